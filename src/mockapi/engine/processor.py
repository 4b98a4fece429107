"""
MockAPI Response Engine

Decides what a simulated endpoint returns for one request.

Evaluation order for mutating requests (POST/PUT/PATCH):
1. Validation disabled  -> success path
2. Probabilistic error scenarios (first winning draw is injected)
3. Enabled rules in order; a failing rule may trigger a matching scenario
4. Strict mode unknown-field check
5. Any errors -> 400 VALIDATION_ERROR
6. Otherwise the endpoint's template is expanded and returned

Other methods skip straight to step 6.
"""

import json
import random
import logging
from typing import List, Dict, Any, Optional, Union

from .models import (
    ValidationConfig,
    EndpointResponse,
    ErrorScenario,
    EvaluationResult,
    MockResponse,
    MUTATING_METHODS,
    OUTCOME_PASSED,
    OUTCOME_FAILED,
    OUTCOME_INJECTED,
    OUTCOME_ERROR,
)
from .rules import evaluate_rule
from .scenarios import ScenarioSelector
from .generator import TagExpander, GeneratorTable, create_generator_table
from .modulators import repeat_array, compute_delay
from ..common.errors import ConfigurationError, InvalidRequestBodyError


logger = logging.getLogger("mockapi.engine")

JSON_HEADERS = {'Content-Type': 'application/json'}


def parse_request_body(request_body: Union[str, bytes, Dict[str, Any], None]) -> Dict[str, Any]:
    """
    Normalize a mutating request's body to a JSON object.

    Raises:
        InvalidRequestBodyError: If the body is not JSON or not an object
    """
    if request_body is None:
        return {}
    if isinstance(request_body, (str, bytes)):
        if not request_body.strip():
            return {}
        try:
            request_body = json.loads(request_body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidRequestBodyError(f"Request body is not valid JSON: {e}") from e
    if not isinstance(request_body, dict):
        raise InvalidRequestBodyError(
            f"Request body must be a JSON object, got {type(request_body).__name__}"
        )
    return request_body


def unknown_fields(body: Dict[str, Any], config: ValidationConfig) -> List[str]:
    """Request keys not declared by any rule, in request order."""
    declared = {rule.field for rule in config.rules}
    return [key for key in body if key not in declared]


def get_validation_summary(config: ValidationConfig) -> str:
    """One-line description of a validation policy."""
    if not config.enabled:
        return "Validation disabled"

    active_rules = [r for r in config.rules if r.enabled]
    conditional_rules = [r for r in active_rules if r.kind == 'conditional']
    active_scenarios = [s for s in config.error_scenarios if s.enabled]

    summary = (
        f"{len(active_rules)} rules ({len(conditional_rules)} conditional), "
        f"{len(active_scenarios)} error scenarios"
    )
    if config.strict_mode:
        summary += ", strict mode"
    return summary


class MockResponseEngine:
    """
    Mock response synthesis engine.

    Stateless between calls apart from its random source, which is shared by
    the scenario draws, the array length draws, the delay draws and the
    numeric tag generators.

    Example:
        engine = MockResponseEngine(seed=42)
        result = engine.evaluate(
            request_body={'email': 'not-an-email'},
            method='POST',
            validation_config=endpoint.validation,
            response=endpoint.response
        )
        print(result.status_code, result.body)

        # Deterministic generators for tests
        engine = MockResponseEngine(generators={'uuid': lambda: 'fixed-id'})
    """

    def __init__(
        self,
        generators: Optional[GeneratorTable] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        locale: str = 'en_US'
    ):
        """
        Initialize the engine.

        Args:
            generators: Tag generator table (defaults to a Faker table)
            rng: Random source (defaults to random.Random(seed))
            seed: Seed used when rng/generators are not given
            locale: Faker locale for the default generator table
        """
        self.rng = rng or random.Random(seed)
        if generators is None:
            generators = create_generator_table(seed=seed, locale=locale, rng=self.rng)
        self.expander = TagExpander(generators)
        self.selector = ScenarioSelector(self.rng)

    def _injected(self, scenario: ErrorScenario, errors: List[str]) -> EvaluationResult:
        logger.warning(f"Injecting error scenario '{scenario.name}' ({scenario.status_code})")
        return EvaluationResult(
            outcome=OUTCOME_INJECTED,
            status_code=scenario.status_code,
            body=scenario.parsed_response(),
            errors=errors,
        )

    def validate_request(self, body: Dict[str, Any], config: ValidationConfig) -> EvaluationResult:
        """
        Run the validation state machine for a parsed request body.

        Args:
            body: Request body as a JSON object
            config: Endpoint validation policy

        Returns:
            EvaluationResult with outcome passed, failed or injected

        Raises:
            ConfigurationError: If a rule or scenario is malformed
        """
        if not config.enabled:
            return EvaluationResult(outcome=OUTCOME_PASSED, status_code=200)

        scenario = self.selector.roll(config.error_scenarios)
        if scenario is not None:
            return self._injected(scenario, [scenario.name])

        errors: List[str] = []
        for rule in config.rules:
            if not rule.enabled:
                continue

            error = evaluate_rule(rule, body)
            if error is None:
                continue

            logger.debug(f"Rule {rule.kind} on '{rule.field}' failed: {error}")
            errors.append(error)

            matching = self.selector.match_field(config.error_scenarios, rule.field)
            if matching is not None:
                return self._injected(matching, [error])

        if config.strict_mode:
            unknown = unknown_fields(body, config)
            if unknown:
                errors.append(f"Unknown fields: {', '.join(unknown)}")

        if errors:
            return EvaluationResult(
                outcome=OUTCOME_FAILED,
                status_code=400,
                body={
                    'error': 'Validation failed',
                    'details': errors,
                    'code': 'VALIDATION_ERROR',
                },
                errors=errors,
            )

        return EvaluationResult(outcome=OUTCOME_PASSED, status_code=200)

    def render_response(self, response: EndpointResponse) -> MockResponse:
        """
        Build the success response from the endpoint's template.

        The expanded text is returned as a parsed JSON value when it is JSON,
        otherwise as plain text.
        """
        text = repeat_array(response.body, response.array_config, self.expander, self.rng)
        if text is None:
            text = self.expander.expand(response.body)

        try:
            body = json.loads(text)
        except json.JSONDecodeError:
            body = text

        return MockResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=body,
            outcome=OUTCOME_PASSED,
        )

    def evaluate(
        self,
        request_body: Union[str, bytes, Dict[str, Any], None],
        method: str,
        validation_config: ValidationConfig,
        response: EndpointResponse
    ) -> MockResponse:
        """
        Evaluate one request against an endpoint configuration.

        Args:
            request_body: Parsed JSON object, raw JSON text, or None
            method: HTTP method; only POST/PUT/PATCH are validated
            validation_config: Endpoint validation policy
            response: Endpoint success response and its modulators

        Returns:
            MockResponse with status, headers, body and advisory delay.
            Malformed configuration yields a 500 CONFIGURATION_ERROR response.

        Raises:
            InvalidRequestBodyError: If a mutating request's body is not a JSON object
        """
        try:
            if method.upper() in MUTATING_METHODS:
                body = parse_request_body(request_body)
                result = self.validate_request(body, validation_config)
            else:
                result = EvaluationResult(outcome=OUTCOME_PASSED, status_code=response.status_code)

            if result.is_valid:
                mock = self.render_response(response)
            else:
                mock = MockResponse(
                    status_code=result.status_code,
                    headers=dict(JSON_HEADERS),
                    body=result.body,
                    outcome=result.outcome,
                    errors=result.errors,
                )

            mock.delay_ms = compute_delay(response.delay_config, self.rng)
            logger.debug(f"{method.upper()} evaluated: {mock.outcome} {mock.status_code} (+{mock.delay_ms}ms)")
            return mock

        except ConfigurationError as e:
            logger.error(f"Configuration error during evaluation: {e}")
            return MockResponse(
                status_code=500,
                headers=dict(JSON_HEADERS),
                body={
                    'error': 'Evaluation error',
                    'details': [str(e)],
                    'code': 'CONFIGURATION_ERROR',
                },
                outcome=OUTCOME_ERROR,
                errors=[str(e)],
            )
