"""
MockAPI Engine Models

Configuration and result types for the mock response engine.

Every configuration type accepts the camelCase dictionaries produced by the
endpoint editor (``statusCode``, ``strictMode``, ``errorScenarios`` ...) via
``from_dict`` and validates them there, so malformed configuration is
reported before any request is evaluated.
"""

import json
import math
import re
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Union

from ..common.errors import ConfigurationError


RULE_KINDS = (
    'required', 'email', 'minLength', 'maxLength',
    'pattern', 'numeric', 'conditional', 'custom',
)

OPERATORS = (
    'equals', 'notEquals', 'contains', 'notContains',
    'greaterThan', 'lessThan', 'exists', 'notExists',
)

VALUELESS_OPERATORS = ('exists', 'notExists')

MUTATING_METHODS = ('POST', 'PUT', 'PATCH')

# Outcomes of a single evaluation
OUTCOME_PASSED = 'passed'
OUTCOME_FAILED = 'failed'
OUTCOME_INJECTED = 'injected'
OUTCOME_ERROR = 'error'


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a JSON value to a number.

    Numbers convert as-is, strings convert when they hold a numeric literal.
    Booleans, null, containers, blank strings and NaN do not convert.

    Returns:
        The float value, or None if the value is not numeric
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number):
        return None
    return number


def _check_range(name: str, minimum: Any, maximum: Any) -> None:
    if isinstance(minimum, bool) or not isinstance(minimum, (int, float)):
        raise ConfigurationError(f"{name}.min must be a number, got {minimum!r}")
    if isinstance(maximum, bool) or not isinstance(maximum, (int, float)):
        raise ConfigurationError(f"{name}.max must be a number, got {maximum!r}")
    if minimum < 0 or maximum < 0:
        raise ConfigurationError(f"{name} bounds must be >= 0, got [{minimum}, {maximum}]")
    if minimum > maximum:
        raise ConfigurationError(f"{name}.min ({minimum}) is greater than {name}.max ({maximum})")


@dataclass(frozen=True)
class RuleValue:
    """Tagged rule/condition value: a string, a number, or absent."""

    kind: str = 'absent'
    raw: Union[str, int, float, None] = None

    @classmethod
    def of(cls, value: Any) -> 'RuleValue':
        """Wrap a raw configuration value, rejecting types rules cannot hold."""
        if isinstance(value, RuleValue):
            return value
        if value is None:
            return cls()
        if isinstance(value, bool):
            raise ConfigurationError(f"Rule values must be strings or numbers, got {value!r}")
        if isinstance(value, (int, float)):
            return cls('number', value)
        if isinstance(value, str):
            return cls('string', value)
        raise ConfigurationError(
            f"Rule values must be strings or numbers, got {type(value).__name__}"
        )

    @property
    def is_absent(self) -> bool:
        return self.kind == 'absent'

    def as_number(self) -> Optional[float]:
        return None if self.is_absent else to_number(self.raw)


@dataclass
class Condition:
    """One sub-comparison inside a conditional rule."""

    field: str
    operator: str
    value: RuleValue = field(default_factory=RuleValue)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Condition':
        condition = cls(
            field=str(data.get('field', '')),
            operator=str(data.get('operator', 'equals')),
            value=RuleValue.of(data.get('value')),
        )
        condition.validate()
        return condition

    def validate(self) -> None:
        if not self.field:
            raise ConfigurationError("Condition is missing a field name")
        if self.operator in OPERATORS and self.operator not in VALUELESS_OPERATORS and self.value.is_absent:
            raise ConfigurationError(
                f"Condition on '{self.field}' with operator '{self.operator}' requires a value"
            )

    def to_dict(self) -> Dict[str, Any]:
        data = {'field': self.field, 'operator': self.operator}
        if not self.value.is_absent:
            data['value'] = self.value.raw
        return data


@dataclass
class ValidationRule:
    """One field-level check."""

    field: str
    kind: str
    message: str = ''
    value: RuleValue = field(default_factory=RuleValue)
    enabled: bool = True
    conditions: List[Condition] = field(default_factory=list)
    conditional_logic: str = 'and'
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ValidationRule':
        """
        Create a rule from its stored dictionary form.

        Accepts both ``type`` (editor format) and ``kind`` for the rule kind.

        Raises:
            ConfigurationError: If the rule is malformed
        """
        rule = cls(
            field=str(data.get('field', '')),
            kind=str(data.get('type', data.get('kind', ''))),
            message=str(data.get('message', '')),
            value=RuleValue.of(data.get('value')),
            enabled=bool(data.get('enabled', True)),
            conditions=[Condition.from_dict(c) for c in data.get('conditions') or []],
            conditional_logic=str(data.get('conditionalLogic') or 'and'),
            id=data.get('id'),
        )
        rule.validate()
        return rule

    def validate(self) -> None:
        if not self.field:
            raise ConfigurationError("Validation rule is missing a field name")
        if self.kind not in RULE_KINDS:
            raise ConfigurationError(f"Unknown validation rule type '{self.kind}' for field '{self.field}'")
        if self.conditional_logic not in ('and', 'or'):
            raise ConfigurationError(
                f"conditionalLogic must be 'and' or 'or', got '{self.conditional_logic}'"
            )

        if self.kind in ('minLength', 'maxLength'):
            threshold = self.value.as_number()
            if threshold is None or threshold < 0:
                raise ConfigurationError(
                    f"{self.kind} rule for '{self.field}' needs a non-negative numeric value"
                )
        elif self.kind == 'pattern':
            self.compiled_pattern()

    def compiled_pattern(self) -> 're.Pattern':
        """
        Compile the regex of a pattern rule.

        Raises:
            ConfigurationError: If the value is missing or does not compile
        """
        if self.value.kind != 'string':
            raise ConfigurationError(f"pattern rule for '{self.field}' needs a regex string value")
        try:
            return re.compile(self.value.raw)
        except re.error as e:
            raise ConfigurationError(
                f"Invalid regex {self.value.raw!r} in pattern rule for '{self.field}': {e}"
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'field': self.field,
            'type': self.kind,
            'message': self.message,
            'enabled': self.enabled,
        }
        if self.id is not None:
            data['id'] = self.id
        if not self.value.is_absent:
            data['value'] = self.value.raw
        if self.kind == 'conditional':
            data['conditions'] = [c.to_dict() for c in self.conditions]
            data['conditionalLogic'] = self.conditional_logic
        return data


@dataclass
class ErrorScenario:
    """A canned failure the engine may inject."""

    name: str
    status_code: int
    response: str
    condition: str = ''
    enabled: bool = True
    probability: float = 0
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ErrorScenario':
        """
        Create a scenario from its stored dictionary form.

        ``response`` is normally pre-serialized JSON text; a structured value
        (as written in a YAML file) is serialized here.

        Raises:
            ConfigurationError: If the scenario is malformed
        """
        response = data.get('response', '{}')
        if not isinstance(response, str):
            response = json.dumps(response)

        try:
            status_code = int(data.get('statusCode', data.get('status_code', 500)))
            probability = float(data.get('probability') or 0)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Error scenario '{data.get('name', '')}': {e}") from e

        scenario = cls(
            name=str(data.get('name', '')),
            status_code=status_code,
            response=response,
            condition=str(data.get('condition', '')),
            enabled=bool(data.get('enabled', True)),
            probability=probability,
            id=data.get('id'),
        )
        scenario.validate()
        return scenario

    def validate(self) -> None:
        if not 100 <= self.status_code <= 599:
            raise ConfigurationError(
                f"Error scenario '{self.name}' has status {self.status_code}, expected 100-599"
            )
        if not 0 <= self.probability <= 100:
            raise ConfigurationError(
                f"Error scenario '{self.name}' has probability {self.probability}, expected 0-100"
            )
        self.parsed_response()

    def parsed_response(self) -> Any:
        """
        Parse the stored response document.

        Raises:
            ConfigurationError: If the response is not valid JSON
        """
        try:
            return json.loads(self.response)
        except (json.JSONDecodeError, TypeError) as e:
            raise ConfigurationError(
                f"Error scenario '{self.name}' response is not valid JSON: {e}"
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'name': self.name,
            'condition': self.condition,
            'statusCode': self.status_code,
            'response': self.response,
            'enabled': self.enabled,
            'probability': self.probability,
        }
        if self.id is not None:
            data['id'] = self.id
        return data


@dataclass
class ValidationConfig:
    """Aggregate validation policy for one endpoint."""

    enabled: bool = False
    rules: List[ValidationRule] = field(default_factory=list)
    error_scenarios: List[ErrorScenario] = field(default_factory=list)
    strict_mode: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ValidationConfig':
        if not data:
            return cls()
        return cls(
            enabled=bool(data.get('enabled', False)),
            rules=[ValidationRule.from_dict(r) for r in data.get('rules') or []],
            error_scenarios=[ErrorScenario.from_dict(s) for s in data.get('errorScenarios') or []],
            strict_mode=bool(data.get('strictMode', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'rules': [r.to_dict() for r in self.rules],
            'errorScenarios': [s.to_dict() for s in self.error_scenarios],
            'strictMode': self.strict_mode,
        }


@dataclass
class DelayConfig:
    """Artificial latency policy, in milliseconds."""

    enabled: bool = False
    min: int = 100
    max: int = 1000

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'DelayConfig':
        if not data:
            return cls()
        config = cls(
            enabled=bool(data.get('enabled', False)),
            min=data.get('min', 100),
            max=data.get('max', 1000),
        )
        config.validate()
        return config

    def validate(self) -> None:
        _check_range('delay', self.min, self.max)

    def to_dict(self) -> Dict[str, Any]:
        return {'enabled': self.enabled, 'min': self.min, 'max': self.max}


@dataclass
class ArrayConfig:
    """Repetition range for array-shaped response templates."""

    min: int = 1
    max: int = 5

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['ArrayConfig']:
        if not data:
            return None
        config = cls(min=data.get('min', 1), max=data.get('max', 5))
        config.validate()
        return config

    def validate(self) -> None:
        _check_range('array', self.min, self.max)

    def to_dict(self) -> Dict[str, Any]:
        return {'min': self.min, 'max': self.max}


@dataclass
class EndpointResponse:
    """The configured success response of an endpoint."""

    body: str = ''
    status_code: int = 200
    headers: Dict[str, str] = field(default_factory=lambda: {'Content-Type': 'application/json'})
    array_config: Optional[ArrayConfig] = None
    delay_config: DelayConfig = field(default_factory=DelayConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EndpointResponse':
        """Create from an endpoint record (``response_body``, ``status_code`` ...)."""
        body = data.get('response_body', '')
        if not isinstance(body, str):
            body = json.dumps(body, indent=2)

        try:
            status_code = int(data.get('status_code', 200))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid status_code: {e}") from e
        if not 100 <= status_code <= 599:
            raise ConfigurationError(f"status_code {status_code} is outside 100-599")

        headers = data.get('headers')
        if headers is None:
            headers = {'Content-Type': 'application/json'}

        return cls(
            body=body,
            status_code=status_code,
            headers={str(k): str(v) for k, v in headers.items()},
            array_config=ArrayConfig.from_dict(data.get('array_config')),
            delay_config=DelayConfig.from_dict(data.get('delay_config')),
        )


@dataclass
class Endpoint:
    """A mock endpoint: route, success response and validation policy."""

    name: str
    method: str
    path: str
    response: EndpointResponse = field(default_factory=EndpointResponse)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    collection: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Endpoint':
        method = str(data.get('method', 'GET')).upper()
        path = str(data.get('path', '/'))
        try:
            return cls(
                name=str(data.get('name') or f"{method} {path}"),
                method=method,
                path=path,
                response=EndpointResponse.from_dict(data),
                validation=ValidationConfig.from_dict(data.get('validation')),
                collection=str(data.get('collection', '')),
            )
        except ConfigurationError as e:
            raise ConfigurationError(f"Endpoint {method} {path}: {e}") from e


@dataclass
class EvaluationResult:
    """Outcome of validating one request against a ValidationConfig."""

    outcome: str
    status_code: int
    body: Any = None
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.outcome == OUTCOME_PASSED


@dataclass
class MockResponse:
    """Engine output handed to the HTTP layer."""

    status_code: int
    headers: Dict[str, str]
    body: Any
    delay_ms: int = 0
    outcome: str = OUTCOME_PASSED
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'statusCode': self.status_code,
            'headers': self.headers,
            'body': self.body,
            'delayMs': self.delay_ms,
            'outcome': self.outcome,
            'errors': self.errors,
        }
