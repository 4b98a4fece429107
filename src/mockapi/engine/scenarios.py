"""
MockAPI Error Scenario Selector

Picks the error scenario, if any, that replaces the normal response.

Two lookups exist:
- roll(): the probabilistic pass, run before any validation rule
- match_field(): the rule-triggered pass, run when a rule fails
"""

import random
import logging
from typing import List, Optional

from .models import ErrorScenario


logger = logging.getLogger("mockapi.engine")


class ScenarioSelector:
    """
    Selects error scenarios to inject.

    The random source is injected so tests can pass a seeded
    ``random.Random`` and get repeatable draws.

    Example:
        selector = ScenarioSelector(random.Random(42))
        scenario = selector.roll(config.error_scenarios)
        if scenario:
            return scenario.status_code, scenario.parsed_response()
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def roll(self, scenarios: List[ErrorScenario]) -> Optional[ErrorScenario]:
        """
        Run the probabilistic pass.

        Each enabled scenario gets one draw in [0, 100), in list order. The
        first scenario whose draw is below its probability wins.

        Args:
            scenarios: Configured scenarios in list order

        Returns:
            The injected scenario, or None
        """
        for scenario in scenarios:
            if not scenario.enabled:
                continue
            draw = self.rng.random() * 100
            if draw < scenario.probability:
                logger.debug(f"Scenario '{scenario.name}' triggered (draw {draw:.2f} < {scenario.probability})")
                return scenario
        return None

    @staticmethod
    def match_field(scenarios: List[ErrorScenario], field_name: str) -> Optional[ErrorScenario]:
        """
        Find the first enabled scenario whose condition label mentions a field.

        Matching is a case-insensitive substring test of the field name in
        the free-text condition, so "missing email" matches both ``email``
        and ``mail``.
        """
        needle = field_name.lower()
        for scenario in scenarios:
            if scenario.enabled and needle in scenario.condition.lower():
                return scenario
        return None
