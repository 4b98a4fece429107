"""
MockAPI Validation Rule Evaluator

Checks one validation rule against a request body. A failing rule yields the
rule's configured message; a passing rule yields None.
"""

import re
from typing import Dict, Any, Optional

from .models import ValidationRule, to_number
from .conditions import get_field, is_present, combine
from ..common.errors import ConfigurationError


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def _check_required(value: Any, rule: ValidationRule, body: Dict[str, Any]) -> bool:
    return is_present(value)


def _check_email(value: Any, rule: ValidationRule, body: Dict[str, Any]) -> bool:
    if not is_present(value):
        return True
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


def _length_threshold(rule: ValidationRule) -> float:
    threshold = rule.value.as_number()
    if threshold is None:
        raise ConfigurationError(f"{rule.kind} rule for '{rule.field}' needs a numeric value")
    return threshold


def _check_min_length(value: Any, rule: ValidationRule, body: Dict[str, Any]) -> bool:
    if not is_present(value) or not isinstance(value, str):
        return True
    return len(value) >= _length_threshold(rule)


def _check_max_length(value: Any, rule: ValidationRule, body: Dict[str, Any]) -> bool:
    if not is_present(value) or not isinstance(value, str):
        return True
    return len(value) <= _length_threshold(rule)


def _check_pattern(value: Any, rule: ValidationRule, body: Dict[str, Any]) -> bool:
    pattern = rule.compiled_pattern()
    if not is_present(value) or not isinstance(value, str):
        return True
    return pattern.search(value) is not None


def _check_numeric(value: Any, rule: ValidationRule, body: Dict[str, Any]) -> bool:
    """Booleans are rejected on purpose: ``true``/``false`` are not numbers."""
    if not is_present(value):
        return True
    return to_number(value) is not None


def _check_conditional(value: Any, rule: ValidationRule, body: Dict[str, Any]) -> bool:
    # No conditions means the rule never applies
    if not rule.conditions:
        return True
    if not combine(rule.conditions, body, rule.conditional_logic):
        return True
    return is_present(value)


def _check_custom(value: Any, rule: ValidationRule, body: Dict[str, Any]) -> bool:
    # Extension point; custom rules are valid until a project defines them
    return True


CHECKS = {
    'required': _check_required,
    'email': _check_email,
    'minLength': _check_min_length,
    'maxLength': _check_max_length,
    'pattern': _check_pattern,
    'numeric': _check_numeric,
    'conditional': _check_conditional,
    'custom': _check_custom,
}


def evaluate_rule(rule: ValidationRule, body: Dict[str, Any]) -> Optional[str]:
    """
    Evaluate a single enabled rule.

    Args:
        rule: Rule to check
        body: Parsed request body (a JSON object)

    Returns:
        The rule's message if it fails, otherwise None

    Raises:
        ConfigurationError: If the rule type is unknown or its value is unusable
    """
    check = CHECKS.get(rule.kind)
    if check is None:
        raise ConfigurationError(f"Unknown validation rule type '{rule.kind}' for field '{rule.field}'")

    value = get_field(body, rule.field)
    if check(value, rule, body):
        return None
    return rule.message
