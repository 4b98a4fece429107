"""
MockAPI Condition Evaluator

Evaluates the comparisons that decide whether a conditional validation rule
applies to a request body.
"""

from typing import List, Dict, Any, Iterable

from .models import Condition, RuleValue, to_number


# Marks a field that is not present in the request body at all
MISSING = object()


def get_field(body: Dict[str, Any], name: str) -> Any:
    """Look up a top-level field, returning MISSING when absent."""
    return body.get(name, MISSING)


def is_present(value: Any) -> bool:
    """A value is present when it exists, is not null and is not an empty string."""
    return value is not MISSING and value is not None and value != ''


def _values_equal(field_value: Any, expected: RuleValue) -> bool:
    if field_value is MISSING or expected.is_absent:
        return field_value is MISSING and expected.is_absent

    # bool is an int subclass; True must not equal 1
    if isinstance(field_value, bool):
        return False

    if expected.kind == 'string':
        if isinstance(field_value, str):
            return field_value == expected.raw
        if isinstance(field_value, (int, float)):
            number = to_number(expected.raw)
            return number is not None and float(field_value) == number
        return False

    # numeric condition value
    return isinstance(field_value, (int, float)) and field_value == expected.raw


def evaluate_condition(condition: Condition, body: Dict[str, Any]) -> bool:
    """
    Evaluate one condition against a request body.

    Args:
        condition: Condition to evaluate
        body: Parsed request body

    Returns:
        True if the condition holds; unknown operators never hold
    """
    field_value = get_field(body, condition.field)
    expected = condition.value
    operator = condition.operator

    if operator == 'equals':
        return _values_equal(field_value, expected)

    if operator == 'notEquals':
        return not _values_equal(field_value, expected)

    if operator in ('contains', 'notContains'):
        if isinstance(field_value, str) and expected.kind == 'string':
            found = expected.raw in field_value
            return found if operator == 'contains' else not found
        return operator == 'notContains'

    if operator in ('greaterThan', 'lessThan'):
        actual = None if field_value is MISSING else to_number(field_value)
        threshold = expected.as_number()
        if actual is None or threshold is None:
            return False
        return actual > threshold if operator == 'greaterThan' else actual < threshold

    if operator == 'exists':
        return is_present(field_value)

    if operator == 'notExists':
        return not is_present(field_value)

    return False


def combine(conditions: Iterable[Condition], body: Dict[str, Any], logic: str = 'and') -> bool:
    """
    Combine conditions with AND (default) or OR.

    An empty list is vacuously True under AND and False under OR.
    """
    results: List[bool] = [evaluate_condition(c, body) for c in conditions]
    if logic == 'or':
        return any(results)
    return all(results)
