"""
Tests for MockAPI Condition Evaluator

Tests condition evaluation including:
- Equality with string/number coercion
- Substring operators on strings and non-strings
- Numeric comparisons
- Presence operators
- AND/OR combination
"""

import pytest

from mockapi.engine.models import Condition, RuleValue
from mockapi.engine.conditions import evaluate_condition, combine, is_present, MISSING


def cond(field, operator, value=None):
    return Condition(field=field, operator=operator, value=RuleValue.of(value))


class TestEquality:
    """Test equals / notEquals."""

    def test_equals_string(self):
        """Test equal strings."""
        assert evaluate_condition(cond('type', 'equals', 'business'), {'type': 'business'}) is True
        assert evaluate_condition(cond('type', 'equals', 'business'), {'type': 'personal'}) is False

    def test_equals_missing_field(self):
        """Test missing field never equals a value."""
        assert evaluate_condition(cond('type', 'equals', 'business'), {}) is False
        assert evaluate_condition(cond('type', 'notEquals', 'business'), {}) is True

    def test_equals_number(self):
        """Test numeric condition values."""
        assert evaluate_condition(cond('count', 'equals', 3), {'count': 3}) is True
        assert evaluate_condition(cond('count', 'equals', 3), {'count': '3'}) is False

    def test_string_value_against_numeric_field(self):
        """Test string condition value is compared numerically to a number field."""
        assert evaluate_condition(cond('count', 'equals', '3'), {'count': 3}) is True
        assert evaluate_condition(cond('count', 'equals', '3.0'), {'count': 3}) is True
        assert evaluate_condition(cond('count', 'equals', 'three'), {'count': 3}) is False

    def test_bool_never_equals_number(self):
        """Test True is not treated as 1."""
        assert evaluate_condition(cond('flag', 'equals', 1), {'flag': True}) is False
        assert evaluate_condition(cond('flag', 'equals', '1'), {'flag': True}) is False

    def test_not_equals(self):
        """Test notEquals is the complement of equals."""
        body = {'type': 'personal'}
        assert evaluate_condition(cond('type', 'notEquals', 'business'), body) is True
        assert evaluate_condition(cond('type', 'notEquals', 'personal'), body) is False


class TestContains:
    """Test contains / notContains."""

    def test_contains_substring(self):
        """Test substring match."""
        body = {'email': 'jane@corp.example'}
        assert evaluate_condition(cond('email', 'contains', '@corp'), body) is True
        assert evaluate_condition(cond('email', 'contains', '@other'), body) is False

    def test_not_contains_substring(self):
        """Test substring absence."""
        body = {'email': 'jane@corp.example'}
        assert evaluate_condition(cond('email', 'notContains', '@other'), body) is True
        assert evaluate_condition(cond('email', 'notContains', '@corp'), body) is False

    @pytest.mark.parametrize('value', [123, None, True, ['a'], {'a': 1}])
    def test_non_string_field_never_contains(self, value):
        """Test non-string fields never contain anything."""
        body = {'field': value}
        assert evaluate_condition(cond('field', 'contains', 'a'), body) is False
        assert evaluate_condition(cond('field', 'notContains', 'a'), body) is True

    def test_numeric_condition_value_never_contained(self):
        """Test numeric condition values are not substring-matched."""
        body = {'code': 'A123'}
        assert evaluate_condition(cond('code', 'contains', 123), body) is False
        assert evaluate_condition(cond('code', 'notContains', 123), body) is True


class TestNumericComparison:
    """Test greaterThan / lessThan."""

    def test_greater_than(self):
        """Test numeric greater-than."""
        assert evaluate_condition(cond('age', 'greaterThan', 18), {'age': 21}) is True
        assert evaluate_condition(cond('age', 'greaterThan', 18), {'age': 18}) is False

    def test_less_than(self):
        """Test numeric less-than."""
        assert evaluate_condition(cond('age', 'lessThan', 18), {'age': 17}) is True
        assert evaluate_condition(cond('age', 'lessThan', 18), {'age': 30}) is False

    def test_numeric_strings_are_coerced(self):
        """Test numeric strings on both sides."""
        assert evaluate_condition(cond('amount', 'greaterThan', '100'), {'amount': '150.5'}) is True
        assert evaluate_condition(cond('amount', 'lessThan', '100'), {'amount': ' 99 '}) is True

    @pytest.mark.parametrize('value', ['abc', '', None, True, [1]])
    def test_non_numeric_field_never_compares(self, value):
        """Test non-numeric values are neither greater nor less."""
        body = {'amount': value}
        assert evaluate_condition(cond('amount', 'greaterThan', 0), body) is False
        assert evaluate_condition(cond('amount', 'lessThan', 1000), body) is False

    def test_missing_field_never_compares(self):
        """Test absent fields are neither greater nor less."""
        assert evaluate_condition(cond('amount', 'greaterThan', 0), {}) is False
        assert evaluate_condition(cond('amount', 'lessThan', 0), {}) is False

    def test_non_numeric_condition_value(self):
        """Test non-numeric threshold never compares."""
        assert evaluate_condition(cond('amount', 'greaterThan', 'lots'), {'amount': 5}) is False


class TestPresence:
    """Test exists / notExists."""

    @pytest.mark.parametrize('value', ['x', 0, False, [], {}])
    def test_exists_for_present_values(self, value):
        """Test present values exist, including falsy non-empty ones."""
        assert evaluate_condition(cond('field', 'exists'), {'field': value}) is True
        assert evaluate_condition(cond('field', 'notExists'), {'field': value}) is False

    @pytest.mark.parametrize('body', [{}, {'field': None}, {'field': ''}])
    def test_not_exists_for_absent_values(self, body):
        """Test absent, null and empty string do not exist."""
        assert evaluate_condition(cond('field', 'exists'), body) is False
        assert evaluate_condition(cond('field', 'notExists'), body) is True

    def test_is_present_helper(self):
        """Test presence helper."""
        assert is_present(MISSING) is False
        assert is_present(None) is False
        assert is_present('') is False
        assert is_present(0) is True


class TestUnknownOperator:
    """Test unknown operators."""

    def test_unknown_operator_is_false(self):
        """Test unknown operator evaluates to False."""
        condition = Condition(field='a', operator='startsWith', value=RuleValue.of('x'))
        assert evaluate_condition(condition, {'a': 'xyz'}) is False


class TestCombine:
    """Test AND/OR combination."""

    @pytest.fixture
    def body(self):
        return {'type': 'business', 'size': 5}

    @pytest.mark.parametrize('first,second', [(True, True), (True, False), (False, True), (False, False)])
    def test_and_or_truth_table(self, body, first, second):
        """Test AND and OR over every combination."""
        c1 = cond('type', 'equals', 'business' if first else 'personal')
        c2 = cond('size', 'greaterThan', 1 if second else 10)

        assert combine([c1, c2], body, 'and') is (first and second)
        assert combine([c1, c2], body, 'or') is (first or second)
        assert combine([c2, c1], body, 'and') is combine([c1, c2], body, 'and')
        assert combine([c2, c1], body, 'or') is combine([c1, c2], body, 'or')

    def test_default_logic_is_and(self, body):
        """Test default combination is AND."""
        conditions = [cond('type', 'equals', 'business'), cond('size', 'greaterThan', 10)]
        assert combine(conditions, body) is False

    def test_empty_list(self, body):
        """Test empty lists are vacuous."""
        assert combine([], body, 'and') is True
        assert combine([], body, 'or') is False
