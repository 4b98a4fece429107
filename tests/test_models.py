"""
Tests for MockAPI Engine Models

Tests loading endpoint configuration from dictionaries, including the
errors raised for malformed rules, scenarios and modulators.
"""

import json

import pytest

from mockapi.engine.models import (
    to_number,
    RuleValue,
    Condition,
    ValidationRule,
    ErrorScenario,
    ValidationConfig,
    DelayConfig,
    ArrayConfig,
    EndpointResponse,
    Endpoint,
)
from mockapi.common.errors import ConfigurationError


class TestToNumber:
    """Test numeric coercion."""

    @pytest.mark.parametrize('value,expected', [
        (3, 3.0),
        (2.5, 2.5),
        ('42', 42.0),
        (' -1.5 ', -1.5),
    ])
    def test_numeric(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize('value', [True, False, None, '', '  ', 'abc', [1], {'a': 1}, 'nan'])
    def test_not_numeric(self, value):
        assert to_number(value) is None


class TestRuleValue:
    """Test tagged rule values."""

    def test_kinds(self):
        assert RuleValue.of('x').kind == 'string'
        assert RuleValue.of(5).kind == 'number'
        assert RuleValue.of(None).is_absent

    @pytest.mark.parametrize('value', [True, [1], {'a': 1}])
    def test_rejects_unsupported_types(self, value):
        with pytest.raises(ConfigurationError):
            RuleValue.of(value)

    def test_as_number(self):
        assert RuleValue.of('10').as_number() == 10.0
        assert RuleValue.of('ten').as_number() is None
        assert RuleValue().as_number() is None


class TestValidationRule:
    """Test rule loading."""

    def test_from_dict_editor_format(self):
        """Test loading the editor's camelCase format."""
        rule = ValidationRule.from_dict({
            'id': 'r1',
            'field': 'company',
            'type': 'conditional',
            'message': 'Company required',
            'conditions': [{'field': 'accountType', 'operator': 'equals', 'value': 'business'}],
            'conditionalLogic': 'or',
        })

        assert rule.kind == 'conditional'
        assert rule.conditional_logic == 'or'
        assert rule.conditions[0].value == RuleValue.of('business')
        assert rule.enabled is True
        assert rule.to_dict()['conditions'] == [
            {'field': 'accountType', 'operator': 'equals', 'value': 'business'}
        ]

    def test_kind_alias(self):
        """Test ``kind`` is accepted in place of ``type``."""
        assert ValidationRule.from_dict({'field': 'a', 'kind': 'required'}).kind == 'required'

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError, match='Unknown validation rule type'):
            ValidationRule.from_dict({'field': 'a', 'type': 'uppercase'})

    def test_missing_field(self):
        with pytest.raises(ConfigurationError):
            ValidationRule.from_dict({'type': 'required'})

    def test_invalid_regex(self):
        with pytest.raises(ConfigurationError, match='Invalid regex'):
            ValidationRule.from_dict({'field': 'a', 'type': 'pattern', 'value': '(['})

    @pytest.mark.parametrize('value', [None, 'abc', -1])
    def test_length_needs_non_negative_number(self, value):
        with pytest.raises(ConfigurationError):
            ValidationRule.from_dict({'field': 'a', 'type': 'minLength', 'value': value})

    def test_length_accepts_numeric_string(self):
        rule = ValidationRule.from_dict({'field': 'a', 'type': 'maxLength', 'value': '10'})
        assert rule.value.as_number() == 10.0

    def test_bad_conditional_logic(self):
        with pytest.raises(ConfigurationError):
            ValidationRule.from_dict({'field': 'a', 'type': 'conditional', 'conditionalLogic': 'xor'})

    def test_condition_requires_value(self):
        """Test comparison operators need a value but exists does not."""
        with pytest.raises(ConfigurationError):
            Condition.from_dict({'field': 'a', 'operator': 'greaterThan'})

        assert Condition.from_dict({'field': 'a', 'operator': 'notExists'}).value.is_absent


class TestErrorScenario:
    """Test scenario loading."""

    def test_from_dict(self):
        scenario = ErrorScenario.from_dict({
            'name': 'Outage',
            'condition': 'random failure',
            'statusCode': 503,
            'response': '{"error": "down"}',
            'probability': 25,
        })

        assert scenario.status_code == 503
        assert scenario.probability == 25
        assert scenario.parsed_response() == {'error': 'down'}

    def test_structured_response_serialized(self):
        """Test YAML-style structured responses are accepted."""
        scenario = ErrorScenario.from_dict({'name': 's', 'statusCode': 409, 'response': {'error': 'dup'}})
        assert json.loads(scenario.response) == {'error': 'dup'}

    def test_missing_probability_is_zero(self):
        assert ErrorScenario.from_dict({'name': 's', 'statusCode': 500}).probability == 0

    @pytest.mark.parametrize('status', [99, 600])
    def test_status_out_of_range(self, status):
        with pytest.raises(ConfigurationError):
            ErrorScenario.from_dict({'name': 's', 'statusCode': status, 'response': '{}'})

    @pytest.mark.parametrize('probability', [-1, 101])
    def test_probability_out_of_range(self, probability):
        with pytest.raises(ConfigurationError):
            ErrorScenario.from_dict({'name': 's', 'statusCode': 500, 'response': '{}', 'probability': probability})

    def test_response_not_json(self):
        with pytest.raises(ConfigurationError, match='not valid JSON'):
            ErrorScenario.from_dict({'name': 's', 'statusCode': 500, 'response': '{nope'})


class TestValidationConfig:
    """Test aggregate policy loading."""

    def test_defaults(self):
        config = ValidationConfig.from_dict(None)
        assert config.enabled is False
        assert config.rules == []
        assert config.strict_mode is False

    def test_to_dict_round_trip_keys(self):
        data = {
            'enabled': True,
            'strictMode': True,
            'rules': [{'field': 'email', 'type': 'email', 'message': 'bad'}],
            'errorScenarios': [{'name': 's', 'statusCode': 500, 'response': '{}'}],
        }

        result = ValidationConfig.from_dict(data).to_dict()

        assert result['enabled'] is True
        assert result['strictMode'] is True
        assert result['rules'][0]['type'] == 'email'
        assert result['errorScenarios'][0]['statusCode'] == 500


class TestModulatorConfigs:
    """Test delay and array configuration."""

    def test_delay_defaults(self):
        config = DelayConfig.from_dict(None)
        assert (config.enabled, config.min, config.max) == (False, 100, 1000)

    def test_delay_min_greater_than_max(self):
        with pytest.raises(ConfigurationError, match='greater than'):
            DelayConfig.from_dict({'enabled': True, 'min': 500, 'max': 100})

    def test_delay_negative(self):
        with pytest.raises(ConfigurationError):
            DelayConfig.from_dict({'enabled': True, 'min': -5, 'max': 100})

    def test_array_absent(self):
        assert ArrayConfig.from_dict(None) is None

    def test_array_bounds(self):
        assert ArrayConfig.from_dict({'min': 2, 'max': 2}).to_dict() == {'min': 2, 'max': 2}
        with pytest.raises(ConfigurationError):
            ArrayConfig.from_dict({'min': 3, 'max': 1})


class TestEndpoint:
    """Test endpoint records."""

    def test_from_dict(self):
        endpoint = Endpoint.from_dict({
            'name': 'Create user',
            'method': 'post',
            'path': '/api/users',
            'status_code': 201,
            'response_body': {'id': '<<uuid>>'},
            'delay_config': {'enabled': True, 'min': 10, 'max': 20},
            'validation': {'enabled': True, 'rules': [{'field': 'email', 'type': 'required'}]},
            'collection': 'Users',
        })

        assert endpoint.method == 'POST'
        assert endpoint.response.status_code == 201
        assert json.loads(endpoint.response.body) == {'id': '<<uuid>>'}
        assert endpoint.response.headers == {'Content-Type': 'application/json'}
        assert endpoint.response.delay_config.enabled is True
        assert endpoint.validation.enabled is True
        assert endpoint.collection == 'Users'

    def test_default_name(self):
        assert Endpoint.from_dict({'method': 'GET', 'path': '/x'}).name == 'GET /x'

    def test_errors_name_the_endpoint(self):
        with pytest.raises(ConfigurationError, match='Endpoint POST /api/users'):
            Endpoint.from_dict({
                'method': 'POST',
                'path': '/api/users',
                'validation': {'rules': [{'field': 'a', 'type': 'pattern', 'value': '['}]},
            })

    def test_bad_status_code(self):
        with pytest.raises(ConfigurationError):
            EndpointResponse.from_dict({'status_code': 700})
