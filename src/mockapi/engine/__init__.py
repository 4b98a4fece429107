"""
MockAPI Engine

Mock response synthesis for simulated endpoints.

This package provides:
- Request validation (rules, conditional rules, strict mode)
- Error scenario injection (probabilistic and rule-triggered)
- Dynamic ``<<tag>>`` response templates backed by Faker
- Array repetition and advisory response delays
"""

from .models import (
    RuleValue,
    Condition,
    ValidationRule,
    ErrorScenario,
    ValidationConfig,
    DelayConfig,
    ArrayConfig,
    EndpointResponse,
    Endpoint,
    EvaluationResult,
    MockResponse,
)
from .conditions import evaluate_condition, combine
from .rules import evaluate_rule
from .scenarios import ScenarioSelector
from .generator import (
    TagExpander,
    create_generator_table,
    TAG_CATEGORIES,
    SAMPLE_TEMPLATES,
)
from .modulators import split_array_elements, repeat_array, compute_delay, describe_dynamic_features
from .processor import MockResponseEngine, get_validation_summary

__all__ = [
    # Models
    'RuleValue',
    'Condition',
    'ValidationRule',
    'ErrorScenario',
    'ValidationConfig',
    'DelayConfig',
    'ArrayConfig',
    'EndpointResponse',
    'Endpoint',
    'EvaluationResult',
    'MockResponse',

    # Evaluators
    'evaluate_condition',
    'combine',
    'evaluate_rule',
    'ScenarioSelector',

    # Generation
    'TagExpander',
    'create_generator_table',
    'TAG_CATEGORIES',
    'SAMPLE_TEMPLATES',
    'split_array_elements',
    'repeat_array',
    'compute_delay',
    'describe_dynamic_features',

    # Engine
    'MockResponseEngine',
    'get_validation_summary',
]
