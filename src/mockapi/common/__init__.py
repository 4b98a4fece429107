"""
MockAPI Common Utilities

Shared utilities and helpers used across MockAPI modules.
"""

from .errors import MockApiError, ConfigurationError, InvalidRequestBodyError
from .utils import get_seed_from_env, EndpointLoader

__all__ = [
    'MockApiError',
    'ConfigurationError',
    'InvalidRequestBodyError',
    'get_seed_from_env',
    'EndpointLoader',
]
