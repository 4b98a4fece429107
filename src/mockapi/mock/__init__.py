"""
MockAPI Mock Server Module

HTTP layer for serving configured mock endpoints.

This module provides:
- FastAPI-based mock server
- Route matching with path parameters
- Admin API and metrics
"""

from .server import MockServer, MockConfig, MockMetrics, create_mock_server
from .matcher import EndpointMatcher, MatchResult, compile_path_pattern

__all__ = [
    # Server
    'MockServer',
    'MockConfig',
    'MockMetrics',
    'create_mock_server',

    # Matcher
    'EndpointMatcher',
    'MatchResult',
    'compile_path_pattern',
]
