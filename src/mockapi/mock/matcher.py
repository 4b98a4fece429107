"""
MockAPI Route Matcher

Finds the configured endpoint for an incoming request.

Features:
- Exact path matching
- Pattern matching with wildcards and named parameters
- Path parameter extraction
"""

import re
from typing import List, Dict, Optional
from dataclasses import dataclass, field
from urllib.parse import urlparse

from ..engine.models import Endpoint
from ..common.errors import ConfigurationError


@dataclass
class MatchResult:
    """Result of matching a request."""

    matched: bool
    endpoint: Optional[Endpoint] = None
    path_params: Dict[str, str] = field(default_factory=dict)
    reason: str = ""

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary."""
        return {
            'matched': self.matched,
            'reason': self.reason,
            'endpoint': self.endpoint.name if self.endpoint else None,
            'path_params': self.path_params,
        }


def compile_path_pattern(pattern: str) -> 're.Pattern':
    """
    Convert an endpoint path into a regex.

    Supports patterns like:
    - /users/* (any single segment)
    - /users/** (any number of segments)
    - /users/{id} or /users/:id (named parameter)

    ``:name`` is only a parameter at the start of a segment, so
    ``/items:batch`` stays literal.

    Raises:
        ConfigurationError: If a parameter name is used twice
    """
    regex = ''
    seen = set()
    tokens = re.split(r'(\{[^}]+\}|(?<=/):[A-Za-z_][A-Za-z0-9_]*|\*\*|\*)', pattern)
    # re.split puts captured tokens at odd positions, literal text at even ones
    for i, token in enumerate(tokens):
        if i % 2 == 0:
            regex += re.escape(token)
        elif token == '**':
            regex += '.*'
        elif token == '*':
            regex += '[^/]+'
        else:
            name = token[1:-1] if token.startswith('{') else token[1:]
            if not name.isidentifier():
                regex += '[^/]+'
                continue
            if name in seen:
                raise ConfigurationError(f"Path parameter '{name}' appears more than once in {pattern}")
            seen.add(name)
            regex += f'(?P<{name}>[^/]+)'
    return re.compile(f'^{regex}/?$')


class EndpointMatcher:
    """
    Route matcher over the loaded endpoints.

    Exact paths win over patterns; among patterns the first configured
    endpoint wins.

    Example:
        matcher = EndpointMatcher(endpoints)
        result = matcher.find_match('GET', '/users/123')

        if result.matched:
            print(result.endpoint.name, result.path_params)
    """

    def __init__(self, endpoints: List[Endpoint]):
        """
        Initialize endpoint matcher.

        Args:
            endpoints: Configured endpoints
        """
        self.endpoints = endpoints
        self._build_index()

    def _build_index(self):
        """Index endpoints by method and exact path, and precompile patterns."""
        self.index: Dict[str, Endpoint] = {}
        self.patterns = []
        for endpoint in self.endpoints:
            key = f"{endpoint.method}:{endpoint.path.rstrip('/') or '/'}"
            self.index.setdefault(key, endpoint)
            self.patterns.append((endpoint, compile_path_pattern(endpoint.path)))

    def find_match(self, method: str, url: str) -> MatchResult:
        """
        Find the endpoint for an incoming request.

        Args:
            method: HTTP method
            url: Request URL or path

        Returns:
            MatchResult with the endpoint and extracted path parameters
        """
        method_upper = method.upper()
        path = urlparse(url).path or '/'

        endpoint = self.index.get(f"{method_upper}:{path.rstrip('/') or '/'}")
        if endpoint is not None:
            return MatchResult(matched=True, endpoint=endpoint, reason="Exact match")

        for endpoint, regex in self.patterns:
            if endpoint.method != method_upper:
                continue
            match = regex.match(path)
            if match:
                return MatchResult(
                    matched=True,
                    endpoint=endpoint,
                    path_params=match.groupdict(),
                    reason="Pattern match"
                )

        return MatchResult(matched=False, reason=f"No endpoint for {method_upper} {path}")
