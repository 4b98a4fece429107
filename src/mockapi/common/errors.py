"""
MockAPI Errors

Exception types shared by the engine, the loader and the HTTP layer.
"""


class MockApiError(Exception):
    """Base class for MockAPI errors."""


class ConfigurationError(MockApiError, ValueError):
    """
    Raised when an endpoint configuration is malformed.

    Examples: a pattern rule whose regex does not compile, an error scenario
    whose stored response is not JSON, or a range with min greater than max.
    """


class InvalidRequestBodyError(MockApiError, ValueError):
    """Raised when a mutating request does not carry a JSON object body."""
