"""
MockAPI

Mock response synthesis for simulated API endpoints: request validation,
error scenario injection and dynamic response bodies.
"""

__version__ = '1.0.0'
