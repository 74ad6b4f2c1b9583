"""
Builders Package
================
Authoring DSL for consumer contracts.
"""

from .pact_builder import (
    Method,
    PactBuilder,
    RequestBuilder,
    ResponseBuilder,
    StateBuilder,
)

__all__ = [
    "Method",
    "PactBuilder",
    "RequestBuilder",
    "ResponseBuilder",
    "StateBuilder",
]
