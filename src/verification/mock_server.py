"""
Mock Server Interfaces
======================
Narrow interfaces to the mock server engine that plays the provider.

The engine itself (request matching, serving responses) lives outside
this package. Anything with these methods can be handed to
``RequestTester.test``.
"""

from typing import Protocol

from src.models import Interaction


class MockServer(Protocol):
    """A running stand-in provider expecting a single interaction."""

    # Base address the exercise function sends its requests to
    url: str

    def has_matched(self) -> bool:
        """True when all expected traffic was observed and matched."""
        ...

    def get_mismatch_json(self) -> str:
        """JSON description of what did not match."""
        ...


class MockServerFactory(Protocol):
    """Creates and releases mock servers."""

    def create_mock_server(self, interaction: Interaction) -> MockServer:
        ...

    def close_server(self, server: MockServer) -> None:
        ...
