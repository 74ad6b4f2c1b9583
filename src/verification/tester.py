"""
Request Tester
==============
Runs one authored exchange against a mock server.

A tester is returned by ``PactBuilder.add_state`` and stays bound to that
builder and state. Running it:

1. Builds the single interaction the state describes
2. Asks the factory for a mock server expecting that interaction
3. Awaits the caller's exercise function against the server
4. Marks the state tested, then checks the server saw matching traffic
5. Always releases the server

Usage:
    tester = builder.add_state(configure_state)

    async def exercise(server):
        response = requests.get(f"{server.url}/orders/123")
        assert response.status_code == 200

    await tester.test(mock_server_factory, exercise)
"""

from typing import Any, Awaitable, Callable, Optional, TYPE_CHECKING

from langfuse import observe, get_client

from src.errors import PactMatchingException, PactStructureError
from src.repository.merge import create_header, merge_interactions
from src.verification.mock_server import MockServer, MockServerFactory

if TYPE_CHECKING:
    from src.builders.pact_builder import PactBuilder, StateBuilder


ExerciseFunction = Callable[[MockServer], Awaitable[Any]]


class RequestTester:
    """Binds one (PactBuilder, StateBuilder) pair to mock server runs."""

    def __init__(self, pact_builder: "PactBuilder", state_builder: "StateBuilder"):
        self._pact_builder = pact_builder
        self._state_builder = state_builder

    @property
    def state(self) -> Optional[str]:
        return self._state_builder.state

    @observe(name="pact_request_test")
    async def test(self, factory: MockServerFactory, exercise: ExerciseFunction) -> None:
        """
        Verify the bound state's exchange against a mock server.

        Args:
            factory: Creates and closes the mock server
            exercise: Coroutine function issuing real requests to the server

        Raises:
            PactMatchingException: The server reported unmatched traffic
            PactStructureError: The state has no complete request to verify
        """
        interaction = self._expected_interaction()
        server = factory.create_mock_server(interaction)
        try:
            await exercise(server)
            self._state_builder._mark_tested()
            if not server.has_matched():
                mismatch_json = server.get_mismatch_json()
                self._pact_builder.results.record_failure(
                    consumer=self._pact_builder.consumer,
                    provider=self._pact_builder.provider,
                    state=self._state_builder.state,
                    mismatch_json=mismatch_json,
                )
                raise PactMatchingException(mismatch_json)
        finally:
            factory.close_server(server)

        try:
            get_client().update_current_span(
                output={"state": self._state_builder.state, "matched": True}
            )
        except Exception:
            pass

    def _expected_interaction(self):
        fragment = self._pact_builder._fragment(self._state_builder)
        fragment.validate(require_tests=False)
        pact = merge_interactions(fragment, create_header(fragment))
        if not pact.interactions:
            raise PactStructureError(
                f'State "{self._state_builder.state}" has no requests to test'
            )
        return pact.interactions[0]
