"""
Pact Builder DSL
================
Mutable builders describing the exchanges a consumer expects.

Builds an interaction for each state-request-response tuple.

The DSL departs from the formal pact specification on purpose: the
provider state is mandatory and requests can only be declared inside
one. Every exchange is then scoped to exactly one precondition.

Not available yet, can be added as needed:
- Request matchers
- Generators
- Encoders

Usage:
    builder = PactBuilder(consumer="OrderUI", provider="OrderService")

    def order_exists(state):
        state.state = "order 123 exists"

        def get_order(request):
            request.description = "a request for order 123"
            request.path = "orders/123"
            request.query = {"verbose": "true"}
            request.set_response(lambda response: setattr(response, "body", {"id": 123}))

        state.add_request(get_order)

    tester = builder.add_state(order_exists)
"""

from enum import Enum
from http import HTTPStatus
from typing import Any, Callable, Optional, Union

from src.errors import PactCoverageError, PactStructureError
from src.verification.results import VerificationResults, run_results
from src.verification.tester import RequestTester


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


# =============================================================================
# PACT BUILDER
# =============================================================================

class PactBuilder:
    """
    Root of the builder tree for one consumer/provider pair.

    ``results`` collects verification failures from this builder's testers.
    It defaults to the run-level aggregate that ``PactRepository()`` also
    uses, so a failure anywhere in the run blocks publishing.
    """

    def __init__(
        self,
        consumer: str,
        provider: str,
        results: Optional[VerificationResults] = None
    ):
        self.consumer = consumer
        self.provider = provider
        self.results = results if results is not None else run_results()
        self._states: list[StateBuilder] = []

    @property
    def state_builders(self) -> list["StateBuilder"]:
        return self._states

    # builder functions allow changing internals later
    def add_state(self, configure: Callable[["StateBuilder"], Any]) -> RequestTester:
        """
        Declare a provider state and the requests made in it.

        Args:
            configure: Called with a fresh StateBuilder; sets ``state`` and
                calls ``add_request`` one or more times

        Returns:
            RequestTester bound to this builder and the new state
        """
        builder = StateBuilder()
        configure(builder)
        self._states.append(builder)
        return RequestTester(self, builder)

    def validate(self, require_tests: bool = True) -> None:
        """
        Check every state is complete and, optionally, verified.

        Raises:
            PactCoverageError: ``require_tests`` is set and a state was never tested
            PactStructureError: A request has no response
        """
        for state_builder in self._states:
            state_builder._validate(require_tests)

    def _fragment(self, state_builder: "StateBuilder") -> "PactBuilder":
        """Throwaway builder holding only ``state_builder``."""
        fragment = PactBuilder(self.consumer, self.provider, results=self.results)
        fragment._states.append(state_builder)
        return fragment


# =============================================================================
# STATE / REQUEST / RESPONSE BUILDERS
# =============================================================================

class StateBuilder:
    def __init__(self):
        self.state: Optional[str] = None
        self.requests: list[RequestBuilder] = []
        self._tested = False

    @property
    def tested(self) -> bool:
        """True once a tester run for this state completed its exercise."""
        return self._tested

    def add_request(self, configure: Callable[["RequestBuilder"], Any]) -> None:
        builder = RequestBuilder()
        configure(builder)
        self.requests.append(builder)

    def _mark_tested(self) -> None:
        self._tested = True

    def _validate(self, require_tests: bool) -> None:
        if require_tests and not self._tested:
            raise PactCoverageError(self.state)
        for request in self.requests:
            request._validate()


class RequestBuilder:
    def __init__(self):
        self._path = "/"
        self._method = Method.GET
        self._response: Optional[ResponseBuilder] = None
        self.description = ""
        self.query: Optional[dict[str, str]] = None
        self.headers: Optional[dict[str, str]] = None
        self.body: Any = None

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, path: str) -> None:
        self._path = path if path.startswith("/") else f"/{path}"

    @property
    def method(self) -> Method:
        return self._method

    @method.setter
    def method(self, method: Union[Method, str]) -> None:
        self._method = method if isinstance(method, Method) else Method(method.upper())

    @property
    def response(self) -> "ResponseBuilder":
        if self._response is None:
            raise PactStructureError(
                f'Request "{self.description}" ({self._method.name} {self._path}) has no response'
            )
        return self._response

    def set_response(self, configure: Callable[["ResponseBuilder"], Any]) -> None:
        builder = ResponseBuilder()
        configure(builder)
        self._response = builder

    def _validate(self) -> None:
        # raises when unset
        self.response


class ResponseBuilder:
    def __init__(self):
        self.headers: Optional[dict[str, str]] = None
        self.status: Union[int, HTTPStatus] = HTTPStatus.OK
        self.body: Any = None
