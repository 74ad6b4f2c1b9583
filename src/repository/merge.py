"""
Builder Merge
=============
Converts the authoring-time builder tree into canonical Pact records.

Used by the repository when a builder is added and by the tester when it
synthesizes the single interaction a mock server should expect.

Conversion rules, per request:
- description copied verbatim
- provider states: empty when the state name is missing, else one state
- method reduced to its plain name ("POST")
- path copied (the builder already made it absolute)
- query mapping encoded as a query string and decoded back, so the
  stored value is canonical but still human readable
- headers and body copied, status reduced to its numeric code
"""

from typing import Optional, TYPE_CHECKING
from urllib.parse import unquote, urlencode

from src.models import Consumer, Interaction, Pact, Provider, ProviderState, Request, Response

if TYPE_CHECKING:
    from src.builders.pact_builder import PactBuilder, RequestBuilder, ResponseBuilder


def create_header(builder: "PactBuilder") -> Pact:
    """New pact carrying only the consumer and provider names."""
    return Pact(
        consumer=Consumer(name=builder.consumer),
        provider=Provider(name=builder.provider),
    )


def to_interactions(builder: "PactBuilder") -> list[Interaction]:
    """One interaction per (state, request) pair, in declaration order."""
    return [
        to_interaction(request, state_builder.state)
        for state_builder in builder.state_builders
        for request in state_builder.requests
    ]


def merge_interactions(builder: "PactBuilder", pact: Pact) -> Pact:
    return pact.with_interactions(to_interactions(builder))


def to_interaction(request_builder: "RequestBuilder", state: Optional[str]) -> Interaction:
    # TODO: take parameters from the state builder once states carry them
    states = () if state is None else (ProviderState(name=state),)
    return Interaction(
        description=request_builder.description,
        provider_states=states,
        request=to_request(request_builder),
        response=to_response(request_builder.response),
    )


def to_request(request_builder: "RequestBuilder") -> Request:
    headers = request_builder.headers
    return Request(
        method=request_builder.method.name,
        path=request_builder.path,
        query=encode_query(request_builder.query),
        headers=dict(headers) if headers is not None else None,
        body=request_builder.body,
    )


def to_response(response_builder: "ResponseBuilder") -> Response:
    headers = response_builder.headers
    return Response(
        status=int(response_builder.status),
        headers=dict(headers) if headers is not None else None,
        body=response_builder.body,
    )


def encode_query(query: Optional[dict]) -> str:
    """
    Canonical, readable query string for a mapping of parameters.

    >>> encode_query({"verbose": "true", "q": "a b"})
    'verbose=true&q=a+b'
    """
    if not query:
        return ""
    return unquote(urlencode(query, doseq=True))
