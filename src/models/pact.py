"""
Pact Contract Model
===================

Canonical, serializable records for a consumer-driven contract.

These are the documents the repository produces and publishes. They are
frozen: authoring code works with the builders in ``src.builders`` and
never mutates a Pact directly. Merging new interactions produces a new
Pact via ``Pact.with_interactions``.

Usage:
    from src.models import Pact, Consumer, Provider

    pact = Pact(consumer=Consumer("OrderUI"), provider=Provider("OrderService"))
    print(pact.key)        # OrderUI|OrderService
    print(pact.to_json())
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional


def pact_key(consumer: str, provider: str) -> str:
    """Lookup key for the pact between a consumer and a provider."""
    return f"{consumer}|{provider}"


def _drop_none(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# PARTICIPANTS
# =============================================================================

@dataclass(frozen=True)
class Consumer:
    """The party issuing requests."""
    name: str

    def to_dict(self) -> dict:
        return {"name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "Consumer":
        return cls(name=data["name"])


@dataclass(frozen=True)
class Provider:
    """The party serving requests."""
    name: str

    def to_dict(self) -> dict:
        return {"name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "Provider":
        return cls(name=data["name"])


@dataclass(frozen=True)
class ProviderState:
    """Named precondition the provider must be in before an interaction."""
    name: str

    def to_dict(self) -> dict:
        return {"name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "ProviderState":
        return cls(name=data["name"])


# =============================================================================
# EXCHANGE
# =============================================================================

@dataclass(frozen=True)
class Request:
    """Expected request. ``method`` is the plain verb name, ``path`` is absolute."""
    method: str
    path: str
    query: str = ""
    headers: Optional[dict[str, str]] = None
    body: Any = None

    def to_dict(self) -> dict:
        return _drop_none({
            "method": self.method,
            "path": self.path,
            "query": self.query,
            "headers": self.headers,
            "body": self.body,
        })

    @classmethod
    def from_dict(cls, data: dict) -> "Request":
        return cls(
            method=data.get("method", "GET"),
            path=data.get("path", "/"),
            query=data.get("query", ""),
            headers=data.get("headers"),
            body=data.get("body"),
        )


@dataclass(frozen=True)
class Response:
    """Response the provider is expected to return."""
    status: int = 200
    headers: Optional[dict[str, str]] = None
    body: Any = None

    def to_dict(self) -> dict:
        return _drop_none({
            "status": self.status,
            "headers": self.headers,
            "body": self.body,
        })

    @classmethod
    def from_dict(cls, data: dict) -> "Response":
        return cls(
            status=int(data.get("status", 200)),
            headers=data.get("headers"),
            body=data.get("body"),
        )


@dataclass(frozen=True)
class Interaction:
    """
    One verified request/response exchange and its preconditions.

    ``provider_states`` holds zero or one state in this version; it is a
    sequence so that multiple states can be added without changing the
    document shape.
    """
    description: str
    request: Request
    response: Response
    provider_states: tuple[ProviderState, ...] = ()

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "providerStates": [s.to_dict() for s in self.provider_states],
            "request": self.request.to_dict(),
            "response": self.response.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Interaction":
        # Older documents carry a single "providerState" string
        if "providerStates" in data:
            states = tuple(ProviderState.from_dict(s) for s in data["providerStates"] or [])
        elif data.get("providerState"):
            states = (ProviderState(name=data["providerState"]),)
        else:
            states = ()

        return cls(
            description=data.get("description", ""),
            request=Request.from_dict(data.get("request", {})),
            response=Response.from_dict(data.get("response", {})),
            provider_states=states,
        )


# =============================================================================
# PACT
# =============================================================================

@dataclass(frozen=True)
class Pact:
    """
    Contract between one consumer and one provider.

    ``interactions`` stays ``None`` until the first merge adds some.
    """
    consumer: Consumer
    provider: Provider
    interactions: Optional[tuple[Interaction, ...]] = field(default=None)

    @property
    def key(self) -> str:
        return pact_key(self.consumer.name, self.provider.name)

    def with_interactions(self, interactions) -> "Pact":
        """
        Return a copy with ``interactions`` appended to the existing ones.

        The consumer and provider are carried over unchanged. An empty
        sequence leaves the pact as it is.
        """
        added = tuple(interactions)
        if not added:
            return self
        merged = added if self.interactions is None else self.interactions + added
        return Pact(consumer=self.consumer, provider=self.provider, interactions=merged)

    def to_dict(self) -> dict:
        data = {
            "consumer": self.consumer.to_dict(),
            "provider": self.provider.to_dict(),
        }
        if self.interactions is not None:
            data["interactions"] = [i.to_dict() for i in self.interactions]
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "Pact":
        interactions = data.get("interactions")
        return cls(
            consumer=Consumer.from_dict(data["consumer"]),
            provider=Provider.from_dict(data["provider"]),
            interactions=(
                None if interactions is None
                else tuple(Interaction.from_dict(i) for i in interactions)
            ),
        )

    @classmethod
    def from_json(cls, text: str) -> "Pact":
        return cls.from_dict(json.loads(text))
