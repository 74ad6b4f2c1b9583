"""
Models Package
==============
Canonical contract records and their JSON form.
"""

from .pact import (
    Consumer,
    Interaction,
    Pact,
    Provider,
    ProviderState,
    Request,
    Response,
    pact_key,
)

__all__ = [
    "Consumer",
    "Interaction",
    "Pact",
    "Provider",
    "ProviderState",
    "Request",
    "Response",
    "pact_key",
]
