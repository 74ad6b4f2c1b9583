"""
Repository Package
==================
Merges builders into canonical pacts and ships them.

Modules:
    merge: Builder tree to canonical model conversion
    pact_repository: Pact store, pact file writer, publish fan-out
    broker_host: Pact Broker / Pactflow publish client
"""

from .broker_host import PactBrokerHost
from .pact_repository import PactHost, PactRepository

__all__ = [
    "PactBrokerHost",
    "PactHost",
    "PactRepository",
]
