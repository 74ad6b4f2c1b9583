"""
Pact Broker Host
================

Publishes pacts to a Pact Broker or Pactflow.

Each pact is PUT to the broker's consumer version endpoint:
    /pacts/provider/{provider}/consumer/{consumer}/version/{version}

Usage:
    from src.repository import PactBrokerHost

    host = PactBrokerHost()        # PACTFLOW_BASE_URL / PACTFLOW_TOKEN
    await repository.publish(host, version="1.4.2")
"""

import asyncio
from typing import Optional
from urllib.parse import quote

import requests
from langfuse import observe

from src.config import PactConfig
from src.models import Pact


class PactBrokerHost:
    """
    Pact Broker client used as a publish target.

    HTTP errors are not caught here: they propagate as ``requests``
    exceptions to whoever awaited the publish.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[int] = None,
        config: Optional[PactConfig] = None
    ):
        config = config or PactConfig.from_env()
        self.base_url = (base_url or config.broker_url).rstrip("/")
        self.token = token or config.broker_token
        self.timeout = timeout or config.timeout

        if not self.base_url:
            raise ValueError("Pact Broker URL not configured. Set PACTFLOW_BASE_URL.")

    def _get_headers(self) -> dict:
        """Get headers for broker API calls."""
        headers = {
            "Accept": "application/hal+json, application/json",
            "Content-Type": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def pact_url(self, pact: Pact, version: str) -> str:
        provider = quote(pact.provider.name, safe="")
        consumer = quote(pact.consumer.name, safe="")
        return (
            f"{self.base_url}/pacts/provider/{provider}"
            f"/consumer/{consumer}/version/{quote(version, safe='')}"
        )

    @observe(name="broker_publish_contract")
    async def publish_contract(self, pact: Pact, version: str) -> None:
        # requests is blocking; keep the event loop free for the other publishes
        await asyncio.to_thread(self._put_pact, pact, version)

    def _put_pact(self, pact: Pact, version: str) -> requests.Response:
        url = self.pact_url(pact, version)
        print(f"[Broker] Publishing {pact.key} v{version}")

        response = requests.put(
            url,
            data=pact.to_json(),
            headers=self._get_headers(),
            timeout=self.timeout
        )
        response.raise_for_status()

        print(f"  [OK] {pact.key} published ({response.status_code})")
        return response
