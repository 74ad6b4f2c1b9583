"""
Pact Repository
===============
Holds pacts in their canonical form and merges builders into them.

Several builders for the same consumer/provider pair are folded into a
single Pact with all the combined interactions, so a consumer's contract
accumulates across every test module that exercises it.

Usage:
    repository = PactRepository()
    builder = repository.builder("OrderUI", "OrderService")
    tester = builder.add_state(order_exists)
    await tester.test(mock_server_factory, exercise)

    repository.add(builder)
    print(repository.get_pact_file("OrderUI", "OrderService"))

    repository.write_pact_files("pacts")
    await repository.publish(PactBrokerHost(), version="1.0.0")
"""

import asyncio
import threading
from pathlib import Path
from typing import Optional, Protocol, TYPE_CHECKING

from langfuse import observe, get_client

from src.config import PactConfig
from src.errors import PactPublishBlockedError
from src.models import Pact, pact_key
from src.repository.merge import create_header, merge_interactions
from src.verification.results import VerificationResults, run_results

if TYPE_CHECKING:
    from src.builders.pact_builder import PactBuilder


class PactHost(Protocol):
    """Remote place pacts are published to."""

    async def publish_contract(self, pact: Pact, version: str) -> None:
        ...


class PactRepository:
    """
    Canonical pacts keyed by ``consumer|provider``.

    ``require_tests`` is fixed at construction: when set, builders with a
    state that no tester exercised are rejected by ``add``.
    ``results`` defaults to the run-level aggregate shared with builders.
    """

    def __init__(
        self,
        require_tests: bool = True,
        results: Optional[VerificationResults] = None
    ):
        self.require_tests = require_tests
        self.results = results if results is not None else run_results()
        self._pacts: dict[str, Pact] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Optional[PactConfig] = None) -> "PactRepository":
        config = config or PactConfig.from_env()
        return cls(require_tests=config.require_tests)

    def builder(self, consumer: str, provider: str) -> "PactBuilder":
        """New PactBuilder whose testers record into this repository's results."""
        from src.builders.pact_builder import PactBuilder

        return PactBuilder(consumer=consumer, provider=provider, results=self.results)

    @property
    def pacts(self) -> tuple[Pact, ...]:
        with self._lock:
            return tuple(self._pacts.values())

    def add(self, builder: "PactBuilder") -> Pact:
        """
        Add all the request/response pairs of a builder as interactions.

        Args:
            builder: Fully described, and normally tested, PactBuilder

        Returns:
            The merged Pact for the builder's consumer/provider pair

        Raises:
            PactCoverageError: A state was never tested and tests are required
            PactStructureError: A request has no response
        """
        # failures count even when the builder itself is rejected
        self.results.absorb(builder.results)
        builder.validate(require_tests=self.require_tests)

        key = pact_key(builder.consumer, builder.provider)
        with self._lock:
            contract = self._pacts.get(key)
            if contract is None:
                contract = create_header(builder)
            contract = merge_interactions(builder, contract)
            self._pacts[key] = contract

        count = len(contract.interactions or ())
        print(f"[Repository] {key}: {count} interaction(s)")
        return contract

    def get_pact(self, consumer: str, provider: str) -> Optional[Pact]:
        with self._lock:
            return self._pacts.get(pact_key(consumer, provider))

    def get_pact_file(self, consumer: str, provider: str) -> Optional[str]:
        """Pact for the pair in JSON format, or None if nothing was added."""
        pact = self.get_pact(consumer, provider)
        if pact is None:
            return None
        return pact.to_json()

    def write_pact_files(self, directory: str) -> list[Path]:
        """
        Write every pact to ``<directory>/<consumer>-<provider>.json``.

        Returns:
            Paths of the written files
        """
        output_path = Path(directory)
        output_path.mkdir(parents=True, exist_ok=True)

        written = []
        for pact in self.pacts:
            pact_file = output_path / f"{pact.consumer.name}-{pact.provider.name}.json"
            pact_file.write_text(pact.to_json(indent=2), encoding="utf-8")
            written.append(pact_file)
            print(f"[Repository] Wrote: {pact_file}")
        return written

    def load_pact_files(self, directory: str) -> list[Pact]:
        """
        Merge every ``*.json`` pact file in ``directory`` into the repository.

        Interactions from a file are appended to any pact already held for
        the same consumer/provider pair.
        """
        loaded = []
        for pact_file in sorted(Path(directory).glob("*.json")):
            pact = Pact.from_json(pact_file.read_text(encoding="utf-8"))
            with self._lock:
                contract = self._pacts.get(pact.key)
                if contract is None:
                    contract = Pact(consumer=pact.consumer, provider=pact.provider)
                self._pacts[pact.key] = contract.with_interactions(pact.interactions or ())
            loaded.append(pact)
            print(f"[Repository] Loaded: {pact_file}")
        return loaded

    @observe(name="pact_publish")
    async def publish(self, host: PactHost, version: str) -> None:
        """
        Publish all pacts onto a host, tagged with ``version``.

        Publications run concurrently. The first failure is raised; the
        others are neither retried nor rolled back.

        Raises:
            PactPublishBlockedError: A verification failed during this run
        """
        if self.results.has_errors:
            raise PactPublishBlockedError(
                "Can't publish when there are tests with errors\n" + self.results.summary()
            )

        pacts = self.pacts
        print(f"[Repository] Publishing {len(pacts)} pact(s) as version {version}")
        await asyncio.gather(*(host.publish_contract(pact, version) for pact in pacts))

        try:
            get_client().update_current_span(
                output={"published": [p.key for p in pacts], "version": version}
            )
        except Exception:
            pass
