"""
Verification Results
====================
Aggregate record of failed verifications for one test run.

Every tester records mismatches here and the repository refuses to
publish while any failure is present. Builders and repositories created
without an explicit aggregate share the run-level one from ``run_results()``,
so a failure recorded anywhere in the run blocks publishing. Pass a
dedicated instance to keep an independent run apart.

Usage:
    results = VerificationResults()
    repository = PactRepository(results=results)
    builder = repository.builder("OrderUI", "OrderService")
    ...
    if results.has_errors:
        print(results.summary())
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class VerificationFailure:
    """One mock server run whose traffic did not match."""
    consumer: str
    provider: str
    state: Optional[str]
    mismatch_json: str


@dataclass
class VerificationResults:
    """Failures are only ever appended, never cleared."""
    failures: list[VerificationFailure] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.failures) > 0

    def record_failure(
        self,
        consumer: str,
        provider: str,
        state: Optional[str],
        mismatch_json: str
    ) -> VerificationFailure:
        failure = VerificationFailure(
            consumer=consumer,
            provider=provider,
            state=state,
            mismatch_json=mismatch_json,
        )
        self.failures.append(failure)
        return failure

    def absorb(self, other: "VerificationResults") -> None:
        """Copy failures recorded elsewhere into this aggregate."""
        if other is self:
            return
        for failure in other.failures:
            if failure not in self.failures:
                self.failures.append(failure)

    def summary(self) -> str:
        if not self.failures:
            return "All verifications passed."
        lines = [f"{len(self.failures)} verification(s) failed:"]
        for f in self.failures:
            lines.append(f'  - {f.consumer} -> {f.provider} [state "{f.state}"]')
        return "\n".join(lines)


# Shared by builders and repositories created without an explicit aggregate
_run_results = VerificationResults()


def run_results() -> VerificationResults:
    """Aggregate for the current test run, used when none is passed in."""
    return _run_results
