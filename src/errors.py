"""
Pact Errors
===========
Exceptions raised while building, verifying and publishing contracts.

None of these are recovered from inside the library; the caller (test
runner or CLI) decides whether the whole run stops.
"""

import json
from typing import Any, Optional


class PactException(Exception):
    """Base class for all contract errors."""


class PactCoverageError(PactException):
    """A declared provider state was never exercised by a tester."""

    def __init__(self, state: Optional[str]):
        self.state = state
        super().__init__(f'State "{state}" not tested')


class PactStructureError(PactException):
    """The builder tree is incomplete, e.g. a request without a response."""


class PactMatchingException(PactException):
    """The mock server saw traffic that did not match the expected interaction."""

    def __init__(self, mismatch_json: str):
        self.mismatch_json = mismatch_json
        super().__init__(f"Pact verification failed: {mismatch_json}")

    @property
    def mismatches(self) -> Any:
        """Mismatch details reported by the mock server, parsed from JSON."""
        return json.loads(self.mismatch_json)


class PactPublishBlockedError(PactException):
    """Publishing refused because at least one verification failed."""
