"""
Verification Package
====================
Runs authored exchanges against mock servers and records the outcome.
"""

from .mock_server import MockServer, MockServerFactory
from .results import VerificationFailure, VerificationResults, run_results
from .tester import ExerciseFunction, RequestTester

__all__ = [
    "ExerciseFunction",
    "MockServer",
    "MockServerFactory",
    "RequestTester",
    "VerificationFailure",
    "VerificationResults",
    "run_results",
]
