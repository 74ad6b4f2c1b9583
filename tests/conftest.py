"""Pytest fixtures: in-memory mock servers, publish hosts and builders."""

import os

# Keep tracing off for the suite; no Langfuse project is configured here
os.environ.setdefault("LANGFUSE_TRACING_ENABLED", "false")

import json

import pytest

from src.repository import PactRepository
from src.verification import results as verification_results
from src.verification.results import VerificationResults


class FakeMockServer:
    def __init__(self, interaction, matched=True, mismatch_json="[]"):
        self.interaction = interaction
        self.url = "http://127.0.0.1:1234"
        self.matched = matched
        self.mismatch_json = mismatch_json
        self.closed = False

    def has_matched(self):
        return self.matched

    def get_mismatch_json(self):
        return self.mismatch_json


class FakeMockServerFactory:
    """Hands out FakeMockServers that match (or not) as configured."""

    def __init__(self, matched=True, mismatch_json="[]"):
        self.matched = matched
        self.mismatch_json = mismatch_json
        self.created = []
        self.closed = []

    def create_mock_server(self, interaction):
        server = FakeMockServer(interaction, self.matched, self.mismatch_json)
        self.created.append(server)
        return server

    def close_server(self, server):
        server.closed = True
        self.closed.append(server)


class FakeHost:
    def __init__(self, fail_for=None):
        self.fail_for = fail_for
        self.published = []

    async def publish_contract(self, pact, version):
        if pact.provider.name == self.fail_for:
            raise ConnectionError(f"broker unreachable for {pact.key}")
        self.published.append((pact.key, version))


async def noop_exercise(server):
    return None


def order_state(state_name="order 123 exists", path="orders/123"):
    """Configure callback for a state with one GET request."""

    def configure(state):
        state.state = state_name

        def request(req):
            req.description = "a request for an order"
            req.path = path
            req.query = {"verbose": "true"}

            def response(resp):
                resp.status = 200
                resp.body = {"id": 123}

            req.set_response(response)

        state.add_request(request)

    return configure


@pytest.fixture(autouse=True)
def run_results(monkeypatch):
    """Fresh run-level aggregate per test so failures stay in their own test."""
    fresh = VerificationResults()
    monkeypatch.setattr(verification_results, "_run_results", fresh)
    return fresh


@pytest.fixture
def mock_factory():
    return FakeMockServerFactory()


@pytest.fixture
def mismatch_factory():
    mismatches = [{"type": "MissingRequest", "path": "/orders/123"}]
    return FakeMockServerFactory(matched=False, mismatch_json=json.dumps(mismatches))


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def repository():
    return PactRepository()
