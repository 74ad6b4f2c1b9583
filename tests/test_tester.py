import json

import pytest

from conftest import FakeMockServerFactory, noop_exercise, order_state
from src.builders import PactBuilder
from src.errors import PactMatchingException, PactPublishBlockedError, PactStructureError
from src.repository import PactRepository
from src.verification import VerificationResults


@pytest.mark.asyncio
async def test_end_to_end_order_example(repository, mock_factory):
    builder = repository.builder("OrderUI", "OrderService")
    tester = builder.add_state(order_state("order 123 exists", "orders/123"))

    seen = []

    async def exercise(server):
        seen.append(server.url)

    await tester.test(mock_factory, exercise)
    repository.add(builder)

    doc = json.loads(repository.get_pact_file("OrderUI", "OrderService"))
    assert len(doc["interactions"]) == 1
    interaction = doc["interactions"][0]
    assert interaction["providerStates"] == [{"name": "order 123 exists"}]
    assert interaction["request"]["path"] == "/orders/123"
    assert interaction["request"]["query"] == "verbose=true"
    assert interaction["request"]["method"] == "GET"
    assert interaction["response"]["status"] == 200
    assert interaction["response"]["body"] == {"id": 123}
    assert seen == ["http://127.0.0.1:1234"]


@pytest.mark.asyncio
async def test_server_expects_the_state_interaction(mock_factory):
    builder = PactBuilder(consumer="OrderUI", provider="OrderService")
    tester = builder.add_state(order_state())

    await tester.test(mock_factory, noop_exercise)

    server = mock_factory.created[0]
    assert server.interaction.request.path == "/orders/123"
    assert server.interaction.provider_states[0].name == "order 123 exists"
    assert builder.state_builders[0].tested is True
    assert mock_factory.closed == [server]


@pytest.mark.asyncio
async def test_mismatch_raises_with_server_details(repository, mismatch_factory, host):
    builder = repository.builder("OrderUI", "OrderService")
    tester = builder.add_state(order_state())

    with pytest.raises(PactMatchingException) as exc_info:
        await tester.test(mismatch_factory, noop_exercise)

    assert exc_info.value.mismatch_json == mismatch_factory.mismatch_json
    assert exc_info.value.mismatches[0]["type"] == "MissingRequest"
    assert repository.results.has_errors
    assert mismatch_factory.created[0].closed

    # exercise finished, so the state still counts as tested
    assert builder.state_builders[0].tested is True

    repository.add(builder)
    with pytest.raises(PactPublishBlockedError):
        await repository.publish(host, "1.0.0")
    assert host.published == []


@pytest.mark.asyncio
async def test_exercise_error_propagates_and_server_is_closed(mock_factory):
    builder = PactBuilder(consumer="OrderUI", provider="OrderService")
    tester = builder.add_state(order_state())
    error = AssertionError("unexpected status")

    async def exercise(server):
        raise error

    with pytest.raises(AssertionError) as exc_info:
        await tester.test(mock_factory, exercise)

    assert exc_info.value is error
    assert len(mock_factory.closed) == 1
    assert builder.state_builders[0].tested is False
    assert not builder.results.has_errors


@pytest.mark.asyncio
async def test_standalone_builder_failure_reaches_run_results(run_results):
    failing = PactBuilder(consumer="OrderUI", provider="OrderService")
    tester = failing.add_state(order_state())

    with pytest.raises(PactMatchingException):
        await tester.test(FakeMockServerFactory(matched=False), noop_exercise)

    assert run_results.has_errors
    assert run_results.failures[0].state == "order 123 exists"
    assert PactRepository().results.has_errors


@pytest.mark.asyncio
async def test_independent_results_stay_apart():
    separate = VerificationResults()
    failing = PactBuilder(consumer="OrderUI", provider="OrderService", results=separate)
    tester = failing.add_state(order_state())

    with pytest.raises(PactMatchingException):
        await tester.test(FakeMockServerFactory(matched=False), noop_exercise)

    assert separate.has_errors
    assert not PactRepository(results=VerificationResults()).results.has_errors


@pytest.mark.asyncio
async def test_state_without_requests_cannot_be_tested(mock_factory):
    builder = PactBuilder(consumer="OrderUI", provider="OrderService")
    tester = builder.add_state(lambda state: setattr(state, "state", "empty"))

    with pytest.raises(PactStructureError):
        await tester.test(mock_factory, noop_exercise)

    assert mock_factory.created == []


@pytest.mark.asyncio
async def test_request_without_response_cannot_be_tested(mock_factory):
    builder = PactBuilder(consumer="OrderUI", provider="OrderService")

    def configure(state):
        state.state = "order 123 exists"
        state.add_request(lambda req: setattr(req, "path", "orders/123"))

    tester = builder.add_state(configure)

    with pytest.raises(PactStructureError):
        await tester.test(mock_factory, noop_exercise)

    assert mock_factory.created == []
    assert builder.state_builders[0].tested is False


@pytest.mark.asyncio
async def test_tester_only_touches_its_own_state(mock_factory):
    builder = PactBuilder(consumer="OrderUI", provider="OrderService")
    first = builder.add_state(order_state("order 1 exists", "orders/1"))
    builder.add_state(order_state("order 2 exists", "orders/2"))

    await first.test(mock_factory, noop_exercise)

    assert [s.tested for s in builder.state_builders] == [True, False]
    assert mock_factory.created[0].interaction.request.path == "/orders/1"
