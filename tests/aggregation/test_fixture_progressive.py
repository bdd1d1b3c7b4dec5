import asyncio

import httpx
import pytest

from aggregation.fixture_detail import FixtureDetailAggregator
from core.resource import Error, Loading, Success
from fakes import EVENTS, LINEUPS, STATISTICS, FakeGateway, api_response, assert_envelope_contract, collect


def progressive_gateway(**overrides) -> FakeGateway:
    responses = {
        "lineups": api_response(LINEUPS),
        "statistics": api_response(STATISTICS),
        "events": api_response(EVENTS),
    }
    responses.update(overrides)
    return FakeGateway(**responses)


def test_progressive_emits_partial_then_complete():
    envelopes = collect(FixtureDetailAggregator(progressive_gateway()).fetch_progressive(1001))

    assert_envelope_contract(envelopes)
    assert [type(e) for e in envelopes] == [Loading, Success, Success]
    partial, complete = envelopes[1].data, envelopes[2].data
    assert list(partial.lineups) == LINEUPS
    assert partial.statistics == () and partial.events == ()
    assert list(complete.lineups) == LINEUPS
    assert len(complete.statistics) == 2
    assert len(complete.events) == 5
    assert partial.fixture is None and complete.fixture is None


def test_partial_snapshot_delivered_before_second_phase_calls():
    log = []

    def record(name, payload):
        def _answer(*args):
            log.append(f"call:{name}")
            return payload
        return _answer

    gateway = FakeGateway(
        lineups=record("lineups", api_response(LINEUPS)),
        statistics=record("statistics", api_response(STATISTICS)),
        events=record("events", api_response(EVENTS)),
    )

    async def scenario():
        async for envelope in FixtureDetailAggregator(gateway).fetch_progressive(1001):
            log.append(f"got:{type(envelope).__name__}")

    asyncio.run(scenario())

    assert log[:3] == ["got:Loading", "call:lineups", "got:Success"]
    assert set(log[3:5]) == {"call:statistics", "call:events"}
    assert log[-1] == "got:Success"


def test_progressive_lineups_failure_has_no_intermediate_state():
    gateway = progressive_gateway(lineups=httpx.ConnectError("offline"))
    envelopes = collect(FixtureDetailAggregator(gateway).fetch_progressive(1001))

    assert [type(e) for e in envelopes] == [Loading, Error]
    assert gateway.called("statistics") == []
    assert gateway.called("events") == []


def test_progressive_lineups_application_error():
    gateway = progressive_gateway(lineups=api_response([], errors=["fixture: sconosciuta"]))
    envelopes = collect(FixtureDetailAggregator(gateway).fetch_progressive(1001))
    assert [type(e) for e in envelopes] == [Loading, Error]
    assert "fixture: sconosciuta" in envelopes[-1].message


def test_progressive_second_phase_failure_keeps_partial_snapshot():
    gateway = progressive_gateway(events=RuntimeError("eventi non disponibili"))
    envelopes = collect(FixtureDetailAggregator(gateway).fetch_progressive(1001))

    assert [type(e) for e in envelopes] == [Loading, Success, Error]
    assert list(envelopes[1].data.lineups) == LINEUPS
    assert envelopes[-1].message == "eventi non disponibili"


def test_progressive_second_phase_application_error():
    gateway = progressive_gateway(statistics=api_response([], errors=["team: non valido"]))
    envelopes = collect(FixtureDetailAggregator(gateway).fetch_progressive(1001))
    assert [type(e) for e in envelopes] == [Loading, Success, Error]
    assert envelopes[-1].message == "Errore durante il recupero delle statistiche: team: non valido"


def test_cancellation_during_second_phase_is_not_an_error():
    async def scenario():
        started = asyncio.Event()
        gate = asyncio.Event()

        async def failing_events(fixture_id):
            started.set()
            await gate.wait()
            raise RuntimeError("boom")

        gateway = progressive_gateway(events=failing_events)
        received = []

        async def consume():
            async for envelope in FixtureDetailAggregator(gateway).fetch_progressive(1001):
                received.append(envelope)

        task = asyncio.create_task(consume())
        await asyncio.wait_for(started.wait(), timeout=1)
        gate.set()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return task, received

    task, received = asyncio.run(scenario())
    assert task.cancelled()
    assert [type(e) for e in received] == [Loading, Success]
    assert not any(isinstance(e, Error) for e in received)
