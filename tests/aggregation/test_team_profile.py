import asyncio

import httpx
import pytest

from aggregation.team_profile import TeamProfileAggregator
from core.bundles import TeamProfileDetails
from core.resource import Error, Loading, Success
from fakes import (
    SQUAD,
    TEAM_PROFILE,
    TEAM_STATISTICS,
    FakeGateway,
    api_response,
    assert_envelope_contract,
    collect,
)


def team_gateway(**overrides) -> FakeGateway:
    responses = {
        "team_profile": api_response([TEAM_PROFILE]),
        "team_statistics": api_response(TEAM_STATISTICS),
        "squad": api_response([SQUAD]),
    }
    responses.update(overrides)
    return FakeGateway(**responses)


def test_full_profile_with_statistics_and_squad():
    gateway = team_gateway()
    envelopes = collect(TeamProfileAggregator(gateway).fetch_profile(33, season=2023, league=39))

    assert_envelope_contract(envelopes)
    details = envelopes[-1].data
    assert isinstance(details, TeamProfileDetails)
    assert details.team_profile == TEAM_PROFILE
    assert details.statistics == TEAM_STATISTICS
    assert details.squad == SQUAD
    assert gateway.called("team_statistics") == [("team_statistics", 39, 2023, 33)]


def test_empty_profile_is_business_error():
    gateway = team_gateway(team_profile=api_response([]))
    envelopes = collect(TeamProfileAggregator(gateway).fetch_profile(33, season=2023, league=39))

    assert [type(e) for e in envelopes] == [Loading, Error]
    assert envelopes[-1].message == "Profilo squadra non trovato."


def test_profile_transport_failure_is_fatal():
    gateway = team_gateway(team_profile=httpx.ConnectError("dns"))
    envelopes = collect(TeamProfileAggregator(gateway).fetch_profile(33))
    assert [type(e) for e in envelopes] == [Loading, Error]
    assert "dns" in envelopes[-1].message


@pytest.mark.parametrize("season", [None, 2023])
def test_statistics_skipped_without_league(season):
    gateway = team_gateway()
    envelopes = collect(TeamProfileAggregator(gateway).fetch_profile(33, season=season, league=None))

    assert isinstance(envelopes[-1], Success)
    assert envelopes[-1].data.statistics is None
    assert gateway.called("team_statistics") == []


def test_statistics_skipped_without_season():
    gateway = team_gateway()
    envelopes = collect(TeamProfileAggregator(gateway).fetch_profile(33, season=None, league=39))
    assert envelopes[-1].data.statistics is None
    assert gateway.called("team_statistics") == []


def test_optional_failures_become_none():
    gateway = team_gateway(
        team_statistics=RuntimeError("stats giù"),
        squad=httpx.ReadTimeout("lento"),
    )
    envelopes = collect(TeamProfileAggregator(gateway).fetch_profile(33, season=2023, league=39))

    assert isinstance(envelopes[-1], Success)
    details = envelopes[-1].data
    assert details.team_profile == TEAM_PROFILE
    assert details.statistics is None
    assert details.squad is None


def test_empty_squad_response_gives_none():
    gateway = team_gateway(squad=api_response([]))
    envelopes = collect(TeamProfileAggregator(gateway).fetch_profile(33))
    assert envelopes[-1].data.squad is None


def test_squad_always_uses_fixed_season():
    gateway = team_gateway()
    collect(TeamProfileAggregator(gateway).fetch_profile(33, season=2019, league=39))
    assert gateway.called("squad") == [("squad", 33, 2024)]


def test_squad_season_from_settings(monkeypatch):
    monkeypatch.setenv("SQUAD_DEFAULT_SEASON", "2025")
    gateway = team_gateway()
    collect(TeamProfileAggregator(gateway).fetch_profile(33))
    assert gateway.called("squad") == [("squad", 33, 2025)]


def test_squad_season_explicit_override():
    gateway = team_gateway()
    collect(TeamProfileAggregator(gateway, squad_season=2022).fetch_profile(33, season=2023))
    assert gateway.called("squad") == [("squad", 33, 2022)]


def test_basic_profile_only_fetches_team():
    gateway = team_gateway()
    envelopes = collect(TeamProfileAggregator(gateway).fetch_basic_profile(33))

    assert_envelope_contract(envelopes)
    details = envelopes[-1].data
    assert details.team_profile == TEAM_PROFILE
    assert details.statistics is None and details.squad is None
    assert [c[0] for c in gateway.calls] == ["team_profile"]


def test_basic_profile_not_found():
    gateway = team_gateway(team_profile=api_response([]))
    envelopes = collect(TeamProfileAggregator(gateway).fetch_basic_profile(33))
    assert isinstance(envelopes[-1], Error)
    assert envelopes[-1].message == "Profilo squadra non trovato."


def test_repeated_profile_calls_are_identical():
    aggregator = TeamProfileAggregator(team_gateway())
    first = collect(aggregator.fetch_profile(33, season=2023, league=39))
    second = collect(aggregator.fetch_profile(33, season=2023, league=39))
    assert first == second


def test_cancellation_wins_over_simultaneous_profile_failure():
    async def scenario():
        started = asyncio.Event()
        gate = asyncio.Event()

        async def failing_profile(team_id):
            started.set()
            await gate.wait()
            raise RuntimeError("boom")

        gateway = team_gateway(team_profile=failing_profile)
        received = []

        async def consume():
            async for envelope in TeamProfileAggregator(gateway).fetch_profile(33):
                received.append(envelope)

        task = asyncio.create_task(consume())
        await asyncio.wait_for(started.wait(), timeout=1)
        # il ramo fallisce e il consumer viene cancellato nello stesso giro del loop
        gate.set()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return task, received

    task, received = asyncio.run(scenario())
    assert task.cancelled()
    assert received == [Loading()]
