from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from aggregation.fixture_detail import FixtureDetailAggregator
from api.deps import get_gateway
from core.logging import get_logger
from providers.api_football.base import FootballGateway
from .streaming import envelope_response, ndjson_response

router = APIRouter(prefix="/fixtures", tags=["fixtures"])
logger = get_logger("api.routes.fixtures")


@router.get("/{fixture_id}/detail", summary="Dettaglio partita (stato terminale)")
async def get_fixture_detail(
    fixture_id: int = Path(..., gt=0),
    gateway: FootballGateway = Depends(get_gateway),
):
    return await envelope_response(FixtureDetailAggregator(gateway).fetch_detail(fixture_id))


@router.get("/{fixture_id}/detail/stream", summary="Dettaglio partita come stream NDJSON di stati")
async def stream_fixture_detail(
    fixture_id: int = Path(..., gt=0),
    progressive: bool = Query(False),
    gateway: FootballGateway = Depends(get_gateway),
):
    aggregator = FixtureDetailAggregator(gateway)
    if progressive:
        return ndjson_response(aggregator.fetch_progressive(fixture_id))
    return ndjson_response(aggregator.fetch_detail(fixture_id))


@router.get("/{fixture_id}/lineups", summary="Solo formazioni")
async def get_fixture_lineups(
    fixture_id: int = Path(..., gt=0),
    gateway: FootballGateway = Depends(get_gateway),
):
    return await envelope_response(FixtureDetailAggregator(gateway).fetch_lineups_only(fixture_id))


@router.get("/{fixture_id}/statistics", summary="Solo statistiche (opzionalmente per squadra)")
async def get_fixture_statistics(
    fixture_id: int = Path(..., gt=0),
    team: Optional[int] = Query(None, gt=0),
    gateway: FootballGateway = Depends(get_gateway),
):
    return await envelope_response(
        FixtureDetailAggregator(gateway).fetch_statistics_only(fixture_id, team_id=team)
    )


@router.get("/{fixture_id}/events", summary="Solo eventi")
async def get_fixture_events(
    fixture_id: int = Path(..., gt=0),
    gateway: FootballGateway = Depends(get_gateway),
):
    return await envelope_response(FixtureDetailAggregator(gateway).fetch_events_only(fixture_id))
