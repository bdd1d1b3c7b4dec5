#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from aggregation.team_profile import TeamProfileAggregator
from core.logging import get_logger
from core.resource import Error
from providers.api_football.base import FootballGateway
from providers.api_football.gateway import ApiFootballGateway

log = get_logger("scripts.team_profile")


async def _run(
    gateway: FootballGateway,
    team_id: int,
    season: Optional[int],
    league: Optional[int],
    basic: bool,
) -> int:
    aggregator = TeamProfileAggregator(gateway)
    if basic:
        stream = aggregator.fetch_basic_profile(team_id)
    else:
        stream = aggregator.fetch_profile(team_id, season=season, league=league)
    exit_code = 0
    async for envelope in stream:
        print(json.dumps(envelope.to_dict(), ensure_ascii=False), flush=True)
        if isinstance(envelope, Error):
            exit_code = 1
    return exit_code


def main(argv: Optional[List[str]] = None, gateway: Optional[FootballGateway] = None) -> int:
    ap = argparse.ArgumentParser(description="Profilo squadra: stampa ogni stato come riga JSON")
    ap.add_argument("team_id", type=int)
    ap.add_argument("--season", type=int, default=None)
    ap.add_argument("--league", type=int, default=None)
    ap.add_argument("--basic", action="store_true", help="solo anagrafica, niente statistiche né rosa")
    args = ap.parse_args(argv)

    log.info("Profilo squadra team=%s season=%s league=%s", args.team_id, args.season, args.league)
    return asyncio.run(
        _run(gateway or ApiFootballGateway(), args.team_id, args.season, args.league, args.basic)
    )


if __name__ == "__main__":
    sys.exit(main())
