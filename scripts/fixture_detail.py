#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from aggregation.fixture_detail import FixtureDetailAggregator
from core.logging import get_logger
from core.resource import Error
from providers.api_football.base import FootballGateway
from providers.api_football.gateway import ApiFootballGateway

log = get_logger("scripts.fixture_detail")


async def _run(gateway: FootballGateway, fixture_id: int, progressive: bool) -> int:
    aggregator = FixtureDetailAggregator(gateway)
    stream = aggregator.fetch_progressive(fixture_id) if progressive else aggregator.fetch_detail(fixture_id)
    exit_code = 0
    async for envelope in stream:
        print(json.dumps(envelope.to_dict(), ensure_ascii=False), flush=True)
        if isinstance(envelope, Error):
            exit_code = 1
    return exit_code


def main(argv: Optional[List[str]] = None, gateway: Optional[FootballGateway] = None) -> int:
    ap = argparse.ArgumentParser(description="Dettaglio partita: stampa ogni stato come riga JSON")
    ap.add_argument("fixture_id", type=int)
    ap.add_argument("--progressive", action="store_true", help="formazioni prima, poi statistiche ed eventi")
    args = ap.parse_args(argv)
    if args.fixture_id <= 0:
        ap.error("fixture_id deve essere positivo")

    log.info("Dettaglio partita fixture=%s progressive=%s", args.fixture_id, args.progressive)
    return asyncio.run(_run(gateway or ApiFootballGateway(), args.fixture_id, args.progressive))


if __name__ == "__main__":
    sys.exit(main())
