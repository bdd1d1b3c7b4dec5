from __future__ import annotations

from functools import partial
from typing import AsyncIterator, Optional

from core.bundles import FixtureDetailBundle
from core.fixture_event import parse_events
from core.logging import get_logger
from core.resource import Loading, Resource, Success
from providers.api_football.base import FootballGateway
from providers.api_football.models import ApiResponse
from .common import guarded, run_all, single_shot, terminal_error, terminal_success
from .errors import raise_for_api_errors

log = get_logger("aggregation.fixture_detail")

OP_DETAIL = "fixture_detail"
OP_PROGRESSIVE = "fixture_detail_progressive"
OP_LINEUPS = "fixture_lineups"
OP_STATISTICS = "fixture_statistics"
OP_EVENTS = "fixture_events"

FIXTURE_CONTEXT = "Errore durante il recupero della partita"
LINEUPS_CONTEXT = "Errore durante il recupero delle formazioni"
STATISTICS_CONTEXT = "Errore durante il recupero delle statistiche"
EVENTS_CONTEXT = "Errore durante il recupero degli eventi"

DETAIL_FALLBACK = "Errore sconosciuto durante il caricamento del dettaglio partita."
LINEUPS_FALLBACK = "Errore sconosciuto durante il caricamento delle formazioni."
STATISTICS_FALLBACK = "Errore sconosciuto durante il caricamento delle statistiche."
EVENTS_FALLBACK = "Errore sconosciuto durante il caricamento degli eventi."


class FixtureDetailAggregator:
    """
    Dettaglio partita: fixture (obbligatoria) + formazioni, statistiche ed
    eventi in parallelo (opzionali).

    Ogni metodo ritorna un async generator di ``Resource``: sempre ``Loading``
    per primo, un solo stato terminale per ultimo. Chiudere il generator (o
    cancellare il task che lo consuma) cancella le chiamate in corso di quella
    sola invocazione.
    """

    def __init__(self, gateway: FootballGateway) -> None:
        self._gateway = gateway

    # ------------------------------------------------------------------
    # Fetch completo
    # ------------------------------------------------------------------

    def fetch_detail(self, fixture_id: int) -> AsyncIterator[Resource[FixtureDetailBundle]]:
        return single_shot(
            OP_DETAIL,
            partial(self._load_detail, fixture_id),
            DETAIL_FALLBACK,
            fixture_id=fixture_id,
        )

    async def _load_detail(self, fixture_id: int) -> FixtureDetailBundle:
        try:
            fixture_response = await self._gateway.fetch_fixture_by_id(fixture_id)
        except Exception as exc:
            log.error("Fixture non disponibile, dettaglio interrotto: %s", exc, extra={"fixture_id": fixture_id})
            raise

        gw = self._gateway
        lineups_result, statistics_result, events_result = await run_all(
            guarded(
                partial(gw.fetch_lineups, fixture_id),
                operation=OP_DETAIL,
                branch="lineups",
                failure_label="Caricamento formazioni non riuscito",
            ),
            guarded(
                partial(gw.fetch_statistics, fixture_id),
                operation=OP_DETAIL,
                branch="statistics",
                failure_label="Caricamento statistiche non riuscito",
            ),
            guarded(
                partial(gw.fetch_events, fixture_id),
                operation=OP_DETAIL,
                branch="events",
                failure_label="Caricamento eventi non riuscito",
            ),
        )

        # Un ramo sostituito ha sempre errors vuoto: il controllo sotto scatta
        # solo per risposte arrivate davvero e rifiutate dall'API.
        lineups = lineups_result.unwrap_or_else(lambda: ApiResponse.empty("fixtures/lineups"))
        statistics = statistics_result.unwrap_or_else(lambda: ApiResponse.empty("fixtures/statistics"))
        events = events_result.unwrap_or_else(lambda: ApiResponse.empty("fixtures/events"))

        raise_for_api_errors(fixture_response, FIXTURE_CONTEXT)
        raise_for_api_errors(lineups, LINEUPS_CONTEXT)
        raise_for_api_errors(statistics, STATISTICS_CONTEXT)
        raise_for_api_errors(events, EVENTS_CONTEXT)

        return FixtureDetailBundle(
            fixture=fixture_response.first(),
            lineups=tuple(lineups.items),
            statistics=tuple(statistics.items),
            events=tuple(parse_events(events.items)),
        )

    # ------------------------------------------------------------------
    # Varianti singole
    # ------------------------------------------------------------------

    def fetch_lineups_only(self, fixture_id: int) -> AsyncIterator[Resource[FixtureDetailBundle]]:
        return single_shot(
            OP_LINEUPS,
            partial(self._load_lineups, fixture_id),
            LINEUPS_FALLBACK,
            fixture_id=fixture_id,
        )

    def fetch_statistics_only(
        self,
        fixture_id: int,
        team_id: Optional[int] = None,
    ) -> AsyncIterator[Resource[FixtureDetailBundle]]:
        return single_shot(
            OP_STATISTICS,
            partial(self._load_statistics, fixture_id, team_id),
            STATISTICS_FALLBACK,
            fixture_id=fixture_id,
            team_id=team_id,
        )

    def fetch_events_only(self, fixture_id: int) -> AsyncIterator[Resource[FixtureDetailBundle]]:
        return single_shot(
            OP_EVENTS,
            partial(self._load_events, fixture_id),
            EVENTS_FALLBACK,
            fixture_id=fixture_id,
        )

    async def _load_lineups(self, fixture_id: int) -> FixtureDetailBundle:
        response = await self._gateway.fetch_lineups(fixture_id)
        raise_for_api_errors(response, LINEUPS_CONTEXT)
        return FixtureDetailBundle(lineups=tuple(response.items))

    async def _load_statistics(self, fixture_id: int, team_id: Optional[int]) -> FixtureDetailBundle:
        response = await self._gateway.fetch_statistics(fixture_id, team_id)
        raise_for_api_errors(response, STATISTICS_CONTEXT)
        return FixtureDetailBundle(statistics=tuple(response.items))

    async def _load_events(self, fixture_id: int) -> FixtureDetailBundle:
        response = await self._gateway.fetch_events(fixture_id)
        raise_for_api_errors(response, EVENTS_CONTEXT)
        return FixtureDetailBundle(events=tuple(parse_events(response.items)))

    # ------------------------------------------------------------------
    # Progressivo: formazioni prima, poi statistiche + eventi
    # ------------------------------------------------------------------

    async def fetch_progressive(self, fixture_id: int) -> AsyncIterator[Resource[FixtureDetailBundle]]:
        """
        Loading -> Success(solo formazioni) -> Success(completo) | Error.

        La fase 2 parte solo dopo che lo snapshot parziale è stato consegnato.
        Un errore in fase 2 termina con Error senza ritrattare lo snapshot
        parziale già emesso. ``fixture`` resta None.
        """
        log.info("%s avviata", OP_PROGRESSIVE, extra={"fixture_id": fixture_id, "stage": "start"})
        yield Loading()

        try:
            partial_bundle = await self._load_lineups(fixture_id)
        except Exception as exc:
            yield terminal_error(OP_PROGRESSIVE, exc, DETAIL_FALLBACK, fixture_id=fixture_id)
            return

        log.info("Formazioni pronte, snapshot parziale", extra={"fixture_id": fixture_id, "stage": "partial"})
        yield Success(partial_bundle)

        try:
            statistics, events = await run_all(
                self._gateway.fetch_statistics(fixture_id),
                self._gateway.fetch_events(fixture_id),
            )
            raise_for_api_errors(statistics, STATISTICS_CONTEXT)
            raise_for_api_errors(events, EVENTS_CONTEXT)
        except Exception as exc:
            yield terminal_error(OP_PROGRESSIVE, exc, DETAIL_FALLBACK, fixture_id=fixture_id)
            return

        complete = FixtureDetailBundle(
            lineups=partial_bundle.lineups,
            statistics=tuple(statistics.items),
            events=tuple(parse_events(events.items)),
        )
        yield terminal_success(OP_PROGRESSIVE, complete, fixture_id=fixture_id)


__all__ = ["FixtureDetailAggregator"]
