from __future__ import annotations

from typing import List, Sequence

from providers.api_football.models import ApiResponse


class AggregationError(Exception):
    """Errore fatale di un'aggregazione (diverso da un errore di trasporto)."""


class ApiResponseError(AggregationError):
    """La risposta è arrivata (HTTP ok) ma l'API l'ha rifiutata: campo ``errors`` non vuoto."""

    def __init__(self, context: str, errors: Sequence[str]) -> None:
        self.context = context
        self.errors: List[str] = list(errors)
        super().__init__(f"{context}: {', '.join(self.errors)}")


class TeamProfileNotFoundError(AggregationError):
    def __init__(self, team_id: int) -> None:
        self.team_id = team_id
        super().__init__("Profilo squadra non trovato.")


def raise_for_api_errors(response: ApiResponse, context: str) -> None:
    if response.errors:
        raise ApiResponseError(context, response.errors)


__all__ = [
    "AggregationError",
    "ApiResponseError",
    "TeamProfileNotFoundError",
    "raise_for_api_errors",
]
