from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _normalize_errors(raw: Any) -> List[str]:
    # API-Football manda "errors" come lista vuota oppure come oggetto {"token": "..."}
    if not raw:
        return []
    if isinstance(raw, dict):
        return [f"{key}: {value}" for key, value in raw.items()]
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw if item not in (None, "")]
    return [str(raw)]


@dataclass(frozen=True)
class ApiResponse:
    """Involucro standard delle risposte API-Football (get, parameters, errors, results, paging, response)."""

    get: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    results: int = 0
    paging: Dict[str, Any] = field(default_factory=lambda: {"current": 1, "total": 1})
    response: Any = field(default_factory=list)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "ApiResponse":
        response = payload.get("response")
        if response is None:
            response = []
        results = payload.get("results")
        try:
            results = int(results) if results is not None else 0
        except (TypeError, ValueError):
            results = 0
        return cls(
            get=str(payload.get("get") or ""),
            parameters=dict(payload.get("parameters") or {}),
            errors=_normalize_errors(payload.get("errors")),
            results=results,
            paging=dict(payload.get("paging") or {"current": 1, "total": 1}),
            response=response,
        )

    @classmethod
    def empty(cls, endpoint: str) -> "ApiResponse":
        """Risposta vuota valida (errors vuoto) usata al posto di un ramo opzionale fallito."""
        return cls(get=endpoint)

    @property
    def items(self) -> List[Any]:
        """``response`` come lista (alcuni endpoint, es. teams/statistics, restituiscono un oggetto)."""
        if isinstance(self.response, list):
            return self.response
        if self.response:
            return [self.response]
        return []

    def first(self) -> Optional[Any]:
        items = self.items
        return items[0] if items else None
