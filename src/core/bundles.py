from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from core.fixture_event import FixtureEvent

# Record upstream lasciati come dict JSON (nessun mapping DTO -> dominio)
TeamLineup = Dict[str, Any]
TeamStatistics = Dict[str, Any]


@dataclass(frozen=True)
class FixtureDetailBundle:
    """
    Dettaglio partita aggregato. Le liste non sono mai None: un ramo fallito
    produce una tupla vuota. ``fixture`` è None nelle modalità parziali.
    """

    fixture: Optional[Dict[str, Any]] = None
    lineups: Tuple[TeamLineup, ...] = ()
    statistics: Tuple[TeamStatistics, ...] = ()
    events: Tuple[FixtureEvent, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixture": self.fixture,
            "lineups": list(self.lineups),
            "statistics": list(self.statistics),
            "events": [ev.to_dict() for ev in self.events],
        }


@dataclass(frozen=True)
class TeamProfileDetails:
    team_profile: Dict[str, Any]
    statistics: Optional[Dict[str, Any]] = None
    squad: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_profile": self.team_profile,
            "statistics": self.statistics,
            "squad": self.squad,
        }


__all__ = ["FixtureDetailBundle", "TeamProfileDetails", "TeamLineup", "TeamStatistics"]
