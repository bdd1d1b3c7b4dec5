from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

# Tipi di categoria
GOAL = "goal"
CARD = "card"
SUBST = "subst"
VAR = "var"
OTHER = "other"

# Sottotipi
GOAL_NORMAL = "normal"
GOAL_PENALTY = "penalty"
GOAL_OWN = "own"
CARD_YELLOW = "yellow"
CARD_RED = "red"
VAR_GOAL = "goal"
VAR_PENALTY = "penalty"
VAR_CARD = "card"
VAR_OTHER = "other"

_ICONS = {
    (GOAL, GOAL_NORMAL): "⚽️",
    (GOAL, GOAL_PENALTY): "🎯",
    (GOAL, GOAL_OWN): "💢⚽️",
    (CARD, CARD_YELLOW): "🟨",
    (CARD, CARD_RED): "🟥",
    (SUBST, None): "🔄",
    (VAR, VAR_GOAL): "🎥⚽️",
    (VAR, VAR_PENALTY): "🎥🎯",
    (VAR, VAR_CARD): "🎥🟨",
    (VAR, VAR_OTHER): "🎥",
    (OTHER, None): "📝",
}


@dataclass(frozen=True)
class EventCategory:
    kind: str
    subtype: Optional[str] = None

    @property
    def is_goal(self) -> bool:
        return self.kind == GOAL or (self.kind == VAR and self.subtype == VAR_GOAL)

    @property
    def is_own_goal(self) -> bool:
        return self.kind == GOAL and self.subtype == GOAL_OWN

    @property
    def icon(self) -> str:
        return _ICONS.get((self.kind, self.subtype), _ICONS[(OTHER, None)])


def classify(event_type: str, detail: str) -> EventCategory:
    """
    Classifica un evento a partire da ``type`` e ``detail`` (case-insensitive).
    L'ordine dei controlli su ``detail`` conta: "Normal Goal" prima di "Penalty".
    """
    t = (event_type or "").lower()
    d = (detail or "").lower()
    if t == "goal":
        if "normal goal" in d:
            return EventCategory(GOAL, GOAL_NORMAL)
        if "penalty" in d:
            return EventCategory(GOAL, GOAL_PENALTY)
        if "own goal" in d:
            return EventCategory(GOAL, GOAL_OWN)
        return EventCategory(GOAL, GOAL_NORMAL)
    if t == "card":
        if "yellow" in d:
            return EventCategory(CARD, CARD_YELLOW)
        if "red" in d:
            return EventCategory(CARD, CARD_RED)
        return EventCategory(CARD, CARD_YELLOW)
    if t == "subst":
        return EventCategory(SUBST)
    if t == "var":
        if "goal" in d:
            return EventCategory(VAR, VAR_GOAL)
        if "penalty" in d:
            return EventCategory(VAR, VAR_PENALTY)
        if "card" in d:
            return EventCategory(VAR, VAR_CARD)
        return EventCategory(VAR, VAR_OTHER)
    return EventCategory(OTHER)


def _as_int(v: Any) -> Optional[int]:
    try:
        return int(v) if v is not None else None
    except (ValueError, TypeError):
        return None


@dataclass(frozen=True)
class FixtureEvent:
    elapsed: int
    extra: Optional[int]
    team_id: Optional[int]
    team_name: Optional[str]
    player_id: Optional[int]
    player_name: Optional[str]
    assist_id: Optional[int]
    assist_name: Optional[str]
    type: str
    detail: str
    comments: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "FixtureEvent":
        # raw nel formato /fixtures/events (time, team, player, assist, type, detail, comments)
        time_ = raw.get("time") or {}
        team = raw.get("team") or {}
        player = raw.get("player") or {}
        assist = raw.get("assist") or {}
        return cls(
            elapsed=_as_int(time_.get("elapsed")) or 0,
            extra=_as_int(time_.get("extra")),
            team_id=_as_int(team.get("id")),
            team_name=team.get("name"),
            player_id=_as_int(player.get("id")),
            player_name=player.get("name"),
            assist_id=_as_int(assist.get("id")),
            assist_name=assist.get("name"),
            type=str(raw.get("type") or ""),
            detail=str(raw.get("detail") or ""),
            comments=raw.get("comments"),
        )

    @property
    def category(self) -> EventCategory:
        return classify(self.type, self.detail)

    @property
    def is_actual_goal(self) -> bool:
        """Gol effettivamente segnato: esclude rigori procurati ("won") e sbagliati ("missed")."""
        if self.type.lower() != "goal":
            return False
        d = self.detail.lower()
        return "won" not in d and "missed" not in d

    @property
    def identity_key(self) -> str:
        return f"{self.elapsed}{self.team_id}{self.player_id or 0}{self.type}{self.detail}"

    @property
    def is_extra_time(self) -> bool:
        return self.elapsed > 90

    @property
    def display_time(self) -> str:
        if self.extra is not None:
            return f"{self.elapsed}+{self.extra}'"
        return f"{self.elapsed}'"

    @property
    def icon(self) -> str:
        return self.category.icon

    def to_dict(self) -> Dict[str, Any]:
        category = self.category
        return {
            "time": {"elapsed": self.elapsed, "extra": self.extra},
            "team": {"id": self.team_id, "name": self.team_name},
            "player": {"id": self.player_id, "name": self.player_name},
            "assist": {"id": self.assist_id, "name": self.assist_name},
            "type": self.type,
            "detail": self.detail,
            "comments": self.comments,
            "id": self.identity_key,
            "category": {"kind": category.kind, "subtype": category.subtype},
            "is_actual_goal": self.is_actual_goal,
        }


def parse_events(raw_events: Iterable[Dict[str, Any]]) -> List[FixtureEvent]:
    return [FixtureEvent.from_api(item) for item in raw_events if isinstance(item, dict)]


def dedupe_events(events: Iterable[FixtureEvent]) -> List[FixtureEvent]:
    """Rimuove i duplicati per identity_key mantenendo la prima occorrenza e l'ordine."""
    seen: set[str] = set()
    out: List[FixtureEvent] = []
    for ev in events:
        key = ev.identity_key
        if key in seen:
            continue
        seen.add(key)
        out.append(ev)
    return out
