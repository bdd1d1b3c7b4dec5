import dataclasses

import pytest

from core.fixture_event import (
    CARD,
    GOAL,
    OTHER,
    SUBST,
    VAR,
    EventCategory,
    FixtureEvent,
    classify,
    dedupe_events,
    parse_events,
)
from fakes import EVENTS


def make_event(type_="Goal", detail="Normal Goal", elapsed=10, extra=None, player_id=7, team_id=33):
    return FixtureEvent(
        elapsed=elapsed,
        extra=extra,
        team_id=team_id,
        team_name="Team",
        player_id=player_id,
        player_name="Player",
        assist_id=None,
        assist_name=None,
        type=type_,
        detail=detail,
    )


@pytest.mark.parametrize(
    "type_, detail, expected",
    [
        ("Goal", "Normal Goal", EventCategory(GOAL, "normal")),
        ("goal", "Penalty", EventCategory(GOAL, "penalty")),
        ("Goal", "Own Goal", EventCategory(GOAL, "own")),
        ("Goal", "Missed Penalty", EventCategory(GOAL, "penalty")),
        ("Goal", "Something else", EventCategory(GOAL, "normal")),
        ("Card", "Yellow Card", EventCategory(CARD, "yellow")),
        ("CARD", "Red Card", EventCategory(CARD, "red")),
        ("Card", "Second Yellow card", EventCategory(CARD, "yellow")),
        ("Card", "", EventCategory(CARD, "yellow")),
        ("subst", "Substitution 1", EventCategory(SUBST)),
        ("Var", "Goal cancelled", EventCategory(VAR, "goal")),
        ("Var", "Penalty confirmed", EventCategory(VAR, "penalty")),
        ("Var", "Card upgrade", EventCategory(VAR, "card")),
        ("Var", "Offside check", EventCategory(VAR, "other")),
        ("Injury", "Hamstring", EventCategory(OTHER)),
    ],
)
def test_classify(type_, detail, expected):
    assert classify(type_, detail) == expected


def test_goal_flags():
    assert classify("Goal", "Own Goal").is_own_goal is True
    assert classify("Goal", "Normal Goal").is_own_goal is False
    assert classify("Var", "Goal Disallowed").is_goal is True
    assert classify("Var", "Card upgrade").is_goal is False
    assert classify("Card", "Red Card").is_goal is False


@pytest.mark.parametrize(
    "type_, detail, expected",
    [
        ("Goal", "Normal Goal", True),
        ("Goal", "Penalty", True),
        ("Goal", "Own Goal", True),
        ("Goal", "Penalty won", False),
        ("Goal", "Missed Penalty", False),
        ("Card", "Yellow Card", False),
        ("Var", "Goal confirmed", False),
    ],
)
def test_is_actual_goal(type_, detail, expected):
    assert make_event(type_, detail).is_actual_goal is expected


def test_identity_key_defaults_player_to_zero():
    assert make_event(elapsed=45, team_id=40, player_id=306).identity_key == "4540306GoalNormal Goal"
    assert make_event(elapsed=45, team_id=40, player_id=None).identity_key == "45400GoalNormal Goal"


def test_display_time_and_extra_time():
    assert make_event(elapsed=45, extra=2).display_time == "45+2'"
    assert make_event(elapsed=12).display_time == "12'"
    assert make_event(elapsed=95).is_extra_time is True
    assert make_event(elapsed=90).is_extra_time is False


def test_icons():
    assert make_event("Goal", "Own Goal").icon == "💢⚽️"
    assert make_event("Card", "Red Card").icon == "🟥"
    assert make_event("subst", "Substitution 2").icon == "🔄"
    assert make_event("Var", "Offside").icon == "🎥"
    assert make_event("Injury", "").icon == "📝"


def test_from_api_round_trip_fields():
    events = parse_events(EVENTS)
    assert len(events) == 5
    first = events[0]
    assert first.elapsed == 12
    assert first.team_id == 40
    assert first.player_id == 306
    assert first.assist_id == 1100
    assert events[2].extra == 2
    assert events[3].assist_name == "player-883"
    data = first.to_dict()
    assert data["id"] == first.identity_key
    assert data["category"] == {"kind": "goal", "subtype": "normal"}


def test_from_api_tolerates_missing_blocks():
    ev = FixtureEvent.from_api({"type": "Goal", "detail": "Normal Goal", "assist": None})
    assert ev.elapsed == 0
    assert ev.player_id is None
    assert ev.identity_key == "0None0GoalNormal Goal"


def test_events_are_immutable():
    ev = make_event()
    with pytest.raises(dataclasses.FrozenInstanceError):
        ev.detail = "Own Goal"


def test_dedupe_keeps_first_occurrence():
    a = make_event(elapsed=10)
    b = make_event(elapsed=20)
    dup = make_event(elapsed=10)
    assert dedupe_events([a, b, dup]) == [a, b]
