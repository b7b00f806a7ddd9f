"""Root conftest for all tests.

This file makes shared session/plan fixtures available across all test modules.
The reference week is Monday 2026-02-23 .. Sunday 2026-03-01.
"""

from collections.abc import Callable
from datetime import date
from typing import Any

import pytest

from weekplan.plans.gating import Participant
from weekplan.sessions.types import Plan, Session

WEEK_MONDAY = date(2026, 2, 23)
TUESDAY = date(2026, 2, 24)
WEDNESDAY = date(2026, 2, 25)


@pytest.fixture
def make_session() -> Callable[..., Session]:
    """Factory for valid canonical sessions; keyword arguments override defaults.

    Usage:
        def test_something(make_session):
            session = make_session(id="s1", start_min=1080)
    """

    def _make(**overrides: Any) -> Session:
        fields: dict[str, Any] = {
            "id": "s1",
            "date": TUESDAY,
            "day": "Di",
            "teams": ("U18",),
            "start_min": 18 * 60,
            "duration_min": 90,
            "location": "Halle Nord",
        }
        fields.update(overrides)
        return Session(**fields)

    return _make


@pytest.fixture
def week_plan(make_session) -> Plan:
    """Small Tuesday/Wednesday plan.

    - s1: Tue 18:00-19:30 training, p1 + p2
    - s2: Tue 19:00-20:00 training, p3
    - g1: Wed 20:00-22:00 away game @ Berlin, warm-up 30, travel 60
    """
    return Plan(week_id="WEEK_2026-02-23").with_sessions(
        [
            make_session(id="s1", participants=("p1", "p2")),
            make_session(id="s2", start_min=19 * 60, duration_min=60, participants=("p3",)),
            make_session(
                id="g1",
                date=WEDNESDAY,
                day="Mi",
                teams=("U18",),
                start_min=20 * 60,
                duration_min=120,
                info="@ Berlin",
                warmup_min=30,
                travel_min=60,
                location="Berlin",
            ),
        ]
    )


@pytest.fixture
def participants() -> dict[str, Participant]:
    """Roster records keyed by id; p3 and p4 have no license number."""
    records = [
        Participant(id="p1", name="Anna", group="2008", identifier="TA-1"),
        Participant(id="p2", name="bert", group="2007", identifier="TA-2"),
        Participant(id="p3", name="Cleo", group="2008"),
        Participant(id="p4", name="Dario", group="Herren"),
    ]
    return {record.id: record for record in records}


class ScriptedPrompt:
    """Async identifier prompt answering from a fixed script and recording calls."""

    def __init__(self, *answers: str | None):
        self.answers = list(answers)
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, title: str, message: str) -> str | None:
        self.calls.append((title, message))
        return self.answers.pop(0)


@pytest.fixture
def scripted_prompt() -> type[ScriptedPrompt]:
    return ScriptedPrompt
