"""Load and dump persisted plan blobs.

A blob is ``{"weekId": ..., "sessions": [...]}``. Blobs written by older
versions may hold legacy-only sessions (just a ``time`` string) or partially
corrupt records; every session is coerced through the adapter rather than
rejected. Dumped blobs carry both the canonical fields and the derived legacy
``time`` so older readers keep working.
"""

import json
from collections.abc import Mapping
from typing import Any

from loguru import logger

from weekplan.sessions.adapter import to_canonical, to_legacy_session
from weekplan.sessions.types import Plan

DEFAULT_WEEK_ID = "LAST"


def revive_plan(raw: str | bytes | Mapping[str, Any] | None) -> Plan | None:
    """Rebuild a Plan from a persisted blob.

    Args:
        raw: JSON text (bytes must be UTF-8) or an already decoded mapping

    Returns:
        The revived plan (sessions canonicalised and sorted), or None when the
        blob is not UTF-8 JSON, not an object, or has no sessions array
    """
    if raw is None:
        return None

    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable plan blob: {e}")
            return None
    else:
        data = raw

    if not isinstance(data, Mapping):
        logger.warning(f"Ignoring plan blob of type {type(data).__name__}")
        return None

    sessions = data.get("sessions")
    if not isinstance(sessions, list):
        logger.warning("Ignoring plan blob without a sessions array")
        return None

    week_id = data.get("weekId")
    plan = Plan(week_id=str(week_id) if week_id else DEFAULT_WEEK_ID).with_sessions(
        to_canonical(item if isinstance(item, Mapping) else {}) for item in sessions
    )
    logger.debug(f"Revived plan {plan.week_id} with {len(plan.sessions)} sessions")
    return plan


def dump_plan(plan: Plan) -> dict[str, Any]:
    """JSON-ready blob for a plan."""
    return {
        "weekId": plan.week_id,
        "sessions": [to_legacy_session(session) for session in plan.sessions],
    }


def dumps_plan(plan: Plan, indent: int | None = 2) -> str:
    return json.dumps(dump_plan(plan), ensure_ascii=False, indent=indent)
