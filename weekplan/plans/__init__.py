"""Plans module - snapshot edits over a week plan.

This module provides:
- Pure plan mutations (assign, relocate, resize, pre-blocks)
- The drag-and-drop gesture engine and its async drop dispatcher
- License-number gating for game assignments
- Persisted blob revival, week templates, undo/redo history
"""

from weekplan.plans.derived import compute_training_counts, plan_date_set, week_label
from weekplan.plans.gating import Participant, make_participant_sort_key, requires_identifier
from weekplan.plans.gestures import (
    DropCode,
    DropOutcome,
    GestureMachine,
    apply_drop,
    parse_drag_item,
    parse_drop_target,
)
from weekplan.plans.history import PlanHistory
from weekplan.plans.mutations import (
    add_participant,
    delete_session,
    relocate_session,
    remove_participant,
    resize_pre_block,
    resize_session,
    toggle_pre_block,
    upsert_session,
)
from weekplan.plans.reviver import dump_plan, dumps_plan, revive_plan
from weekplan.plans.selectors import select_roster_sessions, select_schedule_sessions
from weekplan.plans.week_templates import NewWeekMode, new_week, week_dates

__all__ = [
    "DropCode",
    "DropOutcome",
    "GestureMachine",
    "NewWeekMode",
    "Participant",
    "PlanHistory",
    "add_participant",
    "apply_drop",
    "compute_training_counts",
    "delete_session",
    "dump_plan",
    "dumps_plan",
    "make_participant_sort_key",
    "new_week",
    "parse_drag_item",
    "parse_drop_target",
    "plan_date_set",
    "relocate_session",
    "remove_participant",
    "requires_identifier",
    "resize_pre_block",
    "resize_session",
    "revive_plan",
    "select_roster_sessions",
    "select_schedule_sessions",
    "toggle_pre_block",
    "upsert_session",
    "week_dates",
    "week_label",
]
