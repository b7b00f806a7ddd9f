"""Drag-and-drop gesture engine.

A gesture is a small state machine: idle -> dragging(item) -> idle. Hover
updates (move) only track the current target; nothing touches the plan until
the gesture ends on a target, at which point the (item kind, target kind)
pair is dispatched to exactly one plan mutation:

    player         -> session       assign participant (conflict check, gating)
    calendarEvent  -> calendarSlot  relocate session, keep duration
    calendarResize -> calendarSlot  set duration of a non-game, same day only
    calendarPreBlock -> calendarSlot  set warm-up/travel minutes, same day only

Any other pairing is a no-op. Illegal drops never raise: the outcome carries
the unchanged plan and a short human-readable message for the UI to flash.
"""

from datetime import date as date_type
from enum import StrEnum
from typing import Annotated, Any, Literal

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from weekplan.errors import ConflictError, GatingAbort
from weekplan.plans.gating import IdentifierPrompt, Participant, collect_identifier, needs_identifier
from weekplan.plans.mutations import (
    ParticipantSortKey,
    add_participant,
    can_resize,
    check_assignment,
    relocate_session,
    remove_participant,
    resize_pre_block,
    resize_session,
)
from weekplan.sessions.types import Plan, PreBlockKind, Session


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class PlayerDrag(_Payload):
    """A participant picked up from the roster."""

    type: Literal["player"] = "player"
    participant_id: str = Field(min_length=1, validation_alias=AliasChoices("playerId", "participantId", "participant_id"))

    @property
    def source_id(self) -> str:
        return self.participant_id


class SessionDrag(_Payload):
    """A session block picked up to move it."""

    type: Literal["calendarEvent"] = "calendarEvent"
    session_id: str = Field(min_length=1)

    @property
    def source_id(self) -> str:
        return self.session_id


class ResizeDrag(_Payload):
    """The trailing edge of a (non-game) session block."""

    type: Literal["calendarResize"] = "calendarResize"
    session_id: str = Field(min_length=1)

    @property
    def source_id(self) -> str:
        return self.session_id


class PreBlockDrag(_Payload):
    """The leading edge of a warm-up or travel pre-block."""

    type: Literal["calendarPreBlock"] = "calendarPreBlock"
    session_id: str = Field(min_length=1)
    kind: PreBlockKind

    @property
    def source_id(self) -> str:
        return self.session_id


class SessionTarget(_Payload):
    type: Literal["session"] = "session"
    session_id: str = Field(min_length=1)


class SlotTarget(_Payload):
    """A droppable time slot of the calendar grid."""

    type: Literal["calendarSlot"] = "calendarSlot"
    date: date_type
    start_min: int = Field(ge=0, le=24 * 60)


DragItem = Annotated[PlayerDrag | SessionDrag | ResizeDrag | PreBlockDrag, Field(discriminator="type")]
DropTarget = Annotated[SessionTarget | SlotTarget, Field(discriminator="type")]

_drag_item_adapter: TypeAdapter[Any] = TypeAdapter(DragItem)
_drop_target_adapter: TypeAdapter[Any] = TypeAdapter(DropTarget)


def parse_drag_item(raw: Any) -> PlayerDrag | SessionDrag | ResizeDrag | PreBlockDrag | None:
    """Validate a raw drag payload (camelCase dict); None when unusable."""
    try:
        return _drag_item_adapter.validate_python(raw)
    except ValidationError as e:
        logger.debug(f"Ignoring drag payload {raw!r}: {e.error_count()} validation error(s)")
        return None


def parse_drop_target(raw: Any) -> SessionTarget | SlotTarget | None:
    """Validate a raw drop-target payload; None when unusable."""
    try:
        return _drop_target_adapter.validate_python(raw)
    except ValidationError as e:
        logger.debug(f"Ignoring drop target {raw!r}: {e.error_count()} validation error(s)")
        return None


class DropCode(StrEnum):
    APPLIED = "applied"
    NO_GESTURE = "no_gesture"
    NO_TARGET = "no_target"
    INVALID_TARGET = "invalid_target"
    UNKNOWN_SESSION = "unknown_session"
    CONFLICT = "conflict"
    GATING_ABORTED = "gating_aborted"
    GATING_DECLINED = "gating_declined"
    GAME_RESIZE = "game_resize"
    OTHER_DAY = "other_day"


class DropOutcome(BaseModel):
    """Result of ending a gesture.

    Attributes:
        plan: Plan after the drop (the input plan object when nothing changed)
        changed: Whether plan differs from the input plan
        code: What happened
        message: Transient, human-readable message for blocked drops
        participant_updates: Participant records changed by gating (new identifiers)
    """

    plan: Plan
    changed: bool = False
    code: DropCode
    message: str | None = None
    participant_updates: dict[str, Participant] = Field(default_factory=dict)


def _session_label(session: Session) -> str:
    date_label = session.date.isoformat() if session.date else "?"
    return f"{session.day} {date_label} {session.time_label}".strip()


def _outcome(before: Plan, after: Plan, code: DropCode = DropCode.APPLIED, **kwargs: Any) -> DropOutcome:
    return DropOutcome(plan=after, changed=after is not before, code=code, **kwargs)


def _blocked(plan: Plan, code: DropCode, message: str | None) -> DropOutcome:
    if message:
        logger.info(f"Drop blocked ({code}): {message}")
    return DropOutcome(plan=plan, changed=False, code=code, message=message)


async def _drop_participant(
    plan: Plan,
    item: PlayerDrag,
    target: SessionTarget,
    *,
    participants: dict[str, Participant],
    prompt: IdentifierPrompt | None,
    sort_key: ParticipantSortKey | None,
) -> DropOutcome:
    session = plan.get(target.session_id)
    if session is None:
        return _blocked(plan, DropCode.UNKNOWN_SESSION, f"Unknown session {target.session_id}")

    participant_id = item.participant_id
    try:
        check_assignment(plan, session.id, participant_id)
    except ConflictError as e:
        others = " | ".join(
            _session_label(other) for sid in e.conflicting_session_ids if (other := plan.get(sid)) is not None
        )
        message = f"Conflict: already booked in overlapping sessions ({others}). Target: {_session_label(session)}"
        return _blocked(plan, DropCode.CONFLICT, message)

    participant = participants.get(participant_id)
    updates: dict[str, Participant] = {}
    if participant is not None and needs_identifier(session, participant):
        try:
            identifier = await collect_identifier(prompt, participant, session)
        except GatingAbort as e:
            logger.debug(str(e))
            return _blocked(plan, DropCode.GATING_ABORTED, None)

        if not identifier:
            updated = remove_participant(plan, session.id, participant_id, sort_key=sort_key)
            logger.info(f"Participant {participant_id} declined identifier, removed from {session.id}")
            return _outcome(plan, updated, DropCode.GATING_DECLINED)

        updates[participant_id] = participant.model_copy(update={"identifier": identifier})

    updated = add_participant(plan, session.id, participant_id, sort_key=sort_key)
    return _outcome(plan, updated, participant_updates=updates)


def _drop_session(plan: Plan, item: SessionDrag, target: SlotTarget) -> DropOutcome:
    if plan.get(item.session_id) is None:
        return _blocked(plan, DropCode.UNKNOWN_SESSION, f"Unknown session {item.session_id}")
    return _outcome(plan, relocate_session(plan, item.session_id, target.date, target.start_min))


def _drop_resize(plan: Plan, item: ResizeDrag, target: SlotTarget) -> DropOutcome:
    session = plan.get(item.session_id)
    if session is None:
        return _blocked(plan, DropCode.UNKNOWN_SESSION, f"Unknown session {item.session_id}")
    if session.date != target.date:
        return _blocked(plan, DropCode.OTHER_DAY, "A session can only be resized on its own day")
    if not can_resize(session):
        return _blocked(plan, DropCode.GAME_RESIZE, "Games have a fixed duration")
    return _outcome(plan, resize_session(plan, session.id, target.start_min))


def _drop_pre_block(plan: Plan, item: PreBlockDrag, target: SlotTarget) -> DropOutcome:
    session = plan.get(item.session_id)
    if session is None:
        return _blocked(plan, DropCode.UNKNOWN_SESSION, f"Unknown session {item.session_id}")
    if session.date != target.date:
        return _blocked(plan, DropCode.OTHER_DAY, "A pre-block can only be resized on its session's day")
    return _outcome(plan, resize_pre_block(plan, session.id, item.kind, target.start_min))


async def apply_drop(
    plan: Plan,
    item: PlayerDrag | SessionDrag | ResizeDrag | PreBlockDrag,
    target: SessionTarget | SlotTarget | None,
    *,
    participants: dict[str, Participant] | None = None,
    prompt: IdentifierPrompt | None = None,
    sort_key: ParticipantSortKey | None = None,
) -> DropOutcome:
    """Commit a finished gesture against a plan snapshot.

    Args:
        plan: Current plan snapshot
        item: What was dragged
        target: Where it was dropped (None when released outside any target)
        participants: Known participant records by id, used for gating
        prompt: Async identifier prompt, awaited only for gated game assignments
        sort_key: Participant ordering applied after adding/removing

    Returns:
        DropOutcome with the new (or unchanged) plan
    """
    if target is None:
        return _blocked(plan, DropCode.NO_TARGET, None)

    if isinstance(item, PlayerDrag) and isinstance(target, SessionTarget):
        return await _drop_participant(
            plan, item, target, participants=participants or {}, prompt=prompt, sort_key=sort_key
        )
    if isinstance(item, SessionDrag) and isinstance(target, SlotTarget):
        return _drop_session(plan, item, target)
    if isinstance(item, ResizeDrag) and isinstance(target, SlotTarget):
        return _drop_resize(plan, item, target)
    if isinstance(item, PreBlockDrag) and isinstance(target, SlotTarget):
        return _drop_pre_block(plan, item, target)

    return _blocked(plan, DropCode.INVALID_TARGET, f"Cannot drop {item.type} on {target.type}")


class GestureIdle(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: Literal["idle"] = "idle"


class GestureDragging(BaseModel):
    """An active gesture: the dragged item and the target currently hovered."""

    model_config = ConfigDict(frozen=True)

    state: Literal["dragging"] = "dragging"
    item: DragItem
    over: DropTarget | None = None

    @property
    def kind(self) -> str:
        return self.item.type

    @property
    def source_id(self) -> str:
        return self.item.source_id


class GestureMachine:
    """Tracks one drag gesture at a time and commits it on end."""

    def __init__(self) -> None:
        self._state: GestureIdle | GestureDragging = GestureIdle()

    @property
    def state(self) -> GestureIdle | GestureDragging:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return isinstance(self._state, GestureDragging)

    def begin(self, item: PlayerDrag | SessionDrag | ResizeDrag | PreBlockDrag) -> bool:
        """Start a gesture; rejected (False) while another one is active."""
        if isinstance(self._state, GestureDragging):
            logger.warning(
                f"Ignoring {item.type} drag of {item.source_id}: "
                f"{self._state.kind} drag of {self._state.source_id} still active"
            )
            return False
        self._state = GestureDragging(item=item)
        return True

    def move(self, target: SessionTarget | SlotTarget | None) -> None:
        """Record the hovered target; no effect on the plan."""
        if isinstance(self._state, GestureDragging):
            self._state = self._state.model_copy(update={"over": target})

    def cancel(self) -> None:
        self._state = GestureIdle()

    async def end(
        self,
        plan: Plan,
        target: SessionTarget | SlotTarget | None = None,
        *,
        participants: dict[str, Participant] | None = None,
        prompt: IdentifierPrompt | None = None,
        sort_key: ParticipantSortKey | None = None,
    ) -> DropOutcome:
        """Finish the gesture on target (or the last hovered one) and commit it.

        The machine is back to idle afterwards, whatever the outcome.
        """
        state = self._state
        self._state = GestureIdle()
        if not isinstance(state, GestureDragging):
            return DropOutcome(plan=plan, code=DropCode.NO_GESTURE)
        return await apply_drop(
            plan,
            state.item,
            target if target is not None else state.over,
            participants=participants,
            prompt=prompt,
            sort_key=sort_key,
        )
