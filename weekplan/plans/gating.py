"""Participant records and the license-number gate for game assignments.

Some squads may only field participants holding a registration (license)
number. When such a participant without one is dropped onto a game of a gated
squad, the assignment waits on an externally supplied prompt:

- None      -> the prompt was cancelled, nothing happens
- ""        -> declined, the participant is removed from the game instead
- "<value>" -> stored on the participant record, then the assignment proceeds
"""

from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from weekplan.config.settings import settings
from weekplan.errors import GatingAbort
from weekplan.sessions.types import Session

IdentifierPrompt = Callable[[str, str], Awaitable[str | None]]


class Participant(BaseModel):
    """The slice of a roster record the scheduling core needs.

    Attributes:
        id: Participant id as used in Session.participants
        name: Display name, used for ordering and prompts
        group: Roster group (e.g. birth year cohort), used for ordering
        identifier: License/registration number, None when not on file
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str = ""
    group: str | None = None
    identifier: str | None = Field(default=None, validation_alias=AliasChoices("identifier", "taNumber"))

    @property
    def has_identifier(self) -> bool:
        return bool((self.identifier or "").strip())


def requires_identifier(teams: Iterable[str], gated_teams: Iterable[str] | None = None) -> bool:
    """Whether any of the squads requires an identifier."""
    gated = settings.gated_teams if gated_teams is None else {team.upper() for team in gated_teams}
    return any(str(team).upper() in gated for team in teams)


def needs_identifier(
    session: Session,
    participant: Participant | None,
    gated_teams: Iterable[str] | None = None,
) -> bool:
    """Whether assigning participant to session must wait for an identifier.

    Only games of gated squads are gated, and only for known participants
    without an identifier on file.
    """
    if participant is None or participant.has_identifier:
        return False
    return session.is_game and requires_identifier(session.teams, gated_teams)


async def collect_identifier(prompt: IdentifierPrompt | None, participant: Participant, session: Session) -> str:
    """Ask for a missing identifier.

    Returns:
        The trimmed identifier, or "" when the user declined

    Raises:
        GatingAbort: If there is no prompt or the prompt was cancelled
    """
    if prompt is None:
        raise GatingAbort(f"No identifier prompt available for participant {participant.id}")

    title = "License number required"
    message = (
        f"{participant.name or participant.id} needs a license number to play for "
        f"{'·'.join(session.teams)}. Leave empty to remove them from this game."
    )
    value = await prompt(title, message)
    if value is None:
        raise GatingAbort(f"Identifier prompt cancelled for participant {participant.id}")
    return value.strip()


def make_participant_sort_key(
    participants: Mapping[str, Participant],
    group_order: Sequence[str] = (),
) -> Callable[[str], tuple[Any, ...]]:
    """Build a group-then-name sort key over participant ids.

    Groups listed in group_order come first in that order, other groups
    after them, unknown participant ids last.
    """
    rank = {group: index for index, group in enumerate(group_order)}

    def key(participant_id: str) -> tuple[Any, ...]:
        participant = participants.get(participant_id)
        if participant is None:
            return (len(rank) + 1, participant_id.casefold(), participant_id)
        group_rank = rank.get(participant.group or "", len(rank))
        return (group_rank, (participant.name or participant_id).casefold(), participant_id)

    return key
