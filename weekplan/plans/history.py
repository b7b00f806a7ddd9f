"""Undo/redo over plan snapshots.

Plans are immutable, so history is just two stacks of snapshots around the
present one.
"""

from weekplan.sessions.types import Plan


class PlanHistory:
    """Linear undo/redo history.

    Pushing a new present moves the old one onto the undo stack and clears
    the redo stack. Pushing the current snapshot itself is ignored.
    """

    def __init__(self, present: Plan, limit: int = 100):
        self.present = present
        self.limit = limit
        self._past: list[Plan] = []
        self._future: list[Plan] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def push(self, plan: Plan) -> None:
        if plan is self.present:
            return
        self._past.append(self.present)
        if len(self._past) > self.limit:
            del self._past[0]
        self._future.clear()
        self.present = plan

    def undo(self) -> Plan | None:
        """Step back; returns the new present, or None when there is nothing to undo."""
        if not self._past:
            return None
        self._future.append(self.present)
        self.present = self._past.pop()
        return self.present

    def redo(self) -> Plan | None:
        if not self._future:
            return None
        self._past.append(self.present)
        self.present = self._future.pop()
        return self.present

    def reset(self, plan: Plan) -> None:
        """Replace the present and forget all history (e.g. after loading another week)."""
        self.present = plan
        self._past.clear()
        self._future.clear()
