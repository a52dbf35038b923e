"""Exceptions raised by the decision policy and its construction."""

from __future__ import annotations


class GoalArgumentError(ValueError):
    """Goal arguments are missing or are not integers."""


class PreconditionViolated(LookupError):
    """An action needed a unit, node, enemy or template that does not exist.

    Only raised when the agent runs with ``strict_preconditions``.
    """

    def __init__(self, what: str) -> None:
        super().__init__(f"no {what} available this tick")
        self.what = what


class DuplicateCommandError(RuntimeError):
    """A unit was given more than one command in the same tick."""

    def __init__(self, unit_id: int) -> None:
        super().__init__(f"unit {unit_id} already has a command this tick")
        self.unit_id = unit_id
