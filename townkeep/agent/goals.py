"""AgentGoal — the gold and wood amounts the agent is asked to gather.

Goals are parsed once from the two positional agent arguments and never
change afterwards.  The decision ladder runs on its own thresholds; the
goal only feeds the end-of-episode report.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from townkeep.agent.errors import GoalArgumentError

USAGE = "Two arguments, amount of gold to gather and amount of wood to gather"

# Optional sign then ASCII digits; no padding or digit separators.
_INTEGER = re.compile(r"[+-]?[0-9]+")


def usage() -> str:
    """Return the argument description hosts show for this agent."""
    return USAGE


@dataclass(frozen=True)
class AgentGoal:
    """Required resource amounts.

    Attributes:
        gold_required: Gold the faction should end up with.
        wood_required: Wood the faction should end up with.
    """

    gold_required: int
    wood_required: int

    @classmethod
    def from_args(cls, arguments: Sequence[str | int]) -> AgentGoal:
        """Parse ``[gold, wood]`` agent arguments.

        Args:
            arguments: At least two values, each an integer or a string
                holding one.

        Returns:
            The parsed goal.

        Raises:
            GoalArgumentError: If fewer than two arguments are given or
                either one is not an integer.
        """
        if len(arguments) < 2:
            msg = f"expected 2 goal arguments, got {len(arguments)}. {USAGE}"
            raise GoalArgumentError(msg)
        values = []
        for name, raw in zip(("gold", "wood"), arguments[:2]):
            if isinstance(raw, (bool, float)):
                msg = f"{name} goal must be an integer, got {raw!r}"
                raise GoalArgumentError(msg)
            if isinstance(raw, str) and not _INTEGER.fullmatch(raw):
                msg = f"{name} goal must be an integer, got {raw!r}"
                raise GoalArgumentError(msg)
            try:
                values.append(int(raw))
            except (TypeError, ValueError) as exc:
                msg = f"{name} goal must be an integer, got {raw!r}"
                raise GoalArgumentError(msg) from exc
        return cls(gold_required=values[0], wood_required=values[1])

    def is_met(self, gold: int, wood: int) -> bool:
        """Return True if both stockpiles reached their required amounts."""
        return gold >= self.gold_required and wood >= self.wood_required
