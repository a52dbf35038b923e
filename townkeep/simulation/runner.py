"""EpisodeRunner — replays a sequence of snapshots through an agent.

Stands in for the host simulation loop: it calls the agent once per tick
in the canonical protocol order:

1. ``initial_step`` with the first snapshot
2. ``middle_step`` with every following snapshot but the last
3. ``terminal_step`` with the last snapshot

and decides what happens when a tick's decision fails.  A single-snapshot
episode only gets ``initial_step``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from townkeep.agent.commands import CommandBatch
from townkeep.agent.errors import PreconditionViolated

if TYPE_CHECKING:
    from townkeep.agent.policy import ResourceCollectionAgent
    from townkeep.world.snapshot import WorldSnapshot

logger = logging.getLogger(__name__)


@dataclass
class EpisodeRunner:
    """Drives an agent through a scripted episode tick by tick.

    Attributes:
        agent: The agent under test.
        snapshots: One world view per tick; the last one is terminal.
        abort_on_fault: Re-raise ``PreconditionViolated`` instead of
            recording an empty batch for the failed tick.
        history: Command batches emitted so far, one per decided tick.
        faults: Ticks whose decision failed and was skipped.
        tick: Number of snapshots consumed.
    """

    agent: ResourceCollectionAgent
    snapshots: list[WorldSnapshot]
    abort_on_fault: bool = True
    history: list[CommandBatch] = field(init=False, default_factory=list)
    faults: list[int] = field(init=False, default_factory=list)
    tick: int = 0

    @property
    def finished(self) -> bool:
        """Return True once the terminal snapshot has been delivered."""
        return self.tick >= len(self.snapshots)

    def step(self) -> CommandBatch | None:
        """Deliver the next snapshot to the agent.

        Returns:
            The tick's commands, or ``None`` for the terminal tick.

        Raises:
            IndexError: If the episode is already finished.
            PreconditionViolated: If the agent faults and
                ``abort_on_fault`` is set.
        """
        if self.finished:
            msg = f"episode finished after {len(self.snapshots)} ticks"
            raise IndexError(msg)

        snapshot = self.snapshots[self.tick]
        is_first = self.tick == 0
        is_last = self.tick == len(self.snapshots) - 1
        self.tick += 1

        if is_last and not is_first:
            self.agent.terminal_step(snapshot, self.history)
            return None

        try:
            if is_first:
                batch = self.agent.initial_step(snapshot, self.history)
            else:
                batch = self.agent.middle_step(snapshot, self.history)
        except PreconditionViolated:
            if self.abort_on_fault:
                raise
            logger.exception("Tick %d decision failed; continuing", self.tick)
            self.faults.append(self.tick)
            batch = CommandBatch()

        self.history.append(batch)
        return batch

    def run(self) -> list[CommandBatch]:
        """Run the episode to the end.

        Returns:
            Every decided tick's commands, in order.
        """
        while not self.finished:
            self.step()
        return self.history
