"""Commands — what the policy asks individual units to do this tick.

A Command addresses exactly one acting unit.  The CommandBatch collects
one tick's commands and is handed back to the host, which owns their
multi-tick execution.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto

from townkeep.agent.errors import DuplicateCommandError

logger = logging.getLogger(__name__)


class CommandType(Enum):
    """Kinds of command the policy can emit."""

    BUILD = auto()
    PRODUCE = auto()
    GATHER = auto()
    DEPOSIT = auto()
    ATTACK = auto()


@dataclass(frozen=True)
class Command:
    """A single order for one unit.

    Attributes:
        unit_id: The acting unit.
        ctype: What kind of order this is.
        target: Template id (BUILD/PRODUCE), resource node id (GATHER),
            or unit id (DEPOSIT/ATTACK).
    """

    unit_id: int
    ctype: CommandType
    target: int

    @classmethod
    def build(cls, unit_id: int, template_id: int) -> Command:
        return cls(unit_id, CommandType.BUILD, template_id)

    @classmethod
    def produce(cls, unit_id: int, template_id: int) -> Command:
        return cls(unit_id, CommandType.PRODUCE, template_id)

    @classmethod
    def gather(cls, unit_id: int, node_id: int) -> Command:
        return cls(unit_id, CommandType.GATHER, node_id)

    @classmethod
    def deposit(cls, unit_id: int, target_id: int) -> Command:
        return cls(unit_id, CommandType.DEPOSIT, target_id)

    @classmethod
    def attack(cls, unit_id: int, target_id: int) -> Command:
        return cls(unit_id, CommandType.ATTACK, target_id)

    def __str__(self) -> str:
        return f"{self.ctype.name.lower()}({self.unit_id} -> {self.target})"


@dataclass(eq=False)
class CommandBatch(Mapping[int, Command]):
    """One tick's commands, keyed by acting unit.

    Filled through :meth:`add` while the policy evaluates, then read as a
    plain mapping.  With ``allow_overwrite`` off (the default) a second
    command for the same unit raises; with it on the later command
    replaces the earlier one.

    Attributes:
        allow_overwrite: Whether a unit may be re-addressed in one tick.
    """

    allow_overwrite: bool = False
    _commands: dict[int, Command] = field(default_factory=dict, repr=False)

    def add(self, command: Command) -> None:
        """Record ``command`` for its acting unit.

        Raises:
            DuplicateCommandError: If the unit already has a command and
                overwriting is not allowed.
        """
        previous = self._commands.get(command.unit_id)
        if previous is not None:
            if not self.allow_overwrite:
                raise DuplicateCommandError(command.unit_id)
            logger.warning("Overwriting %s with %s", previous, command)
        self._commands[command.unit_id] = command

    def __getitem__(self, unit_id: int) -> Command:
        return self._commands[unit_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __repr__(self) -> str:
        return f"CommandBatch({list(self._commands.values())!r})"
