"""ResourceCollectionAgent — the scripted per-tick decision policy.

Every tick the agent rebuilds its roster from the snapshot and walks a
fixed priority ladder:

1. Fewer than three gatherers: produce a gatherer at the first command
   centre if gold allows, otherwise send the first gatherer for gold.
2. Otherwise, first match wins:

   a. no farm and enough gold and wood: the first gatherer builds a farm;
   b. no barracks and enough gold and wood: it builds barracks;
   c. barracks but a small army and enough gold: produce a combat unit;
   d. default: combat units attack the first enemy once the army is
      large enough, and three gatherers work fixed assignments
      (position 1 on wood, positions 0 and 2 on gold, each with its own
      deposit threshold).

The ladder itself is the pure function :func:`decide`; the agent adds
only the tick counter and the trace event.

An action whose unit, node, enemy or template is missing is skipped for
the tick, or raises ``PreconditionViolated`` when the config asks for
strict preconditions.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import IO, TYPE_CHECKING, Any

from townkeep.agent.commands import Command, CommandBatch
from townkeep.agent.errors import PreconditionViolated
from townkeep.agent.goals import AgentGoal, usage
from townkeep.agent.roles import Role
from townkeep.agent.roster import Roster
from townkeep.simulation.config import PolicyConfig
from townkeep.world.snapshot import NodeType, ResourceType

if TYPE_CHECKING:
    from townkeep.world.snapshot import UnitView, WorldSnapshot

logger = logging.getLogger(__name__)


class Decision(Enum):
    """Which rung of the ladder fired this tick."""

    PRODUCE_GATHERER = auto()
    GATHER_BOOTSTRAP = auto()
    BUILD_FARM = auto()
    BUILD_BARRACKS = auto()
    PRODUCE_COMBAT_UNIT = auto()
    GATHER_AND_ATTACK = auto()


@dataclass(frozen=True)
class GatherAssignment:
    """A fixed gathering job for the gatherer at one roster position.

    Attributes:
        position: Index into the gatherer bucket.
        node: Resource node kind to gather from.
        cargo: Cargo that counts toward depositing; ``None`` means any.
        deposit_above: Deposit once the counted cargo exceeds this.
    """

    position: int
    node: NodeType
    cargo: ResourceType | None
    deposit_above: int

    def should_deposit(self, unit: UnitView) -> bool:
        """Return True if ``unit`` should head home instead of gathering."""
        if self.cargo is not None and unit.cargo_type is not self.cargo:
            return False
        return unit.cargo_amount > self.deposit_above


_BOOTSTRAP_ASSIGNMENT = GatherAssignment(
    position=0,
    node=NodeType.GOLD_MINE,
    cargo=ResourceType.GOLD,
    deposit_above=0,
)

# Evaluated in this order.
_MATURE_ASSIGNMENTS = (
    GatherAssignment(position=1, node=NodeType.TREE, cargo=None, deposit_above=0),
    GatherAssignment(
        position=0,
        node=NodeType.GOLD_MINE,
        cargo=ResourceType.GOLD,
        deposit_above=2,
    ),
    GatherAssignment(
        position=2,
        node=NodeType.GOLD_MINE,
        cargo=ResourceType.GOLD,
        deposit_above=0,
    ),
)


@dataclass(frozen=True)
class TickDecision:
    """Outcome of one evaluation of the ladder.

    Attributes:
        decision: The rung that fired.
        commands: Commands emitted for this tick.
        roster: The roster the decision was made on.
        gold: Controlled faction's gold this tick.
        wood: Controlled faction's wood this tick.
    """

    decision: Decision
    commands: CommandBatch
    roster: Roster
    gold: int
    wood: int


def decide(
    snapshot: WorldSnapshot,
    player: int,
    config: PolicyConfig | None = None,
) -> TickDecision:
    """Evaluate the decision ladder for one tick.

    Args:
        snapshot: The current world view.
        player: The controlled faction.
        config: Thresholds and switches (defaults if omitted).

    Returns:
        The rung that fired and the commands it produced.

    Raises:
        PreconditionViolated: With ``strict_preconditions``, when an action
            needs something the snapshot does not have.
        DuplicateCommandError: If a unit is addressed twice and overwriting
            is not allowed.
    """
    return _Ladder(snapshot, player, config or PolicyConfig()).evaluate()


class _Ladder:
    """Single-use evaluator holding one tick's working state."""

    def __init__(
        self,
        snapshot: WorldSnapshot,
        player: int,
        config: PolicyConfig,
    ) -> None:
        self.snapshot = snapshot
        self.player = player
        self.config = config
        self.roster = Roster.from_snapshot(snapshot, player)
        self.batch = CommandBatch(allow_overwrite=config.allow_overwrite)
        self.gold = snapshot.resource_amount(player, ResourceType.GOLD)
        self.wood = snapshot.resource_amount(player, ResourceType.WOOD)

    def evaluate(self) -> TickDecision:
        decision = self._choose()
        return TickDecision(
            decision=decision,
            commands=self.batch,
            roster=self.roster,
            gold=self.gold,
            wood=self.wood,
        )

    def _choose(self) -> Decision:
        cfg = self.config
        roster = self.roster
        gold, wood = self.gold, self.wood

        if roster.count(Role.GATHERER) < cfg.gatherer_target:
            if gold >= cfg.gatherer_gold:
                self._produce(Role.COMMAND_CENTER, Role.GATHERER)
                return Decision.PRODUCE_GATHERER
            self._gather(_BOOTSTRAP_ASSIGNMENT)
            return Decision.GATHER_BOOTSTRAP

        barracks = roster.count(Role.BARRACKS)
        army = roster.count(Role.COMBAT_UNIT)
        farms = roster.count(Role.FARM)

        if farms < 1 and gold >= cfg.farm_gold and wood >= cfg.farm_wood:
            self._build(Role.FARM)
            return Decision.BUILD_FARM
        if barracks < 1 and gold >= cfg.barracks_gold and wood >= cfg.barracks_wood:
            self._build(Role.BARRACKS)
            return Decision.BUILD_BARRACKS
        if barracks >= 1 and army < cfg.army_size and gold >= cfg.combat_unit_gold:
            self._produce(Role.BARRACKS, Role.COMBAT_UNIT)
            return Decision.PRODUCE_COMBAT_UNIT

        if army >= cfg.army_size:
            self._attack()
        for assignment in _MATURE_ASSIGNMENTS:
            self._gather(assignment)
        return Decision.GATHER_AND_ATTACK

    # -- Actions --

    def _produce(self, producer_role: Role, product: Role) -> None:
        template_id = self._template_id(product)
        producer = self._first(producer_role)
        if template_id is None or producer is None:
            return
        self.batch.add(Command.produce(producer, template_id))

    def _build(self, structure: Role) -> None:
        template_id = self._template_id(structure)
        builder = self._first(Role.GATHERER)
        if template_id is None or builder is None:
            return
        self.batch.add(Command.build(builder, template_id))

    def _attack(self) -> None:
        target = self._require(self.roster.first_enemy(), "enemy unit")
        if target is None:
            return
        for unit_id in self.roster.units(Role.COMBAT_UNIT):
            self.batch.add(Command.attack(unit_id, target))

    def _gather(self, assignment: GatherAssignment) -> None:
        gatherer = self._require(
            self.roster.at(Role.GATHERER, assignment.position),
            f"{_describe(Role.GATHERER)} at position {assignment.position}",
        )
        if gatherer is None:
            return

        if assignment.should_deposit(self.snapshot.unit(gatherer)):
            hall = self._first(Role.COMMAND_CENTER)
            if hall is not None:
                self.batch.add(Command.deposit(gatherer, hall))
            return

        nodes = self.snapshot.resource_node_ids(assignment.node)
        what = f"{assignment.node.value} node"
        node = self._require(nodes[0] if nodes else None, what)
        if node is not None:
            self.batch.add(Command.gather(gatherer, node))

    # -- Lookups --

    def _first(self, role: Role) -> int | None:
        return self._require(self.roster.first(role), _describe(role))

    def _template_id(self, role: Role) -> int | None:
        template = self.snapshot.template(self.player, role.template_name)
        found = template.template_id if template is not None else None
        return self._require(found, f"{role.value} template")

    def _require(self, value: int | None, what: str) -> int | None:
        """Pass ``value`` through, or raise for a missing one in strict mode."""
        if value is None and self.config.strict_preconditions:
            raise PreconditionViolated(what)
        return value


def _describe(role: Role) -> str:
    return role.name.lower().replace("_", " ")


class ResourceCollectionAgent:
    """Scripted agent that grows an economy, builds up, then attacks.

    Attributes:
        player: The controlled faction.
        goal: Gold and wood amounts requested at construction.
        config: Ladder thresholds and switches.
        tick: Number of ticks seen since the last ``initial_step``.
    """

    def __init__(
        self,
        player: int,
        arguments: Sequence[str | int],
        config: PolicyConfig | None = None,
    ) -> None:
        """Create an agent for ``player``.

        Args:
            player: The controlled faction.
            arguments: The two goal arguments, gold then wood.
            config: Ladder thresholds and switches (defaults if omitted).

        Raises:
            GoalArgumentError: If the goal arguments are missing or are
                not integers.
        """
        self.player = player
        self.goal = AgentGoal.from_args(arguments)
        self.config = config or PolicyConfig()
        self.tick = 0

    @staticmethod
    def usage() -> str:
        """Describe the agent's construction arguments."""
        return usage()

    def initial_step(
        self,
        snapshot: WorldSnapshot,
        history: Any = None,
    ) -> CommandBatch:
        """Start a new episode and decide its first tick."""
        self.tick = 0
        return self.middle_step(snapshot, history)

    def middle_step(
        self,
        snapshot: WorldSnapshot,
        history: Any = None,
    ) -> CommandBatch:
        """Decide this tick's commands.

        ``history`` is accepted for host compatibility and ignored: the
        decision depends on the current snapshot only.
        """
        self.tick += 1
        result = decide(snapshot, self.player, self.config)
        self._trace(result)
        return result.commands

    def terminal_step(
        self,
        snapshot: WorldSnapshot,
        history: Any = None,
    ) -> None:
        """Report final stockpiles.  Emits no commands."""
        self.tick += 1
        gold = snapshot.resource_amount(self.player, ResourceType.GOLD)
        wood = snapshot.resource_amount(self.player, ResourceType.WOOD)
        logger.info(
            "Tick %d: finished with gold=%d wood=%d (goal %d/%d %s)",
            self.tick,
            gold,
            wood,
            self.goal.gold_required,
            self.goal.wood_required,
            "met" if self.goal.is_met(gold, wood) else "not met",
        )

    def save_player_data(self, stream: IO[bytes]) -> None:
        """No-op: the agent does not learn, so there is nothing to save."""

    def load_player_data(self, stream: IO[bytes]) -> None:
        """No-op: the agent does not learn, so there is nothing to load."""

    def _trace(self, result: TickDecision) -> None:
        level = logging.INFO if self.config.trace else logging.DEBUG
        if not logger.isEnabledFor(level):
            return
        logger.log(
            level,
            "tick=%d gold=%d wood=%d roster=%s decision=%s commands=[%s]",
            self.tick,
            result.gold,
            result.wood,
            result.roster.counts(),
            result.decision.name,
            ", ".join(str(cmd) for cmd in result.commands.values()),
        )
