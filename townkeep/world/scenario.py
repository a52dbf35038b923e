"""Scenario generation — seeded random world snapshots.

Used to drive the policy over many plausible situations: rosters of
every size around the mature-economy boundary, gatherers with random
cargo, and stockpiles spread either side of every ladder threshold.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from townkeep.agent.roles import Role
from townkeep.world.snapshot import (
    NodeType,
    ResourceType,
    Template,
    UnitView,
    WorldSnapshot,
)

if TYPE_CHECKING:
    from numpy.random import Generator

# Inclusive (min, max) unit counts per role for the controlled faction.
_ROLE_COUNTS: dict[Role, tuple[int, int]] = {
    Role.COMMAND_CENTER: (1, 2),
    Role.GATHERER: (0, 5),
    Role.FARM: (0, 1),
    Role.BARRACKS: (0, 1),
    Role.COMBAT_UNIT: (0, 3),
}

_TEMPLATE_BASE = 100
_NODE_BASE = 1000


def random_snapshot(
    rng: Generator,
    *,
    player: int = 0,
    enemy_player: int = 1,
    max_enemies: int = 3,
    max_resource: int = 1000,
    max_cargo: int = 5,
    unrecognized_rate: float = 0.1,
) -> WorldSnapshot:
    """Build a random but well-formed snapshot.

    The controlled faction always has a command centre and the world
    always holds at least one tree, one gold mine and one enemy unit, so
    every command the policy can issue has a valid target.

    Args:
        rng: Seeded random generator.
        player: The controlled faction.
        enemy_player: Owner of the enemy units.
        max_enemies: Upper bound on enemy units (at least one is placed).
        max_resource: Upper bound on each stockpile.
        max_cargo: Upper bound on a gatherer's carried amount.
        unrecognized_rate: Probability of adding one unit with a type the
            policy does not know.

    Returns:
        A new WorldSnapshot.

    Raises:
        ValueError: If ``enemy_player`` is the controlled faction.
    """
    if enemy_player == player:
        msg = f"enemy_player must differ from player, both are {player}"
        raise ValueError(msg)
    units: dict[int, UnitView] = {}
    next_id = 1

    def add(
        owner: int,
        type_name: str,
        cargo: ResourceType | None,
        amount: int,
    ) -> None:
        nonlocal next_id
        units[next_id] = UnitView(
            unit_id=next_id,
            player=owner,
            type_name=type_name,
            cargo_type=cargo,
            cargo_amount=amount,
        )
        next_id += 1

    cargo_kinds = (None, ResourceType.GOLD, ResourceType.WOOD)
    for role, (lo, hi) in _ROLE_COUNTS.items():
        for _ in range(int(rng.integers(lo, hi + 1))):
            if role is Role.GATHERER:
                kind = cargo_kinds[int(rng.integers(len(cargo_kinds)))]
                amount = int(rng.integers(1, max_cargo + 1)) if kind else 0
                add(player, role.template_name, kind, amount)
            else:
                add(player, role.template_name, None, 0)

    if rng.random() < unrecognized_rate:
        add(player, "ScoutTower", None, 0)

    for _ in range(int(rng.integers(1, max_enemies + 1))):
        enemy_role = Role.COMBAT_UNIT if rng.random() < 0.5 else Role.GATHERER
        add(enemy_player, enemy_role.template_name, None, 0)

    # Shuffle so role buckets are not contiguous in snapshot order.
    order = rng.permutation(list(units))
    units = {int(uid): units[int(uid)] for uid in order}

    stockpiles = {
        player: {
            ResourceType.GOLD: int(rng.integers(0, max_resource + 1)),
            ResourceType.WOOD: int(rng.integers(0, max_resource + 1)),
        },
    }

    resource_nodes = {
        NodeType.TREE: [
            _NODE_BASE + i for i in range(int(rng.integers(1, 4)))
        ],
        NodeType.GOLD_MINE: [
            _NODE_BASE + 100 + i for i in range(int(rng.integers(1, 3)))
        ],
    }

    templates: dict[tuple[int, str], Template] = {}
    for offset, role in enumerate(_ROLE_COUNTS):
        templates[(player, role.template_name)] = Template(
            template_id=_TEMPLATE_BASE + offset,
            player=player,
            name=role.template_name,
        )

    return WorldSnapshot(
        units=units,
        stockpiles=stockpiles,
        resource_nodes=resource_nodes,
        templates=templates,
    )


def random_episode(rng: Generator, ticks: int, **kwargs: Any) -> list[WorldSnapshot]:
    """Return ``ticks`` independent random snapshots.

    Args:
        rng: Seeded random generator.
        ticks: Number of snapshots to draw.
        **kwargs: Forwarded to :func:`random_snapshot`.
    """
    return [random_snapshot(rng, **kwargs) for _ in range(ticks)]
