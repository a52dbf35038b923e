"""Shared fixtures for the Townkeep test suite."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from numpy.random import Generator

from townkeep.agent.policy import ResourceCollectionAgent
from townkeep.simulation.config import PolicyConfig
from townkeep.world.snapshot import (
    NodeType,
    ResourceType,
    Template,
    UnitView,
    WorldSnapshot,
)

PLAYER = 0
ENEMY = 1

PEASANT_TEMPLATE = 100
FARM_TEMPLATE = 101
BARRACKS_TEMPLATE = 102
FOOTMAN_TEMPLATE = 103

TREE = 20
GOLD_MINE = 21

SnapshotFactory = Callable[..., WorldSnapshot]


def make_snapshot(
    *,
    halls: int = 1,
    peasants: list[tuple[ResourceType | None, int]] | int = 0,
    farms: int = 0,
    barracks: int = 0,
    footmen: int = 0,
    enemies: int = 1,
    extra: list[str] | None = None,
    gold: int = 0,
    wood: int = 0,
    trees: list[int] | None = None,
    mines: list[int] | None = None,
    templates: bool = True,
) -> WorldSnapshot:
    """Build a snapshot with predictable ids.

    Own units are numbered from 1 in the order halls, peasants, farms,
    barracks, footmen, extra; enemies from 90.  ``peasants`` is either a
    count of empty-handed peasants or a list of ``(cargo, amount)``.
    """
    if isinstance(peasants, int):
        peasants = [(None, 0)] * peasants

    units: dict[int, UnitView] = {}
    next_id = 1

    def add(type_name: str, cargo: ResourceType | None = None, amount: int = 0) -> None:
        nonlocal next_id
        units[next_id] = UnitView(next_id, PLAYER, type_name, cargo, amount)
        next_id += 1

    for _ in range(halls):
        add("TownHall")
    for cargo, amount in peasants:
        add("Peasant", cargo, amount)
    for _ in range(farms):
        add("Farm")
    for _ in range(barracks):
        add("Barracks")
    for _ in range(footmen):
        add("Footman")
    for type_name in extra or []:
        add(type_name)
    for i in range(enemies):
        uid = 90 + i
        units[uid] = UnitView(uid, ENEMY, "Footman")

    catalogue = {}
    if templates:
        for name, tid in (
            ("Peasant", PEASANT_TEMPLATE),
            ("Farm", FARM_TEMPLATE),
            ("Barracks", BARRACKS_TEMPLATE),
            ("Footman", FOOTMAN_TEMPLATE),
        ):
            catalogue[(PLAYER, name)] = Template(tid, PLAYER, name)

    return WorldSnapshot(
        units=units,
        stockpiles={PLAYER: {ResourceType.GOLD: gold, ResourceType.WOOD: wood}},
        resource_nodes={
            NodeType.TREE: [TREE] if trees is None else trees,
            NodeType.GOLD_MINE: [GOLD_MINE] if mines is None else mines,
        },
        templates=catalogue,
    )


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def default_config() -> PolicyConfig:
    """Default policy config (no YAML file needed)."""
    return PolicyConfig()


@pytest.fixture
def strict_config() -> PolicyConfig:
    """Config that raises on missing units, nodes, enemies or templates."""
    return PolicyConfig(strict_preconditions=True)


@pytest.fixture
def snapshot_factory() -> SnapshotFactory:
    """The ``make_snapshot`` builder."""
    return make_snapshot


@pytest.fixture
def agent(default_config: PolicyConfig) -> ResourceCollectionAgent:
    """An agent for player 0 with a 1000 gold / 1000 wood goal."""
    return ResourceCollectionAgent(PLAYER, ["1000", "1000"], default_config)
