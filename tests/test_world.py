"""Tests for townkeep.world — snapshots, random scenarios and the CLI."""

from pathlib import Path

import numpy as np
import pytest
from numpy.random import Generator

from townkeep.__main__ import load_scenario, main
from townkeep.agent.commands import CommandType
from townkeep.agent.policy import Decision, decide
from townkeep.agent.roles import Role
from townkeep.agent.roster import Roster
from townkeep.world.scenario import random_episode, random_snapshot
from townkeep.world.snapshot import NodeType, ResourceType, WorldSnapshot

_REPO_ROOT = Path(__file__).resolve().parent.parent
_OPENING = _REPO_ROOT / "config" / "scenarios" / "opening.yaml"

_MATURE = {
    Decision.BUILD_FARM,
    Decision.BUILD_BARRACKS,
    Decision.PRODUCE_COMBAT_UNIT,
    Decision.GATHER_AND_ATTACK,
}


class TestWorldSnapshot:
    """Tests for the read-only snapshot view."""

    def test_from_dict(self) -> None:
        snap = WorldSnapshot.from_dict(
            {
                "resources": {"gold": 120, "wood": 30},
                "units": [
                    {"id": 1, "type": "TownHall"},
                    {"id": 2, "type": "Peasant", "cargo": "gold", "amount": 3},
                    {"id": 9, "player": 1, "type": "Footman"},
                ],
                "nodes": {"tree": [20, 22], "gold_mine": [21]},
                "templates": {"Peasant": 100},
            },
            player=0,
        )
        assert snap.resource_amount(0, ResourceType.GOLD) == 120
        assert snap.unit_ids(0) == [1, 2]
        assert snap.all_unit_ids() == [1, 2, 9]
        assert snap.unit(2).cargo_type is ResourceType.GOLD
        assert snap.unit(2).cargo_amount == 3
        assert snap.resource_node_ids(NodeType.TREE) == [20, 22]
        assert snap.template(0, "Peasant").template_id == 100
        assert snap.template(0, "Farm") is None

    def test_unknown_resource_rejected(self) -> None:
        with pytest.raises(ValueError):
            WorldSnapshot.from_dict({"resources": {"stone": 1}})

    def test_defaults_for_missing_data(self) -> None:
        snap = WorldSnapshot()
        assert snap.resource_amount(3, ResourceType.WOOD) == 0
        assert snap.resource_node_ids(NodeType.GOLD_MINE) == []
        with pytest.raises(KeyError):
            snap.unit(1)


class TestRandomSnapshots:
    """Policy properties over many seeded random snapshots."""

    def test_deterministic(self) -> None:
        a = random_snapshot(np.random.default_rng(7))
        b = random_snapshot(np.random.default_rng(7))
        assert a == b

    def test_always_has_targets(self, rng: Generator) -> None:
        for snap in random_episode(rng, 50):
            assert snap.resource_node_ids(NodeType.TREE)
            assert snap.resource_node_ids(NodeType.GOLD_MINE)
            assert set(snap.all_unit_ids()) - set(snap.unit_ids(0))

    def test_other_player_has_enemies(self, rng: Generator) -> None:
        for snap in random_episode(rng, 50, player=1, enemy_player=0):
            roster = Roster.from_snapshot(snap, 1)
            assert roster.enemies
            assert all(snap.unit(uid).player == 0 for uid in roster.enemies)
            assert snap.template(1, "Peasant") is not None

    def test_enemy_must_differ(self, rng: Generator) -> None:
        with pytest.raises(ValueError):
            random_snapshot(rng, player=1)

    def test_one_rung_fires(self, rng: Generator) -> None:
        for snap in random_episode(rng, 300):
            result = decide(snap, 0)
            gatherers = result.roster.count(Role.GATHERER)
            if gatherers >= 3:
                assert result.decision in _MATURE
            else:
                assert result.decision not in _MATURE

    def test_targets_exist(self, rng: Generator) -> None:
        for snap in random_episode(rng, 300):
            result = decide(snap, 0)
            template_ids = {t.template_id for t in snap.templates.values()}
            node_ids = set(snap.resource_node_ids(NodeType.TREE))
            node_ids.update(snap.resource_node_ids(NodeType.GOLD_MINE))
            for unit_id, command in result.commands.items():
                assert snap.unit(unit_id).player == 0
                if command.ctype in (CommandType.BUILD, CommandType.PRODUCE):
                    assert command.target in template_ids
                elif command.ctype is CommandType.GATHER:
                    assert command.target in node_ids
                else:
                    assert command.target in snap.units

    def test_bootstrap_production_is_alone(self, rng: Generator) -> None:
        for snap in random_episode(rng, 300):
            result = decide(snap, 0)
            if result.decision is Decision.PRODUCE_GATHERER:
                (command,) = result.commands.values()
                assert command.ctype is CommandType.PRODUCE
                assert command.unit_id == result.roster.first(Role.COMMAND_CENTER)


class TestCli:
    """Tests for the ``python -m townkeep`` entry point."""

    def test_load_scenario(self) -> None:
        player, snapshots = load_scenario(_OPENING)
        assert player == 0
        assert len(snapshots) == 6

    def test_replays_opening(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["1000", "500", "--scenario", str(_OPENING)])
        out = capsys.readouterr().out.splitlines()
        assert out == [
            "tick 1: gather(2 -> 21)",
            "tick 2: deposit(2 -> 1)",
            "tick 3: produce(1 -> 100)",
            "tick 4: deposit(3 -> 1), gather(2 -> 21), deposit(4 -> 1)",
            "tick 5: build(2 -> 101)",
        ]

    def test_random_run(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["10", "10", "--random", "5", "--seed", "3"])
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 4
        assert out[0].startswith("tick 1:")

    def test_load_scenario_player_override(self) -> None:
        player, snapshots = load_scenario(_OPENING, player=1)
        assert player == 1
        third = snapshots[2]
        assert third.resource_amount(1, ResourceType.GOLD) == 400
        assert third.resource_amount(0, ResourceType.GOLD) == 0
        assert third.template(1, "Peasant").template_id == 100
        assert third.unit_ids(1) == [1, 2, 50]

    def test_player_override_replays(
        self,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["10", "10", "--scenario", str(_OPENING), "--player", "1"])
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "tick 1: gather(2 -> 21)"
        assert out[2] == "tick 3: produce(1 -> 100)"
        assert out[4] == "tick 5: build(2 -> 101)"

    def test_random_run_other_player(
        self,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["10", "10", "--random", "20", "--seed", "5", "--player", "1"])
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 19
        assert any(line != f"tick {i}: -" for i, line in enumerate(out, 1))

    def test_bad_goal_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main(["ten", "10", "--random", "2"])
        assert excinfo.value.code == 2
