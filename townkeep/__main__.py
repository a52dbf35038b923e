"""Entry point for ``python -m townkeep``.

Builds a resource-collection agent from the two goal arguments, replays
a scenario file (or a run of random snapshots) through it, and prints
the commands chosen on every tick.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
from collections.abc import Sequence

import numpy as np
import yaml

from townkeep.agent.errors import GoalArgumentError
from townkeep.agent.goals import usage
from townkeep.agent.policy import ResourceCollectionAgent
from townkeep.simulation.config import PolicyConfig
from townkeep.simulation.runner import EpisodeRunner
from townkeep.world.scenario import random_episode
from townkeep.world.snapshot import WorldSnapshot

_ROOT = pathlib.Path(__file__).resolve().parent.parent
_DEFAULT_CONFIG = _ROOT / "config" / "default.yaml"
_DEFAULT_SCENARIO = _ROOT / "config" / "scenarios" / "opening.yaml"


def load_scenario(
    path: pathlib.Path,
    player: int | None = None,
) -> tuple[int, list[WorldSnapshot]]:
    """Read a scenario file.

    Args:
        path: Scenario YAML.
        player: Controlled player overriding the file's ``player`` key.
            Stockpiles, templates and units without an owner are keyed
            to this player.

    Returns:
        The controlled player and one snapshot per tick.
    """
    with path.open("r") as f:
        data = yaml.safe_load(f) or {}
    if player is None:
        player = int(data.get("player", 0))
    snapshots = [
        WorldSnapshot.from_dict(entry, player=player)
        for entry in data.get("ticks") or []
    ]
    return player, snapshots


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI args, build the agent, replay the episode."""
    parser = argparse.ArgumentParser(
        prog="townkeep",
        description="Townkeep - scripted resource-collection agent",
        epilog=usage(),
    )
    parser.add_argument("gold", help="Amount of gold to gather")
    parser.add_argument("wood", help="Amount of wood to gather")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-s",
        "--scenario",
        type=pathlib.Path,
        default=_DEFAULT_SCENARIO,
        help="Scenario YAML to replay (default: config/scenarios/opening.yaml)",
    )
    source.add_argument(
        "-r",
        "--random",
        type=int,
        metavar="TICKS",
        help="Replay TICKS random snapshots instead of a scenario file",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Seed for --random (default: 42)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to policy YAML config (default: config/default.yaml)",
    )
    parser.add_argument(
        "-p",
        "--player",
        type=int,
        default=None,
        help="Controlled player (default: from scenario, else 0)",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Skip ticks whose decision fails instead of aborting",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log the per-tick trace",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = PolicyConfig.from_yaml(args.config)

    if args.random is not None:
        player = 0 if args.player is None else args.player
        rng = np.random.default_rng(args.seed)
        snapshots = random_episode(
            rng,
            args.random,
            player=player,
            enemy_player=1 if player == 0 else 0,
        )
    else:
        player, snapshots = load_scenario(args.scenario, player=args.player)

    try:
        agent = ResourceCollectionAgent(player, [args.gold, args.wood], config)
    except GoalArgumentError as exc:
        parser.error(str(exc))

    runner = EpisodeRunner(
        agent=agent,
        snapshots=snapshots,
        abort_on_fault=not args.keep_going,
    )
    while not runner.finished:
        batch = runner.step()
        if batch is None:
            continue
        commands = ", ".join(str(cmd) for cmd in batch.values()) or "-"
        print(f"tick {agent.tick}: {commands}")


if __name__ == "__main__":
    main()
