"""Config — load decision-policy parameters from YAML files.

The policy's thresholds and behavioural switches live in YAML and are
parsed into a typed dataclass here.  Defaults reproduce the stock
resource-collection behaviour, so an empty file is a valid config.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass(frozen=True)
class PolicyConfig:
    """Decision-policy configuration, fixed for the lifetime of an agent.

    Attributes:
        gatherer_target: Gatherer count at which the economy is mature.
        gatherer_gold: Gold needed to produce another gatherer.
        farm_gold: Gold needed to build a farm.
        farm_wood: Wood needed to build a farm.
        barracks_gold: Gold needed to build barracks.
        barracks_wood: Wood needed to build barracks.
        combat_unit_gold: Gold needed to produce a combat unit.
        army_size: Combat units wanted before attacking.
        strict_preconditions: Raise ``PreconditionViolated`` when an
            action's unit, node, enemy or template is missing, instead of
            skipping that action for the tick.
        allow_overwrite: Let a later command replace an earlier one for
            the same unit instead of raising ``DuplicateCommandError``.
        trace: Emit the per-tick trace event even when the logger is not
            at DEBUG level.
    """

    gatherer_target: int = 3
    gatherer_gold: int = 400
    farm_gold: int = 500
    farm_wood: int = 250
    barracks_gold: int = 700
    barracks_wood: int = 400
    combat_unit_gold: int = 600
    army_size: int = 2

    strict_preconditions: bool = False
    allow_overwrite: bool = False
    trace: bool = False

    @classmethod
    def from_yaml(cls, path: str | Path) -> PolicyConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated PolicyConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            gatherer_target=data.get("gatherer_target", cls.gatherer_target),
            gatherer_gold=data.get("gatherer_gold", cls.gatherer_gold),
            farm_gold=data.get("farm_gold", cls.farm_gold),
            farm_wood=data.get("farm_wood", cls.farm_wood),
            barracks_gold=data.get("barracks_gold", cls.barracks_gold),
            barracks_wood=data.get("barracks_wood", cls.barracks_wood),
            combat_unit_gold=data.get(
                "combat_unit_gold",
                cls.combat_unit_gold,
            ),
            army_size=data.get("army_size", cls.army_size),
            strict_preconditions=data.get(
                "strict_preconditions",
                cls.strict_preconditions,
            ),
            allow_overwrite=data.get("allow_overwrite", cls.allow_overwrite),
            trace=data.get("trace", cls.trace),
        )
