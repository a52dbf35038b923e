"""WorldSnapshot — the read-only view of world state for one tick.

The host simulation hands the agent a fresh snapshot every tick.  It
holds every unit (own and enemy), per-faction resource stockpiles, the
harvestable resource nodes and the catalogue of producible templates.
Nothing in here is mutated by the agent.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceType(Enum):
    """Stockpiled resource kinds."""

    GOLD = "gold"
    WOOD = "wood"


class NodeType(Enum):
    """Harvestable resource node kinds."""

    TREE = "tree"
    GOLD_MINE = "gold_mine"


@dataclass(frozen=True)
class UnitView:
    """A single unit as seen this tick.

    Attributes:
        unit_id: Unique identifier within the snapshot.
        player: Owning faction.
        type_name: Template name, e.g. ``"Peasant"``.
        cargo_type: Resource currently carried, if any.
        cargo_amount: Amount of ``cargo_type`` carried.
    """

    unit_id: int
    player: int
    type_name: str
    cargo_type: ResourceType | None = None
    cargo_amount: int = 0


@dataclass(frozen=True)
class Template:
    """A producible unit or building template."""

    template_id: int
    player: int
    name: str


@dataclass(frozen=True)
class WorldSnapshot:
    """Read-only world state for the current tick.

    Attributes:
        units: All units keyed by id, in snapshot iteration order.
        stockpiles: Per-faction resource amounts.
        resource_nodes: Node ids per node kind, in snapshot order.
        templates: Producible templates keyed by ``(player, name)``.
    """

    units: dict[int, UnitView] = field(default_factory=dict)
    stockpiles: dict[int, dict[ResourceType, int]] = field(default_factory=dict)
    resource_nodes: dict[NodeType, list[int]] = field(default_factory=dict)
    templates: dict[tuple[int, str], Template] = field(default_factory=dict)

    def resource_amount(self, player: int, rtype: ResourceType) -> int:
        """Return the stockpiled amount of ``rtype`` for ``player`` (0 if unknown)."""
        return self.stockpiles.get(player, {}).get(rtype, 0)

    def unit_ids(self, player: int) -> list[int]:
        """Return ids of units owned by ``player`` in snapshot order."""
        return [uid for uid, unit in self.units.items() if unit.player == player]

    def all_unit_ids(self) -> list[int]:
        """Return every unit id in snapshot order."""
        return list(self.units)

    def unit(self, unit_id: int) -> UnitView:
        """Return the view of a unit.

        Raises:
            KeyError: If ``unit_id`` is not part of this snapshot.
        """
        return self.units[unit_id]

    def resource_node_ids(self, ntype: NodeType) -> list[int]:
        """Return ids of resource nodes of the given kind."""
        return list(self.resource_nodes.get(ntype, []))

    def template(self, player: int, name: str) -> Template | None:
        """Look up the template ``name`` producible by ``player``."""
        return self.templates.get((player, name))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], player: int = 0) -> WorldSnapshot:
        """Build a snapshot from the scenario-file layout.

        ``resources`` and ``templates`` describe the controlled faction
        ``player``; units carry their own owner.

        Args:
            data: One parsed tick entry of a scenario file.
            player: The controlled faction.

        Returns:
            A populated WorldSnapshot.

        Raises:
            KeyError: If a unit entry lacks ``id`` or ``type``.
            ValueError: If a resource or node kind is unknown.
        """
        units: dict[int, UnitView] = {}
        for entry in data.get("units") or []:
            cargo = entry.get("cargo")
            unit = UnitView(
                unit_id=int(entry["id"]),
                player=int(entry.get("player", player)),
                type_name=str(entry["type"]),
                cargo_type=ResourceType(cargo) if cargo else None,
                cargo_amount=int(entry.get("amount", 0)),
            )
            units[unit.unit_id] = unit

        resources = data.get("resources") or {}
        stockpiles = {
            player: {
                ResourceType(name): int(amount) for name, amount in resources.items()
            },
        }

        nodes = data.get("nodes") or {}
        resource_nodes = {
            NodeType(name): [int(nid) for nid in ids] for name, ids in nodes.items()
        }

        templates = {
            (player, name): Template(template_id=int(tid), player=player, name=name)
            for name, tid in (data.get("templates") or {}).items()
        }

        return cls(
            units=units,
            stockpiles=stockpiles,
            resource_nodes=resource_nodes,
            templates=templates,
        )
