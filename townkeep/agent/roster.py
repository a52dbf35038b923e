"""Roster — per-tick bucketing of owned units by role.

A Roster is rebuilt from scratch every tick with a single scan over the
controlled faction's units.  Buckets keep snapshot order, so "position 0"
of a bucket is simply the first unit of that role the snapshot listed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from townkeep.agent.roles import Role

if TYPE_CHECKING:
    from townkeep.world.snapshot import WorldSnapshot

_BUCKETED = (
    Role.GATHERER,
    Role.COMMAND_CENTER,
    Role.FARM,
    Role.BARRACKS,
    Role.COMBAT_UNIT,
)


@dataclass
class Roster:
    """Owned unit ids grouped by role, plus the enemy units in view.

    Attributes:
        buckets: Ordered unit ids per role (unrecognised units excluded).
        enemies: Ids of every unit not owned by the controlled faction.
    """

    buckets: dict[Role, list[int]] = field(
        default_factory=lambda: {role: [] for role in _BUCKETED},
    )
    enemies: list[int] = field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: WorldSnapshot, player: int) -> Roster:
        """Classify all of ``player``'s units in ``snapshot``.

        Args:
            snapshot: The current world view.
            player: The controlled faction.

        Returns:
            A freshly built Roster.
        """
        roster = cls()
        owned = snapshot.unit_ids(player)
        for unit_id in owned:
            role = Role.classify(snapshot.unit(unit_id).type_name)
            if role is Role.UNRECOGNIZED:
                continue
            roster.buckets[role].append(unit_id)

        owned_set = set(owned)
        roster.enemies = [
            uid for uid in snapshot.all_unit_ids() if uid not in owned_set
        ]
        return roster

    def units(self, role: Role) -> tuple[int, ...]:
        """Return the ordered unit ids holding ``role``."""
        return tuple(self.buckets.get(role, ()))

    def count(self, role: Role) -> int:
        """Return how many units hold ``role``."""
        return len(self.units(role))

    def at(self, role: Role, position: int) -> int | None:
        """Return the unit at ``position`` within a role bucket, if any."""
        bucket = self.units(role)
        if 0 <= position < len(bucket):
            return bucket[position]
        return None

    def first(self, role: Role) -> int | None:
        """Return the first unit holding ``role``, if any."""
        return self.at(role, 0)

    def first_enemy(self) -> int | None:
        """Return the first enemy unit id, if any enemy is in view."""
        return self.enemies[0] if self.enemies else None

    def counts(self) -> dict[str, int]:
        """Role-name → count summary used in trace output."""
        return {role.name.lower(): len(ids) for role, ids in self.buckets.items()}
