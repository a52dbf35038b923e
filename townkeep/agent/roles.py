"""Role — the behavioural category the policy assigns to each owned unit.

Classification is an exact match on the unit's template name.  Anything
the policy has no use for resolves to ``Role.UNRECOGNIZED`` and is left
without a command.
"""

from __future__ import annotations

from enum import Enum


class Role(Enum):
    """Closed set of unit roles, valued by their template name."""

    COMMAND_CENTER = "TownHall"
    GATHERER = "Peasant"
    FARM = "Farm"
    BARRACKS = "Barracks"
    COMBAT_UNIT = "Footman"
    UNRECOGNIZED = ""

    @classmethod
    def classify(cls, type_name: str) -> Role:
        """Resolve a template name to its role.

        Args:
            type_name: The unit's template name, matched case-sensitively.

        Returns:
            The matching role, or ``Role.UNRECOGNIZED``.
        """
        if not type_name:
            return cls.UNRECOGNIZED
        try:
            return cls(type_name)
        except ValueError:
            return cls.UNRECOGNIZED

    @property
    def template_name(self) -> str:
        """Name of the template that produces units of this role."""
        return self.value
