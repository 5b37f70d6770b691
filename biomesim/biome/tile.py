"""ResourceTile — a single numbered tile in a biome row.

A tile either holds a harvestable resource (active) or is blank ground
that may carry at most one egg.  The two roles never overlap.
"""

from __future__ import annotations

from dataclasses import dataclass

FULL_VALUE = 10.0


@dataclass
class ResourceTile:
    """One tile in a biome's left-to-right resource layout.

    Attributes:
        value: Current extractable quantity (0.0-10.0).
        initial_value: Value the tile was created with.  Never mutated.
        active: Whether the tile takes part in generation, harvest and
            lushness math.  Inactive tiles are blank.
        has_egg: Whether an egg sits on this (inactive) tile.
    """

    value: float = FULL_VALUE
    initial_value: float = FULL_VALUE
    active: bool = True
    has_egg: bool = False

    @property
    def is_blank(self) -> bool:
        """Return True if the tile is inactive and free of eggs."""
        return not self.active and not self.has_egg

    @property
    def is_eligible(self) -> bool:
        """Return True if the tile can regenerate this turn."""
        return self.active and 0.0 < self.value < FULL_VALUE

    def deactivate(self) -> None:
        """Turn a depleted resource into blank ground."""
        self.value = 0.0
        self.active = False
