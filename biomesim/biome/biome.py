"""Biome — aggregate state for one independently simulated patch of tiles.

A Biome owns an ordered row of ResourceTile objects, derived lushness
values, egg bookkeeping, the player's harvest settings and a per-turn
history.  It is mutated in place by ``EcosystemEngine`` once per turn.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from biomesim.biome.tile import FULL_VALUE, ResourceTile

logger = logging.getLogger(__name__)

MAX_LUSHNESS = 8.0


class HarvestStrategy(Enum):
    """Terminal depletion policy applied once the skim phase is exhausted."""

    PRESERVATION = "preservation"
    REALISTIC = "realistic"
    ABUSIVE = "abusive"

    @classmethod
    def parse(cls, value: HarvestStrategy | str) -> HarvestStrategy:
        """Coerce a strategy name (case-insensitive) into a member.

        Args:
            value: A HarvestStrategy or its string value.

        Raises:
            ValueError: If ``value`` names no known strategy.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        choices = ", ".join(s.value for s in cls)
        msg = f"Unknown harvest strategy {value!r} (expected one of: {choices})"
        raise ValueError(msg)


@dataclass
class TurnRecord:
    """Snapshot of one simulated turn.

    Appended to ``Biome.history`` and returned by ``simulate_turn``.
    History is observability only and never read back by the simulation.
    """

    turn: int
    lushness: float
    resource_total: float
    base_lushness: float = 0.0
    lushness_boost: float = 0.0
    generation_rate: float = 0.0
    harvested_amount: float = 0.0
    regenerated_amount: float = 0.0
    eggs_produced: int = 0
    egg_count: int = 0

    def as_dict(self) -> dict[str, Any]:
        """Return the record as a plain dict for callers that serialise."""
        return asdict(self)


@dataclass
class Biome:
    """Top-level state for a single biome.

    Attributes:
        id: Unique identifier.
        name: Display name.
        resources: Tiles in spatial left-to-right order.
        base_lushness: Lushness derived from resource health.
        lushness_boost: Extra lushness derived from egg density.
        lushness: Combined lushness used by generation and egg gating.
        egg_count: Number of tiles carrying an egg.
        total_harvested: Lifetime harvested units.
        turns_count: Harvest invocations so far (drives periodic strategies).
        harvest_strategy: Terminal depletion policy.  Strings are parsed on
            assignment; unknown names raise ValueError.
        harvest_rate: Units requested per turn by ``EcosystemEngine.step``.
        harvest_percent: ``harvest_rate`` expressed as % of tile count.
        history: Append-only per-turn records.
        initial_resource_count: Tile count at creation.
        non_depleted_count: Active tiles above zero, refreshed each
            lushness pass.
    """

    id: str
    name: str
    resources: list[ResourceTile] = field(default_factory=list, repr=False)
    base_lushness: float = MAX_LUSHNESS
    lushness_boost: float = 0.0
    lushness: float = MAX_LUSHNESS
    egg_count: int = 0
    total_harvested: float = 0.0
    turns_count: int = 0
    harvest_strategy: HarvestStrategy = HarvestStrategy.PRESERVATION
    harvest_rate: int = 0
    harvest_percent: int = 0
    history: list[TurnRecord] = field(default_factory=list, repr=False)
    initial_resource_count: int = 0
    non_depleted_count: int = 0

    def __post_init__(self) -> None:
        """Reject a biome without tiles.

        Raises:
            ValueError: If ``resources`` is empty.
        """
        if not self.resources:
            msg = f"Biome {self.id} must have at least one tile"
            raise ValueError(msg)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "harvest_strategy":
            value = HarvestStrategy.parse(value)
        super().__setattr__(name, value)

    @property
    def resource_total(self) -> float:
        """Sum of values over active tiles."""
        return sum(t.value for t in self.resources if t.active)

    @property
    def active_count(self) -> int:
        """Number of tiles currently holding a resource."""
        return sum(1 for t in self.resources if t.active)

    @property
    def blank_count(self) -> int:
        """Number of inactive tiles with no egg."""
        return sum(1 for t in self.resources if t.is_blank)

    def find_leftmost_blank_tile(self) -> int | None:
        """Return the lowest index of a blank tile, or None if there is none."""
        for i, tile in enumerate(self.resources):
            if tile.is_blank:
                return i
        return None

    def place_egg(self, index: int) -> None:
        """Put an egg on the blank tile at ``index``.

        Raises:
            ValueError: If the tile is active or already has an egg.
        """
        tile = self.resources[index]
        if not tile.is_blank:
            msg = f"Tile {index} in {self.id} is not blank"
            raise ValueError(msg)
        tile.has_egg = True
        self.egg_count += 1


def create_biome(
    biome_id: str,
    name: str,
    tile_count: int,
    initial_lushness: float = MAX_LUSHNESS,
) -> Biome:
    """Build a biome with every tile active at full value.

    The turn-1 history record is appended immediately.

    Args:
        biome_id: Unique identifier.
        name: Display name.
        tile_count: Number of tiles in the row (must be positive).
        initial_lushness: Starting lushness.

    Raises:
        ValueError: If ``tile_count`` is zero or negative.
    """
    if tile_count <= 0:
        msg = f"tile_count must be positive, got {tile_count}"
        raise ValueError(msg)

    biome = Biome(
        id=biome_id,
        name=name,
        resources=[ResourceTile() for _ in range(tile_count)],
        base_lushness=initial_lushness,
        lushness=initial_lushness,
        initial_resource_count=tile_count,
        non_depleted_count=tile_count,
    )
    biome.history.append(
        TurnRecord(
            turn=1,
            lushness=initial_lushness,
            base_lushness=initial_lushness,
            resource_total=tile_count * FULL_VALUE,
        ),
    )
    return biome


def arrange_tiles(biome: Biome, resource_tile_count: int) -> None:
    """Split the row into active resources followed by blank ground.

    The first ``resource_tile_count`` tiles become active at full value;
    the rest become blank at zero.  Existing eggs are cleared.

    Args:
        biome: The biome to rearrange.
        resource_tile_count: How many leading tiles hold resources.
    """
    biome.egg_count = 0
    for i, tile in enumerate(biome.resources):
        tile.has_egg = False
        if i < resource_tile_count:
            tile.active = True
            tile.value = FULL_VALUE
        else:
            tile.active = False
            tile.value = 0.0
    biome.non_depleted_count = min(resource_tile_count, len(biome.resources))
    refresh_initial_record(biome)


def place_initial_eggs(biome: Biome, count: int) -> int:
    """Place up to ``count`` eggs on the leftmost blank tiles.

    Returns:
        Number of eggs actually placed.
    """
    placed = 0
    for _ in range(count):
        index = biome.find_leftmost_blank_tile()
        if index is None:
            logger.warning(
                "%s: only %d of %d initial eggs fit on blank tiles",
                biome.id,
                placed,
                count,
            )
            break
        biome.place_egg(index)
        placed += 1
    refresh_initial_record(biome)
    return placed


def refresh_initial_record(biome: Biome) -> None:
    """Sync the creation-time history record with the current layout."""
    if not biome.history:
        return
    first = biome.history[0]
    first.resource_total = biome.resource_total
    first.egg_count = biome.egg_count
