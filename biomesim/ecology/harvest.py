"""Harvesting — two-phase extraction of resource units from a biome.

Phase A skims every active tile above the floor of 1, rightmost tile
first, taking at most 20% of each tile's distance to the floor.  Phase B
pushes tiles sitting at the floor down to 0 according to the biome's
``HarvestStrategy``, turning them into blank ground.

Harvesting is best effort: asking for more than the biome can give
returns whatever was available.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from biomesim.biome.biome import HarvestStrategy

if TYPE_CHECKING:
    from biomesim.biome.biome import Biome

logger = logging.getLogger(__name__)

FLOOR_VALUE = 1.0
SKIM_FRACTION = 0.2
REALISTIC_PERIOD = 3
REALISTIC_MAX_TILES = 3


def skim_cap(value: float) -> float:
    """Return the most Phase A may take from a tile at ``value`` (at least 1)."""
    return max(1.0, math.ceil((value - FLOOR_VALUE) * SKIM_FRACTION))


def depletion_quota(
    strategy: HarvestStrategy,
    count_at_floor: int,
    turns_count: int,
    *,
    has_skimmable: bool,
) -> int:
    """How many floor-value tiles the strategy allows to be depleted.

    Args:
        strategy: The biome's harvest strategy.
        count_at_floor: Active tiles sitting at value 1.
        turns_count: Harvest invocations so far, including the current one.
        has_skimmable: Whether any active tile is still above value 1.

    Returns:
        Maximum number of tiles to take from 1 to 0 this call.
    """
    match strategy:
        case HarvestStrategy.PRESERVATION:
            # Only once the whole biome is skimmed
            if has_skimmable:
                return 0
            return math.ceil(0.25 * count_at_floor)
        case HarvestStrategy.REALISTIC:
            if turns_count % REALISTIC_PERIOD != 0:
                return 0
            return min(math.ceil(0.10 * count_at_floor), REALISTIC_MAX_TILES)
        case HarvestStrategy.ABUSIVE:
            return math.ceil(0.15 * count_at_floor)
        case _:
            msg = f"Unhandled harvest strategy: {strategy!r}"
            raise AssertionError(msg)


def harvest(biome: Biome, units_requested: float) -> float:
    """Extract up to ``units_requested`` units from ``biome``.

    Increments ``biome.turns_count`` on every call.

    Args:
        biome: The biome to harvest (mutated in place).
        units_requested: Units wanted this turn.

    Returns:
        Units actually harvested (never more than requested).

    Raises:
        ValueError: If ``units_requested`` is negative.
    """
    if units_requested < 0:
        msg = f"units_requested must be non-negative, got {units_requested}"
        raise ValueError(msg)

    biome.turns_count += 1
    harvested = 0.0
    remaining = float(units_requested)

    # Highest index first
    active = [
        (i, t) for i, t in reversed(list(enumerate(biome.resources))) if t.active
    ]

    # Phase A: skim down to the floor
    for _, tile in active:
        if remaining <= 0:
            break
        headroom = tile.value - FLOOR_VALUE
        if headroom <= 0:
            continue
        take = min(skim_cap(tile.value), headroom, remaining)
        # Land exactly on the floor so Phase B can find the tile
        tile.value = FLOOR_VALUE if take >= headroom else tile.value - take
        harvested += take
        remaining -= take

    if remaining <= 0:
        return harvested

    # Phase B: terminal depletion
    at_floor = [(i, t) for i, t in active if t.value == FLOOR_VALUE]
    quota = depletion_quota(
        biome.harvest_strategy,
        len(at_floor),
        biome.turns_count,
        has_skimmable=any(t.value > FLOOR_VALUE for _, t in active),
    )
    for index, tile in at_floor[:quota]:
        if remaining < FLOOR_VALUE:
            break
        tile.deactivate()
        harvested += FLOOR_VALUE
        remaining -= FLOOR_VALUE
        logger.debug("%s: tile %d depleted and left blank", biome.id, index)

    return harvested
