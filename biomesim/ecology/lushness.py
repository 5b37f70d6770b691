"""Lushness and egg feedback.

Base lushness tracks how much of the biome's active resource pool is
left.  Eggs sitting on blank ground add a boost on top, and a lush
enough biome lays new eggs.  Because the boost is computed before eggs
are laid each turn, a new egg only lifts lushness from the next turn on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from biomesim.biome.tile import FULL_VALUE

if TYPE_CHECKING:
    from biomesim.biome.biome import Biome

logger = logging.getLogger(__name__)


def base_lushness(biome: Biome, max_lushness: float = 8.0) -> float:
    """Return lushness derived from the health of active resources.

    ``(sum of active values / (active count * 10)) * max_lushness``, or 0
    when there are no active tiles or every active tile is at 0.

    Refreshes ``biome.non_depleted_count`` as a side effect.

    Args:
        biome: The biome to evaluate.
        max_lushness: Lushness of a biome with every active tile full.
    """
    active = [t for t in biome.resources if t.active]
    biome.non_depleted_count = sum(1 for t in active if t.value > 0)
    if biome.non_depleted_count == 0:
        return 0.0

    ratio = sum(t.value for t in active) / (len(active) * FULL_VALUE)
    return ratio * max_lushness


def egg_percentage(biome: Biome) -> float:
    """Return the share of non-resource ground occupied by eggs (0.0-1.0)."""
    denominator = biome.blank_count + biome.egg_count
    if denominator == 0:
        return 0.0
    return biome.egg_count / denominator


def lushness_boost(percentage: float, max_boost: float = 2.0) -> float:
    """Linear boost: full egg saturation yields ``max_boost``."""
    return max_boost * percentage


def produce_eggs(
    biome: Biome,
    turn: int,
    *,
    turn_interval: int = 2,
    threshold: float = 7.0,
) -> int:
    """Lay at most one egg on the leftmost blank tile.

    Production only happens on turns divisible by ``turn_interval`` and
    when ``biome.lushness`` is at least ``threshold``.

    Args:
        biome: The biome laying eggs (mutated in place).
        turn: Current turn index.
        turn_interval: Production cadence in turns.
        threshold: Minimum lushness for production.

    Returns:
        Number of eggs produced (0 or 1).

    Raises:
        ValueError: If ``turn_interval`` is not positive.
    """
    if turn_interval <= 0:
        msg = f"turn_interval must be positive, got {turn_interval}"
        raise ValueError(msg)
    if turn % turn_interval != 0:
        return 0
    if biome.lushness < threshold:
        return 0

    index = biome.find_leftmost_blank_tile()
    if index is None:
        return 0

    biome.place_egg(index)
    logger.debug(
        "%s: egg laid on tile %d (turn %d, lushness %.2f)",
        biome.id,
        index,
        turn,
        biome.lushness,
    )
    return 1


def remove_egg(biome: Biome, index: int) -> None:
    """Take the egg off tile ``index``, leaving blank ground.

    The latest history record's egg count is updated to match.

    Raises:
        ValueError: If the tile carries no egg.
    """
    tile = biome.resources[index]
    if not tile.has_egg:
        msg = f"Tile {index} in {biome.id} has no egg"
        raise ValueError(msg)

    tile.has_egg = False
    biome.egg_count -= 1
    if biome.history:
        biome.history[-1].egg_count = biome.egg_count
    logger.debug(
        "%s: egg removed from tile %d, %d remaining",
        biome.id,
        index,
        biome.egg_count,
    )
