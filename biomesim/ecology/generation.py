"""Resource generation — lushness-driven regrowth of depleted tiles.

The regeneration rate is a closed-form cubic of lushness.  The total
amount injected per turn is fixed by the rate and the set of eligible
tiles; only its split across those tiles is randomised.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from biomesim.biome.tile import FULL_VALUE

if TYPE_CHECKING:
    from numpy.random import Generator

    from biomesim.biome.biome import Biome
    from biomesim.simulation.config import GenerationParams

logger = logging.getLogger(__name__)

WEIGHT_LOW = 0.5
WEIGHT_HIGH = 2.5


def generation_rate(
    lushness: float,
    params: GenerationParams,
    max_lushness: float = 8.0,
) -> float:
    """Return the per-tile regeneration rate for the given lushness.

    Lushness above ``max_lushness`` (possible once egg boost is added) is
    capped so the cubic stays inside its calibrated range.

    Args:
        lushness: Current biome lushness.
        params: Polynomial coefficients.
        max_lushness: Upper bound applied to ``lushness`` before evaluation.
    """
    lush = min(lushness, max_lushness)
    rate = params.a * lush**3 + params.b * lush**2 + params.c * lush + params.d
    return max(0.0, rate)


def regenerate(biome: Biome, rate: float, rng: Generator) -> float:
    """Distribute one turn of regrowth across eligible tiles.

    Each eligible tile (active, ``0 < value < 10``) expects
    ``rate * (1 - value / 10)``.  The summed expectation is then handed
    out in proportion to independent random weights drawn from
    [0.5, 2.5), and each tile is clamped at full value.

    Args:
        biome: The biome whose tiles regrow (mutated in place).
        rate: Output of ``generation_rate`` for this turn.
        rng: Seeded random generator.

    Returns:
        Total amount actually added to tile values.
    """
    eligible = [t for t in biome.resources if t.is_eligible]
    if not eligible:
        return 0.0

    total_expected = sum(rate * (1.0 - t.value / FULL_VALUE) for t in eligible)
    weights = rng.uniform(WEIGHT_LOW, WEIGHT_HIGH, size=len(eligible))
    proportions = weights / weights.sum()

    applied = 0.0
    for tile, share in zip(eligible, proportions, strict=True):
        before = tile.value
        tile.value = min(FULL_VALUE, before + total_expected * float(share))
        applied += tile.value - before

    logger.debug(
        "%s: regenerated %.3f across %d tiles (rate %.4f)",
        biome.id,
        applied,
        len(eligible),
        rate,
    )
    return applied
