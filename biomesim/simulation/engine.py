"""EcosystemEngine — the per-turn biome loop.

Each biome advances in the canonical turn order:

1. Regenerate resources from start-of-turn lushness
2. Harvest the requested units
3. Recompute base lushness from the post-harvest resource state
4. Recompute egg boost from eggs laid on *previous* turns
5. Combine lushness
6. Lay eggs using the fresh lushness
7. Append a history record

Running step 4 before step 6 makes the egg boost lag production by one
turn, which keeps the lushness/egg feedback loop self-damping.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from biomesim.biome.biome import (
    Biome,
    HarvestStrategy,
    TurnRecord,
    arrange_tiles,
    create_biome,
    place_initial_eggs,
)
from biomesim.ecology.generation import generation_rate, regenerate
from biomesim.ecology.harvest import harvest
from biomesim.ecology.lushness import (
    base_lushness,
    egg_percentage,
    lushness_boost,
    produce_eggs,
)
from biomesim.simulation.config import EcosystemConfig

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


@dataclass
class EcosystemEngine:
    """Drives every registered biome forward turn by turn.

    Attributes:
        config: Loaded ecosystem configuration.
        rng: Seeded random generator.  Built from ``config.seed`` unless
            one is injected.
        biomes: Biomes advanced by ``step``.
        turn: Number of completed ``step`` calls.
    """

    config: EcosystemConfig = field(default_factory=EcosystemConfig)
    rng: Generator | None = None
    biomes: list[Biome] = field(default_factory=list)
    turn: int = 0

    def __post_init__(self) -> None:
        """Seed the RNG from config when none was injected."""
        if self.rng is None:
            self.rng = np.random.default_rng(self.config.seed)

    def create_biome(
        self,
        biome_id: str,
        name: str,
        tile_count: int,
        *,
        harvest_rate: int = 0,
        harvest_strategy: HarvestStrategy | str = HarvestStrategy.PRESERVATION,
    ) -> Biome:
        """Build a biome laid out per config and register it.

        The leading ``resource_capability`` percent of tiles hold
        resources, the rest start blank, and the configured number of
        initial eggs is placed on the leftmost blank tiles.

        Args:
            biome_id: Unique identifier.
            name: Display name.
            tile_count: Number of tiles in the row.
            harvest_rate: Units harvested per ``step``.
            harvest_strategy: Terminal depletion policy.

        Returns:
            The new biome (also appended to ``self.biomes``).
        """
        biome = create_biome(
            biome_id,
            name,
            tile_count,
            initial_lushness=self.config.max_lushness,
        )
        resource_tiles = round_half_up(
            tile_count * self.config.resource_capability / 100,
        )
        arrange_tiles(biome, resource_tiles)
        place_initial_eggs(biome, self.config.egg_production.initial_count)
        biome.harvest_strategy = harvest_strategy
        self.set_harvest_units(biome, harvest_rate, sync=False)
        self.add_biome(biome)
        return biome

    def add_biome(self, biome: Biome) -> None:
        """Register an existing biome for ``step``."""
        self.biomes.append(biome)

    def simulate_turn(self, biome: Biome, harvest_rate: float = 0) -> TurnRecord:
        """Advance ``biome`` by one turn.

        Args:
            biome: The biome to advance (mutated in place).
            harvest_rate: Units to harvest this turn.

        Returns:
            The history record appended for this turn.

        Raises:
            ValueError: If ``harvest_rate`` is negative.
        """
        if harvest_rate < 0:
            msg = f"harvest_rate must be non-negative, got {harvest_rate}"
            raise ValueError(msg)

        cfg = self.config

        # 1. Regeneration from start-of-turn lushness
        rate = generation_rate(
            biome.lushness,
            cfg.resource_generation,
            cfg.max_lushness,
        )
        regenerated = regenerate(biome, rate, self.rng)

        # 2. Harvest
        harvested = 0.0
        if harvest_rate > 0:
            harvested = harvest(biome, harvest_rate)
            biome.total_harvested += harvested

        # 3-5. Lushness
        biome.base_lushness = base_lushness(biome, cfg.max_lushness)
        biome.lushness_boost = lushness_boost(
            egg_percentage(biome),
            cfg.max_lushness_boost,
        )
        lushness = biome.base_lushness + biome.lushness_boost
        if cfg.lushness_cap is not None:
            lushness = min(lushness, cfg.lushness_cap)
        biome.lushness = lushness

        # 6. Eggs
        turn = len(biome.history)
        eggs = produce_eggs(
            biome,
            turn,
            turn_interval=cfg.egg_production.turn_interval,
            threshold=cfg.egg_production.threshold,
        )

        # 7. History
        record = TurnRecord(
            turn=turn,
            lushness=biome.lushness,
            resource_total=biome.resource_total,
            base_lushness=biome.base_lushness,
            lushness_boost=biome.lushness_boost,
            generation_rate=rate,
            harvested_amount=harvested,
            regenerated_amount=regenerated,
            eggs_produced=eggs,
            egg_count=biome.egg_count,
        )
        biome.history.append(record)
        return record

    def step(self) -> list[TurnRecord]:
        """Advance every registered biome by one turn at its own harvest rate."""
        records = [self.simulate_turn(b, b.harvest_rate) for b in self.biomes]
        self.turn += 1
        return records

    def run(self, turns: int) -> None:
        """Run the simulation for a fixed number of turns.

        Args:
            turns: Number of turns to advance.
        """
        for _ in range(turns):
            self.step()

    def set_harvest_percent(
        self,
        biome: Biome,
        percent: int,
        *,
        sync: bool | None = None,
    ) -> None:
        """Set harvest intensity as a percentage of the biome's tile count.

        With syncing on, every other registered biome gets the same
        percentage scaled to its own size.

        Args:
            biome: The biome being adjusted.
            percent: Harvest percentage (0-100).
            sync: Override ``config.sync_biomes`` for this call.

        Raises:
            ValueError: If ``percent`` is outside 0-100.
        """
        if not 0 <= percent <= 100:
            msg = f"percent must be within 0-100, got {percent}"
            raise ValueError(msg)

        targets = [biome]
        if self.config.sync_biomes if sync is None else sync:
            targets += [b for b in self.biomes if b is not biome]

        for target in targets:
            target.harvest_percent = percent
            target.harvest_rate = round_half_up(
                percent * len(target.resources) / 100,
            )
            logger.debug(
                "%s: harvest set to %d%% (%d units)",
                target.id,
                percent,
                target.harvest_rate,
            )

    def set_harvest_units(
        self,
        biome: Biome,
        units: int,
        *,
        sync: bool | None = None,
    ) -> None:
        """Set harvest intensity in units and derive the percentage.

        With syncing on, other biomes receive the derived percentage.

        Raises:
            ValueError: If ``units`` is negative.
        """
        if units < 0:
            msg = f"units must be non-negative, got {units}"
            raise ValueError(msg)

        percent = round_half_up(units * 100 / len(biome.resources))
        biome.harvest_rate = units
        biome.harvest_percent = percent
        if self.config.sync_biomes if sync is None else sync:
            others = [b for b in self.biomes if b is not biome]
            for other in others:
                other.harvest_percent = percent
                other.harvest_rate = round_half_up(
                    percent * len(other.resources) / 100,
                )
