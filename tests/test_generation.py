"""Tests for biomesim.ecology.generation - rate formula and regrowth split."""

import numpy as np
import pytest
from numpy.random import Generator

from biomesim.biome.biome import Biome, create_biome
from biomesim.ecology.generation import generation_rate, regenerate
from biomesim.simulation.config import GenerationParams


class TestGenerationRate:
    """Tests for the cubic rate polynomial."""

    def test_constant_term_at_zero(self) -> None:
        assert generation_rate(0.0, GenerationParams()) == pytest.approx(0.1)

    def test_default_curve_at_max(self) -> None:
        # -0.0025*512 + 0.035*64 + 0.04*8 + 0.1
        assert generation_rate(8.0, GenerationParams()) == pytest.approx(1.38)

    def test_boosted_lushness_is_capped(self) -> None:
        params = GenerationParams()
        assert generation_rate(10.0, params) == generation_rate(8.0, params)

    def test_negative_rate_clamped_to_zero(self) -> None:
        params = GenerationParams(a=-1.0, b=0.0, c=0.0, d=0.0)
        assert generation_rate(5.0, params) == 0.0

    def test_pure(self) -> None:
        params = GenerationParams()
        assert generation_rate(4.2, params) == generation_rate(4.2, params)


class TestRegenerate:
    """Tests for distributing regrowth across eligible tiles."""

    def test_full_biome_gains_nothing(self, full_biome: Biome, rng: Generator) -> None:
        assert regenerate(full_biome, 1.38, rng) == 0.0
        assert full_biome.resource_total == 100.0

    def test_total_is_rate_bounded(self, rng: Generator) -> None:
        biome = create_biome("b", "B", 4)
        biome.resources[0].value = 5.0
        biome.resources[1].value = 5.0
        biome.resources[3].value = 0.0
        applied = regenerate(biome, 1.0, rng)
        # 1.0 * (1 - 0.5) for each of the two half-full tiles
        assert applied == pytest.approx(1.0)
        assert biome.resources[0].value + biome.resources[1].value == pytest.approx(
            11.0,
        )

    def test_depleted_and_inactive_tiles_untouched(self, rng: Generator) -> None:
        biome = create_biome("b", "B", 3)
        biome.resources[0].value = 0.0
        biome.resources[1].value = 4.0
        biome.resources[1].active = False
        biome.resources[2].value = 6.0
        regenerate(biome, 2.0, rng)
        assert biome.resources[0].value == 0.0
        assert biome.resources[1].value == 4.0
        assert biome.resources[2].value > 6.0

    def test_values_never_exceed_full(self, rng: Generator) -> None:
        biome = create_biome("b", "B", 1)
        biome.resources[0].value = 9.99
        applied = regenerate(biome, 100.0, rng)
        assert biome.resources[0].value == 10.0
        assert applied == pytest.approx(0.01)

    def test_split_is_randomised(self, rng: Generator) -> None:
        biome = create_biome("b", "B", 5)
        for tile in biome.resources:
            tile.value = 2.0
        regenerate(biome, 1.0, rng)
        values = {round(t.value, 9) for t in biome.resources}
        assert len(values) > 1

    def test_same_seed_same_split(self) -> None:
        results = []
        for _ in range(2):
            biome = create_biome("b", "B", 6)
            for i, tile in enumerate(biome.resources):
                tile.value = 1.0 + i
            regenerate(biome, 1.2, np.random.default_rng(99))
            results.append([t.value for t in biome.resources])
        assert results[0] == results[1]
