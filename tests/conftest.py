"""Shared fixtures for the biomesim test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from biomesim.biome.biome import Biome, create_biome
from biomesim.simulation.config import EcosystemConfig
from biomesim.simulation.engine import EcosystemEngine


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def default_config() -> EcosystemConfig:
    """Default ecosystem config (no YAML file needed)."""
    return EcosystemConfig()


@pytest.fixture
def engine(default_config: EcosystemConfig, rng: Generator) -> EcosystemEngine:
    """An engine with no registered biomes and an injected RNG."""
    return EcosystemEngine(config=default_config, rng=rng)


@pytest.fixture
def full_biome() -> Biome:
    """A 10-tile biome with every tile active at full value."""
    return create_biome("biome-test", "Test Biome", 10)