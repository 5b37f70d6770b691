"""Config — load ecosystem parameters from YAML files.

All tunable constants (generation polynomial, lushness ceilings, egg
production cadence, biome roster) live in YAML and are parsed into typed
dataclasses here.  Several historical variants of the engine used
different egg thresholds, so none of these values are hardcoded in the
simulation core.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from biomesim.biome.biome import HarvestStrategy


@dataclass
class GenerationParams:
    """Coefficients of the cubic regeneration-rate polynomial.

    ``rate = max(0, a*L**3 + b*L**2 + c*L + d)``
    """

    a: float = -0.0025
    b: float = 0.035
    c: float = 0.04
    d: float = 0.1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenerationParams:
        """Build from a mapping, falling back to defaults for missing keys."""
        return cls(
            a=data.get("a", cls.a),
            b=data.get("b", cls.b),
            c=data.get("c", cls.c),
            d=data.get("d", cls.d),
        )


@dataclass
class EggProductionParams:
    """Egg production cadence and gating.

    Attributes:
        turn_interval: Eggs may only be produced on turns divisible by this.
        initial_count: Eggs placed on blank tiles at biome creation.
        threshold: Minimum lushness required to produce an egg.
    """

    turn_interval: int = 2
    initial_count: int = 1
    threshold: float = 7.0

    def __post_init__(self) -> None:
        if self.turn_interval <= 0:
            msg = f"turn_interval must be positive, got {self.turn_interval}"
            raise ValueError(msg)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EggProductionParams:
        """Build from a mapping, falling back to defaults for missing keys."""
        return cls(
            turn_interval=data.get("turn_interval", cls.turn_interval),
            initial_count=data.get("initial_count", cls.initial_count),
            threshold=data.get("threshold", cls.threshold),
        )


@dataclass
class BiomeSpec:
    """A biome the engine should build at start-up.

    Attributes:
        id: Unique identifier.
        name: Display name.
        tile_count: Number of tiles in the row.
        harvest_rate: Units harvested per turn.
        harvest_strategy: Terminal depletion policy name.
    """

    id: str
    name: str
    tile_count: int
    harvest_rate: int = 0
    harvest_strategy: HarvestStrategy = HarvestStrategy.PRESERVATION

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BiomeSpec:
        """Build from a mapping.  ``id``, ``name`` and ``tile_count`` are required."""
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            tile_count=int(data["tile_count"]),
            harvest_rate=int(data.get("harvest_rate", 0)),
            harvest_strategy=HarvestStrategy.parse(
                data.get("harvest_strategy", HarvestStrategy.PRESERVATION),
            ),
        )


@dataclass
class EcosystemConfig:
    """Top-level ecosystem configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        max_lushness: Ceiling of base lushness (resource health).
        max_lushness_boost: Boost at full egg saturation of blank ground.
        lushness_cap: Optional clamp on combined lushness.  ``None`` keeps
            the plain sum, which can reach ``max_lushness +
            max_lushness_boost``.
        resource_capability: Percentage of tiles that hold resources when
            the engine builds a biome; the remainder start blank.
        sync_biomes: Whether harvest settings propagate to every biome.
        resource_generation: Regeneration polynomial coefficients.
        egg_production: Egg cadence and lushness threshold.
        biomes: Biomes built by the CLI runner.
    """

    seed: int = 42
    max_lushness: float = 8.0
    max_lushness_boost: float = 2.0
    lushness_cap: float | None = None
    resource_capability: int = 50
    sync_biomes: bool = False
    resource_generation: GenerationParams = field(default_factory=GenerationParams)
    egg_production: EggProductionParams = field(default_factory=EggProductionParams)
    biomes: list[BiomeSpec] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, path: str | Path) -> EcosystemConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated EcosystemConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a value is out of range (unknown strategy,
                non-positive turn interval).
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            max_lushness=data.get("max_lushness", cls.max_lushness),
            max_lushness_boost=data.get(
                "max_lushness_boost",
                cls.max_lushness_boost,
            ),
            lushness_cap=data.get("lushness_cap", cls.lushness_cap),
            resource_capability=data.get(
                "resource_capability",
                cls.resource_capability,
            ),
            sync_biomes=data.get("sync_biomes", cls.sync_biomes),
            resource_generation=GenerationParams.from_dict(
                data.get("resource_generation") or {},
            ),
            egg_production=EggProductionParams.from_dict(
                data.get("egg_production") or {},
            ),
            biomes=[BiomeSpec.from_dict(b) for b in data.get("biomes") or []],
        )
