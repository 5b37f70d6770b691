"""Entry point for ``python -m biomesim``.

Loads the default YAML config, builds every configured biome, runs the
turn loop headlessly and prints a per-biome summary.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from biomesim.simulation.config import BiomeSpec, EcosystemConfig
from biomesim.simulation.engine import EcosystemEngine

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

_FALLBACK_TILE_COUNTS = (30, 24, 20, 18, 15)

logger = logging.getLogger("biomesim")


def build_engine(config: EcosystemConfig) -> EcosystemEngine:
    """Create an engine and register the biomes listed in ``config``.

    Without a ``biomes`` section, five biomes of 30, 24, 20, 18 and 15
    tiles are created.
    """
    engine = EcosystemEngine(config=config)
    specs = config.biomes or [
        BiomeSpec(id=f"biome-{i}", name=f"Biome {i + 1}", tile_count=n)
        for i, n in enumerate(_FALLBACK_TILE_COUNTS)
    ]
    for spec in specs:
        engine.create_biome(
            spec.id,
            spec.name,
            spec.tile_count,
            harvest_rate=spec.harvest_rate,
            harvest_strategy=spec.harvest_strategy,
        )
    return engine


def format_summary(engine: EcosystemEngine) -> str:
    """Render one line per biome with its current headline numbers."""
    header = (
        f"{'biome':<12} {'strategy':<13} {'lushness':>8} {'base':>6} "
        f"{'boost':>6} {'resources':>9} {'harvested':>9} {'eggs':>5}"
    )
    lines = [f"turn {engine.turn}", header]
    for b in engine.biomes:
        lines.append(
            f"{b.name:<12} {b.harvest_strategy.value:<13} {b.lushness:>8.2f} "
            f"{b.base_lushness:>6.2f} {b.lushness_boost:>6.2f} "
            f"{b.resource_total:>9.1f} {b.total_harvested:>9.1f} "
            f"{b.egg_count:>5d}",
        )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, build the engine, run and report."""
    parser = argparse.ArgumentParser(
        prog="biomesim",
        description="biomesim - per-biome resource and egg ecology simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "-t",
        "--turns",
        type=int,
        default=50,
        help="Number of turns to simulate (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the config RNG seed",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=0,
        help="Print a summary every N turns (default: only at the end)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = EcosystemConfig.from_yaml(args.config)
    if args.seed is not None:
        config.seed = args.seed
    engine = build_engine(config)
    logger.info(
        "Running %d biomes for %d turns (seed %d)",
        len(engine.biomes),
        args.turns,
        config.seed,
    )

    for _ in range(args.turns):
        engine.step()
        if args.report_every and engine.turn % args.report_every == 0:
            print(format_summary(engine))
            print()

    if not args.report_every or engine.turn % args.report_every != 0:
        print(format_summary(engine))


if __name__ == "__main__":
    main()
