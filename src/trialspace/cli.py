"""Command line interface for sampling from experiment search spaces."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from .config import ExperimentConfig, load_config
from .distributions import StandardSpace
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sample configurations from a declarative search space."
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sample_parser = subparsers.add_parser(
        "sample",
        help="Print sampled configurations as JSON.",
    )
    sample_parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the experiment configuration YAML file.",
    )
    sample_parser.add_argument(
        "-n",
        "--samples",
        type=int,
        help="Number of configurations to draw (default: value from config).",
    )
    sample_parser.add_argument(
        "--seed",
        type=int,
        help="Override the seed from the configuration.",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate the configuration and print it as JSON.",
    )
    validate_parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the experiment configuration YAML file.",
    )
    return parser.parse_args(argv)


def sample_configurations(
    config: ExperimentConfig,
    *,
    samples: int | None = None,
    seed: int | None = None,
) -> list[Any]:
    """Draw configurations from ``config.search_space`` with one generator."""

    count = samples if samples is not None else config.samples
    if count <= 0:
        raise ConfigError("--samples must be a positive integer")
    resolved_seed = seed if seed is not None else config.seed
    rng = np.random.default_rng(resolved_seed)
    LOGGER.info("Sampling %d configuration(s) with seed %s", count, resolved_seed)
    return StandardSpace().sample(config.search_space, count, rng)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        config = load_config(args.config)
        if args.command == "validate":
            print(json.dumps(config.model_dump(mode="json"), indent=2, ensure_ascii=False))
            return
        drawn = sample_configurations(config, samples=args.samples, seed=args.seed)
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc
    except (KeyError, ValueError) as exc:
        raise SystemExit(f"Search space could not be sampled: {exc}") from exc

    print(json.dumps(drawn, indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    main()
