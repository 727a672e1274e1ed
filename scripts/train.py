"""Command-line interface for launching a factorisation training run."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from loguru import logger

from latentmf.core import MatrixFactorizationError
from latentmf.pipelines import run_training
from latentmf.utils import configure_logging, load_config, set_by_dotted_path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/default.yaml"),
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a config value by dotted key, e.g. training.learn_rate=0.005.",
    )
    parser.add_argument("--log-level", default="INFO", help="loguru level for stderr output.")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    configure_logging(args.log_level)
    config = load_config(args.config)
    for override in args.overrides:
        key, sep, value = override.partition("=")
        if not sep:
            logger.error("Override '{}' is not of the form KEY=VALUE", override)
            return 2
        set_by_dotted_path(config, key.strip(), value.strip())

    logger.info("Starting training with config at {}", args.config)
    try:
        run_training(config)
    except MatrixFactorizationError as exc:
        logger.error("Training failed: {}", exc.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
