#!/usr/bin/env python3
"""
promreplay CLI tool

Command line interface for validating a replay config and serving it
"""

from __future__ import annotations

import argparse
import sys

from pydantic import ValidationError

from promreplay.config import get_server_settings, load_config
from promreplay.engine import ReplayEngine
from promreplay.exceptions import ConfigError, RegistrationError
from promreplay.logger import logger, set_level
from promreplay.models.config import ReplayConfig


def describe_config(config: ReplayConfig) -> list[str]:
    """
    Summarize a replay config, one line per family

    Args:
        config: Validated replay config

    Returns:
        Human readable summary lines
    """
    lines = [f"port: {config.port}"]
    for family in config.families:
        labels = ", ".join(family.label_names) or "no labels"
        lines.append(f"{family.name}: {len(family.series)} series ({labels})")
    return lines


def run_check(config_path: str) -> None:
    """
    Validate a replay config without registering or serving anything

    Args:
        config_path: Path to the YAML config file
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    for line in describe_config(config):
        logger.info(line)
    logger.info(f"{config_path}: OK")


def run_replay(config_path: str, host: str | None = None, log_level: str | None = None) -> None:
    """
    Load a replay config, register its metrics and serve them

    Args:
        config_path: Path to the YAML config file
        host: Bind address (overrides PROMREPLAY_HOST)
        log_level: Log level (overrides PROMREPLAY_LOG_LEVEL)
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    settings = get_server_settings()
    overrides = {key: value for key, value in (("host", host), ("log_level", log_level)) if value is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)

    engine = ReplayEngine(config, settings=settings)
    try:
        engine.start()
    except RegistrationError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """
    CLI main entry point
    """
    parser = argparse.ArgumentParser(prog="promreplay", description="Replay synthetic gauges on a Prometheus scrape endpoint")
    parser.add_argument("config", help="Path to the YAML replay config")
    parser.add_argument("--host", default=None, help="Bind address (default: 0.0.0.0 or PROMREPLAY_HOST)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=None,
        help="Log level (default: INFO or PROMREPLAY_LOG_LEVEL)",
    )
    parser.add_argument("--check", action="store_true", help="Validate the config and exit without serving")

    args = parser.parse_args(argv)

    try:
        settings = get_server_settings()
    except ValidationError as e:
        problems = "; ".join(f"{err['loc'][0]}: {err['msg']}" for err in e.errors())
        logger.error(f"Error: invalid PROMREPLAY_* environment: {problems}")
        sys.exit(1)

    set_level(args.log_level or settings.log_level)

    if args.check:
        run_check(args.config)
    else:
        run_replay(args.config, host=args.host, log_level=args.log_level)


if __name__ == "__main__":
    main()
