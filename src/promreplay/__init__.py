"""
promreplay - Configurable replayer of synthetic Prometheus gauges.

Reads a declarative YAML description of gauge families, drifts their values
over time (per-tick deltas, time-window overrides) and serves them on /metrics.

Examples:
    >>> from promreplay import ReplayEngine, load_config
    >>> engine = ReplayEngine(load_config("replay.yaml"))
    >>> engine.start()  # blocks, serving http://0.0.0.0:<port>/metrics
"""

__version__ = "0.1.0"

from promreplay.config import load_config, parse_config
from promreplay.engine import ReplayEngine
from promreplay.exceptions import ConfigError, RegistrationError, ReplayError
from promreplay.models import MetricFamily, OverrideRule, ReplayConfig, Series

__all__ = [
    "ConfigError",
    "MetricFamily",
    "OverrideRule",
    "RegistrationError",
    "ReplayConfig",
    "ReplayEngine",
    "ReplayError",
    "Series",
    "load_config",
    "parse_config",
]
