"""
promreplay data models package.

This package contains the replay config tree (families, series, override rules)
and the update logic bound to it.
"""

from promreplay.models.config import ReplayConfig
from promreplay.models.family import MetricFamily, RegisteredFamily, register
from promreplay.models.override import AddDelta, Effect, OverrideRule, SetValue, evaluate
from promreplay.models.series import Series, tick

__all__ = [
    "AddDelta",
    "Effect",
    "MetricFamily",
    "OverrideRule",
    "RegisteredFamily",
    "ReplayConfig",
    "Series",
    "SetValue",
    "evaluate",
    "register",
    "tick",
]
