"""
Replay series model and the per-tick update rule.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from promreplay.logger import logger
from promreplay.models.override import AddDelta, Effect, GaugeCell, OverrideRule, evaluate
from promreplay.utils.duration import parse_duration

__all__ = ["Series", "tick"]


class Series(BaseModel):
    """One schedulable gauge cell within a metric family."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    initial: float = Field(default=0, description="Value written once at registration")
    delta: float = Field(default=0, description="Per-tick delta when no override matches")
    interval: float = Field(..., description="Tick period in seconds")
    labels: dict[str, str] = Field(default_factory=dict)
    overrides: list[OverrideRule] = Field(default_factory=list, description="Evaluated in order, first match wins")

    @field_validator("interval", mode="before")
    @classmethod
    def _parse_interval(cls, value: Any) -> float:
        seconds = parse_duration(value)
        if seconds <= 0:
            raise ValueError("interval must be greater than zero")
        return seconds

    @field_validator("labels", mode="before")
    @classmethod
    def _stringify_labels(cls, value: Any) -> Any:
        # YAML turns `env: 1` or `canary: true` into non-strings; `env: null` is an empty value
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    def describe(self, family_name: str = "") -> str:
        """Human readable identity, e.g. ``requests_total{env="prod"}``."""
        labels = ",".join(f'{k}="{v}"' for k, v in sorted(self.labels.items()))
        return f"{family_name}{{{labels}}}"


def tick(series: Series, gauge: GaugeCell, now: datetime, family_name: str = "") -> Effect:
    """Apply one scheduled update to a series' gauge.

    The first override whose period contains ``now`` wins and later rules are
    not consulted. Without a match the series' default delta is added.
    Exactly one gauge mutation happens per call.

    Args:
        series: Series being updated
        gauge: The series' gauge child
        now: Instant used to evaluate override periods
        family_name: Metric family name, used for logging only

    Returns:
        The effect that was applied.
    """
    effect: Effect | None = None
    for rule in series.overrides:
        effect = evaluate(rule, now)
        if effect is not None:
            break

    if effect is None:
        effect = AddDelta(delta=series.delta)

    effect.apply(gauge)
    logger.info(f"update metrics {series.describe(family_name)}: {effect}")
    return effect
