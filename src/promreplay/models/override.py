"""
Override rules and the gauge effects they produce.

An override is "when the period is active, set the gauge to X" or
"when the period is active, add D to the gauge". The two cases are an explicit
tagged variant: a config entry must name exactly one of ``value`` or ``delta``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from promreplay.timeinterval import TimeInterval

__all__ = ["AddDelta", "Effect", "GaugeCell", "OverrideRule", "SetValue", "evaluate"]


class GaugeCell(Protocol):
    """The part of a prometheus_client gauge child that effects touch."""

    def set(self, value: float) -> None: ...

    def inc(self, amount: float = 1) -> None: ...


class SetValue(BaseModel):
    """Replace the gauge's current value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["set"] = "set"
    value: float

    def apply(self, gauge: GaugeCell) -> None:
        gauge.set(self.value)

    def __str__(self) -> str:
        return f"set to {self.value:g}"


class AddDelta(BaseModel):
    """Add a (possibly negative) delta to the gauge's current value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["add"] = "add"
    delta: float

    def apply(self, gauge: GaugeCell) -> None:
        gauge.inc(self.delta)

    def __str__(self) -> str:
        return f"add {self.delta:+g}"


Effect = SetValue | AddDelta


class OverrideRule(BaseModel):
    """A conditional gauge adjustment guarded by a time interval.

    In YAML the action is written as a sibling key of ``period``::

        - period: {weekdays: ["saturday", "sunday"]}
          value: 0

    Writing both ``value`` and ``delta``, or neither, is rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    period: TimeInterval = Field(
        default_factory=TimeInterval,
        validation_alias=AliasChoices("period", "window"),
        description="When the rule is eligible; empty means always",
    )
    action: SetValue | AddDelta = Field(..., discriminator="kind")

    @model_validator(mode="before")
    @classmethod
    def _build_action(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "action" in data:
            # Only already-built effects; config files name value or delta instead
            if isinstance(data["action"], (SetValue, AddDelta)) and "value" not in data and "delta" not in data:
                return data
            raise ValueError("override must set exactly one of 'value' or 'delta'; 'action' is not a config key")

        data = dict(data)
        has_value = data.get("value") is not None
        has_delta = data.get("delta") is not None
        value = data.pop("value", None)
        delta = data.pop("delta", None)

        if has_value and has_delta:
            raise ValueError(f"override sets both value ({value}) and delta ({delta}); exactly one is allowed")
        if not has_value and not has_delta:
            raise ValueError("override must set exactly one of 'value' or 'delta'")

        data["action"] = {"kind": "set", "value": value} if has_value else {"kind": "add", "delta": delta}
        return data


def evaluate(rule: OverrideRule, now: datetime) -> Effect | None:
    """Return the rule's effect if ``now`` falls inside its period.

    Args:
        rule: Override rule to evaluate
        now: Instant to test against the rule's period

    Returns:
        The rule's action, or None when the period does not contain ``now``.
    """
    if rule.period.contains(now):
        return rule.action
    return None
