"""
Metric family model and its registration with a Prometheus registry.
"""

from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Gauge
from pydantic import BaseModel, ConfigDict, Field

from promreplay.exceptions import RegistrationError
from promreplay.logger import logger
from promreplay.models.override import GaugeCell
from promreplay.models.series import Series
from promreplay.utils.validators import validate_label_name, validate_metric_name

__all__ = ["MetricFamily", "RegisteredFamily", "register"]


class MetricFamily(BaseModel):
    """A named gauge whose series are distinguished by label values."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Exported metric name")
    help: str = Field(default="", description="HELP text exposed with the metric")
    series: list[Series] = Field(default_factory=list)

    @property
    def label_names(self) -> tuple[str, ...]:
        """Union of label names across all series, sorted."""
        names: set[str] = set()
        for s in self.series:
            names.update(s.labels)
        return tuple(sorted(names))

    def label_values(self, series: Series) -> tuple[str, ...]:
        """Materialize a series' label values against the family's label names.

        Label names the series does not set resolve to an empty string.
        """
        return tuple(series.labels.get(name, "") for name in self.label_names)


@dataclass(frozen=True)
class RegisteredFamily:
    """A family whose gauge has been published, with one cell per series."""

    family: MetricFamily
    gauge: Gauge
    cells: list[tuple[Series, GaugeCell]]


def register(family: MetricFamily, registry: CollectorRegistry) -> RegisteredFamily:
    """Create the family's gauge, seed every series and publish it.

    The gauge is built unregistered, each series' cell is set to its initial
    value, and only then is the gauge added to ``registry``. No scheduler
    threads are started here.

    Args:
        family: Metric family to register
        registry: Registry the gauge is published to

    Returns:
        RegisteredFamily holding the gauge and one cell per series, in config order.

    Raises:
        RegistrationError: If the metric or a label name is invalid, the name
            collides with an existing metric, or two series resolve to the
            same label values.
    """
    label_names = family.label_names

    try:
        validate_metric_name(family.name)
        for label in label_names:
            validate_label_name(label)
        gauge = Gauge(family.name, family.help, labelnames=label_names, registry=None)
    except ValueError as e:
        raise RegistrationError(f"metric {family.name!r}: {e}") from e

    cells: list[tuple[Series, GaugeCell]] = []
    seen: dict[tuple[str, ...], int] = {}
    for index, s in enumerate(family.series):
        values = family.label_values(s)
        if values in seen:
            raise RegistrationError(
                f"metric {family.name!r}: series #{index} {s.describe(family.name)} has the same label values as series #{seen[values]}"
            )
        seen[values] = index

        cell = gauge.labels(*values) if label_names else gauge
        cell.set(s.initial)
        cells.append((s, cell))

    try:
        registry.register(gauge)
    except ValueError as e:
        raise RegistrationError(f"metric {family.name!r}: {e}") from e

    logger.debug(f"registered metric {family.name} with labels {list(label_names)} and {len(cells)} series")
    return RegisteredFamily(family=family, gauge=gauge, cells=cells)
