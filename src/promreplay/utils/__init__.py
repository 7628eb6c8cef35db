"""Utility modules for promreplay."""

from promreplay.utils.duration import parse_duration
from promreplay.utils.validators import validate_label_name, validate_metric_name

__all__ = [
    "parse_duration",
    "validate_label_name",
    "validate_metric_name",
]
