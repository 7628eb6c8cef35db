"""Name validators for promreplay.

Metric and label names are checked against the classic Prometheus naming rules
so a config renders the same way for every scraper, regardless of whether the
installed client library accepts UTF-8 names.
"""

import re

__all__ = ["validate_label_name", "validate_metric_name"]

_METRIC_NAME_PATTERN = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")

_LABEL_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def validate_metric_name(name: str) -> None:
    """Validate a metric name.

    Args:
        name: Metric name from the replay config

    Raises:
        ValueError: If name is empty or contains invalid characters

    Examples:
        >>> validate_metric_name("http_requests_total")  # OK
        >>> validate_metric_name("http-requests")  # Raises ValueError
    """
    if not name or not _METRIC_NAME_PATTERN.match(name):
        raise ValueError(f"Invalid metric name {name!r}. Names must match {_METRIC_NAME_PATTERN.pattern}.")


def validate_label_name(name: str) -> None:
    """Validate a label name.

    Names starting with ``__`` are reserved for internal use by Prometheus.

    Args:
        name: Label name from the replay config

    Raises:
        ValueError: If name is empty, reserved or contains invalid characters
    """
    if not name or not _LABEL_NAME_PATTERN.match(name):
        raise ValueError(f"Invalid label name {name!r}. Names must match {_LABEL_NAME_PATTERN.pattern}.")
    if name.startswith("__"):
        raise ValueError(f"Invalid label name {name!r}. Names starting with '__' are reserved.")
