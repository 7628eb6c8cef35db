"""Tests for metric and label name validators."""

import pytest

from promreplay.utils.validators import validate_label_name, validate_metric_name


@pytest.mark.parametrize("name", ["up", "http_requests_total", "job:latency:p99", "_private", "A1"])
def test_validate_metric_name_valid(name):
    """Test that valid metric names pass validation."""
    validate_metric_name(name)


@pytest.mark.parametrize("name", ["", "1up", "http-requests", "latency.p99", "with space"])
def test_validate_metric_name_invalid(name):
    """Test that invalid metric names raise ValueError."""
    with pytest.raises(ValueError, match="Invalid metric name"):
        validate_metric_name(name)


@pytest.mark.parametrize("name", ["env", "region_1", "_x"])
def test_validate_label_name_valid(name):
    """Test that valid label names pass validation."""
    validate_label_name(name)


@pytest.mark.parametrize("name", ["", "1env", "env-name", "job:name"])
def test_validate_label_name_invalid(name):
    """Test that invalid label names raise ValueError."""
    with pytest.raises(ValueError, match="Invalid label name"):
        validate_label_name(name)


def test_validate_label_name_reserved():
    """Test that names starting with '__' are reserved."""
    with pytest.raises(ValueError, match="reserved"):
        validate_label_name("__name__")
