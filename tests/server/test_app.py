"""
Unit tests for the scrape endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CONTENT_TYPE_LATEST

from promreplay.models import MetricFamily, register
from promreplay.server import create_app


@pytest.fixture
def test_client(registry):
    """Client for an app bound to the test registry."""
    return TestClient(create_app(registry))


@pytest.fixture
def requests_family(registry):
    family = MetricFamily.model_validate(
        {
            "name": "requests_total",
            "help": "Synthetic request count",
            "series": [
                {"interval": "1s", "initial": 3, "labels": {"env": "prod"}},
                {"interval": "1s", "initial": 7, "labels": {"env": "dev"}},
            ],
        }
    )
    return register(family, registry)


class TestMetricsEndpoint:
    """Tests for /metrics."""

    def test_exposition_format(self, test_client, requests_family):
        """Test that registered gauges are rendered as Prometheus text."""
        response = test_client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"] == CONTENT_TYPE_LATEST
        assert "# HELP requests_total Synthetic request count" in response.text
        assert "# TYPE requests_total gauge" in response.text
        assert 'requests_total{env="prod"} 3.0' in response.text
        assert 'requests_total{env="dev"} 7.0' in response.text

    def test_reflects_current_values(self, test_client, requests_family):
        """Test that each scrape reads the live gauge values."""
        _, cell = requests_family.cells[0]
        cell.set(42)

        response = test_client.get("/metrics")

        assert 'requests_total{env="prod"} 42.0' in response.text

    def test_empty_registry(self, test_client):
        """Test scraping before anything is registered."""
        response = test_client.get("/metrics")

        assert response.status_code == 200
        assert "requests_total" not in response.text


class TestHealthEndpoint:
    """Tests for /api/v1/health."""

    def test_health(self, test_client):
        """Test that the health check always reports ok."""
        response = test_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


def test_docs_disabled(test_client):
    """Test that interactive docs are not served."""
    assert test_client.get("/docs").status_code == 404
