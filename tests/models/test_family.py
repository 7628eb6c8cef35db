"""Tests for metric family registration."""

import pytest
from prometheus_client import CollectorRegistry, Gauge

from promreplay.exceptions import RegistrationError
from promreplay.models import MetricFamily, register


def make_family(name="requests_total", series=None, **fields) -> MetricFamily:
    return MetricFamily.model_validate({"name": name, "series": series or [], **fields})


class TestLabelNames:
    """Tests for the derived label schema."""

    def test_union_of_series_labels(self):
        """Test that label names are the union across series."""
        family = make_family(
            series=[
                {"interval": "1s", "labels": {"env": "prod"}},
                {"interval": "1s", "labels": {"env": "dev", "region": "us"}},
            ]
        )

        assert set(family.label_names) == {"env", "region"}

    def test_missing_labels_become_empty_strings(self):
        """Test label completeness for a series lacking a label."""
        family = make_family(
            series=[
                {"interval": "1s", "labels": {"env": "prod"}},
                {"interval": "1s", "labels": {"env": "dev", "region": "us"}},
            ]
        )

        prod, dev = family.series
        assert dict(zip(family.label_names, family.label_values(prod))) == {"env": "prod", "region": ""}
        assert dict(zip(family.label_names, family.label_values(dev))) == {"env": "dev", "region": "us"}

    def test_label_names_are_deterministic(self):
        """Test that the same config always yields the same schema."""
        data = {
            "name": "requests_total",
            "series": [
                {"interval": "1s", "labels": {"zone": "a", "env": "prod"}},
                {"interval": "1s", "labels": {"region": "us", "app": "api"}},
            ],
        }

        first = MetricFamily.model_validate(data).label_names
        second = MetricFamily.model_validate(data).label_names

        assert first == second == ("app", "env", "region", "zone")

    def test_no_labels(self):
        """Test a family whose series carry no labels."""
        assert make_family(series=[{"interval": "1s"}]).label_names == ()


class TestRegister:
    """Tests for register()."""

    def test_initial_values_are_set(self, registry):
        """Test that every series starts at its initial value."""
        family = make_family(
            series=[
                {"interval": "1s", "initial": 3, "labels": {"env": "prod"}},
                {"interval": "1s", "initial": 7, "labels": {"env": "dev", "region": "us"}},
            ]
        )

        register(family, registry)

        assert registry.get_sample_value("requests_total", {"env": "prod", "region": ""}) == 3
        assert registry.get_sample_value("requests_total", {"env": "dev", "region": "us"}) == 7

    def test_cells_follow_config_order(self, registry):
        """Test that each series gets its own cell, in order."""
        family = make_family(
            series=[
                {"interval": "1s", "labels": {"env": "a"}},
                {"interval": "1s", "labels": {"env": "b"}},
            ]
        )

        registered = register(family, registry)

        assert [s.labels["env"] for s, _ in registered.cells] == ["a", "b"]
        registered.cells[1][1].inc(4)
        assert registry.get_sample_value("requests_total", {"env": "a"}) == 0
        assert registry.get_sample_value("requests_total", {"env": "b"}) == 4

    def test_unlabelled_family_uses_gauge_itself(self, registry):
        """Test a single series without labels."""
        family = make_family(name="up", series=[{"interval": "1s", "initial": 1}])

        registered = register(family, registry)

        assert registered.cells[0][1] is registered.gauge
        assert registry.get_sample_value("up") == 1

    def test_help_text(self, registry):
        """Test that the HELP text is exposed."""
        register(make_family(name="up", help="Always one", series=[{"interval": "1s"}]), registry)

        metric = next(m for m in registry.collect() if m.name == "up")
        assert metric.documentation == "Always one"

    def test_duplicate_name_in_registry(self, registry):
        """Test that a name collision raises RegistrationError."""
        Gauge("requests_total", "already here", registry=registry)

        with pytest.raises(RegistrationError, match="requests_total"):
            register(make_family(series=[{"interval": "1s"}]), registry)

    def test_duplicate_family_registered_twice(self, registry):
        """Test registering the same family twice."""
        family = make_family(series=[{"interval": "1s"}])
        register(family, registry)

        with pytest.raises(RegistrationError):
            register(family, registry)

    def test_nothing_published_on_failure(self, registry):
        """Test that a failing family leaves the registry untouched."""
        family = make_family(
            series=[
                {"interval": "1s", "labels": {"env": "prod"}},
                {"interval": "1s", "labels": {"env": "prod"}},
            ]
        )

        with pytest.raises(RegistrationError, match="same label values"):
            register(family, registry)

        assert list(registry.collect()) == []

    def test_missing_label_collides_with_empty_value(self, registry):
        """Test that an omitted label clashes with an explicit empty one."""
        family = make_family(
            series=[
                {"interval": "1s", "labels": {"env": "prod"}},
                {"interval": "1s", "labels": {"env": "prod", "region": ""}},
            ]
        )

        with pytest.raises(RegistrationError, match="same label values"):
            register(family, registry)

    def test_two_unlabelled_series_rejected(self, registry):
        """Test that two series without labels cannot share the single cell."""
        family = make_family(name="up", series=[{"interval": "1s"}, {"interval": "2s"}])

        with pytest.raises(RegistrationError):
            register(family, registry)

    @pytest.mark.parametrize("name", ["", "http-requests", "9lives"])
    def test_invalid_metric_name(self, registry, name):
        """Test that invalid metric names raise RegistrationError."""
        with pytest.raises(RegistrationError, match="Invalid metric name"):
            register(make_family(name=name, series=[{"interval": "1s"}]), registry)

    def test_invalid_label_name(self, registry):
        """Test that invalid label names raise RegistrationError."""
        family = make_family(series=[{"interval": "1s", "labels": {"env-name": "prod"}}])

        with pytest.raises(RegistrationError, match="Invalid label name"):
            register(family, registry)

    def test_separate_registries_are_independent(self):
        """Test that the same family can be registered in two registries."""
        family = make_family(series=[{"interval": "1s", "initial": 2}])
        first, second = CollectorRegistry(), CollectorRegistry()

        register(family, first)
        register(family, second)

        assert first.get_sample_value("requests_total") == 2
        assert second.get_sample_value("requests_total") == 2
