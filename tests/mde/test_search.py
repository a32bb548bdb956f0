"""Tests for find_smallest_n_for_target."""

import pytest

from clustermde.design import TrialDesignParameters
from clustermde.mde import (
    ExceedsRange,
    calc_retention_mde,
    calc_severity_mde,
    find_smallest_n_for_target,
)


class TestScan:
    """Linear scan over the grid."""

    def test_two_point_severity(self):
        """Default design reaches a 2-point MDE at N = 600."""
        n = find_smallest_n_for_target(TrialDesignParameters(), 2.0, "severity")
        assert n == 600

    def test_smallest_qualifying(self):
        p = TrialDesignParameters()
        n = find_smallest_n_for_target(p, 7.0, "retention")
        assert isinstance(n, int)
        assert calc_retention_mde(p, n).mde_percentage_points <= 7.0
        for smaller in range(400, n, 10):
            assert calc_retention_mde(p, smaller).mde_percentage_points > 7.0

    def test_already_satisfied_returns_n_min(self):
        assert find_smallest_n_for_target(TrialDesignParameters(), 3.0, "severity") == 400

    def test_unreachable_returns_sentinel(self):
        n = find_smallest_n_for_target(TrialDesignParameters(), 0.5, "severity")
        assert n == ExceedsRange(1300)
        assert str(n) == ">1300"

    def test_sentinel_uses_n_max(self):
        n = find_smallest_n_for_target(TrialDesignParameters(), 0.5, "severity", n_max=2000)
        assert str(n) == ">2000"

    def test_custom_calculator_and_selector(self):
        p = TrialDesignParameters()
        n = find_smallest_n_for_target(
            p, 0.21, calc_severity_mde, lambda r: r.effect_size,
        )
        assert calc_severity_mde(p, n).effect_size <= 0.21
        assert calc_severity_mde(p, n - 10).effect_size > 0.21

    def test_field_name(self):
        p = TrialDesignParameters()
        n = find_smallest_n_for_target(p, 14.0, "retention", "binary_mde_percentage_points")
        assert calc_retention_mde(p, n).binary_mde_percentage_points <= 14.0

    def test_icc_half_width(self):
        p = TrialDesignParameters()
        n = find_smallest_n_for_target(p, 0.03, "icc")
        assert isinstance(n, int)


class TestBisect:
    """Bisection agrees with the linear scan for monotone fields."""

    @pytest.mark.parametrize("outcome, target", [
        ("severity", 1.4),
        ("severity", 2.0),
        ("severity", 3.0),
        ("severity", 0.5),
        ("retention", 7.0),
        ("retention", 5.5),
        ("icc", 0.03),
    ])
    def test_matches_scan(self, outcome, target):
        p = TrialDesignParameters(measurement_model="rasch")
        scan = find_smallest_n_for_target(p, target, outcome)
        bisect = find_smallest_n_for_target(p, target, outcome, method="bisect")
        assert scan == bisect


class TestSearchValidation:
    """Argument errors."""

    def test_unknown_outcome(self):
        with pytest.raises(ValueError, match="outcome"):
            find_smallest_n_for_target(TrialDesignParameters(), 2.0, "mortality")

    def test_callable_requires_field(self):
        with pytest.raises(ValueError, match="field"):
            find_smallest_n_for_target(TrialDesignParameters(), 2.0, calc_severity_mde)

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="method"):
            find_smallest_n_for_target(TrialDesignParameters(), 2.0, "severity", method="newton")

    def test_bad_step(self):
        with pytest.raises(ValueError, match="step"):
            find_smallest_n_for_target(TrialDesignParameters(), 2.0, "severity", step=0)

    @pytest.mark.parametrize("name, kwargs", [
        ("step", {"step": 10.0}),
        ("n_min", {"n_min": 400.0}),
        ("n_max", {"n_max": 1300.5}),
    ])
    def test_non_integer_grid(self, name, kwargs):
        with pytest.raises(ValueError, match=f"{name} must be an integer"):
            find_smallest_n_for_target(TrialDesignParameters(), 2.0, "severity", **kwargs)

    def test_bad_range(self):
        with pytest.raises(ValueError, match="range"):
            find_smallest_n_for_target(TrialDesignParameters(), 2.0, "severity", n_min=500, n_max=400)
