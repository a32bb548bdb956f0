"""Tests for the z-score tables and lookups."""

import pytest

from clustermde.design import (
    Z_ALPHA_FALLBACK,
    Z_BETA_FALLBACK,
    AlphaLevel,
    PowerLevel,
    exact_z_alpha,
    exact_z_beta,
    z_alpha,
    z_beta,
)


class TestZAlpha:
    """Two-sided critical values."""

    @pytest.mark.parametrize("alpha, expected", [
        (0.05, 1.96),
        (0.025, 2.24),
        (0.01, 2.58),
    ])
    def test_tabulated_floats(self, alpha, expected):
        assert z_alpha(alpha) == expected

    @pytest.mark.parametrize("level, expected", [
        (AlphaLevel.A050, 1.96),
        (AlphaLevel.A025, 2.24),
        (AlphaLevel.A010, 2.58),
    ])
    def test_tabulated_enum(self, level, expected):
        assert z_alpha(level) == expected
        assert level.z == expected

    def test_float_drift_matches_level(self):
        """A value off by representation error still finds its level."""
        assert z_alpha(0.05 + 1e-15) == 1.96

    @pytest.mark.parametrize("alpha", [0.1, 0.03, 0.001, 0.5])
    def test_non_enumerated_falls_back(self, alpha):
        """Silent fallback to the 0.025 entry; kept deliberately visible here."""
        assert z_alpha(alpha) == Z_ALPHA_FALLBACK == 2.24


class TestZBeta:
    """Power quantiles."""

    @pytest.mark.parametrize("power, expected", [
        (0.70, 0.524),
        (0.75, 0.674),
        (0.80, 0.842),
        (0.85, 1.036),
        (0.90, 1.282),
    ])
    def test_tabulated_floats(self, power, expected):
        assert z_beta(power) == expected

    def test_tabulated_enum(self):
        for level in PowerLevel:
            assert z_beta(level) == level.z

    @pytest.mark.parametrize("power", [0.95, 0.5, 0.81])
    def test_non_enumerated_falls_back(self, power):
        """Silent fallback to the 0.80 entry."""
        assert z_beta(power) == Z_BETA_FALLBACK == 0.842


class TestExactQuantiles:
    """Exact normal quantiles used for cross-checking the tables."""

    def test_exact_alpha_05(self):
        assert exact_z_alpha(0.05) == pytest.approx(1.959964, abs=1e-6)

    def test_exact_power_80(self):
        assert exact_z_beta(0.80) == pytest.approx(0.841621, abs=1e-6)

    def test_tables_close_to_exact(self):
        """Every tabulated value is within 0.01 of its exact quantile."""
        for level in AlphaLevel:
            assert level.z == pytest.approx(exact_z_alpha(level), abs=0.01)
        for level in PowerLevel:
            assert level.z == pytest.approx(exact_z_beta(level), abs=0.01)
