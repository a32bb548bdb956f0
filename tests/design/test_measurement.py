"""Tests for the measurement-model variance multiplier."""

import pytest

from clustermde.design import (
    DesignValidationError,
    MeasurementModel,
    TrialDesignParameters,
    measurement_variance_multiplier,
    variance_reduction_pct,
)


class TestMeasurementModel:
    """Composition flags of the tagged variant."""

    def test_flags(self):
        assert not MeasurementModel.SUM_SCORE.upgrades_reliability
        assert not MeasurementModel.SUM_SCORE.removes_rater_variance
        assert MeasurementModel.RASCH.upgrades_reliability
        assert not MeasurementModel.RASCH.removes_rater_variance
        assert MeasurementModel.MFRM.upgrades_reliability
        assert MeasurementModel.MFRM.removes_rater_variance


class TestMultiplier:
    """Variance multiplier values."""

    def test_sum_score_is_one(self):
        p = TrialDesignParameters(measurement_model="sum")
        assert measurement_variance_multiplier(p) == 1.0
        assert variance_reduction_pct(p) == 0.0

    def test_rasch_exact_formula(self):
        """Reproduce 1 - reduction * sum_error exactly."""
        p = TrialDesignParameters(
            measurement_model="rasch", sum_score_reliability=0.86, alternative_reliability=0.91,
        )
        sum_error = 1 - 0.86
        alt_error = 1 - 0.91
        reduction = (sum_error - alt_error) / sum_error
        assert measurement_variance_multiplier(p) == 1.0 * (1 - reduction * sum_error)
        assert measurement_variance_multiplier(p) == pytest.approx(0.95)

    def test_mfrm_composes(self):
        """MFRM = Rasch adjustment times (1 - rater variance)."""
        rasch = TrialDesignParameters(measurement_model="rasch")
        mfrm = TrialDesignParameters(measurement_model="mfrm", rater_variance_proportion=0.07)
        assert measurement_variance_multiplier(mfrm) == pytest.approx(
            measurement_variance_multiplier(rasch) * 0.93
        )
        assert variance_reduction_pct(mfrm) == pytest.approx(11.65)

    def test_rater_variance_ignored_for_rasch(self):
        a = TrialDesignParameters(measurement_model="rasch", rater_variance_proportion=0.0)
        b = TrialDesignParameters(measurement_model="rasch", rater_variance_proportion=0.5)
        assert measurement_variance_multiplier(a) == measurement_variance_multiplier(b)

    def test_reliabilities_ignored_for_sum_score(self):
        p = TrialDesignParameters(sum_score_reliability=0.5, alternative_reliability=0.99)
        assert measurement_variance_multiplier(p) == 1.0

    def test_in_unit_interval(self):
        for model in MeasurementModel:
            m = measurement_variance_multiplier(TrialDesignParameters(measurement_model=model))
            assert 0.0 < m <= 1.0

    def test_equal_reliabilities_leave_variance_unchanged(self):
        p = TrialDesignParameters(
            measurement_model="rasch", sum_score_reliability=0.9, alternative_reliability=0.9,
        )
        assert measurement_variance_multiplier(p) == pytest.approx(1.0)

    def test_lower_alternative_reliability_rejected(self):
        """The multiplier never exceeds 1 because validation stops it first."""
        with pytest.raises(DesignValidationError, match="alternative_reliability"):
            TrialDesignParameters(
                measurement_model="rasch", sum_score_reliability=0.9, alternative_reliability=0.5,
            )
