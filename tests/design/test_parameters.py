"""Tests for TrialDesignParameters construction and validation."""

import dataclasses

import numpy as np
import pytest

from clustermde.design import (
    AlphaLevel,
    DesignValidationError,
    MeasurementModel,
    PowerLevel,
    TrialDesignParameters,
)


class TestDefaults:
    """Default configuration."""

    def test_default_levels(self):
        p = TrialDesignParameters()
        assert p.power is PowerLevel.P80
        assert p.alpha is AlphaLevel.A025
        assert p.z_alpha == 2.24
        assert p.z_beta == 0.842

    def test_fixed_constants(self):
        p = TrialDesignParameters()
        assert p.severity_sd == 7.0
        assert p.ipcw_vif == 1.2
        assert p.repeated_measures_gain == 1.43

    def test_treatment_proportion(self):
        assert TrialDesignParameters(treatment_ratio=3).treatment_proportion == 0.75
        assert TrialDesignParameters(treatment_ratio=1).treatment_proportion == 0.5

    def test_frozen(self):
        p = TrialDesignParameters()
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.power = PowerLevel.P90


class TestCoercion:
    """Floats and strings are coerced to their enumerations."""

    def test_float_power_and_alpha(self):
        p = TrialDesignParameters(power=0.9, alpha=0.05)
        assert p.power is PowerLevel.P90
        assert p.alpha is AlphaLevel.A050

    def test_string_measurement_model(self):
        p = TrialDesignParameters(measurement_model="mfrm")
        assert p.measurement_model is MeasurementModel.MFRM

    def test_numpy_scalars_accepted(self):
        p = TrialDesignParameters(patients_per_cluster=np.int64(12), icc_severity=np.float64(0.05))
        assert p.patients_per_cluster == 12

    def test_replace_validates(self):
        p = TrialDesignParameters().replace(patients_per_cluster=15)
        assert p.patients_per_cluster == 15
        with pytest.raises(DesignValidationError):
            p.replace(control_attrition=1.0)


class TestValidation:
    """Out-of-domain fields are rejected with the field named."""

    @pytest.mark.parametrize("field, value", [
        ("power", 0.95),
        ("alpha", 0.1),
        ("measurement_model", "irt"),
        ("patients_per_cluster", 0),
        ("patients_per_cluster", 2.5),
        ("n_followups", 0),
        ("treatment_ratio", 0.0),
        ("treatment_ratio", -1.0),
        ("control_attrition", 1.0),
        ("control_attrition", -0.1),
        ("icc_severity", 0.0),
        ("icc_retention", 1.0),
        ("r2_severity", 1.0),
        ("r2_retention", -0.01),
        ("sum_score_reliability", 1.0),
        ("alternative_reliability", 0.0),
        ("rater_variance_proportion", 1.0),
        ("survival_efficiency", 0.5),
        ("cluster_size_cv", -0.2),
        ("target_icc", 1.2),
        ("expected_icc", 0.0),
        ("icc_cluster_correlation", 1.0),
        ("severity_sd", 0.0),
        ("ipcw_vif", float("nan")),
        ("repeated_measures_gain", float("inf")),
    ])
    def test_invalid_field(self, field, value):
        with pytest.raises(DesignValidationError, match=field) as info:
            TrialDesignParameters(**{field: value})
        assert info.value.field == field

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            TrialDesignParameters(icc_severity=2.0)

    def test_bool_rejected_as_count(self):
        with pytest.raises(DesignValidationError, match="patients_per_cluster"):
            TrialDesignParameters(patients_per_cluster=True)

    @pytest.mark.parametrize("model", ["rasch", "mfrm"])
    def test_alternative_below_sum_score_rejected(self, model):
        with pytest.raises(DesignValidationError, match="sum_score_reliability") as info:
            TrialDesignParameters(
                measurement_model=model, sum_score_reliability=0.9, alternative_reliability=0.5,
            )
        assert info.value.field == "alternative_reliability"

    def test_alternative_below_sum_score_allowed_for_sum_model(self):
        p = TrialDesignParameters(sum_score_reliability=0.9, alternative_reliability=0.5)
        assert p.alternative_reliability == 0.5

    def test_expected_below_target_allowed(self):
        """No ordering constraint between expected and target ICC."""
        p = TrialDesignParameters(expected_icc=0.6, target_icc=0.75)
        assert p.expected_icc < p.target_icc

    def test_boundary_values_allowed(self):
        p = TrialDesignParameters(
            control_attrition=0.0, r2_severity=0.0, rater_variance_proportion=0.0,
            survival_efficiency=1.0, patients_per_cluster=1, n_followups=1,
        )
        assert p.survival_efficiency == 1.0
