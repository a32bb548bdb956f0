"""Trial design configuration and its validation."""

from __future__ import annotations

import dataclasses
import math
import numbers
from dataclasses import dataclass
from enum import Enum

from clustermde.design._common import (
    IPCW_VIF,
    REPEATED_MEASURES_GAIN,
    SEVERITY_SD,
    AlphaLevel,
    PowerLevel,
    as_alpha_level,
    as_power_level,
)


class DesignValidationError(ValueError):
    """A design parameter lies outside its valid domain.

    ``field`` names the offending :class:`TrialDesignParameters` field.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class MeasurementModel(str, Enum):
    """Scoring model for the severity instrument.

    ``RASCH`` replaces the sum score with a more reliable Rasch measure.
    ``MFRM`` (many-facet Rasch) applies the Rasch upgrade and additionally
    removes rater variance.
    """

    SUM_SCORE = "sum"
    RASCH = "rasch"
    MFRM = "mfrm"

    @property
    def upgrades_reliability(self) -> bool:
        return self in (MeasurementModel.RASCH, MeasurementModel.MFRM)

    @property
    def removes_rater_variance(self) -> bool:
        return self is MeasurementModel.MFRM


# ---------------------------------------------------------------------------
# Field checks
# ---------------------------------------------------------------------------

def _check_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise DesignValidationError(name, f"must be a number, got {value!r}")
    if not math.isfinite(value):
        raise DesignValidationError(name, f"must be finite, got {value}")


def _check_open_unit(name: str, value: float) -> None:
    _check_finite(name, value)
    if not (0.0 < value < 1.0):
        raise DesignValidationError(name, f"must be in (0, 1), got {value}")


def _check_half_open_unit(name: str, value: float) -> None:
    _check_finite(name, value)
    if not (0.0 <= value < 1.0):
        raise DesignValidationError(name, f"must be in [0, 1), got {value}")


def _check_positive(name: str, value: float) -> None:
    _check_finite(name, value)
    if value <= 0.0:
        raise DesignValidationError(name, f"must be > 0, got {value}")


def _check_count(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise DesignValidationError(name, f"must be an integer, got {value!r}")
    if value < 1:
        raise DesignValidationError(name, f"must be >= 1, got {value}")


_OPEN_UNIT = (
    "icc_severity",
    "icc_retention",
    "sum_score_reliability",
    "alternative_reliability",
    "target_icc",
    "expected_icc",
    "icc_cluster_correlation",
)
_HALF_OPEN_UNIT = (
    "control_attrition",
    "r2_severity",
    "r2_retention",
    "rater_variance_proportion",
)
_POSITIVE = (
    "treatment_ratio",
    "severity_sd",
    "ipcw_vif",
    "repeated_measures_gain",
)
_COUNTS = ("patients_per_cluster", "n_followups")


# ---------------------------------------------------------------------------
# Configuration object
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TrialDesignParameters:
    """Design parameters for a three-outcome cluster randomized trial.

    Immutable; use :meth:`replace` to derive a changed configuration.
    ``power`` and ``alpha`` accept floats, which are coerced to the
    matching :class:`PowerLevel` / :class:`AlphaLevel`.

    Raises
    ------
    DesignValidationError
        If any field lies outside its valid domain.
    """

    power: PowerLevel = PowerLevel.P80
    alpha: AlphaLevel = AlphaLevel.A025
    patients_per_cluster: int = 10
    cluster_size_cv: float = 0.0
    treatment_ratio: float = 3.0
    control_attrition: float = 0.30

    # Severity (HAM-D) outcome
    icc_severity: float = 0.04
    r2_severity: float = 0.35
    severity_sd: float = SEVERITY_SD
    ipcw_vif: float = IPCW_VIF
    repeated_measures_gain: float = REPEATED_MEASURES_GAIN

    # Measurement model for the severity instrument
    measurement_model: MeasurementModel = MeasurementModel.SUM_SCORE
    sum_score_reliability: float = 0.86
    alternative_reliability: float = 0.91
    rater_variance_proportion: float = 0.07

    # Retention outcome
    icc_retention: float = 0.05
    r2_retention: float = 0.05
    survival_efficiency: float = 4.0

    # ICC validation (treatment arm only)
    target_icc: float = 0.75
    expected_icc: float = 0.80
    icc_cluster_correlation: float = 0.03
    n_followups: int = 4

    def __post_init__(self) -> None:
        power = as_power_level(self.power)
        if power is None:
            raise DesignValidationError(
                "power",
                f"must be one of {[p.value for p in PowerLevel]}, got {self.power!r}",
            )
        alpha = as_alpha_level(self.alpha)
        if alpha is None:
            raise DesignValidationError(
                "alpha",
                f"must be one of {[a.value for a in AlphaLevel]}, got {self.alpha!r}",
            )
        object.__setattr__(self, "power", power)
        object.__setattr__(self, "alpha", alpha)

        try:
            model = MeasurementModel(self.measurement_model)
        except ValueError:
            raise DesignValidationError(
                "measurement_model",
                f"must be one of {[m.value for m in MeasurementModel]}, "
                f"got {self.measurement_model!r}",
            ) from None
        object.__setattr__(self, "measurement_model", model)

        for name in _COUNTS:
            _check_count(name, getattr(self, name))
        for name in _OPEN_UNIT:
            _check_open_unit(name, getattr(self, name))
        for name in _HALF_OPEN_UNIT:
            _check_half_open_unit(name, getattr(self, name))
        for name in _POSITIVE:
            _check_positive(name, getattr(self, name))

        _check_finite("cluster_size_cv", self.cluster_size_cv)
        if self.cluster_size_cv < 0.0:
            raise DesignValidationError(
                "cluster_size_cv", f"must be >= 0, got {self.cluster_size_cv}"
            )
        _check_finite("survival_efficiency", self.survival_efficiency)
        if self.survival_efficiency < 1.0:
            raise DesignValidationError(
                "survival_efficiency", f"must be >= 1, got {self.survival_efficiency}"
            )
        if (
            model.upgrades_reliability
            and self.alternative_reliability < self.sum_score_reliability
        ):
            raise DesignValidationError(
                "alternative_reliability",
                f"must be >= sum_score_reliability ({self.sum_score_reliability}) "
                f"for the {model.value!r} model, got {self.alternative_reliability}",
            )

    @property
    def z_alpha(self) -> float:
        """Tabulated two-sided critical value for ``alpha``."""
        return self.alpha.z

    @property
    def z_beta(self) -> float:
        """Tabulated z for ``power``."""
        return self.power.z

    @property
    def treatment_proportion(self) -> float:
        """Share of clusters allocated to treatment, r / (r + 1)."""
        return self.treatment_ratio / (self.treatment_ratio + 1.0)

    def replace(self, **changes) -> TrialDesignParameters:
        """Return a validated copy with the given fields changed."""
        return dataclasses.replace(self, **changes)
