"""Shared result types and allocation helpers for the MDE calculators."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass

from clustermde.design import TrialDesignParameters


@dataclass(frozen=True)
class SeverityResult:
    """Minimum detectable effect on the continuous severity score.

    ``mde`` and ``baseline_mde`` are in raw scale points; ``baseline_mde``
    ignores the measurement-model adjustment. ``variance_reduction_pct`` is
    the share of variance that adjustment removes, in [0, 100).
    """

    mde: float
    baseline_mde: float
    effect_size: float  # standardized mean difference, mde / SD
    n_clusters: int
    n_treatment_clusters: int
    n_control_clusters: int
    n_completers: float
    variance_reduction_pct: float

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            "Severity outcome MDE",
            "=" * 40,
            f"MDE           : {self.mde:.4f} points",
            f"Baseline MDE  : {self.baseline_mde:.4f} points",
            f"Effect size d : {self.effect_size:.4f}",
            f"Clusters      : {self.n_clusters} "
            f"({self.n_treatment_clusters} tx / {self.n_control_clusters} ctrl)",
            f"Completers    : {self.n_completers:.1f}",
            f"Variance red. : {self.variance_reduction_pct:.2f}%",
        ]
        return "\n".join(lines)


@dataclass(frozen=True)
class RetentionResult:
    """Minimum detectable difference in retention, in percentage points."""

    mde_percentage_points: float
    control_rate_pct: float
    treatment_rate_pct: float  # negative values flag an infeasible design
    n_clusters: int
    binary_mde_percentage_points: float  # without the survival-analysis gain

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            "Retention outcome MDE",
            "=" * 40,
            f"MDE           : {self.mde_percentage_points:.3f} pp",
            f"Binary MDE    : {self.binary_mde_percentage_points:.3f} pp",
            f"Control rate  : {self.control_rate_pct:.1f}%",
            f"Treatment rate: {self.treatment_rate_pct:.1f}%",
            f"Clusters      : {self.n_clusters}",
        ]
        return "\n".join(lines)


@dataclass(frozen=True)
class IccValidationResult:
    """Precision of the reliability (ICC) estimate in the treatment arm.

    Bounds form a 95% normal-approximation interval around the expected
    ICC and are reported as-is, even outside [0, 1].
    """

    n_treatment_patients: float
    n_treatment_clusters: int
    n_observations: float
    n_effective: float
    se_icc: float
    ci_half_width: float
    lower_bound: float
    upper_bound: float
    can_rule_out_poor: bool

    def summary(self) -> str:
        """Human-readable summary."""
        verdict = "yes" if self.can_rule_out_poor else "no"
        lines = [
            "ICC validation precision",
            "=" * 40,
            f"Tx patients   : {self.n_treatment_patients:.1f} "
            f"in {self.n_treatment_clusters} clusters",
            f"Observations  : {self.n_observations:.1f}",
            f"Effective n   : {self.n_effective:.1f}",
            f"SE(ICC)       : {self.se_icc:.4f}",
            f"95% CI        : [{self.lower_bound:.4f}, {self.upper_bound:.4f}]",
            f"Rule out poor : {verdict}",
        ]
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Shared validation and allocation
# ---------------------------------------------------------------------------

def _round_half_up(x: float) -> int:
    """Round to the nearest integer, halves away from -inf (2.5 -> 3)."""
    return int(math.floor(x + 0.5))


def _check_total_n(total_n: float) -> None:
    if isinstance(total_n, bool) or not isinstance(total_n, numbers.Real):
        raise ValueError(f"total_n must be a number, got {total_n!r}")
    if not math.isfinite(total_n) or total_n <= 0:
        raise ValueError(f"total_n must be a positive finite number, got {total_n}")


def _check_grid_int(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _allocate_clusters(
    params: TrialDesignParameters, total_n: float,
) -> tuple[int, int, int]:
    """Split total_n into (n_clusters, n_treatment_clusters, n_control_clusters).

    Cluster counts are rounded to the nearest integer; the treatment share
    is ``r / (r + 1)`` for allocation ratio ``r``.
    """
    _check_total_n(total_n)
    n_clusters = _round_half_up(total_n / params.patients_per_cluster)
    n_treatment = _round_half_up(n_clusters * params.treatment_proportion)
    return n_clusters, n_treatment, n_clusters - n_treatment


def _unequal_cluster_factor(params: TrialDesignParameters) -> float:
    """Design-effect inflation for variable cluster sizes, 1 + CV^2."""
    return 1.0 + params.cluster_size_cv ** 2


def _z_sum(params: TrialDesignParameters) -> float:
    return params.z_alpha + params.z_beta
