"""Cross-check of the scalar engine against the vectorised re-expression."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from clustermde.design import (
    Z_ALPHA_TABLE,
    Z_BETA_TABLE,
    TrialDesignParameters,
    exact_z_alpha,
    exact_z_beta,
)
from clustermde.mde._batch import batch_evaluate
from clustermde.mde._curve import DEFAULT_CURVE_STEP, DEFAULT_N_MAX, DEFAULT_N_MIN, generate_curve

# batch field -> CurvePoint accessor
_COMPARED_FIELDS = {
    "severity_mde": lambda p: p.severity.mde,
    "severity_baseline_mde": lambda p: p.severity.baseline_mde,
    "severity_effect_size": lambda p: p.severity.effect_size,
    "n_completers": lambda p: p.severity.n_completers,
    "retention_mde": lambda p: p.retention.mde_percentage_points,
    "retention_binary_mde": lambda p: p.retention.binary_mde_percentage_points,
    "retention_treatment_rate": lambda p: p.retention.treatment_rate_pct,
    "icc_n_effective": lambda p: p.icc_validation.n_effective,
    "icc_se": lambda p: p.icc_validation.se_icc,
    "icc_lower_bound": lambda p: p.icc_validation.lower_bound,
}


@dataclass(frozen=True)
class CrossCheckResult:
    """Agreement between the scalar and vectorised engines.

    ``max_abs_diff`` maps each compared field to the largest absolute
    difference over the grid (0.0 where both are the same infinity).
    ``z_table_deviation`` maps each tabulated level to
    ``tabulated - exact`` normal quantile.
    """

    max_abs_diff: dict[str, float]
    decisions_agree: bool
    z_table_deviation: dict[str, float]
    n_points: int
    rtol: float
    passed: bool

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            "Engine cross-check",
            "=" * 40,
            f"Grid points      : {self.n_points}",
            f"Decisions agree  : {self.decisions_agree}",
        ]
        for name, diff in self.max_abs_diff.items():
            lines.append(f"  {name:<24s} max |diff| = {diff:.3g}")
        lines.append("Tabulated z minus exact quantile:")
        for name, dev in self.z_table_deviation.items():
            lines.append(f"  {name:<24s} {dev:+.4f}")
        lines.append(f"Result           : {'PASS' if self.passed else 'FAIL'}")
        return "\n".join(lines)


def z_table_deviation() -> dict[str, float]:
    """Tabulated z value minus the exact normal quantile, per level."""
    deviation = {}
    for level, z in Z_ALPHA_TABLE.items():
        deviation[f"alpha={level.value:g}"] = z - exact_z_alpha(level)
    for level, z in Z_BETA_TABLE.items():
        deviation[f"power={level.value:g}"] = z - exact_z_beta(level)
    return deviation


def cross_check(
    params: TrialDesignParameters,
    n_min: int = DEFAULT_N_MIN,
    n_max: int = DEFAULT_N_MAX,
    step: int = DEFAULT_CURVE_STEP,
    rtol: float = 1e-12,
) -> CrossCheckResult:
    """Recompute the curve with :func:`batch_evaluate` and compare field by field.

    Passes when every compared field agrees within *rtol* (infinities must
    match exactly) and every ``can_rule_out_poor`` decision agrees.
    """
    if rtol < 0:
        raise ValueError(f"rtol must be >= 0, got {rtol}")

    points = list(generate_curve(params, n_min, n_max, step))
    batch = batch_evaluate(params, [p.total_n for p in points])

    max_abs_diff: dict[str, float] = {}
    passed = True
    for name, accessor in _COMPARED_FIELDS.items():
        scalar = np.array([accessor(p) for p in points], dtype=float)
        vector = getattr(batch, name)
        both_inf = np.isinf(scalar) & np.isinf(vector) & (np.sign(scalar) == np.sign(vector))
        with np.errstate(invalid="ignore"):
            diff = np.where(both_inf, 0.0, np.abs(scalar - vector))
        max_abs_diff[name] = float(np.nanmax(diff))
        if not np.allclose(scalar, vector, rtol=rtol, atol=0.0, equal_nan=True):
            passed = False

    scalar_decisions = np.array([p.icc_validation.can_rule_out_poor for p in points])
    decisions_agree = bool(np.array_equal(scalar_decisions, batch.icc_can_rule_out_poor))

    return CrossCheckResult(
        max_abs_diff=max_abs_diff,
        decisions_agree=decisions_agree,
        z_table_deviation=z_table_deviation(),
        n_points=len(points),
        rtol=rtol,
        passed=passed and decisions_agree,
    )
