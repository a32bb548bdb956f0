"""Vectorised evaluation of all three outcome calculators.

Re-expresses the scalar formulas with NumPy array arithmetic over many
total sample sizes at once. Used to cross-check the scalar engine and for
dense curves where per-point dataclasses are not needed.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from clustermde.design import CI_Z, TrialDesignParameters, measurement_variance_multiplier


@dataclass(frozen=True)
class BatchMDEResult:
    """Outcome fields for each total sample size, shape (n_points,)."""

    total_n: NDArray[np.floating]
    n_clusters: NDArray[np.floating]
    n_treatment_clusters: NDArray[np.floating]
    n_control_clusters: NDArray[np.floating]
    severity_mde: NDArray[np.floating]
    severity_baseline_mde: NDArray[np.floating]
    severity_effect_size: NDArray[np.floating]
    n_completers: NDArray[np.floating]
    retention_mde: NDArray[np.floating]  # percentage points
    retention_binary_mde: NDArray[np.floating]
    retention_treatment_rate: NDArray[np.floating]
    icc_n_effective: NDArray[np.floating]
    icc_se: NDArray[np.floating]
    icc_ci_half_width: NDArray[np.floating]
    icc_lower_bound: NDArray[np.floating]
    icc_can_rule_out_poor: NDArray[np.bool_]
    n_points: int


def batch_evaluate(params: TrialDesignParameters, totals: ArrayLike) -> BatchMDEResult:
    """Evaluate severity, retention and ICC validation for every N in *totals*.

    Degenerate allocations yield ``inf`` exactly as the scalar calculators
    do.
    """
    n = np.asarray(totals, dtype=float)
    if n.ndim != 1:
        raise ValueError("totals must be 1-D")
    if n.size == 0:
        raise ValueError("totals must not be empty")
    if not np.all(np.isfinite(n)) or np.any(n <= 0):
        raise ValueError("totals must be positive finite numbers")

    m = float(params.patients_per_cluster)
    retained = 1.0 - params.control_attrition
    cv_factor = 1.0 + params.cluster_size_cv ** 2
    z = params.z_alpha + params.z_beta

    # Cluster allocation (round half up)
    n_clusters = np.floor(n / m + 0.5)
    n_tx_clusters = np.floor(n_clusters * params.treatment_proportion + 0.5)
    n_ctrl_clusters = n_clusters - n_tx_clusters
    both_arms = (n_tx_clusters > 0) & (n_ctrl_clusters > 0)

    with np.errstate(divide="ignore", invalid="ignore"):
        # --- Severity ---
        n_tx = n_tx_clusters * m * retained
        n_ctrl = n_ctrl_clusters * m * retained
        n_harmonic = np.where(both_arms, 2.0 * n_tx * n_ctrl / (n_tx + n_ctrl), 0.0)

        sigma2_adj = params.severity_sd ** 2 * (1.0 - params.r2_severity)
        deff_sev = (1.0 + (m * retained - 1.0) * params.icc_severity) * cv_factor
        base_var = sigma2_adj * deff_sev * params.ipcw_vif / params.repeated_measures_gain
        net_var = base_var * measurement_variance_multiplier(params)

        sev_baseline = np.where(both_arms, z * np.sqrt(2.0 * base_var / n_harmonic), np.inf)
        sev_mde = np.where(both_arms, z * np.sqrt(2.0 * net_var / n_harmonic), np.inf)

        # --- Retention ---
        p0 = params.control_attrition
        deff_ret = (1.0 + (m - 1.0) * params.icc_retention) * cv_factor
        base_se = np.where(
            both_arms,
            np.sqrt(p0 * (1.0 - p0) * (1.0 / (n_tx_clusters * m) + 1.0 / (n_ctrl_clusters * m))),
            np.inf,
        )
        adjusted_se = base_se * np.sqrt(deff_ret) * np.sqrt(1.0 - params.r2_retention)
        ret_mde = z * (adjusted_se / np.sqrt(params.survival_efficiency))

        # --- ICC validation ---
        n_obs = n_tx_clusters * m * retained * params.n_followups
        deff_icc = 1.0 + (n_obs / n_tx_clusters - 1.0) * params.icc_cluster_correlation
        n_eff = np.where(n_tx_clusters > 0, n_obs / deff_icc, 0.0)
        expected = params.expected_icc
        se_icc = np.where(
            n_eff > 1.0,
            (1.0 - expected * expected) * np.sqrt(2.0 / (n_eff - 1.0)),
            np.inf,
        )

    half_width = CI_Z * se_icc
    lower = expected - half_width

    return BatchMDEResult(
        total_n=n,
        n_clusters=n_clusters,
        n_treatment_clusters=n_tx_clusters,
        n_control_clusters=n_ctrl_clusters,
        severity_mde=sev_mde,
        severity_baseline_mde=sev_baseline,
        severity_effect_size=sev_mde / params.severity_sd,
        n_completers=n_tx + n_ctrl,
        retention_mde=ret_mde * 100.0,
        retention_binary_mde=z * adjusted_se * 100.0,
        retention_treatment_rate=(p0 - ret_mde) * 100.0,
        icc_n_effective=n_eff,
        icc_se=se_icc,
        icc_ci_half_width=half_width,
        icc_lower_bound=lower,
        icc_can_rule_out_poor=lower > params.target_icc,
        n_points=int(n.size),
    )
