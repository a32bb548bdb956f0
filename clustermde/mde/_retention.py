"""Minimum detectable difference for the retention outcome.

Retention is measured on every randomized patient, so no attrition is
applied to the arm sizes. The baseline event rate is the control-arm
attrition rate ``p0``.
"""

from __future__ import annotations

import math

from clustermde.design import TrialDesignParameters
from clustermde.mde._common import (
    RetentionResult,
    _allocate_clusters,
    _unequal_cluster_factor,
    _z_sum,
)


def calc_retention_mde(params: TrialDesignParameters, total_n: float) -> RetentionResult:
    """Retention-outcome MDE for a trial enrolling *total_n* patients.

    Builds the standard error in four steps: two-proportion SE at ``p0``,
    inflation by the cluster design effect, covariate adjustment by
    ``sqrt(1 - R^2)`` and, for the primary survival analysis, deflation by
    ``sqrt(survival_efficiency)``. ``binary_mde_percentage_points`` stops
    before the last step.

    Returned rates are percentages. ``treatment_rate_pct`` goes negative
    when the MDE exceeds ``p0``; that is an infeasible design, not an
    error. If an arm receives no clusters both MDEs are ``inf``.
    """
    n_clusters, n_tx_clusters, n_ctrl_clusters = _allocate_clusters(params, total_n)

    n_tx = n_tx_clusters * params.patients_per_cluster
    n_ctrl = n_ctrl_clusters * params.patients_per_cluster

    deff = (
        (1.0 + (params.patients_per_cluster - 1.0) * params.icc_retention)
        * _unequal_cluster_factor(params)
    )
    p0 = params.control_attrition

    if n_tx > 0 and n_ctrl > 0:
        base_se = math.sqrt(p0 * (1.0 - p0) * (1.0 / n_tx + 1.0 / n_ctrl))
    else:
        base_se = math.inf

    clustered_se = base_se * math.sqrt(deff)
    adjusted_se = clustered_se * math.sqrt(1.0 - params.r2_retention)
    survival_se = adjusted_se / math.sqrt(params.survival_efficiency)

    z = _z_sum(params)
    mde = z * survival_se

    return RetentionResult(
        mde_percentage_points=mde * 100.0,
        control_rate_pct=p0 * 100.0,
        treatment_rate_pct=(p0 - mde) * 100.0,
        n_clusters=n_clusters,
        binary_mde_percentage_points=z * adjusted_se * 100.0,
    )
