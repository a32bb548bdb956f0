"""Minimum detectable effect for the continuous severity outcome.

The analysis compares completer means between arms with a clustered,
covariate-adjusted, censoring-weighted repeated-measures model. Its
variance per completer is

    sigma2_adj = SD^2 * (1 - R^2)
    DEFF       = (1 + (m_c - 1) * ICC) * (1 + CV^2),  m_c = m * (1 - attrition)
    V          = sigma2_adj * DEFF * VIF_ipcw / gain_rm

and the MDE at the harmonic-mean completer count ``n_h`` is

    MDE = (z_alpha + z_beta) * sqrt(2 * V * k / n_h)

where ``k`` is the measurement-model variance multiplier (k = 1 for the
baseline MDE).
"""

from __future__ import annotations

import math

from clustermde.design import TrialDesignParameters, measurement_variance_multiplier
from clustermde.mde._common import (
    SeverityResult,
    _allocate_clusters,
    _unequal_cluster_factor,
    _z_sum,
)


def _severity_base_variance(params: TrialDesignParameters) -> float:
    """Per-completer variance before the measurement-model adjustment."""
    sigma2_adj = params.severity_sd ** 2 * (1.0 - params.r2_severity)

    # Completers per cluster after attrition
    cluster_size = params.patients_per_cluster * (1.0 - params.control_attrition)
    deff = (1.0 + (cluster_size - 1.0) * params.icc_severity) * _unequal_cluster_factor(params)

    return sigma2_adj * deff * params.ipcw_vif / params.repeated_measures_gain


def calc_severity_mde(params: TrialDesignParameters, total_n: float) -> SeverityResult:
    """Severity-outcome MDE for a trial enrolling *total_n* patients.

    Parameters
    ----------
    params : TrialDesignParameters
        Design configuration.
    total_n : float
        Total number of randomized patients (> 0).

    Returns
    -------
    SeverityResult

    Notes
    -----
    *total_n* must be large enough to give each arm at least one cluster.
    Otherwise the harmonic mean of completers is zero and ``mde`` /
    ``baseline_mde`` / ``effect_size`` are ``inf``.

    Examples
    --------
    >>> from clustermde.design import TrialDesignParameters
    >>> r = calc_severity_mde(TrialDesignParameters(), 1000)
    >>> (r.n_clusters, r.n_treatment_clusters, r.n_control_clusters)
    (100, 75, 25)
    >>> round(r.mde, 4)
    1.5487
    """
    n_clusters, n_tx_clusters, n_ctrl_clusters = _allocate_clusters(params, total_n)

    retained = 1.0 - params.control_attrition
    n_tx = n_tx_clusters * params.patients_per_cluster * retained
    n_ctrl = n_ctrl_clusters * params.patients_per_cluster * retained

    # Harmonic mean of completers
    if n_tx > 0.0 and n_ctrl > 0.0:
        n_harmonic = 2.0 * n_tx * n_ctrl / (n_tx + n_ctrl)
    else:
        n_harmonic = 0.0

    base_variance = _severity_base_variance(params)
    multiplier = measurement_variance_multiplier(params)
    net_variance = base_variance * multiplier

    z = _z_sum(params)
    if n_harmonic > 0.0:
        baseline_mde = z * math.sqrt(2.0 * base_variance / n_harmonic)
        mde = z * math.sqrt(2.0 * net_variance / n_harmonic)
    else:
        baseline_mde = mde = math.inf

    return SeverityResult(
        mde=mde,
        baseline_mde=baseline_mde,
        effect_size=mde / params.severity_sd,
        n_clusters=n_clusters,
        n_treatment_clusters=n_tx_clusters,
        n_control_clusters=n_ctrl_clusters,
        n_completers=n_tx + n_ctrl,
        variance_reduction_pct=(1.0 - multiplier) * 100.0,
    )
