"""Precision of the inter-rater reliability (ICC) validation.

Agreement between the two raters is assessed in the treatment arm only,
using every follow-up assessment of every completer. Observations are
clustered within sites, so the effective sample size is deflated by

    DEFF = 1 + (obs_per_cluster - 1) * rho

The standard error of the ICC estimate uses the large-sample
approximation

    SE(ICC) ~ (1 - ICC^2) * sqrt(2 / (n_eff - 1))

which is adequate for moderate-to-large ``n_eff`` and an expected ICC not
close to 1. It is not the exact Fisher-z interval.
"""

from __future__ import annotations

import math

from clustermde.design import CI_Z, TrialDesignParameters
from clustermde.mde._common import IccValidationResult, _allocate_clusters


def calc_icc_validation(params: TrialDesignParameters, total_n: float) -> IccValidationResult:
    """ICC-validation precision for a trial enrolling *total_n* patients.

    ``can_rule_out_poor`` is True when the lower 95% bound around
    ``expected_icc`` exceeds ``target_icc``. It is always False when
    ``expected_icc <= target_icc``. Bounds outside [0, 1] are returned
    unchanged.

    When the effective sample size is at most 1 (including a treatment arm
    with no clusters) the approximation is undefined: ``se_icc`` and
    ``ci_half_width`` are ``inf`` and the bounds are ``-inf`` / ``inf``.
    """
    _, n_tx_clusters, _ = _allocate_clusters(params, total_n)

    n_tx_patients = (
        n_tx_clusters * params.patients_per_cluster * (1.0 - params.control_attrition)
    )
    n_obs = n_tx_patients * params.n_followups

    if n_tx_clusters > 0:
        obs_per_cluster = n_obs / n_tx_clusters
        deff = 1.0 + (obs_per_cluster - 1.0) * params.icc_cluster_correlation
        n_eff = n_obs / deff
    else:
        n_eff = 0.0

    expected = params.expected_icc
    if n_eff > 1.0:
        se_icc = (1.0 - expected * expected) * math.sqrt(2.0 / (n_eff - 1.0))
    else:
        se_icc = math.inf

    half_width = CI_Z * se_icc
    lower = expected - half_width

    return IccValidationResult(
        n_treatment_patients=n_tx_patients,
        n_treatment_clusters=n_tx_clusters,
        n_observations=n_obs,
        n_effective=n_eff,
        se_icc=se_icc,
        ci_half_width=half_width,
        lower_bound=lower,
        upper_bound=expected + half_width,
        can_rule_out_poor=lower > params.target_icc,
    )
