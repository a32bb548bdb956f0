"""Variance multiplier for the severity instrument's measurement model.

Switching from a sum score to a Rasch measure removes part of the
measurement-error variance; a many-facet Rasch model (MFRM) additionally
removes the rater facet. The two adjustments compose multiplicatively:

    multiplier = 1
    if Rasch or MFRM:
        e_sum  = 1 - reliability_sum
        e_alt  = 1 - reliability_alt
        reduction = (e_sum - e_alt) / e_sum
        multiplier *= 1 - reduction * e_sum
    if MFRM:
        multiplier *= 1 - rater_variance_proportion
"""

from __future__ import annotations

from clustermde.design._parameters import TrialDesignParameters


def measurement_variance_multiplier(params: TrialDesignParameters) -> float:
    """Multiplier applied to the severity outcome's error variance.

    Returns 1.0 for the sum-score baseline and a value in (0, 1] otherwise;
    validation guarantees the alternative score is at least as reliable as
    the sum score. When the sum-score error is zero (reliability 1) the
    reliability term is left unapplied.

    Examples
    --------
    >>> from clustermde.design import MeasurementModel, TrialDesignParameters
    >>> p = TrialDesignParameters(measurement_model=MeasurementModel.RASCH)
    >>> round(measurement_variance_multiplier(p), 10)
    0.95
    """
    model = params.measurement_model
    multiplier = 1.0

    if model.upgrades_reliability:
        sum_error = 1.0 - params.sum_score_reliability
        alt_error = 1.0 - params.alternative_reliability
        if sum_error > 0.0:
            error_reduction = (sum_error - alt_error) / sum_error
            multiplier *= 1.0 - error_reduction * sum_error

    if model.removes_rater_variance:
        multiplier *= 1.0 - params.rater_variance_proportion

    return multiplier


def variance_reduction_pct(params: TrialDesignParameters) -> float:
    """Percentage of severity variance removed by the measurement model."""
    return (1.0 - measurement_variance_multiplier(params)) * 100.0
