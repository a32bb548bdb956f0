"""
Minimum detectable effects for a three-outcome cluster randomized trial.

Pure functions of a :class:`~clustermde.design.TrialDesignParameters` and a
total sample size N:

- severity score MDE (raw points and standardized effect size)
- retention MDE (percentage points, survival and binary analyses)
- precision of the reliability (ICC) validation in the treatment arm

plus curves over a grid of N, threshold searches for the smallest N that
reaches a target, and a vectorised re-expression used for cross-checking.
"""

from clustermde.mde._common import IccValidationResult, RetentionResult, SeverityResult
from clustermde.mde._severity import calc_severity_mde
from clustermde.mde._retention import calc_retention_mde
from clustermde.mde._icc import calc_icc_validation
from clustermde.mde._curve import (
    CURVE_FIELDS,
    Curve,
    CurvePoint,
    design_table,
    evaluate_point,
    generate_curve,
)
from clustermde.mde._search import OUTCOMES, ExceedsRange, find_smallest_n_for_target
from clustermde.mde._summary import DEFAULT_TRADEOFF_TOTALS, DesignSummary, summarize_design
from clustermde.mde._batch import BatchMDEResult, batch_evaluate
from clustermde.mde._crosscheck import CrossCheckResult, cross_check, z_table_deviation

__all__ = [
    "SeverityResult",
    "RetentionResult",
    "IccValidationResult",
    "calc_severity_mde",
    "calc_retention_mde",
    "calc_icc_validation",
    "CURVE_FIELDS",
    "Curve",
    "CurvePoint",
    "design_table",
    "evaluate_point",
    "generate_curve",
    "OUTCOMES",
    "ExceedsRange",
    "find_smallest_n_for_target",
    "DEFAULT_TRADEOFF_TOTALS",
    "DesignSummary",
    "summarize_design",
    "BatchMDEResult",
    "batch_evaluate",
    "CrossCheckResult",
    "cross_check",
    "z_table_deviation",
]
