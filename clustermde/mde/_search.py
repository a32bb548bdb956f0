"""Smallest total sample size that reaches a target MDE."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from clustermde.design import TrialDesignParameters
from clustermde.mde._common import _check_grid_int
from clustermde.mde._icc import calc_icc_validation
from clustermde.mde._retention import calc_retention_mde
from clustermde.mde._severity import calc_severity_mde

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_STEP = 10

_VALID_METHODS = ("scan", "bisect")

Calculator = Callable[[TrialDesignParameters, float], Any]

# name -> (calculator, default MDE field)
OUTCOMES: dict[str, tuple[Calculator, str]] = {
    "severity": (calc_severity_mde, "mde"),
    "retention": (calc_retention_mde, "mde_percentage_points"),
    "icc": (calc_icc_validation, "ci_half_width"),
}


@dataclass(frozen=True)
class ExceedsRange:
    """Sentinel: no sample size up to ``n_max`` reaches the target."""

    n_max: int

    def __str__(self) -> str:
        return f">{self.n_max}"


SearchResult = Union[int, ExceedsRange]


def _resolve_outcome(
    outcome: str | Calculator,
    field: str | Callable[[Any], float] | None,
) -> tuple[Calculator, Callable[[Any], float]]:
    if isinstance(outcome, str):
        if outcome not in OUTCOMES:
            raise ValueError(
                f"outcome must be one of {tuple(OUTCOMES)}, got {outcome!r}"
            )
        calculator, default_field = OUTCOMES[outcome]
    else:
        calculator, default_field = outcome, None

    if field is None:
        field = default_field
    if field is None:
        raise ValueError("field is required when outcome is a calculator callable")

    if callable(field):
        return calculator, field
    return calculator, lambda result: getattr(result, field)


def find_smallest_n_for_target(
    params: TrialDesignParameters,
    target_mde: float,
    outcome: str | Calculator,
    field: str | Callable[[Any], float] | None = None,
    n_min: int = 400,
    n_max: int = 1300,
    step: int = DEFAULT_SEARCH_STEP,
    method: str = "scan",
) -> SearchResult:
    """Smallest N on the grid ``n_min, n_min + step, ... <= n_max`` with MDE <= target.

    Parameters
    ----------
    params : TrialDesignParameters
        Design configuration.
    target_mde : float
        Target value, in the units of the selected field.
    outcome : str or callable
        ``'severity'``, ``'retention'``, ``'icc'`` or any calculator with
        signature ``(params, total_n) -> result``.
    field : str, callable or None
        Attribute name or selector applied to the calculator result.
        Defaults to the outcome's MDE field for named outcomes
        (``mde``, ``mde_percentage_points``, ``ci_half_width``).
    n_min, n_max, step : int
        Search grid.
    method : str
        ``'scan'`` checks every grid point in ascending order.
        ``'bisect'`` assumes the selected value is non-increasing in N
        (true for all three MDE fields) and bisects the grid.

    Returns
    -------
    int or ExceedsRange
        The first qualifying N, or ``ExceedsRange(n_max)`` when none does.

    Examples
    --------
    >>> from clustermde.design import TrialDesignParameters
    >>> find_smallest_n_for_target(TrialDesignParameters(), 0.5, "severity")
    ExceedsRange(n_max=1300)
    """
    if method not in _VALID_METHODS:
        raise ValueError(f"method must be one of {_VALID_METHODS}, got {method!r}")
    for name, value in (("n_min", n_min), ("n_max", n_max), ("step", step)):
        _check_grid_int(name, value)
    if step <= 0:
        raise ValueError(f"step must be > 0, got {step}")
    if n_min <= 0 or n_max < n_min:
        raise ValueError(f"invalid range: n_min={n_min}, n_max={n_max}")

    calculator, select = _resolve_outcome(outcome, field)
    totals = range(n_min, n_max + 1, step)

    def reaches(n: int) -> bool:
        return select(calculator(params, n)) <= target_mde

    if method == "scan":
        for n in totals:
            if reaches(n):
                return n
    else:
        lo, hi = 0, len(totals)
        while lo < hi:
            mid = (lo + hi) // 2
            if reaches(totals[mid]):
                hi = mid
            else:
                lo = mid + 1
        if lo < len(totals):
            return totals[lo]

    logger.debug(
        "target %.4g not reached for %r within N <= %d", target_mde, outcome, n_max
    )
    return ExceedsRange(n_max)
