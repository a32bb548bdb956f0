"""MDE curves over a grid of total sample sizes.

A :class:`Curve` is a lazy sequence: each point is computed on access
from the (immutable) design parameters, so iterating twice recomputes the
same values and a curve built from changed parameters shares nothing with
the old one.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from clustermde.design import TrialDesignParameters
from clustermde.mde._common import (
    IccValidationResult,
    RetentionResult,
    SeverityResult,
    _check_grid_int,
)
from clustermde.mde._icc import calc_icc_validation
from clustermde.mde._retention import calc_retention_mde
from clustermde.mde._severity import calc_severity_mde

DEFAULT_N_MIN = 400
DEFAULT_N_MAX = 1300
DEFAULT_CURVE_STEP = 50
DEFAULT_TABLE_TOTALS = (400, 500, 600, 700, 800, 900, 1000, 1100, 1200, 1300)

# Plotting fields exported by Curve.to_arrays()
CURVE_FIELDS = (
    "total_n",
    "n_clusters",
    "severity_mde",
    "severity_baseline_mde",
    "severity_effect_size",
    "retention_mde",
    "retention_treatment_rate",
    "icc_ci_width",
    "icc_lower_bound",
)


@dataclass(frozen=True)
class CurvePoint:
    """All three outcome results at one total sample size."""

    total_n: int
    severity: SeverityResult
    retention: RetentionResult
    icc_validation: IccValidationResult

    @property
    def n_clusters(self) -> int:
        return self.severity.n_clusters

    @property
    def severity_mde(self) -> float:
        return self.severity.mde

    @property
    def severity_baseline_mde(self) -> float:
        return self.severity.baseline_mde

    @property
    def severity_effect_size(self) -> float:
        return self.severity.effect_size

    @property
    def retention_mde(self) -> float:
        return self.retention.mde_percentage_points

    @property
    def retention_treatment_rate(self) -> float:
        return self.retention.treatment_rate_pct

    @property
    def icc_ci_width(self) -> float:
        """Full width of the 95% interval around the expected ICC."""
        return 2.0 * self.icc_validation.ci_half_width

    @property
    def icc_lower_bound(self) -> float:
        return self.icc_validation.lower_bound


def evaluate_point(params: TrialDesignParameters, total_n: int) -> CurvePoint:
    """Run all three outcome calculators at *total_n*."""
    return CurvePoint(
        total_n=total_n,
        severity=calc_severity_mde(params, total_n),
        retention=calc_retention_mde(params, total_n),
        icc_validation=calc_icc_validation(params, total_n),
    )


def _check_grid(n_min: int, n_max: int, step: int) -> None:
    for name, value in (("n_min", n_min), ("n_max", n_max), ("step", step)):
        _check_grid_int(name, value)
    if step <= 0:
        raise ValueError(f"step must be > 0, got {step}")
    if n_min <= 0:
        raise ValueError(f"n_min must be > 0, got {n_min}")
    if n_max < n_min:
        raise ValueError(f"n_max must be >= n_min, got n_min={n_min}, n_max={n_max}")


@dataclass(frozen=True)
class Curve(Sequence):
    """Ordered, finite, non-empty sequence of :class:`CurvePoint`.

    Points sit at ``n_min, n_min + step, ...`` up to and including
    ``n_max`` when it lies on the grid.
    """

    params: TrialDesignParameters
    n_min: int
    n_max: int
    step: int

    def __post_init__(self) -> None:
        _check_grid(self.n_min, self.n_max, self.step)

    @property
    def totals(self) -> range:
        """Grid of total sample sizes."""
        return range(self.n_min, self.n_max + 1, self.step)

    def __len__(self) -> int:
        return (self.n_max - self.n_min) // self.step + 1

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [evaluate_point(self.params, n) for n in self.totals[index]]
        return evaluate_point(self.params, self.totals[index])

    def __iter__(self) -> Iterator[CurvePoint]:
        for n in self.totals:
            yield evaluate_point(self.params, n)

    def to_arrays(self) -> dict[str, NDArray[np.floating]]:
        """Plotting fields as NumPy arrays, keyed by :data:`CURVE_FIELDS`."""
        points = list(self)
        return {
            name: np.array([getattr(p, name) for p in points], dtype=float)
            for name in CURVE_FIELDS
        }


def generate_curve(
    params: TrialDesignParameters,
    n_min: int = DEFAULT_N_MIN,
    n_max: int = DEFAULT_N_MAX,
    step: int = DEFAULT_CURVE_STEP,
) -> Curve:
    """MDE curve for all three outcomes over ``n_min..n_max`` in steps of *step*.

    Returns
    -------
    Curve
        ``(n_max - n_min) // step + 1`` points in ascending ``total_n``.

    Examples
    --------
    >>> from clustermde.design import TrialDesignParameters
    >>> curve = generate_curve(TrialDesignParameters())
    >>> len(curve), curve[0].total_n, curve[-1].total_n
    (19, 400, 1300)
    """
    return Curve(params=params, n_min=n_min, n_max=n_max, step=step)


def design_table(
    params: TrialDesignParameters,
    totals: Iterable[int] = DEFAULT_TABLE_TOTALS,
) -> list[CurvePoint]:
    """One :class:`CurvePoint` per listed total sample size, in the given order."""
    return [evaluate_point(params, n) for n in totals]
