"""Normal quantile tables and fixed constants shared by the MDE calculators."""

from __future__ import annotations

import math
import numbers
from enum import Enum

from scipy.stats import norm

# Fixed severity-outcome constants (HAM-D scale).
SEVERITY_SD = 7.0
IPCW_VIF = 1.2
REPEATED_MEASURES_GAIN = 1.43

# z for the 95% interval around an ICC estimate.
CI_Z = 1.96

Z_ALPHA_FALLBACK = 2.24
Z_BETA_FALLBACK = 0.842


class PowerLevel(float, Enum):
    """Supported target power levels."""

    P70 = 0.70
    P75 = 0.75
    P80 = 0.80
    P85 = 0.85
    P90 = 0.90

    @property
    def z(self) -> float:
        return Z_BETA_TABLE[self]


class AlphaLevel(float, Enum):
    """Supported two-sided significance levels (possibly multiplicity-adjusted)."""

    A050 = 0.05
    A025 = 0.025
    A010 = 0.01

    @property
    def z(self) -> float:
        return Z_ALPHA_TABLE[self]


Z_ALPHA_TABLE: dict[AlphaLevel, float] = {
    AlphaLevel.A050: 1.96,
    AlphaLevel.A025: 2.24,
    AlphaLevel.A010: 2.58,
}

Z_BETA_TABLE: dict[PowerLevel, float] = {
    PowerLevel.P70: 0.524,
    PowerLevel.P75: 0.674,
    PowerLevel.P80: 0.842,
    PowerLevel.P85: 1.036,
    PowerLevel.P90: 1.282,
}


# ---------------------------------------------------------------------------
# Level matching
# ---------------------------------------------------------------------------

def _match_level(value: float, levels: type[Enum]) -> Enum | None:
    """Return the enumerated level equal to *value* (within float drift), or None."""
    if isinstance(value, levels):
        return value
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    for level in levels:
        if math.isclose(float(value), level.value, rel_tol=1e-9, abs_tol=1e-12):
            return level
    return None


def as_power_level(power: float) -> PowerLevel | None:
    """Match a float to a :class:`PowerLevel`, or ``None`` if not enumerated."""
    return _match_level(power, PowerLevel)


def as_alpha_level(alpha: float) -> AlphaLevel | None:
    """Match a float to an :class:`AlphaLevel`, or ``None`` if not enumerated."""
    return _match_level(alpha, AlphaLevel)


# ---------------------------------------------------------------------------
# Public lookups
# ---------------------------------------------------------------------------

def z_alpha(alpha: AlphaLevel | float) -> float:
    """Two-sided critical value z(1 - alpha/2) from the fixed table.

    Values that are not one of the enumerated levels fall back to the
    alpha = 0.025 entry (2.24) rather than raising.

    Examples
    --------
    >>> z_alpha(0.05)
    1.96
    >>> z_alpha(0.03)
    2.24
    """
    level = as_alpha_level(alpha)
    if level is None:
        return Z_ALPHA_FALLBACK
    return Z_ALPHA_TABLE[level]


def z_beta(power: PowerLevel | float) -> float:
    """z(power) from the fixed table; non-enumerated values fall back to 0.842."""
    level = as_power_level(power)
    if level is None:
        return Z_BETA_FALLBACK
    return Z_BETA_TABLE[level]


def exact_z_alpha(alpha: AlphaLevel | float) -> float:
    """Exact two-sided normal quantile ``norm.ppf(1 - alpha/2)``."""
    return float(norm.ppf(1.0 - float(alpha) / 2.0))


def exact_z_beta(power: PowerLevel | float) -> float:
    """Exact normal quantile ``norm.ppf(power)``."""
    return float(norm.ppf(float(power)))
