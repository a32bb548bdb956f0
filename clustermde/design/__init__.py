"""
Trial design configuration: enumerated power/alpha levels, their normal
quantiles, the measurement-model variance adjustment and the validated
parameter object every calculator consumes.
"""

from clustermde.design._common import (
    CI_Z,
    IPCW_VIF,
    REPEATED_MEASURES_GAIN,
    SEVERITY_SD,
    Z_ALPHA_FALLBACK,
    Z_ALPHA_TABLE,
    Z_BETA_FALLBACK,
    Z_BETA_TABLE,
    AlphaLevel,
    PowerLevel,
    exact_z_alpha,
    exact_z_beta,
    z_alpha,
    z_beta,
)
from clustermde.design._parameters import (
    DesignValidationError,
    MeasurementModel,
    TrialDesignParameters,
)
from clustermde.design._measurement import (
    measurement_variance_multiplier,
    variance_reduction_pct,
)

__all__ = [
    "CI_Z",
    "IPCW_VIF",
    "REPEATED_MEASURES_GAIN",
    "SEVERITY_SD",
    "Z_ALPHA_FALLBACK",
    "Z_ALPHA_TABLE",
    "Z_BETA_FALLBACK",
    "Z_BETA_TABLE",
    "AlphaLevel",
    "PowerLevel",
    "exact_z_alpha",
    "exact_z_beta",
    "z_alpha",
    "z_beta",
    "DesignValidationError",
    "MeasurementModel",
    "TrialDesignParameters",
    "measurement_variance_multiplier",
    "variance_reduction_pct",
]
