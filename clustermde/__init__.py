"""
ClusterMDE: minimum detectable effects and sample-size curves for
cluster randomized trials with a severity score, a retention outcome and
an embedded reliability (ICC) validation.

The calculation engine is a set of pure functions of a validated
design configuration and a total sample size. Settings persistence and
the command-line front end sit outside it.

Usage:
    from clustermde import design, mde, settings
"""

__version__ = "0.1.0"

from clustermde import design
from clustermde import mde
from clustermde import settings

__all__ = [
    "__version__",
    "design",
    "mde",
    "settings",
]
