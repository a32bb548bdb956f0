"""
Settings persistence for design parameters.

Kept outside the calculation engine: the engine only ever receives a
:class:`~clustermde.design.TrialDesignParameters` by value.
"""

from clustermde.settings._store import (
    SettingsStore,
    parameters_from_dict,
    parameters_to_dict,
)

__all__ = [
    "SettingsStore",
    "parameters_from_dict",
    "parameters_to_dict",
]
