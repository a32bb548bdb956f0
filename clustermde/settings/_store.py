"""JSON persistence of design parameters with merge-over-defaults loading."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from clustermde.design import TrialDesignParameters

logger = logging.getLogger(__name__)

_FIELD_NAMES = tuple(f.name for f in dataclasses.fields(TrialDesignParameters))


def parameters_to_dict(params: TrialDesignParameters) -> dict[str, Any]:
    """Plain-JSON mapping of every field; enums are stored by value."""
    data = {}
    for name in _FIELD_NAMES:
        value = getattr(params, name)
        data[name] = value.value if isinstance(value, Enum) else value
    return data


def parameters_from_dict(
    data: Mapping[str, Any],
    defaults: TrialDesignParameters | None = None,
) -> TrialDesignParameters:
    """Build parameters from *data* merged over *defaults*.

    Missing keys keep their default; unknown keys are logged and ignored.

    Raises
    ------
    DesignValidationError
        If a stored value is outside its valid domain.
    """
    base = defaults if defaults is not None else TrialDesignParameters()
    unknown = sorted(set(data) - set(_FIELD_NAMES))
    if unknown:
        logger.warning("ignoring unknown settings keys: %s", ", ".join(unknown))
    changes = {k: v for k, v in data.items() if k in _FIELD_NAMES}
    return base.replace(**changes)


class SettingsStore:
    """Loads and saves :class:`TrialDesignParameters` as a JSON file.

    A missing or unreadable file loads the defaults.
    """

    def __init__(
        self,
        path: str | os.PathLike,
        defaults: TrialDesignParameters | None = None,
    ) -> None:
        self.path = Path(path)
        self.defaults = defaults if defaults is not None else TrialDesignParameters()

    def load(self) -> TrialDesignParameters:
        if not self.path.exists():
            logger.info("no settings at %s, using defaults", self.path)
            return self.defaults
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("could not read settings %s (%s), using defaults", self.path, exc)
            return self.defaults
        if not isinstance(data, dict):
            logger.warning("settings %s is not a JSON object, using defaults", self.path)
            return self.defaults
        return parameters_from_dict(data, self.defaults)

    def save(self, params: TrialDesignParameters) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(parameters_to_dict(params), indent=2, sort_keys=True),
            encoding="utf-8",
        )
        logger.debug("saved settings to %s", self.path)

    def reset(self) -> TrialDesignParameters:
        """Delete the stored file and return the defaults."""
        if self.path.exists():
            self.path.unlink()
            logger.debug("removed settings %s", self.path)
        return self.defaults
