# lite_classifiers/options.py
from __future__ import annotations

import dataclasses
from typing import Any, Mapping

from .errors import ConfigurationError


def config_from_options(cls, options: Mapping[str, Any]):
    """Build config dataclass `cls` from a loose option mapping, rejecting unknown keys."""
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(options) - known)
    if unknown:
        raise ConfigurationError(f"unknown {cls.__name__} option(s): {', '.join(unknown)}")
    return cls(**options)
