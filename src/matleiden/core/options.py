from __future__ import annotations

import math
from numbers import Integral, Real
from typing import Any, Dict, Mapping, Optional

from matleiden.core.types import FORMAT_NAMES, QUALITY_NAMES, LeidenOptions


class InvalidOptionsError(ValueError):
    """Raised with one message per invalid option in `errors`."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        detail = "; ".join(f"{k}: {v}" for k, v in sorted(self.errors.items()))
        super().__init__(f"Invalid Leiden options ({detail})")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(float(value))


def _is_integer(value: Any) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def _check_positive_number(value: Any) -> Optional[str]:
    if _is_number(value) and value > 0:
        return None
    return "must be a positive number"


def _check_positive_integer(value: Any) -> Optional[str]:
    if _is_integer(value) and value > 0:
        return None
    return "must be a positive integer"


def _check_quality_function(value: Any) -> Optional[str]:
    if value in QUALITY_NAMES:
        return None
    return "must be 'modularity' or 'cpm'"


def _check_format(value: Any) -> Optional[str]:
    if value in FORMAT_NAMES:
        return None
    return "must be one of: " + ", ".join(repr(n) for n in FORMAT_NAMES)


def _check_seed(value: Any) -> Optional[str]:
    if _is_integer(value) and value >= 0:
        return None
    return "must be a non-negative integer"


# option -> (default, check); a None value always means "use the default"
_RULES: Dict[str, tuple] = {
    "resolution": (1.0, _check_positive_number),
    "quality_function": ("modularity", _check_quality_function),
    "max_level": (5, _check_positive_integer),
    "community_size_threshold": (None, _check_positive_integer),
    "theta": (0.01, _check_positive_number),
    "format": ("communities_and_bridges", _check_format),
    "seed": (None, _check_seed),
}


def collect_option_errors(opts: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for key, (_default, check) in _RULES.items():
        value = (opts or {}).get(key)
        if value is None:
            continue
        reason = check(value)
        if reason is not None:
            errors[key] = reason
    return errors


def validate_options(opts: Optional[Mapping[str, Any]] = None) -> LeidenOptions:
    """
    Validate a raw option mapping and fill in defaults.

    Unknown keys are ignored. Every recognised key is checked independently,
    so a single InvalidOptionsError reports all problems at once.
    """
    if opts is not None and not isinstance(opts, Mapping):
        raise TypeError(f"options must be a mapping, got {type(opts).__name__}")

    errors = collect_option_errors(opts)
    if errors:
        raise InvalidOptionsError(errors)

    resolved: Dict[str, Any] = {}
    for key, (default, _check) in _RULES.items():
        value = (opts or {}).get(key)
        resolved[key] = default if value is None else value

    resolved["resolution"] = float(resolved["resolution"])
    resolved["theta"] = float(resolved["theta"])
    resolved["max_level"] = int(resolved["max_level"])
    if resolved["community_size_threshold"] is not None:
        resolved["community_size_threshold"] = int(resolved["community_size_threshold"])
    if resolved["seed"] is not None:
        resolved["seed"] = int(resolved["seed"])
    return LeidenOptions(**resolved)
