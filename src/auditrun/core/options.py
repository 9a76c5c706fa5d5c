"""Typed access to the option mapping of a single check.

Completeness (``is_complete``) only looks at presence and emptiness so that a
check can be rejected before any network call. Value types are validated
lazily by the ``require_*`` accessors when the check reads them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from auditrun.core.errors import ConfigurationError, ConfigurationErrorKind

_SCALAR_TYPES = (str, int, float)


def _coerce_scalar(key: str, value: Any) -> str:
    # bool is an int subclass but "True" is never a meaningful option value
    if isinstance(value, bool) or not isinstance(value, _SCALAR_TYPES):
        raise ConfigurationError(
            key,
            ConfigurationErrorKind.TYPE_MISMATCH,
            f"expected a string, got {type(value).__name__}",
        )
    return str(value)


def require_string(options: Mapping[str, Any], key: str) -> str:
    """Return the option ``key`` as a string.

    Raises:
        ConfigurationError: ``MISSING`` if the key is absent or null,
            ``TYPE_MISMATCH`` if the value is not a scalar.
    """
    value = options.get(key)
    if value is None:
        raise ConfigurationError(key, ConfigurationErrorKind.MISSING)
    return _coerce_scalar(key, value)


def require_list_of_strings(options: Mapping[str, Any], key: str) -> list[str]:
    """Return the option ``key`` as a list of strings.

    An absent or null key yields an empty list.

    Raises:
        ConfigurationError: ``TYPE_MISMATCH`` if the value is not a list of scalars.
    """
    value = options.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(
            key,
            ConfigurationErrorKind.TYPE_MISMATCH,
            f"expected a list of strings, got {type(value).__name__}",
        )
    return [_coerce_scalar(key, item) for item in value]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def missing_keys(options: Mapping[str, Any], required_keys: Iterable[str]) -> list[str]:
    """Return the required keys that are absent or empty, in the given order."""
    return [key for key in required_keys if _is_empty(options.get(key))]


def is_complete(options: Mapping[str, Any], required_keys: Iterable[str]) -> bool:
    """Check that every required key is present and non-empty."""
    return not missing_keys(options, required_keys)
