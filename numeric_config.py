"""Configuration record and helpers for numeric input fields."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional


class ConfigurationError(ValueError):
    """Raised when a settings mapping cannot be turned into a configuration."""


@dataclass(frozen=True)
class ValidationIssue:
    """Represents a configuration or value validation problem."""

    field: str
    title: str
    message: str


@dataclass(frozen=True)
class NumericInputConfig:
    """Immutable constraints for one numeric field instance.

    ``min_value`` and ``max_value`` are inclusive and ``None`` means unbounded.
    ``min_decimals`` and ``max_decimals`` only apply when ``accept_float`` is
    set. ``value`` is the text the field starts out with.
    """

    min_value: Optional[float] = None
    max_value: Optional[float] = None
    accept_float: bool = False
    min_decimals: int = 0
    max_decimals: Optional[int] = None
    value: str = ""

    @property
    def allows_negative(self) -> bool:
        """False when the bounds make every valid value non-negative."""
        return self.min_value is None or self.min_value < 0


# Component-style keys first, snake_case field names second.
_SETTING_KEYS = {
    "min_value": ("min", "min_value"),
    "max_value": ("max", "max_value"),
    "accept_float": ("acceptFloat", "accept_float"),
    "min_decimals": ("minDecimals", "min_decimals"),
    "max_decimals": ("maxDecimals", "max_decimals"),
    "value": ("value",),
}


def _coerce_number(value: Any) -> float | None:
    """Best-effort conversion to ``float`` returning ``None`` on failure."""

    if isinstance(value, bool):
        # ``bool`` is a subclass of ``int`` in Python, but we treat it as invalid
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except (TypeError, ValueError):
            return None
    if math.isnan(number):
        return None
    return number


def _coerce_int(value: Any) -> int | None:
    """Best-effort conversion to ``int`` returning ``None`` on failure."""

    number = _coerce_number(value)
    if number is None or math.isinf(number) or not number.is_integer():
        return None
    return int(number)


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _lookup(settings: Mapping[str, Any], field: str) -> Any:
    for key in _SETTING_KEYS[field]:
        if key in settings and settings[key] is not None and settings[key] != "":
            return settings[key]
    return None


def config_from_settings(settings: Mapping[str, Any]) -> NumericInputConfig:
    """Build a configuration from a plain settings mapping.

    Parameters
    ----------
    settings:
        Mapping using either the component-style keys (``min``, ``max``,
        ``acceptFloat``, ``minDecimals``, ``maxDecimals``, ``value``) or the
        snake_case field names of :class:`NumericInputConfig`. Missing and
        ``None`` entries fall back to the defaults.

    Returns
    -------
    NumericInputConfig
        The coerced configuration.

    Raises
    ------
    ConfigurationError
        If a numeric entry cannot be coerced.
    """

    kwargs: dict = {}

    for field in ("min_value", "max_value"):
        raw = _lookup(settings, field)
        if raw is None:
            continue
        number = _coerce_number(raw)
        if number is None:
            raise ConfigurationError(f"{_SETTING_KEYS[field][0]} must be a number, got {raw!r}")
        kwargs[field] = number

    for field in ("min_decimals", "max_decimals"):
        raw = _lookup(settings, field)
        if raw is None:
            continue
        count = _coerce_int(raw)
        if count is None:
            raise ConfigurationError(f"{_SETTING_KEYS[field][0]} must be a whole number, got {raw!r}")
        kwargs[field] = count

    accept_float = _lookup(settings, "accept_float")
    if accept_float is not None:
        kwargs["accept_float"] = _coerce_bool(accept_float)

    value = _lookup(settings, "value")
    if value is not None:
        kwargs["value"] = str(value)

    return NumericInputConfig(**kwargs)


def review_configuration(config: NumericInputConfig) -> List[ValidationIssue]:
    """Report configurations that can never produce a useful verdict.

    The gatekeeper and validator do not consult this; a misconfigured field
    simply reports every value as INVALID. Hosts use the issues for warnings.
    """

    issues: List[ValidationIssue] = []

    if (
        config.min_value is not None
        and config.max_value is not None
        and config.min_value > config.max_value
    ):
        issues.append(
            ValidationIssue(
                field="min",
                title="Empty Range",
                message=(
                    f"The minimum {config.min_value:g} is above the maximum {config.max_value:g}, "
                    "so no value can be valid."
                ),
            )
        )

    if config.min_decimals < 0 or (config.max_decimals is not None and config.max_decimals < 0):
        issues.append(
            ValidationIssue(
                field="min_decimals" if config.min_decimals < 0 else "max_decimals",
                title="Negative Decimal Count",
                message="Decimal digit bounds must be zero or greater.",
            )
        )

    if config.max_decimals is not None and config.min_decimals > config.max_decimals:
        issues.append(
            ValidationIssue(
                field="max_decimals",
                title="Empty Decimal Range",
                message=(
                    f"At least {config.min_decimals} decimals are required but at most "
                    f"{config.max_decimals} are allowed."
                ),
            )
        )

    if not config.accept_float and (config.min_decimals > 0 or config.max_decimals is not None):
        issues.append(
            ValidationIssue(
                field="accept_float",
                title="Decimals Ignored",
                message="Decimal digit bounds only apply when floating point input is accepted.",
            )
        )

    return issues
