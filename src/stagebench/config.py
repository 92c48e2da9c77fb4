"""Report configuration for stagebench.

Handles:
- The :class:`ReportConfig` dataclass consumed by the reporter.
- Loading a configuration from a YAML file.
- Validating a configuration before use.

Configuration only affects how results are displayed; it never changes
measured or computed values, except for the diff threshold that decides
when two stage speeds count as equal.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from stagebench.logging import get_logger

log = get_logger("config")

DEFAULT_DIFF_THRESHOLD = 0.0001
DEFAULT_FALLBACK_WIDTH = 40


# ---------------------------------------------------------------------------
# ReportConfig
# ---------------------------------------------------------------------------


@dataclass
class ReportConfig:
    """Resolved display settings."""

    color: bool | None = None  # None = auto (colour only on a terminal)
    number_separator: str = "_"
    fallback_width: int = DEFAULT_FALLBACK_WIDTH
    precision: int = 3  # Decimals for secs / msecs
    diff_threshold: float = DEFAULT_DIFF_THRESHOLD
    show_status: bool = True  # Emit "stage started/completed" lines


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: ReportConfig) -> list[ValidationError]:
    """Validate a report configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if config.fallback_width <= 0:
        errors.append(
            ValidationError(
                field="fallback_width",
                message=f"Fallback width must be positive (got {config.fallback_width}).",
            )
        )

    if config.precision < 0:
        errors.append(
            ValidationError(
                field="precision",
                message=f"Precision cannot be negative (got {config.precision}).",
            )
        )
    elif config.precision > 9:
        errors.append(
            ValidationError(
                field="precision",
                message=(
                    f"Precision above 9 decimals is below clock resolution "
                    f"(got {config.precision})."
                ),
                severity="warning",
            )
        )

    if config.diff_threshold < 0:
        errors.append(
            ValidationError(
                field="diff_threshold",
                message=f"Diff threshold cannot be negative (got {config.diff_threshold}).",
            )
        )

    if len(config.number_separator) > 1:
        errors.append(
            ValidationError(
                field="number_separator",
                message=(
                    f"Number separator must be at most one character "
                    f"(got {config.number_separator!r})."
                ),
            )
        )

    return errors


def check_config(config: ReportConfig) -> None:
    """Log validation warnings and reject a config with any error.

    Raises:
        ValueError: Listing every error-severity problem.
    """
    problems = validate_config(config)
    fatal = [p for p in problems if p.severity == "error"]
    for p in problems:
        if p.severity == "warning":
            log.warning("Config warning: %s: %s", p.field, p.message)
    if fatal:
        messages = [f"  {p.field}: {p.message}" for p in fatal]
        raise ValueError("Invalid report configuration:\n" + "\n".join(messages))


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------

# Accepted YAML types per field. bool is excluded from the numeric fields
# because it is a subclass of int.
_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "color": (bool, type(None)),
    "number_separator": (str,),
    "fallback_width": (int,),
    "precision": (int,),
    "diff_threshold": (int, float),
    "show_status": (bool,),
}


def _type_errors(data: dict[str, Any]) -> list[str]:
    errors = []
    for key, value in data.items():
        expected = _FIELD_TYPES[key]
        numeric = bool not in expected and isinstance(value, bool)
        if numeric or not isinstance(value, expected):
            names = " or ".join("null" if t is type(None) else t.__name__ for t in expected)
            errors.append(f"  {key}: expected {names}, got {value!r}")
    return errors


def config_from_dict(data: dict[str, Any]) -> ReportConfig:
    """Build a ReportConfig from a parsed mapping.

    Raises:
        ValueError: On unknown keys or values of the wrong type.
    """
    known = {f.name for f in fields(ReportConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown report config keys: {', '.join(unknown)}")
    errors = _type_errors(data)
    if errors:
        raise ValueError("Invalid report configuration:\n" + "\n".join(errors))
    return ReportConfig(**data)


def load_config(config_path: Path) -> ReportConfig:
    """Load and validate a report configuration from a YAML file.

    File format::

        color: false
        number_separator: ","
        fallback_width: 80
        precision: 3
        diff_threshold: 0.0001
        show_status: true

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: If *config_path* does not exist.
        ValueError: If the file is not a mapping, names an unknown key, or
            holds a value of the wrong type or out of range.
    """
    import yaml

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a YAML mapping, got {type(data).__name__}")

    config = config_from_dict(data)
    check_config(config)
    log.debug("Loaded report config from %s", config_path)
    return config
