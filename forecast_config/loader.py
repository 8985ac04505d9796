"""
Configuration Loader (``forecast_config.loader``).

Responsibility
--------------
Loads a YAML settings document and parses it into a frozen
``ForecastConfig``.  This is internal tooling; the single public entry
point for runtime config is ``forecast_config.get_active_config()``.

Architecture position
---------------------
**Config layer**.  Depends on the kernel only (date-range presets and the
config exception).  Nothing in the kernel or engines imports it.

Invariants enforced
-------------------
* Every problem in a document is collected and reported together in one
  ``InvalidForecastConfigError``; no silent defaults for malformed values.
  Keys that are absent fall back to the shipped defaults.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  canonical JSON form of the parsed document.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML or invalid values  -> ``InvalidForecastConfigError``.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from forecast_kernel.domain.date_range import PresetKind, RangePreset
from forecast_kernel.exceptions import InvalidForecastConfigError
from forecast_config.schema import ForecastConfig

_DEFAULTS = ForecastConfig()


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        InvalidForecastConfigError: if the file is not valid YAML or its
            root is not a mapping.
    """
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise InvalidForecastConfigError(str(path), [f"malformed YAML: {exc}"]) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidForecastConfigError(
            str(path), [f"root must be a mapping, got {type(data).__name__}"],
        )
    return data


def compute_checksum(data: Mapping[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _section(data: Mapping[str, Any], key: str, errors: list[str]) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        errors.append(f"{key}: expected a mapping")
        return {}
    return value


def _string(
    section: Mapping[str, Any],
    key: str,
    default: str,
    path: str,
    errors: list[str],
) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or not value.strip():
        errors.append(f"{path}: expected a non-empty string, got {value!r}")
        return default
    return value.strip()


def _weeks_per_month(data: Mapping[str, Any], errors: list[str]) -> Decimal:
    raw = data.get("weeks_per_month", _DEFAULTS.weeks_per_month)
    if isinstance(raw, bool):
        errors.append(f"weeks_per_month: expected a number, got {raw!r}")
        return _DEFAULTS.weeks_per_month
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        errors.append(f"weeks_per_month: expected a number, got {raw!r}")
        return _DEFAULTS.weeks_per_month
    if not value.is_finite() or value <= 0:
        errors.append(f"weeks_per_month: must be positive, got {raw!r}")
        return _DEFAULTS.weeks_per_month
    return value


def _realized_statuses(section: Mapping[str, Any], errors: list[str]) -> frozenset[str]:
    raw = section.get("realized_transaction")
    if raw is None:
        return _DEFAULTS.realized_statuses
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not raw or not all(isinstance(s, str) and s for s in raw):
        errors.append(
            "statuses.realized_transaction: expected a non-empty list of strings"
        )
        return _DEFAULTS.realized_statuses
    return frozenset(raw)


def _int_field(spec: Mapping[str, Any], key: str, path: str, errors: list[str]) -> int:
    value = spec.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        errors.append(f"{path}.{key}: expected an integer, got {value!r}")
        return 0
    return value


def parse_presets(raw: Any, errors: list[str]) -> tuple[RangePreset, ...]:
    """
    Parse the ``presets`` mapping (name -> {kind, months_ahead | days}).

    Order of the document is kept; it is the order presets are listed in.
    """
    if raw is None:
        return _DEFAULTS.presets
    if not isinstance(raw, Mapping) or not raw:
        errors.append("presets: expected a non-empty mapping of name -> spec")
        return _DEFAULTS.presets

    presets: list[RangePreset] = []
    for name, spec in raw.items():
        path = f"presets.{name}"
        if not isinstance(spec, Mapping):
            errors.append(f"{path}: expected a mapping")
            continue
        try:
            kind = PresetKind(spec.get("kind"))
        except ValueError:
            errors.append(
                f"{path}.kind: expected one of "
                f"{sorted(k.value for k in PresetKind)}, got {spec.get('kind')!r}"
            )
            continue
        if kind == PresetKind.CALENDAR_MONTH:
            months_ahead = _int_field(spec, "months_ahead", path, errors)
            presets.append(RangePreset(str(name), kind, months_ahead=months_ahead))
        else:
            days = _int_field(spec, "days", path, errors)
            if days < 0:
                errors.append(f"{path}.days: must be >= 0, got {days}")
                continue
            presets.append(RangePreset(str(name), kind, days=days))
    return tuple(presets)


def parse_forecast_config(data: Mapping[str, Any], source: str = "<memory>") -> ForecastConfig:
    """
    Parse a settings document into a ``ForecastConfig``.

    Raises:
        InvalidForecastConfigError: listing every invalid value found.
    """
    errors: list[str] = []

    config_id = _string(data, "config_id", _DEFAULTS.config_id, "config_id", errors)
    version = data.get("version", _DEFAULTS.version)
    if isinstance(version, bool) or not isinstance(version, int):
        errors.append(f"version: expected an integer, got {version!r}")
        version = _DEFAULTS.version

    labels = _section(data, "labels", errors)
    statuses = _section(data, "statuses", errors)
    tags = _section(data, "tags", errors)

    config = ForecastConfig(
        config_id=config_id,
        version=version,
        weeks_per_month=_weeks_per_month(data, errors),
        uncategorized_label=_string(
            labels, "uncategorized", _DEFAULTS.uncategorized_label,
            "labels.uncategorized", errors,
        ),
        unknown_customer_label=_string(
            labels, "unknown_customer", _DEFAULTS.unknown_customer_label,
            "labels.unknown_customer", errors,
        ),
        active_status=_string(
            statuses, "active_contract", _DEFAULTS.active_status,
            "statuses.active_contract", errors,
        ),
        realized_statuses=_realized_statuses(statuses, errors),
        declined_status=_string(
            statuses, "declined_transaction", _DEFAULTS.declined_status,
            "statuses.declined_transaction", errors,
        ),
        return_type=_string(
            tags, "return_type", _DEFAULTS.return_type, "tags.return_type", errors,
        ),
        recurring_source=_string(
            tags, "recurring_source", _DEFAULTS.recurring_source,
            "tags.recurring_source", errors,
        ),
        presets=parse_presets(data.get("presets"), errors),
        checksum=compute_checksum(data),
    )

    if config.declined_status in config.realized_statuses:
        errors.append(
            f"statuses: {config.declined_status!r} cannot be both declined and realized"
        )

    if errors:
        raise InvalidForecastConfigError(source, errors)
    return config


def load_config_file(path: Path) -> ForecastConfig:
    """Load and parse one YAML settings file."""
    return parse_forecast_config(load_yaml_file(path), source=str(path))
