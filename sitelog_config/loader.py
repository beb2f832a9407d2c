"""
Configuration Loader (``sitelog_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into a validated
``ProgressConfig``.  Runtime callers go through
``sitelog_config.get_active_config()``.

Invariants enforced
-------------------
* Keys absent from the file keep their packaged defaults.
* Every present key is type- and range-checked; a bad value raises
  ``ConfigurationError`` naming the key.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  parsed document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid value  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from sitelog_kernel.exceptions import ConfigurationError
from sitelog_engines.schedule import ContractType
from sitelog_config.schema import ProgressConfig

_MAX_PRECISION = 6


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), type(data).__name__, "top level must be a mapping")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(name, section, "section must be a mapping")
    return section


def _int_value(section: dict[str, Any], key: str, default: int, minimum: int, maximum: int | None = None) -> int:
    if key not in section:
        return default
    value = section[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(key, value, "must be an integer")
    if value < minimum:
        raise ConfigurationError(key, value, f"must be >= {minimum}")
    if maximum is not None and value > maximum:
        raise ConfigurationError(key, value, f"must be <= {maximum}")
    return value


def _label_format(section: dict[str, Any], default: str) -> str:
    value = section.get("label_format", default)
    if not isinstance(value, str) or not value:
        raise ConfigurationError("label_format", value, "must be a non-empty string")
    try:
        value.format(year=2026, month=1, day=1)
    except (KeyError, IndexError, ValueError) as exc:
        raise ConfigurationError("label_format", value, f"bad placeholder: {exc}") from exc
    return value


def _contract_type(section: dict[str, Any], default: ContractType) -> ContractType:
    if "default_contract_type" not in section:
        return default
    value = section["default_contract_type"]
    try:
        return ContractType(value)
    except ValueError as exc:
        allowed = [c.value for c in ContractType]
        raise ConfigurationError("default_contract_type", value, f"must be one of {allowed}") from exc


def _issue_statuses(section: dict[str, Any], default: tuple[str, ...]) -> tuple[str, ...]:
    if "issue_statuses" not in section:
        return default
    value = section["issue_statuses"]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError("issue_statuses", value, "must be a list of strings")
    return tuple(value)


def parse_progress_config(data: dict[str, Any]) -> ProgressConfig:
    """
    Parse a configuration document into ``ProgressConfig``.

    Postconditions:
        - Returns a frozen ``ProgressConfig`` carrying the checksum of
          ``data``.
    Raises:
        ConfigurationError: on any invalid value.
    """
    defaults = ProgressConfig()
    progress = _section(data, "progress")
    s_curve = _section(data, "s_curve")
    logs = _section(data, "logs")

    return ProgressConfig(
        config_id=str(data.get("config_id", defaults.config_id)),
        version=_int_value(data, "version", defaults.version, minimum=1),
        s_curve_steps=_int_value(s_curve, "steps", defaults.s_curve_steps, minimum=1),
        future_tolerance_days=_int_value(
            s_curve, "future_tolerance_days", defaults.future_tolerance_days, minimum=0,
        ),
        display_precision=_int_value(
            progress, "display_precision", defaults.display_precision,
            minimum=0, maximum=_MAX_PRECISION,
        ),
        label_format=_label_format(s_curve, defaults.label_format),
        default_contract_type=_contract_type(progress, defaults.default_contract_type),
        issue_statuses=_issue_statuses(logs, defaults.issue_statuses),
        checksum=compute_checksum(data),
    )
