"""
sitelog_config -- single public entrypoint for progress configuration.

Responsibility:
    Provides the runtime way to obtain configuration through
    ``get_active_config()``.  Services receive the returned
    ``ProgressConfig`` and never read YAML themselves.

Architecture position:
    Configuration -- sits above ``sitelog_kernel`` and ``sitelog_engines``
    and below ``sitelog_modules``.  Engines take plain parameters and MUST
    NEVER import from ``sitelog_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ConfigurationError`` -- a value is mistyped or out of range.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``SITELOG_CONFIG_TRACE`` log entry with the config id, version and
    checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sitelog_config.loader import compute_checksum, load_yaml_file, parse_progress_config
from sitelog_config.schema import ProgressConfig

_logger = logging.getLogger("sitelog_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(config_path: Path | str | None = None) -> ProgressConfig:
    """
    Load and validate the progress configuration.

    Args:
        config_path: YAML file to load. Defaults to the packaged
            ``defaults.yaml``.

    Returns:
        ProgressConfig -- frozen, validated settings.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_progress_config(load_yaml_file(path))

    _logger.info(
        "SITELOG_CONFIG_TRACE",
        extra={
            "trace_type": "SITELOG_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": str(path),
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ProgressConfig",
    "compute_checksum",
    "get_active_config",
    "load_yaml_file",
    "parse_progress_config",
]
