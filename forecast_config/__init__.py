"""
forecast_config -- single public entrypoint for forecast settings.

Responsibility:
    Provides the ONLY way to obtain engine settings at runtime through
    ``get_active_config()``.  No other component reads configuration
    files directly.  Returns a frozen ``ForecastConfig``.

Architecture position:
    Configuration -- YAML-backed settings.  This package sits above
    ``forecast_kernel`` and below ``forecast_services``.  The kernel and
    the engines MUST NEVER import from ``forecast_config``; the service
    layer hands the settings to them as parameters.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Deterministic parsing: the same YAML always produces the same
      ``ForecastConfig`` and checksum.

Failure modes:
    - ``FileNotFoundError`` -- the requested settings file does not exist.
    - ``InvalidForecastConfigError`` -- malformed YAML or invalid values.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``FORECAST_CONFIG_TRACE`` log entry with the config id, version,
    checksum and source path, tying a generated report to the settings
    that shaped it.
"""

from __future__ import annotations

from pathlib import Path

from forecast_kernel.logging_config import get_logger
from forecast_config.loader import load_config_file
from forecast_config.schema import ForecastConfig

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(path: Path | str | None = None) -> ForecastConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: Settings file to load.  Defaults to the packaged
            ``forecast_config/defaults.yaml``.

    Returns:
        ForecastConfig -- frozen settings.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        InvalidForecastConfigError: If the document fails validation.
    """
    source = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    config = load_config_file(source)

    _logger.info(
        "FORECAST_CONFIG_TRACE",
        extra={
            "trace_type": "FORECAST_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": str(source),
            "preset_count": len(config.presets),
        },
    )
    return config


__all__ = ["DEFAULT_CONFIG_PATH", "ForecastConfig", "get_active_config"]
