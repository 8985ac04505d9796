"""
forecast_services -- Package init and public API.

Responsibility:
    Orchestration that composes the pure forecast engines with an
    injected clock and YAML-backed settings.  This is the **only** layer
    that may read wall-clock time (through ``SystemClock``) or consult
    ``forecast_config``.

Architecture position:
    Services -- orchestration over engines + kernel + config.

    Dependency direction (enforced by tests/architecture/test_forecast_boundaries.py):
        forecast_services/ -> forecast_engines/  (allowed)
        forecast_services/ -> forecast_kernel/   (allowed)
        forecast_services/ -> forecast_config/   (allowed)
        forecast_engines/  -> forecast_services/ (FORBIDDEN)
        forecast_kernel/   -> forecast_services/ (FORBIDDEN)
"""

from forecast_kernel.logging_config import get_logger

logger = get_logger("services")

from forecast_services.forecast_service import (
    ActualRevenue,
    ForecastMetrics,
    ForecastReport,
    ForecastService,
    MonthlyTotal,
    ProjectedRevenue,
    generate_forecast,
)

__all__ = [
    "ActualRevenue",
    "ForecastMetrics",
    "ForecastReport",
    "ForecastService",
    "MonthlyTotal",
    "ProjectedRevenue",
    "generate_forecast",
]
