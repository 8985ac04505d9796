"""
Typed Exception Hierarchy for the Forecast Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the forecast engine (an HTTP boundary, a CLI, a batch job) must
map failures to responses without parsing message strings:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        report = generate_forecast(contracts, transactions, range_spec)
    except InvalidRangeSpecError as e:
        return api_response(status=400, code=e.code, reason=e.reason)
    except InvalidDateFormatError as e:
        return api_response(status=400, code=e.code, value=e.value)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ForecastKernelError (base)
    |
    +-- DateError
    |   +-- InvalidDateFormatError
    |
    +-- RangeSpecError
    |   +-- InvalidRangeSpecError
    |
    +-- ConfigError
        +-- InvalidForecastConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Date            | INVALID_DATE_FORMAT         | String is not one of the accepted shapes
----------------|-----------------------------|-----------------------------------------
Range           | INVALID_RANGE_SPEC          | Unknown preset, partial or inverted range
----------------|-----------------------------|-----------------------------------------
Config          | INVALID_FORECAST_CONFIG     | YAML settings missing or malformed

===============================================================================
SOFT CONDITIONS (NEVER RAISED)
===============================================================================

Contracts without a next bill date, with an unparseable billing frequency,
or with a non-Active status contribute nothing to a projection.  Customers
without categorized history resolve to "Uncategorized".  Empty inputs
produce zero totals.  None of these are errors.

===============================================================================
"""


class ForecastKernelError(Exception):
    """
    Base exception for all forecast kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "FORECAST_KERNEL_ERROR"


# Date-related exceptions


class DateError(ForecastKernelError):
    """Base exception for date parsing errors."""

    code: str = "DATE_ERROR"


class InvalidDateFormatError(DateError):
    """Date string is not ISO-8601, PostgreSQL timestamp, or YYYY-MM-DD."""

    code: str = "INVALID_DATE_FORMAT"

    def __init__(self, value: object, reason: str = "unrecognized date format"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid date format: {value!r} ({reason})")


# Range-related exceptions


class RangeSpecError(ForecastKernelError):
    """Base exception for report range resolution errors."""

    code: str = "RANGE_SPEC_ERROR"


class InvalidRangeSpecError(RangeSpecError):
    """Neither a known preset nor a valid explicit start/end was supplied."""

    code: str = "INVALID_RANGE_SPEC"

    def __init__(
        self,
        reason: str,
        preset: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ):
        self.reason = reason
        self.preset = preset
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Invalid range spec: {reason} "
            f"(preset={preset!r}, start_date={start_date!r}, end_date={end_date!r})"
        )


# Configuration exceptions


class ConfigError(ForecastKernelError):
    """Base exception for forecast configuration errors."""

    code: str = "CONFIG_ERROR"


class InvalidForecastConfigError(ConfigError):
    """Forecast settings file is missing required keys or holds bad values."""

    code: str = "INVALID_FORECAST_CONFIG"

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = errors
        super().__init__(
            f"Invalid forecast configuration in {source}: " + "; ".join(errors)
        )
