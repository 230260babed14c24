"""Runtime configuration read from environment variables.

Environment Variables:
    WINDOWFX_MAX_WORKERS: Thread pool size for scenario and trade fan-out
        (default: 1, meaning sequential)
    WINDOWFX_HOLIDAY_DATA: Path of an extra holiday calendar file merged over
        the bundled calendars (see :meth:`ReferenceData.standard`)
"""

import os

from windowfx.exceptions import ConfigurationError

ENV_MAX_WORKERS = "WINDOWFX_MAX_WORKERS"
DEFAULT_MAX_WORKERS = 1


def get_max_workers() -> int:
    """Thread pool size configured through ``WINDOWFX_MAX_WORKERS``.

    Raises:
        ConfigurationError: If the variable is set but not a positive integer
    """
    raw = os.getenv(ENV_MAX_WORKERS)
    if raw is None or not raw.strip():
        return DEFAULT_MAX_WORKERS
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            "Invalid worker count", context={"variable": ENV_MAX_WORKERS, "value": raw}
        ) from None
    if value < 1:
        raise ConfigurationError(
            "Worker count must be at least 1", context={"variable": ENV_MAX_WORKERS, "value": raw}
        )
    return value
