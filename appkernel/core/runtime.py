"""Runtime configuration: debug flags, diagnostics and timezone"""

from __future__ import annotations

import os
import time
import warnings

import pytz
from loguru import logger
from pydantic import BaseModel, ConfigDict

from appkernel.core.config import settings
from appkernel.core.exceptions import InvalidTimezoneError
from appkernel.core.ports import ConfigSource

DEFAULT_TIMEZONE = "UTC"

# Lower-severity categories muted outside diagnostics mode
QUIET_WARNING_CATEGORIES = (
    DeprecationWarning,
    PendingDeprecationWarning,
    FutureWarning,
    ImportWarning,
    ResourceWarning,
)

# env key -> RuntimeConfig field
FLAG_KEYS = {
    "DEBUG": "is_debug",
    "DEBUG_PHP": "debug_diagnostics",
    "DEBUG_REQUEST": "debug_request",
    "DEBUG_RESPONSE": "debug_response",
    "DEBUG_DATABASE": "debug_database",
    "DEBUG_SESSION": "debug_session",
    "DEBUG_MEMORY": "debug_memory",
    "DEBUG_RUN_ELAPSED_TIMES": "debug_run_elapsed_times",
    "DEBUG_INCLUDED_FILES": "debug_included_files",
}


def _text(value, default: str) -> str:
    # bare or null keys fall back to the default
    if value is None:
        return default
    return str(value)


class RuntimeConfig(BaseModel):
    """Typed view over the application environment.

    A flag is only on when the source holds exactly ``True``.
    """

    model_config = ConfigDict(frozen=True)

    is_debug: bool = False
    debug_diagnostics: bool = False
    debug_request: bool = False
    debug_response: bool = False
    debug_database: bool = False
    debug_session: bool = False
    debug_memory: bool = False
    debug_run_elapsed_times: bool = False
    debug_included_files: bool = False
    timezone: str = DEFAULT_TIMEZONE
    memory_limit: str = settings.DEFAULT_MEMORY_LIMIT

    @classmethod
    def from_source(cls, source: ConfigSource) -> "RuntimeConfig":
        """Build from anything exposing ``get(key, default=None)``."""
        values = {field: source.get(key) is True for key, field in FLAG_KEYS.items()}
        values["timezone"] = _text(source.get("TIMEZONE"), DEFAULT_TIMEZONE)
        values["memory_limit"] = _text(source.get("MEMORY_LIMIT"), settings.DEFAULT_MEMORY_LIMIT)
        return cls(**values)

    @property
    def show_diagnostics(self) -> bool:
        return self.is_debug and self.debug_diagnostics


def configure_diagnostics(verbose: bool) -> bool:
    """Apply process-wide warning visibility.

    Returns the resulting ``display_errors`` state.
    """
    if verbose:
        warnings.resetwarnings()
        warnings.simplefilter("default")
        logger.debug("Diagnostics enabled: every warning category is shown")
        return True

    for category in QUIET_WARNING_CATEGORIES:
        warnings.filterwarnings("ignore", category=category)
    return False


def is_valid_timezone(timezone) -> bool:
    return isinstance(timezone, str) and timezone in pytz.all_timezones_set


def apply_timezone(timezone) -> str:
    """Validate ``timezone`` and make it the process default."""
    if not is_valid_timezone(timezone):
        raise InvalidTimezoneError(timezone)

    os.environ["TZ"] = timezone
    if hasattr(time, "tzset"):
        time.tzset()
    logger.debug(f"Default timezone set to {timezone}")
    return timezone
