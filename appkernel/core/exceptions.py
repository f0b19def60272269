"""
appkernel exceptions

Bootstrap failures are fatal to the calling operation and surfaced unwrapped.
"""

from __future__ import annotations

# =============================================================================
# Base exception
# =============================================================================


class AppKernelException(Exception):
    """Base class for every appkernel error"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


# =============================================================================
# Application errors
# =============================================================================


class ApplicationException(AppKernelException):
    """Raised by the application context and its static accessors"""


class InvalidFolderError(ApplicationException):
    def __init__(self, name):
        self.name = name
        super().__init__(f'"{name}" is not a valid folder.', error_code="INVALID_FOLDER")


class MissingFolderError(ApplicationException):
    def __init__(self, required):
        self.required = tuple(required)
        super().__init__(
            "Missing folder name. Use " + ", ".join(self.required),
            error_code="MISSING_FOLDER",
        )


class InvalidFolderNameError(ApplicationException):
    def __init__(self, name: str | None = None):
        self.name = name
        super().__init__("Invalid folder name", error_code="INVALID_FOLDER_NAME")


class InvalidTimezoneError(ApplicationException):
    def __init__(self, timezone):
        self.timezone = timezone
        super().__init__(
            f"Invalid timezone: {timezone}. Check pytz.all_timezones",
            error_code="INVALID_TIMEZONE",
        )


class InvalidRoutesError(ApplicationException):
    def __init__(self):
        super().__init__("Invalid routes", error_code="INVALID_ROUTES")


class InvalidRouteFileError(ApplicationException):
    def __init__(self, route_file: str | None = None):
        self.route_file = route_file
        super().__init__("Invalid route file", error_code="INVALID_ROUTE_FILE")


class EmptyInstanceError(ApplicationException):
    def __init__(self):
        super().__init__("Empty Instance", error_code="EMPTY_INSTANCE")


# =============================================================================
# Collaborator errors
# =============================================================================


class EnvironmentException(AppKernelException):
    """Environment file missing or unreadable"""

    def __init__(self, message: str):
        super().__init__(message, error_code="ENVIRONMENT_ERROR")


class RouterException(AppKernelException):
    """Route registration or dispatch failure"""

    NO_ROUTE_FOUND = "No route found to dispatch"
    INVALID_DEFAULT_404 = "The default404 is invalid"

    def __init__(self, message: str):
        super().__init__(message, error_code="ROUTER_ERROR")

    @property
    def is_no_route_found(self) -> bool:
        return self.message == self.NO_ROUTE_FOUND
