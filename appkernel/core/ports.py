"""Collaborator interfaces consumed by the application context."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DatabaseClient(Protocol):
    """Database handle able to record the queries it executes."""

    def enable_save_queries(self) -> None:
        """Start recording executed queries."""

    def get_saved_queries(self) -> list[Any]:
        """Return the queries recorded so far."""


@runtime_checkable
class ConfigSource(Protocol):
    """Key/value configuration lookup."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for ``key`` or ``default``."""
