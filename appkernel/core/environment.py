"""
Application environment

Reads a ``.env`` file from the first folder that contains it and exposes its
values as Python scalars.
"""

from __future__ import annotations

import os
import re
from typing import Any, Iterable

from dotenv import dotenv_values
from loguru import logger

from appkernel.core.exceptions import EnvironmentException

_INT = re.compile(r"^[+-]?\d+$")
_FLOAT = re.compile(r"^[+-]?(\d+\.\d*|\.\d+)$")


def coerce_value(value: str | None) -> Any:
    """Map a raw env string to bool / None / int / float / str."""
    if value is None:
        return None

    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None
    if _INT.match(value):
        return int(value)
    if _FLOAT.match(value):
        return float(value)
    return value


class Environment:
    """Lazy ``.env`` config source.

    ``folders`` is searched in order; the first folder holding ``filename``
    wins. Nothing touches the filesystem until the first read.
    """

    def __init__(self, folders: str | Iterable[str], filename: str = ".env"):
        if isinstance(folders, str):
            folders = [folders]
        self.folders = [str(folder) for folder in folders]
        self.filename = filename
        self._values: dict[str, Any] | None = None
        self._path: str | None = None

    @property
    def path(self) -> str | None:
        return self._path

    @property
    def loaded(self) -> bool:
        return self._values is not None

    def _find_file(self) -> str:
        for folder in self.folders:
            candidate = os.path.join(folder, self.filename)
            if os.path.isfile(candidate):
                return candidate

        raise EnvironmentException(
            f"Missing file {self.filename} in folders: {', '.join(self.folders)}"
        )

    def load(self) -> None:
        path = self._find_file()
        try:
            raw = dotenv_values(path, interpolate=True, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise EnvironmentException(f"Unable to read {path}: {e}") from e

        self._values = {key: coerce_value(value) for key, value in raw.items()}
        self._path = path
        logger.debug(f"Environment loaded from {path} ({len(self._values)} keys)")

    def _ensure_loaded(self) -> dict[str, Any]:
        if self._values is None:
            self.load()
        return self._values

    def get(self, key: str, default: Any = None) -> Any:
        values = self._ensure_loaded()
        if key not in values:
            return default
        return values[key]

    def exists(self, key: str) -> bool:
        return key in self._ensure_loaded()

    def set(self, key: str, value: Any) -> None:
        """Override a value in memory; the file is left untouched."""
        self._ensure_loaded()[key] = value

    def get_all(self) -> dict[str, Any]:
        return dict(self._ensure_loaded())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Environment):
            return NotImplemented
        return self.get_all() == other.get_all()

    def __repr__(self) -> str:
        return f"Environment(folders={self.folders!r}, filename={self.filename!r})"
