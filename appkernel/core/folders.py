"""Named filesystem roots"""

from __future__ import annotations

import os
from typing import Iterable, Mapping

from appkernel.core.exceptions import InvalidFolderError, InvalidFolderNameError, MissingFolderError

REQUIRED_FOLDERS = ("ROOT", "ROUTES")


class FolderRegistry:
    """Validated mapping of logical folder names to directory paths.

    Every stored path ends with exactly one ``os.sep``.
    """

    def __init__(self, folders: Mapping[str, str]):
        self._folders = dict(folders)

    @classmethod
    def validate(cls, folders: Mapping[str, object], required: Iterable[str] = REQUIRED_FOLDERS) -> "FolderRegistry":
        required = tuple(required)
        normalized = {}

        for name, folder in folders.items():
            if not isinstance(folder, str) or not os.path.exists(folder):
                raise InvalidFolderError(name)

            if not folder.endswith(os.sep):
                folder += os.sep

            normalized[name] = folder

        if any(name not in normalized for name in required):
            raise MissingFolderError(required)

        return cls(normalized)

    def get(self, name: str) -> str:
        try:
            return self._folders[name]
        except KeyError:
            raise InvalidFolderNameError(name) from None

    def names(self) -> list[str]:
        return list(self._folders)

    def as_dict(self) -> dict[str, str]:
        return dict(self._folders)

    def __contains__(self, name: object) -> bool:
        return name in self._folders

    def __repr__(self) -> str:
        return f"FolderRegistry({self._folders!r})"
