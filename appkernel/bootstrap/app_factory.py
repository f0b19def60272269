"""Application factory module.

Provides the create_app() factory used by the ASGI entrypoint.
"""

from typing import Mapping, Optional

from appkernel.bootstrap.application import Application
from appkernel.core.config import settings
from appkernel.core.environment import Environment
from appkernel.core.logging import setup_logging


def create_app(folders: Optional[Mapping[str, str]] = None, env: Optional[Environment] = None) -> Application:
    """Configure logging and build the application context.

    Args:
        folders: named folders, defaults to ``APPKERNEL_ROOT`` / ``APPKERNEL_ROUTES``.
        env: config source, defaults to the ``.env`` of the ROOT folder.

    Returns:
        Application: the new process-wide instance, usable as an ASGI app.
    """
    setup_logging()

    if folders is None:
        folders = {
            "ROOT": settings.APPKERNEL_ROOT,
            "ROUTES": settings.APPKERNEL_ROUTES,
        }

    return Application(folders, env)
