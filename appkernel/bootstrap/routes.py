"""Route file loading.

A route file is a Python module in the ROUTES folder. It receives the router
three ways: as the module global ``router`` while it executes, through a
``register(router)`` function, or by declaring a ``ROUTES`` table in the
shape accepted by ``Router.setup_routes``.
"""

import importlib.util
import itertools
import os

from loguru import logger

from appkernel.core.config import settings
from appkernel.core.exceptions import InvalidRouteFileError, InvalidRoutesError

_module_ids = itertools.count()


def is_route_file(filename: str, extension: str = settings.ROUTE_EXTENSION) -> bool:
    if filename.startswith("__"):
        return False
    return filename.lower().endswith(extension.lower())


def list_route_files(folder: str, extension: str = settings.ROUTE_EXTENSION) -> list[str]:
    """Route files of ``folder`` in directory order (not sorted)."""
    return [
        entry.name
        for entry in os.scandir(folder)
        if entry.is_file() and is_route_file(entry.name, extension)
    ]


def load_route_file(path: str, router) -> None:
    stem = os.path.splitext(os.path.basename(path))[0]
    spec = importlib.util.spec_from_file_location(f"appkernel_routes_{next(_module_ids)}_{stem}", path)
    if spec is None or spec.loader is None:
        raise InvalidRouteFileError(path)

    module = importlib.util.module_from_spec(spec)
    module.router = router
    spec.loader.exec_module(module)

    register = getattr(module, "register", None)
    if callable(register):
        register(router)

    table = getattr(module, "ROUTES", None)
    if table is not None:
        router.setup_routes(table)

    logger.debug(f"Route file loaded: {path}")


def resolve_route_files(folder: str, routes, extension: str = settings.ROUTE_EXTENSION) -> list[str]:
    """Paths of the route files selected by the ROUTES config value.

    ``None`` selects every route file of ``folder``; a string is a
    comma-separated list of base names.
    """
    if routes is None:
        return [os.path.join(folder, name) for name in list_route_files(folder, extension)]

    if not isinstance(routes, str):
        raise InvalidRoutesError()

    paths = []
    for name in routes.split(","):
        path = os.path.join(folder, name + extension)
        if not os.path.isfile(path):
            raise InvalidRouteFileError(path)
        paths.append(path)
    return paths
