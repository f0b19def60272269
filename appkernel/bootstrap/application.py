"""Application context.

Construction validates folders, loads the environment, applies diagnostics
and timezone settings and loads route files. ``run()`` dispatches one
request. The most recently constructed instance is also reachable through
the class-level accessors (``Application.get_router()`` ...).
"""

from __future__ import annotations

import sys
import time
from typing import Any, Dict, List, Mapping, Optional

import anyio
from loguru import logger
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from appkernel.bootstrap.routes import load_route_file, resolve_route_files
from appkernel.core import memory
from appkernel.core.config import settings
from appkernel.core.environment import Environment
from appkernel.core.exceptions import EmptyInstanceError, RouterException
from appkernel.core.folders import REQUIRED_FOLDERS, FolderRegistry
from appkernel.core.ports import DatabaseClient
from appkernel.core.runtime import RuntimeConfig, apply_timezone, configure_diagnostics
from appkernel.http.messages import get_protocol_version, get_server_params, with_protocol_version
from appkernel.http.router import Router


class Application:
    """Front controller owning folders, config, router, database and bag."""

    _instance: Optional["Application"] = None

    required_folders = REQUIRED_FOLDERS

    def __init__(self, folders: Mapping[str, str], env: Optional[Environment] = None):
        self.folders: FolderRegistry = FolderRegistry.validate(folders, self.required_folders)

        self.router: Router = Router()
        self.database: Optional[DatabaseClient] = None
        self.request: Optional[Request] = None
        self.response = None
        self.bags: Dict[str, Any] = {}
        self.run_elapsed_times: List[float] = []
        self.route_files: List[str] = []
        self.display_errors = False
        # serializes ASGI requests, run() keeps per-context state
        self._run_lock = anyio.Lock()
        type(self)._set_instance(self)

        self.config = env if env is not None else Environment(self.folders.get("ROOT"))
        self.runtime = RuntimeConfig.from_source(self.config)

        self._setup_application()
        self._load_routes()

        logger.info(
            f"Application ready: debug={self.is_debug}, timezone={self.runtime.timezone}, "
            f"routes={len(self.router.routes)}"
        )

    # ------------------------------------------------------------------
    # Construction steps
    # ------------------------------------------------------------------
    @classmethod
    def _set_instance(cls, app: Optional["Application"]) -> None:
        # stored on the base class so subclasses share one slot
        Application._instance = app

    @property
    def is_debug(self) -> bool:
        return self.runtime.is_debug

    def _setup_application(self) -> None:
        self.display_errors = configure_diagnostics(self.runtime.show_diagnostics)
        apply_timezone(self.runtime.timezone)

    def _load_routes(self) -> None:
        paths = resolve_route_files(self.folders.get("ROUTES"), self.config.get("ROUTES"))
        for path in paths:
            self._load_route_file(path)

    def _load_route_file(self, path: str) -> None:
        router = self.router
        load_route_file(path, router)
        self.router = router
        self.route_files.append(path)

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------
    def run(self, request: Request):
        """Dispatch ``request``; ``None`` when no route handles it."""
        run_start = time.perf_counter()

        self.router.find_route(request)

        try:
            response = self.router.dispatch(request)
        except RouterException as e:
            if e.is_no_route_found:
                logger.debug(f"Nothing to dispatch for {request.method} {request.url.path}")
                return None
            raise

        response = with_protocol_version(response, self._extract_protocol_version(request))

        self.request = request
        self.response = response

        self.run_elapsed_times.append(round(time.perf_counter() - run_start, 6))
        overflow = len(self.run_elapsed_times) - settings.MAX_RUN_ELAPSED_TIMES
        if overflow > 0:
            del self.run_elapsed_times[:overflow]

        return response

    @staticmethod
    def _extract_protocol_version(request: Request) -> str:
        server_params = get_server_params(request)
        if "SERVER_PROTOCOL" not in server_params:
            return get_protocol_version(request)

        return server_params["SERVER_PROTOCOL"][5:]

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] == "lifespan":
            while True:
                message = await receive()
                if message["type"] == "lifespan.startup":
                    await send({"type": "lifespan.startup.complete"})
                elif message["type"] == "lifespan.shutdown":
                    await send({"type": "lifespan.shutdown.complete"})
                    return

        if scope["type"] != "http":
            return

        request = Request(scope, receive)
        async with self._run_lock:
            response = await run_in_threadpool(self.run, request)
        if response is None:
            response = PlainTextResponse("Not Found", status_code=404)
        await response(scope, receive, send)

    # ------------------------------------------------------------------
    # Class-level accessors
    # ------------------------------------------------------------------
    @classmethod
    def get_instance(cls) -> "Application":
        if Application._instance is None:
            raise EmptyInstanceError()
        return Application._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._set_instance(None)

    @classmethod
    def get_folder(cls, name: str) -> str:
        return cls.get_instance().folders.get(name)

    @classmethod
    def get_config(cls) -> Environment:
        return cls.get_instance().config

    @classmethod
    def get_router(cls) -> Router:
        return cls.get_instance().router

    @classmethod
    def get_database(cls) -> Optional[DatabaseClient]:
        return cls.get_instance().database

    @classmethod
    def set_database(cls, database: DatabaseClient) -> None:
        app = cls.get_instance()
        if app.is_debug and app.runtime.debug_database:
            database.enable_save_queries()
        app.database = database

    @classmethod
    def get_from_bag(cls, name: str) -> Any:
        return cls.get_instance().bags.get(name)

    @classmethod
    def set_in_bag(cls, name: str, value: Any) -> None:
        cls.get_instance().bags[name] = value

    @classmethod
    def remove_from_bag(cls, name: str) -> None:
        cls.get_instance().bags.pop(name, None)

    # ------------------------------------------------------------------
    # Debug snapshot
    # ------------------------------------------------------------------
    def get_debug_infos(self) -> Dict[str, Any]:
        if not self.is_debug:
            return {}

        return {
            "memory": self._get_debug_memory(),
            "run_elapsed_times": self._get_debug_run_elapsed_times(),
            "included_files": self._get_debug_included_files(),
            "request": self._get_debug_request(),
            "response": self._get_debug_response(),
            "database": self._get_debug_database(),
            "session": self._get_debug_session(),
        }

    def _get_debug_memory(self) -> Optional[Dict[str, Any]]:
        if not self.runtime.debug_memory:
            return None

        usage = memory.current_usage()
        limit = self.runtime.memory_limit
        return {
            "usage": usage,
            "limit": limit,
            "percentage": memory.percentage(usage, limit),
            "summary": memory.summary(usage, limit),
        }

    def _get_debug_run_elapsed_times(self) -> List[float]:
        if self.runtime.debug_run_elapsed_times:
            return list(self.run_elapsed_times)
        return []

    def _get_debug_included_files(self) -> Optional[List[str]]:
        if not self.runtime.debug_included_files:
            return None

        files = {
            module.__file__
            for module in list(sys.modules.values())
            if getattr(module, "__file__", None)
        }
        files.update(self.route_files)
        return sorted(files)

    def _get_debug_request(self) -> Optional[Request]:
        if self.request is not None and self.runtime.debug_request:
            return self.request
        return None

    def _get_debug_response(self):
        if self.response is not None and self.runtime.debug_response:
            return self.response
        return None

    def _get_debug_database(self) -> Optional[list]:
        if self.database is not None and self.runtime.debug_database:
            return self.database.get_saved_queries()
        return None

    def _get_debug_session(self) -> Optional[dict]:
        if self.request is None or not self.runtime.debug_session:
            return None
        session = self.request.scope.get("session")
        if session is None:
            return None
        return dict(session)
