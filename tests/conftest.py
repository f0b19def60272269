import os
import time
import warnings

import pytest

from appkernel.bootstrap.application import Application
from appkernel.core.environment import Environment

ROUTES_FILE = '''
from appkernel.http import Response


def no_handle(request, next_handler):
    return next_handler(request)


def home(request, next_handler):
    return Response("home", status_code=200)


ROUTES = {
    "routes": [
        {"methods": ["GET"], "url": "/no_handle", "callback": no_handle, "name": "test_no_handle"},
        {"methods": ["GET"], "url": "/", "callback": home, "name": "test_home"},
    ]
}
'''

ROUTER_404_FILE = '''
def no_handle(request, next_handler):
    return next_handler(request)


ROUTES = {
    "router": {"default_404": False},
    "routes": [
        {"methods": ["GET"], "url": "/no_handle", "callback": no_handle, "name": "test_no_handle"},
    ],
}
'''

ENV_FILES = {
    "test_empty.env": "",
    "test_bad_timezone.env": "TIMEZONE=invalid\nROUTES=test_routes\n",
    "test_good_timezone.env": "TIMEZONE=Europe/Paris\nROUTES=test_routes\n",
    "test_invalid_routes.env": "ROUTES=1\n",
    "test_invalid_route.env": "ROUTES=missing_file\n",
    "test_valid_routes.env": "ROUTES=test_routes\n",
    "test_router_404.env": "ROUTES=test_router_404\n",
    "test_debug.env": (
        "DEBUG=true\n"
        "DEBUG_PHP=true\n"
        "DEBUG_REQUEST=true\n"
        "DEBUG_RESPONSE=true\n"
        "DEBUG_DATABASE=true\n"
        "DEBUG_SESSION=true\n"
        "DEBUG_MEMORY=true\n"
        "DEBUG_RUN_ELAPSED_TIMES=true\n"
        "DEBUG_INCLUDED_FILES=true\n"
        "MEMORY_LIMIT=256M\n"
        "ROUTES=test_routes\n"
    ),
    "test_bare_memory_limit.env": "DEBUG=true\nDEBUG_MEMORY=true\nMEMORY_LIMIT\nROUTES=test_routes\n",
    "test_debug_flags_off.env": "DEBUG=true\nROUTES=test_routes\n",
    "test_debug_exclude_database.env": (
        "DEBUG=true\n"
        "DEBUG_PHP=false\n"
        "DEBUG_MEMORY=true\n"
        "DEBUG_INCLUDED_FILES=true\n"
        "DEBUG_DATABASE=false\n"
        "ROUTES=test_routes\n"
    ),
}


@pytest.fixture(autouse=True)
def isolated_process_state(monkeypatch):
    """Reset the singleton, warning filters and TZ around every test."""
    monkeypatch.setenv("TZ", os.environ.get("TZ", "UTC"))
    Application.reset_instance()
    with warnings.catch_warnings():
        yield
    Application.reset_instance()
    monkeypatch.undo()
    if hasattr(time, "tzset"):
        time.tzset()


@pytest.fixture
def folders_root(tmp_path):
    root = tmp_path / "folders"
    for name in ("app", "www", "routes", "tests_routes", "tests_env"):
        (root / name).mkdir(parents=True)

    (root / ".env").write_text("", encoding="utf-8")
    (root / "routes" / "test_routes.py").write_text(ROUTES_FILE, encoding="utf-8")
    (root / "tests_routes" / "test_routes.py").write_text(ROUTES_FILE, encoding="utf-8")
    (root / "tests_routes" / "test_router_404.py").write_text(ROUTER_404_FILE, encoding="utf-8")
    for filename, content in ENV_FILES.items():
        (root / "tests_env" / filename).write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def app_folders(folders_root):
    """Folders without trailing separators, using the ``routes`` folder."""
    return {
        "ROOT": str(folders_root),
        "APP": os.path.join(str(folders_root), "app"),
        "WWW": os.path.join(str(folders_root), "www"),
        "ROUTES": os.path.join(str(folders_root), "routes"),
    }


@pytest.fixture
def test_folders(folders_root):
    """Folders with trailing separators, using the ``tests_routes`` folder."""
    return {
        "ROOT": str(folders_root),
        "APP": os.path.join(str(folders_root), "app") + os.sep,
        "WWW": os.path.join(str(folders_root), "www") + os.sep,
        "ROUTES": os.path.join(str(folders_root), "tests_routes") + os.sep,
    }


@pytest.fixture
def make_env(folders_root):
    def _make(filename):
        return Environment([str(folders_root / "tests_env")], filename)

    return _make


class FakeDatabase:
    def __init__(self):
        self.save_queries = False
        self.queries = []

    def enable_save_queries(self):
        self.save_queries = True

    def get_saved_queries(self):
        return list(self.queries)


@pytest.fixture
def fake_database():
    return FakeDatabase()
