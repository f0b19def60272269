"""Bootstrap module for application initialization.

This module provides:
- The application context (Application)
- Route file loading (load_route_file, resolve_route_files)
- The ASGI application factory (create_app)
"""

from appkernel.bootstrap.app_factory import create_app
from appkernel.bootstrap.application import Application
from appkernel.bootstrap.routes import load_route_file, resolve_route_files

__all__ = ["Application", "create_app", "load_route_file", "resolve_route_files"]
