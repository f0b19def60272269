import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (the directory holding the appkernel package)
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))


class Settings(BaseSettings):
    """Process settings for the kernel itself.

    Application-level flags (DEBUG, TIMEZONE, ROUTES, ...) are read from the
    application's own environment file, see ``appkernel.core.environment``.
    """

    APP_NAME: str = "appkernel"
    APP_VERSION: str = "1.0.0"

    LOG_LEVEL: str = Field(default="INFO")
    LOG_TO_FILE: bool = Field(default=False)
    LOG_FILE_PATH: str = Field(default=os.path.join(BASE_DIR, "data", "logs", "app.log"))

    # Route files are Python modules
    ROUTE_EXTENSION: str = ".py"

    # ini-style ceiling reported when the application env has no MEMORY_LIMIT
    DEFAULT_MEMORY_LIMIT: str = "-1"

    # Oldest run timings are dropped past this count
    MAX_RUN_ELAPSED_TIMES: int = Field(default=1000)

    SERVER_HOST: str = Field(default="127.0.0.1")
    SERVER_PORT: int = Field(default=8000)

    # Folders used by the ASGI entrypoint
    APPKERNEL_ROOT: str = Field(default=BASE_DIR)
    APPKERNEL_ROUTES: str = Field(default=os.path.join(BASE_DIR, "routes"))

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, ".env"),
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
