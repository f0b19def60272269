import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from appkernel.core.config import settings

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_log_config() -> dict:
    """uvicorn's logging config with a timestamp on every line."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    for formatter in log_config["formatters"].values():
        formatter["fmt"] = "%(asctime)s " + formatter["fmt"]
        formatter["datefmt"] = LOG_DATE_FORMAT
    return log_config


def main() -> None:
    uvicorn.run(
        "appkernel.asgi:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=build_log_config(),
    )


if __name__ == '__main__':
    main()
