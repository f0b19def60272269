"""Logging setup

loguru sinks with credential redaction applied to every record.
"""
import os
import re
import sys
from typing import Any, Dict

from loguru import logger

from appkernel.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

SENSITIVE_PATTERNS = [
    (re.compile(r'(api[_-]?key|secret[_-]?key|access[_-]?key)["\']?\s*[:=]\s*["\']?([a-zA-Z0-9_\-]{8,})["\']?', re.IGNORECASE), r'\1=***REDACTED***'),
    (re.compile(r'(password|passwd|pwd)["\']?\s*[:=]\s*["\']?([^"\'\s,}]{3,})["\']?', re.IGNORECASE), r'\1=***REDACTED***'),
    (re.compile(r'(token|bearer)["\']?\s*[:=]\s*["\']?([a-zA-Z0-9_\-\.]{20,})["\']?', re.IGNORECASE), r'\1=***REDACTED***'),
    # DSN with inline credentials
    (re.compile(r'(mysql|postgres|postgresql|redis|sqlite)://([^:/]+):([^@]+)@', re.IGNORECASE), r'\1://\2:***@'),
]

SENSITIVE_KEYS = frozenset({
    'password', 'passwd', 'pwd', 'secret', 'token', 'api_key',
    'apikey', 'secret_key', 'access_key', 'authorization', 'credential',
})


def sanitize_log_message(message: str) -> str:
    if not message:
        return message

    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def sanitize_dict(data: Dict[str, Any], sensitive_keys=SENSITIVE_KEYS) -> Dict[str, Any]:
    """Redact values whose key looks like a credential, recursing into dicts."""
    if not isinstance(data, dict):
        return data

    result = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = '***REDACTED***'
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            result[key] = sanitize_log_message(value)
        else:
            result[key] = value
    return result


class SanitizingFilter:
    """loguru filter redacting message and extra"""

    def __call__(self, record: Dict[str, Any]) -> bool:
        if 'message' in record:
            record['message'] = sanitize_log_message(record['message'])
        if 'extra' in record and isinstance(record['extra'], dict):
            record['extra'] = sanitize_dict(record['extra'])
        return True


def setup_logging(level: str | None = None, log_to_file: bool | None = None) -> None:
    """(Re)configure loguru sinks.

    Args:
        level: sink level, defaults to ``settings.LOG_LEVEL``
        log_to_file: add the rotating file sink, defaults to ``settings.LOG_TO_FILE``
    """
    level = level or settings.LOG_LEVEL
    if log_to_file is None:
        log_to_file = settings.LOG_TO_FILE

    logger.remove()
    sanitizing_filter = SanitizingFilter()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=True,
        filter=sanitizing_filter,
    )

    if log_to_file:
        log_dir = os.path.dirname(settings.LOG_FILE_PATH)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        logger.add(
            settings.LOG_FILE_PATH,
            format=FILE_FORMAT,
            level=level,
            rotation="100 MB",
            retention="14 days",
            encoding="utf-8",
            filter=sanitizing_filter,
        )

    logger.debug(f"Logging ready: level={level}, file={log_to_file}")
