"""Logging setup for the relay.

``SecretSafeFilter`` keeps credentials out of log output: the management
``api_key`` query parameter and the signature header of every provider in
``PROVIDERS``, whether logged as text or as raw ``(name, value)`` header
pairs.
"""
import logging
import logging.config
import re

from hookrelay.core.settings import Settings
from hookrelay.fanout.providers import PROVIDERS

REDACTED = "[REDACTED]"

SIGNATURE_HEADERS = frozenset(provider.signature_header for provider in PROVIDERS.values())

_API_KEY_RE = re.compile(r"(?i)(api_key=)([^&\s]+)")
_SIGNATURE_RE = re.compile(
    r"(?i)((?:%s)['\"]?\s*[:=]\s*['\"]?)([^'\"\s]+)"
    % "|".join(re.escape(name) for name in sorted(SIGNATURE_HEADERS))
)


def _is_signature_header(name: object) -> bool:
    if isinstance(name, bytes):
        name = name.decode("latin-1")
    return isinstance(name, str) and name.lower() in SIGNATURE_HEADERS


class SecretSafeFilter(logging.Filter):
    def _sanitize(self, value: object) -> object:
        if isinstance(value, str):
            value = _API_KEY_RE.sub(rf"\1{REDACTED}", value)
            return _SIGNATURE_RE.sub(rf"\1{REDACTED}", value)

        if isinstance(value, tuple) and len(value) == 2 and _is_signature_header(value[0]):
            return (value[0], REDACTED)

        if type(value) in (list, tuple):
            return type(value)(self._sanitize(item) for item in value)

        return value

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._sanitize(record.msg)

        if isinstance(record.args, tuple):
            record.args = tuple(self._sanitize(item) for item in record.args)
        elif isinstance(record.args, dict):
            record.args = {key: self._sanitize(value) for key, value in record.args.items()}

        return True


def setup_logging(settings: Settings) -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "secret_safe": {
                    "()": "hookrelay.core.logging.SecretSafeFilter",
                }
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["secret_safe"],
                }
            },
            "loggers": {
                "": {
                    "handlers": ["console"],
                    "level": settings.log_level.upper(),
                },
                "uvicorn.access": {
                    "handlers": ["console"],
                    "level": "WARNING",
                    "propagate": False,
                },
            },
        }
    )
