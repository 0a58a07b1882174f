"""Logging setup and the per-account log prefix."""
import logging
from typing import Any, MutableMapping

SENSITIVE_FIELDS = frozenset({"password", "shared_secret", "identity_secret"})
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    logging.getLogger("httpx").setLevel(logging.WARNING)


class BotLogger(logging.LoggerAdapter):
    """Prefixes every record with the owning account's tag, e.g. ``[alice]``."""

    def __init__(self, logger: logging.Logger, tag: str) -> None:
        super().__init__(logger, {"tag": tag})

    @property
    def tag(self) -> str:
        return self.extra["tag"]

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.extra['tag']} {msg}", kwargs


def bot_logger(name: str, tag: str) -> BotLogger:
    return BotLogger(logging.getLogger(name), tag)


def redact(data: dict) -> dict:
    """Mask credentials in a mapping before it is displayed."""
    result = {}
    for key, value in data.items():
        if key.lower() in SENSITIVE_FIELDS:
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = redact(value)
        else:
            result[key] = value
    return result
