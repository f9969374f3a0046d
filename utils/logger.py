import json
import logging
import sys
from typing import Any, Dict, Optional

_INITIALIZED = False


def configure_logging(level_name: Optional[str] = None, fmt: Optional[str] = None, force: bool = False) -> None:
    global _INITIALIZED
    if _INITIALIZED and not force:
        return
    if level_name is None or fmt is None:
        from app.config import get_settings

        settings = get_settings()
        level_name = level_name or settings.log_level
        fmt = fmt or settings.log_format
    level = getattr(logging, level_name.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    # Clear existing handlers to avoid duplicate logs when reloaded
    root.handlers.clear()

    handler = logging.StreamHandler(stream=sys.stdout)
    if fmt.lower() == "json":
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    _INITIALIZED = True


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        props = getattr(record, "props", None)
        if isinstance(props, dict) and props:
            payload.update(props)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)


def kv_message(message: str, **fields: Any) -> str:
    """Return message with appended JSON key-values, e.g. ``fetch_done | {"records": 3, "year": 2021}``."""
    if not fields:
        return message
    return f"{message} | {json.dumps(fields, ensure_ascii=False, sort_keys=True, default=str)}"
