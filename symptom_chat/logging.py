# symptom_chat/logging.py
import json
import logging
from datetime import datetime, timezone

# third-party loggers that log every request at INFO
_CHATTY = ("httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """One JSON object per line; `session` is included when a record carries it."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        session = getattr(record, "session", None)
        if session is not None:
            payload["session"] = session
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    for name in _CHATTY:
        logging.getLogger(name).setLevel(logging.WARNING)
