import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from config import LOG_LEVEL, SQL_LOG_LEVEL


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line: timestamp, level, logger, message and, when
    present, the exception text and the entity ids attached via ``extra``.
    """

    EXTRA_FIELDS = ("role", "property_id", "vendor_id", "agent_id", "admin_id", "service_id")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        for key in self.EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging() -> None:
    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)

    # uvicorn --reload re-imports main; drop handlers from the previous import
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(LOG_LEVEL)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(LOG_LEVEL)
    logging.getLogger("sqlalchemy.engine").setLevel(SQL_LOG_LEVEL)
