import json
import logging
from datetime import datetime, timezone

from deadstock.config import get_settings

# Passed through ``extra=`` by the views and the bulk importer.
CONTEXT_FIELDS = ("session_key", "pharmacy_id", "table", "row")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        # Arabic drug names are logged as-is.
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level_name=None) -> None:
    settings = get_settings()
    level = getattr(logging, (level_name or settings.LOG_LEVEL).upper(), logging.INFO)

    handler = logging.StreamHandler()
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    logging.getLogger("deadstock").debug("Logging configured for %s", settings.APP_NAME)
