"""
Logging setup: console plus rotating app.log / error.log under LOG_DIR.

Records are plain text by default, or one JSON object per line when
LOG_JSON_FORMAT is on. Request logs carry method, path, status and
duration_ms through `extra=`, which the JSON output keeps as fields.
"""
import json
import logging
import logging.config
import sys
from pathlib import Path

from campusvault.core.config import settings

# Attributes every LogRecord has; anything else came in through `extra=`
RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({k: v for k, v in vars(record).items() if k not in RESERVED_ATTRS})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def get_log_dir() -> Path:
    path = settings.BASE_DIR / settings.LOG_DIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def rotating_handler(filename: Path, level, formatter: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": str(filename),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
    }


def build_logging_config() -> dict:
    level = settings.LOG_LEVEL.upper()
    formatter = "json" if settings.LOG_JSON_FORMAT else "text"
    log_dir = get_log_dir()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {"()": JSONFormatter, "datefmt": "%Y-%m-%dT%H:%M:%S"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": formatter,
                "stream": sys.stdout,
            },
            "app_file": rotating_handler(log_dir / "app.log", level, formatter),
            "error_file": rotating_handler(log_dir / "error.log", "ERROR", formatter),
        },
        "loggers": {
            "campusvault": {
                "handlers": ["console", "app_file", "error_file"],
                "level": level,
                "propagate": False,
            },
            # Requests are already logged by the app middleware
            "uvicorn.access": {"handlers": [], "level": "WARNING", "propagate": False},
            "uvicorn.error": {
                "handlers": ["console", "error_file"],
                "level": "INFO",
                "propagate": False,
            },
        },
    }


def setup_logging():
    logging.config.dictConfig(build_logging_config())
