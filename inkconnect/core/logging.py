"""
inkconnect/core/logging.py

Logging setup for the API and the live event feed.
- Colored console output through `colorlog`
- logs/app.log (rotating, 1MB x 5) and logs/error.log for ERROR and above
- logs/realtime.log for websocket connects, disconnects and publish failures
- File handlers can be switched off with LOG_TO_FILE (tests, containers)

Call `init_logging()` once from main.py before the app is created.
"""

from logging.config import dictConfig
from pathlib import Path
from typing import Any

from inkconnect.core.config import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] in %(module)s: %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# Modules whose records also go to realtime.log
REALTIME_LOGGERS = ("inkconnect.messaging.manager", "inkconnect.messaging.websocket")

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = (
    "uvicorn.access",
    "sqlalchemy.engine",
    "botocore",
    "boto3",
    "python_http_client",
    "aiosqlite",
    "passlib",
)


def _file_handler(path: Path, level: str = "NOTSET", rotating: bool = True) -> dict[str, Any]:
    handler: dict[str, Any] = {
        "class": "logging.handlers.RotatingFileHandler" if rotating else "logging.FileHandler",
        "filename": str(path),
        "level": level,
        "formatter": "default",
        "encoding": "utf-8",
    }
    if rotating:
        handler["maxBytes"] = 1024 * 1024
        handler["backupCount"] = 5
    return handler


def build_logging_config(
    level: str | None = None,
    log_dir: Path | None = None,
    to_file: bool | None = None,
) -> dict[str, Any]:
    """Build the dictConfig mapping; arguments default to the current settings."""
    level = (level or settings.LOG_LEVEL).upper()
    to_file = settings.LOG_TO_FILE if to_file is None else to_file

    handlers: dict[str, Any] = {
        "console": {"class": "logging.StreamHandler", "formatter": "color"},
    }
    root_handlers = ["console"]
    realtime_handlers: list[str] = []

    if to_file:
        log_dir = log_dir or settings.log_path
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = _file_handler(log_dir / "app.log")
        handlers["error_file"] = _file_handler(log_dir / "error.log", "ERROR", rotating=False)
        handlers["realtime_file"] = _file_handler(log_dir / "realtime.log")
        root_handlers += ["file", "error_file"]
        realtime_handlers.append("realtime_file")

    loggers: dict[str, Any] = {name: {"level": "WARNING"} for name in QUIET_LOGGERS}
    for name in REALTIME_LOGGERS:
        # Propagates to root as well, so realtime records still reach app.log
        loggers[name] = {"handlers": realtime_handlers, "propagate": True}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
            "color": {
                "()": "colorlog.ColoredFormatter",
                "format": f"%(log_color)s{LOG_FORMAT}",
                "log_colors": LOG_COLORS,
            },
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": level, "handlers": root_handlers},
    }


def init_logging() -> None:
    dictConfig(build_logging_config())
