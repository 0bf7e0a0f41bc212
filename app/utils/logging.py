"""
Loguru setup shared by the API, the seeders and the client helpers.

Standard-library loggers (uvicorn, SQLAlchemy, httpx) are routed into loguru,
and every record carries the request ID and caller ID of the request that
produced it, or "app" and "-" outside of a request.
"""

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from app.config.settings import settings
from app.utils.context import get_request_id, get_user_id

CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

# ENVIRONMENT value -> section of logging_config.json
CONFIG_SECTIONS = {
    "production": "production",
    "testing": "testing",
}

# Standard-library loggers whose output goes through loguru
INTERCEPTED_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "fastapi",
    "httpx",
    "sqlalchemy.engine",
)


def context_extra() -> Dict[str, str]:
    return {
        "request_id": get_request_id() or "app",
        "user_id": get_user_id() or "-",
    }


class InterceptHandler(logging.Handler):
    loglevel_mapping = {
        50: "CRITICAL",
        40: "ERROR",
        30: "WARNING",
        20: "INFO",
        10: "DEBUG",
        0: "NOTSET",
    }

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except (ValueError, AttributeError):
            level = self.loglevel_mapping[record.levelno]

        # Report the caller of the stdlib logger, not this handler
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


class CustomizeLogger:
    @classmethod
    def make_logger(
        cls,
        config_path: Path = CONFIG_PATH,
        environment: str = "development",
        level_override: Optional[str] = None,
    ):
        config = cls.load_logging_config(config_path)
        section = config.get(CONFIG_SECTIONS.get(environment, "logger"), config["logger"])
        log_file = f"{date.today().strftime('%Y-%m-%d')}-{section['filename']}"

        return cls.customize_logging(
            section, log_file=log_file, level=level_override or section["level"]
        )

    @classmethod
    def customize_logging(cls, section: Dict[str, Any], log_file: str, level: str):
        logger.remove()
        # Request context is attached as each record is emitted
        logger.configure(
            extra={"request_id": "app", "user_id": "-"},
            patcher=lambda record: record["extra"].update(context_extra()),
        )

        logger.add(
            sys.stdout,
            enqueue=True,
            backtrace=True,
            level=level.upper(),
            format=section["console_format"],
            colorize=True,
        )

        # No file sink when log_dir is null (tests)
        log_dir = section.get("log_dir")
        if log_dir:
            sink_options = dict(
                rotation=section["rotation"],
                retention=section["retention"],
                enqueue=True,
                backtrace=True,
                level=level.upper(),
                colorize=False,
            )
            if section.get("use_json_logs") and section["file_format"] == "json":
                logger.add(f"{log_dir}/{log_file}", serialize=True, **sink_options)
            else:
                logger.add(
                    f"{log_dir}/{log_file}", format=section["file_format"], **sink_options
                )

        cls._setup_intercept_handlers()
        return logger

    @staticmethod
    def _setup_intercept_handlers():
        logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

        for log_name in INTERCEPTED_LOGGERS:
            std_logger = logging.getLogger(log_name)
            std_logger.handlers = [InterceptHandler()]
            std_logger.propagate = False

        # SQL statements are only interesting when echo is switched on
        if not settings.DATABASE_ECHO:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    @staticmethod
    def load_logging_config(config_path: Path) -> Dict[str, Any]:
        with open(config_path) as config_file:
            return json.load(config_file)


custom_logger = CustomizeLogger.make_logger(
    environment=settings.ENVIRONMENT, level_override=settings.LOG_LEVEL
)


def get_logger():
    """The configured logger; records pick up the current request and caller."""
    return custom_logger
