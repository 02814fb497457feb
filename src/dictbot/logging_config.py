"""JSON logging for the webhook and the queue worker.

Every record is one JSON object on stdout with ``severity``, ``timestamp`` and
``logger`` fields, plus static ``service`` and ``environment`` tags so webhook
and worker logs can be told apart once they share a log group.

Usage:
    from dictbot.logging_config import configure_logging
    configure_logging(settings.log_level, settings.environment)
"""

import logging
import logging.config

SERVICE_NAME = "discord-dictbot"

# Follow-up URLs embed interaction tokens; httpx logs every request URL at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "botocore", "boto3", "urllib3")


def build_logging_config(level: str = "INFO", environment: str = "development") -> dict:
    """Return the dictConfig mapping for the given root level and environment."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(funcName)s %(message)s",
                "rename_fields": {
                    "levelname": "severity",
                    "asctime": "timestamp",
                    "name": "logger",
                },
                "static_fields": {
                    "service": SERVICE_NAME,
                    "environment": environment,
                },
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
    }


def configure_logging(level: str = "INFO", environment: str = "development") -> None:
    """Install JSON logging. Called from the FastAPI lifespan and at worker cold start."""
    logging.config.dictConfig(build_logging_config(level, environment))
