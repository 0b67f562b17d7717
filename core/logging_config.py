# core/logging_config.py
"""Logging configuration for the APAR inspection API."""
import logging
import logging.config


def setup_logging(log_level: str = "INFO") -> None:
    """Configure root and application loggers to write to stdout."""
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
        },
        "handlers": {
            "default": {
                "level": log_level,
                "formatter": "standard",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {
                "handlers": ["default"],
                "level": log_level,
            },
            # SQL echo is controlled by settings.DEBUG on the engine
            "sqlalchemy.engine": {
                "level": "WARNING",
                "propagate": True,
            },
        },
    })
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
