"""Logging setup: stdlib logging, one console handler, module-level loggers."""

import logging
import logging.config


def build_dict_config(level: str = "INFO") -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            }
        },
        "loggers": {
            "app": {"handlers": ["console"], "level": level.upper(), "propagate": False},
            # Request logs from the ES client are noisy at INFO
            "elastic_transport": {"level": "WARNING"},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(build_dict_config(level))
