import logging

import structlog


def configure_logging(level: str | None = None):
    if level is None:
        from .config import settings

        level = settings.log_level
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format="%(message)s")
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    # uvicorn access lines duplicate what MetricsMiddleware records
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None):
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
