"""
Structured logging setup shared by the API server and the CLI.
"""
import logging

import structlog


def configure_logging(level: str = "INFO", json: bool = True):
    """Configure structlog on top of the stdlib root logger."""
    logging.basicConfig(level=level.upper(), format="%(message)s")

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
