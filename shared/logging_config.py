"""
FlowerEngine Logging

structlog setup shared by the command line entry points.
"""

import logging
import sys

import structlog


def configure_logging(level: int = logging.WARNING) -> None:
    """
    Configure structured logging on top of the standard library.

    Args:
        level: Minimum level to emit
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
        force=True
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
