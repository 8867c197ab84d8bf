"""structlog setup shared by the API server and scripts."""

import logging

import structlog


def configure_logging(debug: bool = False) -> None:
    """Configure structlog with a console renderer.

    Args:
        debug: Emit DEBUG events when True, INFO and above otherwise
    """
    log_level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
