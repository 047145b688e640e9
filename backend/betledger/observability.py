"""Logfire observability initialization and instrumentation."""

import logging

import logfire
from fastapi import FastAPI

from betledger import __version__
from betledger.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings, app: FastAPI | None = None) -> bool:
    """
    Initialize Logfire and instrument the API.

    Must be called once at startup, before requests are served.

    Configures Logfire cloud tracking and instruments:
    - FastAPI request handling (when ``app`` is given)
    - Python logging (bridges to Logfire)

    Args:
        settings: Application settings containing the Logfire token
        app: FastAPI application to instrument

    Returns:
        True if Logfire is active. Failures are logged and never raised.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="betledger",
            service_version=__version__,
            environment=settings.environment,
        )

        if app is not None:
            logfire.instrument_fastapi(app)

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        return False
