"""FastAPI application for the Betledger API.

This module:
- Builds the FastAPI app with its ledger-backed service
- Maps ledger errors to HTTP status codes
- Initializes Logfire on startup
- Provides the health check endpoint
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from betledger import __version__
from betledger.api.routes import bets_router, users_router
from betledger.config import Settings, get_settings
from betledger.ledger import LedgerError, PartialSettlementError
from betledger.observability import initialize_logfire
from betledger.services import BetService, create_bet_service

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(x) for x in error.get("loc", ()) if x != "body")
        parts.append(f"{loc}: {error.get('msg')}" if loc else str(error.get("msg")))
    return "; ".join(parts) or "invalid request"


async def handle_partial_settlement(
    request: Request, exc: PartialSettlementError
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Internal ledger error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )
    report = exc.report
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "event_id": report.event_id,
            "settled": report.settled,
            "failed": [f.model_dump() for f in report.failures],
        },
    )


async def handle_ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Internal ledger error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )
    logger.info(f"Responding with status {exc.status_code}: {exc} - Path: {request.url.path}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = f"Validation failed: {_format_validation_error(exc)}"
    logger.info(f"Responding with status 400: {message} - Path: {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": message}
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled internal error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


def create_app(
    settings: Settings | None = None,
    service: BetService | None = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Configuration; defaults to ``get_settings()``
        service: Service to serve; defaults to one over a fresh empty ledger
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        initialize_logfire(settings, app)
        logger.info(
            f"Starting Betledger API server (environment={settings.environment})"
        )
        yield
        logger.info("Shutting down Betledger API server")

    app = FastAPI(
        title="Betledger API",
        description="Bet placement and settlement against in-memory user balances",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.bet_service = service or create_bet_service(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PartialSettlementError, handle_partial_settlement)
    app.add_exception_handler(LedgerError, handle_ledger_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(bets_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)

    @app.get("/health", tags=["Health"])
    def health_check() -> Dict[str, str]:
        """Health check endpoint for load balancers and monitoring."""
        return {"status": "ok", "service": "betledger-api", "version": __version__}

    return app
