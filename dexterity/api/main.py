"""FastAPI application for the route quoting service."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dexterity import __version__
from dexterity.api.endpoints import router
from dexterity.api.schemas import ErrorResponse
from dexterity.errors import (
    ConfigError,
    DexterityError,
    InvalidPathError,
    NetworkError,
    NoValidRouteError,
)
from dexterity.logs import configure_logging

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("DEXTERITY_HOST", "0.0.0.0")
PORT = int(os.environ.get("DEXTERITY_PORT", "8000"))
DEBUG = os.environ.get("DEXTERITY_DEBUG", "false").lower() in ("true", "1", "yes")

# Error class -> HTTP status; anything else derived from DexterityError is a 500
ERROR_STATUS: dict[type[DexterityError], int] = {
    InvalidPathError: 404,
    NoValidRouteError: 422,
    NetworkError: 502,
    ConfigError: 500,
}

configure_logging(debug=DEBUG)

app = FastAPI(
    title="Dexterity Router",
    description="Multi-hop route finding across AMM vaults",
    version=__version__,
)


@app.exception_handler(DexterityError)
async def dexterity_error_handler(request: Request, exc: DexterityError) -> JSONResponse:
    """Render routing errors as {code, error}."""
    status = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500
    )
    log = logger.error if status >= 500 else logger.info
    log("request_failed", path=request.url.path, code=exc.code, error=str(exc))
    body = ErrorResponse(code=exc.code, error=str(exc))
    return JSONResponse(status_code=status, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - DEXTERITY_HOST: Host to bind to (default: 0.0.0.0)
    - DEXTERITY_PORT: Port to bind to (default: 8000)
    - DEXTERITY_DEBUG: Enable debug logging and reload mode (default: false)
    - DEXTERITY_POOLS_FILE: JSON pool list to load at startup
    - DEXTERITY_QUOTE_MODE: "local" or "contract" (default: local)
    """
    uvicorn.run(
        "dexterity.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
