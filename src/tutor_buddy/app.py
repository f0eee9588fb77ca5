"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tutor_buddy import __version__
from tutor_buddy.api.routes import batch, tutor, user
from tutor_buddy.config import API_HOST, API_PORT, CORS_ALLOWED_ORIGINS
from tutor_buddy.core.dependencies import get_gateway
from tutor_buddy.core.exceptions import NotFoundError, StoreError
from tutor_buddy.core.logging_config import setup_logging

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="Tutor Buddy API",
    description="Backend API for managing tutors, batches, students and payments.",
    version=__version__,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(user.router)
app.include_router(tutor.router)
app.include_router(batch.router)


@app.exception_handler(NotFoundError)
async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(StoreError)
async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    """Report a data-layer fault as a failed request."""
    logger.error("Request %s %s failed in %s", request.method, request.url.path, exc.operation)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


@app.on_event("startup")
def startup_tasks() -> None:
    """Build the gateway and make sure its tables exist."""
    get_gateway().create_schema()


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Tutor Buddy API on http://%s:%s", API_HOST, API_PORT)
    uvicorn.run("tutor_buddy.app:app", host=API_HOST, port=API_PORT, reload=True)
