"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import get_client_ip
from api.logging import RequestLog, record_unexpected_error, write_request_log
from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import calendar_router, events_router, health_router, parse_router
from core import database
from core.config import API_DEBUG, API_VERSION

# Routes that write their own request log, including on failure
SELF_LOGGED_PATHS = {"/v1/parse/bulk", "/v1/events/import"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: make sure the events database exists
    database.DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = database.get_connection()
    try:
        database.create_schema(conn)
    finally:
        conn.close()

    yield


app = FastAPI(
    title="PI Planning Calendar API",
    description="REST API for importing, storing and laying out PI planning calendar events",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format and log them."""
    if request.url.path not in SELF_LOGGED_PATHS:
        request_log = RequestLog(
            endpoint=request.url.path,
            method=request.method,
            client_ip=get_client_ip(request),
        )
        record_unexpected_error(request_log, exc)
        write_request_log(request_log)

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(parse_router)
app.include_router(events_router)
app.include_router(calendar_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
