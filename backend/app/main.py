"""FastAPI application entry point with structured logging and health checks."""

import os
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import activities, audit, fraud_alerts
from app.database import init_db
from app.errors import PipelineError
from app.health import router as health_router
from app.logging_config import bind_context, clear_context, get_logger, setup_logging

# Setup structured logging
setup_logging(
    json_logs=os.getenv("JSON_LOGS", "false").lower() == "true",
    log_level=os.getenv("LOG_LEVEL", "INFO"),
)
logger = get_logger(__name__)

VERSION = "1.0.0"

HTTP_STATUS_BY_KIND = {
    "not_found": 404,
    "validation_error": 422,
    "invalid_transition": 409,
    "ineligible_appeal": 409,
    "invalid_alert_state": 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the FastAPI application."""
    logger.info("application_startup", version=VERSION)
    init_db()
    logger.info("database_initialized")
    yield
    logger.info("application_shutdown")


app = FastAPI(
    title="Activity Verifier",
    description=(
        "Scores student activity submissions from their evidence, routes them "
        "through mentor review and appeals, and raises fraud alerts for admins."
    ),
    version=VERSION,
    lifespan=lifespan,
)

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log line of a request with its request id."""
    clear_context()
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    bind_context(request_id=request_id, path=request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    status = HTTP_STATUS_BY_KIND.get(exc.kind, 400)
    logger.warning("pipeline_error", kind=exc.kind, detail=exc.message, status=status)
    return JSONResponse(status_code=status, content=exc.to_dict())


# Health checks (no versioning)
app.include_router(health_router, tags=["health"])

API_V1_PREFIX = "/api/v1"

app.include_router(activities.router, prefix=f"{API_V1_PREFIX}/activities", tags=["activities"])
app.include_router(fraud_alerts.router, prefix=f"{API_V1_PREFIX}/fraud-alerts", tags=["fraud-alerts"])
app.include_router(audit.router, prefix=f"{API_V1_PREFIX}/audit-logs", tags=["audit"])


@app.get("/")
def root():
    """Root endpoint - API information and available endpoints."""
    return {
        "service": "Activity Verifier API",
        "version": VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "health_detailed": "/health/detailed",
        "api_version": "v1",
        "endpoints": {
            "activities": f"{API_V1_PREFIX}/activities/",
            "fraud_alerts": f"{API_V1_PREFIX}/fraud-alerts/",
            "audit_logs": f"{API_V1_PREFIX}/audit-logs/",
        },
    }
