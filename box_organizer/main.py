"""FastAPI application entry point."""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from box_organizer.config import settings
from box_organizer.database import init_db
from box_organizer.errors import AppError
from box_organizer.logging import configure_logging
from box_organizer.routes import boxes, locations, qr_codes, workspaces

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Create database tables
    init_db()
    logger.info("app_started", app=settings.APP_NAME, version=settings.APP_VERSION)
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Catalogue storage boxes by location, QR code and full-text search",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_details(errors) -> list:
    details = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({"field": ".".join(loc) or "request", "reason": error.get("msg", "invalid")})
    return details


def _validation_response(errors) -> JSONResponse:
    details = _validation_details(errors)
    first = details[0] if details else {"field": "request", "reason": "invalid"}
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "message": f"{first['field']}: {first['reason']}",
            "details": details,
        },
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _validation_response(exc.errors())


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_handler(request: Request, exc: PydanticValidationError):
    return _validation_response(exc.errors())


# Include routers
app.include_router(workspaces.router, prefix="/api")
app.include_router(locations.router, prefix="/api")
app.include_router(boxes.router, prefix="/api")
app.include_router(qr_codes.router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
