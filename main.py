import json
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import MODE, settings
from core.logging_config import setup_logging
from db import init_db
from api.auth.views import router as auth_router
from api.apars.views import router as apars_router
from api.inspections.views import router as inspections_router
from api.dashboard.views import router as dashboard_router
from api.admin.views import router as admin_router

logger = logging.getLogger(__name__)

# Request locations that are not part of the field name
_LOCATION_PREFIXES = {"body", "query", "path"}


def get_cors_origins() -> list[str]:
    """Get CORS origins from environment variable or use defaults."""
    cors_env = os.environ.get("CORS_ORIGINS", "")

    # Try to parse as JSON array
    if cors_env:
        try:
            origins = json.loads(cors_env)
            if isinstance(origins, list):
                return origins
        except json.JSONDecodeError:
            # If not valid JSON, treat as comma-separated
            return [o.strip() for o in cors_env.split(",") if o.strip()]

    # Default origins for local frontends
    return [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]


def validation_errors_by_field(errors) -> dict[str, str]:
    """
    Flatten FastAPI/Pydantic error entries into {field: message}.
    Nested locations are dotted, e.g. 'items.0.status'. First error wins.
    """
    result: dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
        field = ".".join(loc) or "body"
        result.setdefault(field, error.get("msg", "Invalid value"))
    return result


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    if MODE == "local":
        # Alembic owns the schema everywhere else
        await init_db()
    logger.info("APAR Inspection API started (mode=%s)", MODE)
    yield


app = FastAPI(
    title="APAR Inspection API",
    description="API for registering fire extinguishers (APAR) and recording their periodic inspections",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return request validation failures in the same shape as domain ValidationErrors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder({
            "detail": {
                "message": "Validation failed",
                "errors": validation_errors_by_field(exc.errors()),
            }
        }),
    )


# Get CORS origins from environment or use defaults
cors_origins = get_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Authentication endpoints
app.include_router(auth_router, prefix="/api/v1")

# Business endpoints
app.include_router(apars_router, prefix="/api/v1")
app.include_router(inspections_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


# Health check endpoint
@app.get("/health", tags=["system"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
