"""Application configuration and router setup."""

import logging

import fastapi
from fastapi.middleware import cors
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from components.core import init_db
from components.core.exceptions import ServiceError
from components.core.logging_config import configure_logging
from restapi.endpoints import (
    alert,
    auth,
    dashboard,
    health_check,
    medicine,
    payment,
    plan,
    prediction,
    prescription,
    user,
)

logger = logging.getLogger(__name__)

TITLE = "Prescription Cost Planner"
DESCRIPTION = "Prescription cost tracking, annual cost prediction and EMI payment plans"
VERSION = "1.0.0"


async def service_error_handler(request: fastapi.Request, exc: ServiceError) -> JSONResponse:
    """Turn domain errors into JSON error responses."""
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = fastapi.FastAPI(
        title=TITLE,
        description=DESCRIPTION,
        version=VERSION,
    )

    # Initialize database
    init_db.init_db(app)

    app.add_exception_handler(ServiceError, service_error_handler)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_check.router)
    app.include_router(auth.router)
    app.include_router(user.router)
    app.include_router(dashboard.router)
    app.include_router(medicine.router)
    app.include_router(prescription.router)
    app.include_router(prediction.router)
    app.include_router(plan.router)
    app.include_router(payment.router)
    app.include_router(alert.router)

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        app.openapi_schema = get_openapi(
            title=TITLE,
            version=VERSION,
            description=DESCRIPTION,
            routes=app.routes,
        )
        return app.openapi_schema

    app.openapi = custom_openapi

    return app
