from __future__ import annotations

from fastapi import FastAPI

from docshare.application.dtos.common_dto import HealthResponse, RootResponse
from docshare.infrastructure.api.error_handlers import register_error_handlers
from docshare.infrastructure.api.middlewares import add_default_middlewares
from docshare.infrastructure.api.routes.auth_routes import router as auth_router
from docshare.infrastructure.api.routes.document_routes import router as document_router
from docshare.infrastructure.api.routes.profile_routes import router as profile_router
from docshare.infrastructure.api.routes.share_routes import router as share_router
from docshare.infrastructure.log_config import setup_logging


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title="DocShare Backend",
        version="0.1.0",
        description="""
        ## DocShare Backend API

        FastAPI backend for storing JSON documents, sharing them between user
        profiles, and searching the profile directory.

        ### Features
        - **Authentication**: Token-based authentication with Supabase
        - **Profiles**: Read, update and delete your own profile; search all profiles
        - **Documents**: Create, list, read, update and delete JSON documents
        - **Sharing**: Owner-controlled share lists per document
        - **Clean Architecture**: Domain-driven design with clear separation of concerns

        ### Authentication
        All endpoints (except root and health) require authentication via Bearer token
        in the Authorization header:
        ```
        Authorization: Bearer your-jwt-token
        ```

        ### Error Responses
        All endpoints may return the following error responses, with a
        `{"detail": "..."}` body:
        - **400 Bad Request**: Invalid request parameters or malformed body
        - **401 Unauthorized**: Missing or invalid authentication token
        - **403 Forbidden**: Caller is not allowed to act on the document
        - **404 Not Found**: Requested resource does not exist
        - **409 Conflict**: Email already used by another profile
        - **500 Internal Server Error**: Record store failure
        """,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    add_default_middlewares(app)
    register_error_handlers(app)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the DocShare API",
        response_description="API information including status and version",
    )
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "docshare-backend", "version": app.version}

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running and healthy",
        response_description="Health status of the API service",
    )
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(document_router)
    app.include_router(share_router)
    return app


app = create_app()
