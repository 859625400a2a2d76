from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from string_analyzer.api.routes import router
from string_analyzer.config import Settings, get_settings
from string_analyzer.errors import (
    InternalError,
    InvalidTypeError,
    StringAnalyzerError,
    ValidationError,
)
from string_analyzer.store import StringStore

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def error_response(exc: StringAnalyzerError) -> JSONResponse:
    """The one place domain errors become HTTP responses"""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _from_request_validation(exc: RequestValidationError) -> ValidationError:
    """
    Map FastAPI's request validation failures onto our error kinds.

    A "value" field that is present but not a string is a 422; anything
    else (missing field, unparseable or non-object body) is a 400.
    """
    for error in exc.errors():
        loc = error.get("loc", ())
        if loc and loc[-1] == "value" and error.get("type") == "value_error":
            return InvalidTypeError("Value must be valid Unicode text", field="value")
        if loc and loc[-1] == "value" and error.get("type") != "missing":
            return InvalidTypeError("Value must be a string", field="value")

    for error in exc.errors():
        loc = error.get("loc", ())
        if loc and loc[-1] == "value":
            return ValidationError('Missing "value" field', field="value")

    return ValidationError("Invalid request body or missing 'value' field")


def create_app(settings: Optional[Settings] = None, store: Optional[StringStore] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = store is None
        app.state.store = store if store is not None else StringStore(settings.database_url)
        logger.info("String store ready")
        try:
            yield
        finally:
            if owned:
                app.state.store.close()
            app.state.store = None
            logger.info("String store closed")

    app = FastAPI(
        title=settings.app_name,
        description="Analyze strings, store their properties and query them",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"📩 {request.method} {request.url.path}")
        return await call_next(request)

    app.include_router(router, tags=["strings"])

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": settings.app_name,
            "version": settings.app_version,
            "endpoints": {
                "POST /strings": "Analyze and store a string",
                "GET /strings/{string_value}": "Get specific string analysis",
                "GET /strings": "Get all strings with optional filters",
                "GET /strings/filter-by-natural-language": "Filter using natural language",
                "DELETE /strings/{string_value}": "Delete a string"
            }
        }

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint"""
        store = getattr(request.app.state, "store", None)
        return {
            "status": "healthy",
            "records": store.count() if store is not None else 0,
        }

    @app.exception_handler(StringAnalyzerError)
    async def domain_exception_handler(request: Request, exc: StringAnalyzerError):
        if exc.status_code >= 500:
            logger.error(f"{exc.kind.value} error on {request.url.path}: {exc.message}")
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(_from_request_validation(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # A known path with an unsupported method is still an unmatched route
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": "Not Found", "path": request.url.path},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.url.path}: {exc}")
        return error_response(InternalError("Internal server error"))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run("string_analyzer.main:app", host=settings.host, port=settings.port)
