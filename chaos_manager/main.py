from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy.exc import OperationalError

from .api.api import router as api_router
from .api.middleware import LoggingMiddleware
from .core.config import Settings, settings as default_settings
from .core.errors import ChaosManagerError
from .core.logging import setup_logging
from .db.session import Database

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables on startup; a failure leaves the app up but answering 503
    app.state.database.initialize()
    yield
    app.state.database.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ChaosManagerError)
    async def handle_domain_error(request: Request, exc: ChaosManagerError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(OperationalError)
    async def handle_store_failure(request: Request, exc: OperationalError):
        log.error("database_operation_failed", error=str(exc.orig))
        return JSONResponse(status_code=503, content={"detail": "Database is not available"})


def register_frontend(app: FastAPI, build_dir: Path, api_prefix: str) -> None:
    """Serve the built single-page app for every GET the API didn't match.

    Any method on an unmatched API path gets a 404 rather than a 405.
    """
    index_html = build_dir / "index.html"
    api_root = api_prefix.strip("/")

    @app.api_route(
        "/{full_path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    def serve_frontend(full_path: str, request: Request):
        if full_path == api_root or full_path.startswith(api_root + "/"):
            return JSONResponse(status_code=404, content={"detail": "API endpoint not found"})
        if request.method != "GET":
            return JSONResponse(status_code=404, content={"detail": "Not Found"})

        if full_path:
            candidate = (build_dir / full_path).resolve()
            if candidate.is_file() and candidate.is_relative_to(build_dir.resolve()):
                return FileResponse(candidate)

        if index_html.is_file():
            return FileResponse(index_html)

        # Development: the frontend runs on its own dev server
        return JSONResponse(
            status_code=404,
            content={
                "detail": "Frontend build not found",
                "info": "In development the frontend is served separately",
                "apiUrl": api_prefix,
            },
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.LOG_FORMAT, settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="REST API for the Chaos Manager to-do list",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routers
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    @app.get("/ready")
    def readiness_check(request: Request):
        database = request.app.state.database
        if not database.is_ready:
            return JSONResponse(
                status_code=503,
                content={"status": database.state.value, "error": database.error},
            )
        return {"status": "ready"}

    # Must come last: it matches every path
    register_frontend(app, Path(settings.FRONTEND_BUILD_DIR), settings.API_PREFIX)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
