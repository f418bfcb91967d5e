# ---------------------------------------------------------
# estate_catalog/main.py
# Estate Catalog - real-estate projects and property search API
#
# Run: uvicorn estate_catalog.main:app --reload (from repo root)
#
# - FastAPI + SQLite (or in-memory store)
# - /api/projects                 : list / create projects
# - /api/projects/{id}            : get / update / delete a project
# - /api/projects/properties/{id} : get a property by id
# - /api/projects/search          : search properties across projects
# ---------------------------------------------------------

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from estate_catalog import config
from estate_catalog.dependencies import get_catalog_store
from estate_catalog.errors import CatalogError
from estate_catalog.logging_config import get_logger, setup_logging
from estate_catalog.responses import error_response, success_response
from estate_catalog.routes_projects import router as projects_router
from estate_catalog.store import SQLiteCatalogStore

setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)
logger = get_logger(__name__)

app = FastAPI(title="Estate Catalog", version="0.1")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS if config.IS_PROD else ["*"],  # Restrict origins in production
    allow_credentials=config.IS_PROD,
    allow_methods=["*"],
    allow_headers=["*"],
)


def format_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one message, e.g. "properties.0.type: Input should be ..."."""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(messages) or "Invalid request."


# ---------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------
@app.exception_handler(CatalogError)
async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
    if exc.status_code >= 500:
        # Underlying cause stays in the server log only
        logger.error("[API] %s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return error_response(str(exc), exc.status_code)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(format_validation_errors(exc), 400)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown routes and unsupported methods both answer 404
    if exc.status_code in (404, 405):
        return error_response("Route not found.", 404)
    message = exc.detail if isinstance(exc.detail, str) else "Request failed."
    return error_response(message, exc.status_code)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[API] Unhandled error on %s %s", request.method, request.url.path)
    return error_response("Internal server error.", 500)


@app.on_event("startup")
def init_store() -> None:
    store = get_catalog_store()
    if isinstance(store, SQLiteCatalogStore):
        store.init_schema()
    logger.info(
        "[CONFIG] env=%s backend=%s require_location=%s filter_mode=%s",
        config.ENV,
        config.CATALOG_BACKEND,
        config.REQUIRE_LOCATION,
        config.FILTER_MODE.value,
    )


# ---------------------------------------------------------
# Routes
# ---------------------------------------------------------
@app.get("/health")
def health() -> JSONResponse:
    return success_response({"status": "ok"})


app.include_router(projects_router)
