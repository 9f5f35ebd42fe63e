import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .routes.auth import router as auth_router
from .routes.camps import router as camps_router
from .routes.documents import router as documents_router
from .routes.health import router as health_router
from .routes.issues import router as issues_router
from .routes.news import router as news_router
from .services.collection import describe_validation_error
from .utils.errors import AuthenticationError, ClientInputError, PortalError
from .utils.logging import logger
from .utils.mongo import ensure_indexes, mongo_manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.log_step("starting_portal_service", {
        "host": settings.APP_HOST,
        "port": settings.APP_PORT,
        "debug": settings.DEBUG,
        "python_version": sys.version,
        "storage_root": str(settings.storage_root_path)
    })

    settings.storage_root_path.mkdir(parents=True, exist_ok=True)
    logger.log_step("storage_directory_ready", {
        "storage_root": str(settings.storage_root_path)
    })

    if mongo_manager.ping():
        try:
            ensure_indexes(mongo_manager.db)
        except Exception as e:
            logger.log_error("mongodb_index_setup_failed", {"error": str(e)})
    else:
        # Continue startup; /api/health reports the database as unavailable
        logger.log_error("mongodb_unavailable_at_startup", {"database": settings.DATABASE_NAME})

    yield

    mongo_manager.close()
    logger.log_step("portal_service_shutdown")


app = FastAPI(
    title=settings.SERVICE_NAME,
    description="Membership portal API: camps, news, documents and magazine issues.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    logger.log_step("request_completed", {
        "method": request.method,
        "url": str(request.url),
        "status_code": response.status_code,
        "process_time": process_time
    })

    return response


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    details = {
        "method": request.method,
        "url": str(request.url),
        "status_code": exc.status_code,
        "error_code": exc.code,
        "detail": exc.message
    }
    if exc.status_code >= 500:
        logger.log_error("request_failed", details)
    else:
        logger.log_warning("request_rejected", details)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response(),
        headers=headers
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ClientInputError(f"Invalid request. {describe_validation_error(exc)}")
    logger.log_warning("request_rejected", {
        "method": request.method,
        "url": str(request.url),
        "status_code": error.status_code,
        "error_code": error.code,
        "detail": error.message
    })

    return JSONResponse(status_code=error.status_code, content=error.to_response())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.log_error("unhandled_exception", {
        "method": request.method,
        "url": str(request.url),
        "error": str(exc)
    })

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": "server_error"}
    )


app.include_router(health_router)
app.include_router(auth_router)
app.include_router(camps_router)
app.include_router(news_router)
app.include_router(documents_router)
app.include_router(issues_router)


@app.get("/")
async def root():
    return {
        "message": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "endpoints": {
            "health": "/api/health",
            "auth": "/api/auth/",
            "camps": "/api/camps",
            "news": "/api/news",
            "documents": "/api/documents",
            "issues": "/api/issues",
            "docs": "/docs"
        }
    }
