"""
Workboard Backend API Server

FastAPI application for workload allocation and capacity planning.
Serves capacity, daily workload, distribution planning and assignment
suggestions over an allocation store.
"""
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workboard import __version__, config
from workboard.api.routes import capacity, tasks, workload
from workboard.errors import NotFoundError, ValidationError, WorkboardError
from workboard.store import DEMO_SCENARIO, AllocationStore, get_store, init_store

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Creates the allocation store on startup.
    """
    logger.info("Starting Workboard API server...")
    store = init_store()
    logger.info(f"Allocation store ready: {len(store.entries)} workload entries")

    yield

    logger.info("Shutting down Workboard API server...")


app = FastAPI(
    title="Workboard API",
    description="Workload allocation and capacity planning",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)


# CORS middleware for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing"""
    start_time = time.time()

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Duration: {duration_ms:.2f}ms"
    )

    return response


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details
            }
        }
    )


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, exc.code, exc.message, exc.details)


@app.exception_handler(ValidationError)
async def workload_validation_exception_handler(request: Request, exc: ValidationError):
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.message}")
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, exc.code, exc.message, exc.details)


@app.exception_handler(WorkboardError)
async def workboard_exception_handler(request: Request, exc: WorkboardError):
    logger.error(f"Workboard error: {exc.message}")
    return error_response(status.HTTP_400_BAD_REQUEST, exc.code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        jsonable_encoder(exc.errors())
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal server error occurred",
        str(exc) if app.debug else None
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns server status and version information.
    """
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "version": __version__,
        "service": "workboard-api"
    }


app.include_router(capacity.router)
app.include_router(tasks.router)
app.include_router(workload.router)


@app.get("/", tags=["Root"])
async def root():
    """API root endpoint"""
    return {
        "name": "Workboard API",
        "version": __version__,
        "description": "Workload allocation and capacity planning",
        "docs": "/api/docs",
        "health": "/health"
    }


@app.post("/admin/load-demo", tags=["Admin"])
async def load_demo_data(store: AllocationStore = Depends(get_store)):
    """Replace the store contents with the bundled demo scenario"""
    store.clear()
    counts = store.load_scenario_file(DEMO_SCENARIO)
    return {"status": "success", "loaded": counts}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=config.LOG_LEVEL.lower()
    )
