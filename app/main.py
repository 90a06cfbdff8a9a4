import logging
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Cognos to Looker Migration Assessment Report API",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def log_rejected_snapshot(request: Request, exc: RequestValidationError):
    """Malformed snapshots are logged, then answered with FastAPI's standard 422 body."""
    logger.warning(f"Rejected {request.method} {request.url.path}: {len(exc.errors())} validation error(s)")
    return await request_validation_exception_handler(request, exc)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    if settings.mapping_override_enabled:
        logger.info(f"Visualization mapping override: {settings.VISUALIZATION_MAPPING_PATH}")
    logger.info(
        f"Unknown calculated field complexity: {settings.CALCULATED_FIELD_UNKNOWN_COMPLEXITY}, "
        f"high complexity share threshold: {settings.HIGH_COMPLEXITY_SHARE_THRESHOLD}"
    )


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down application")


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check; also reports which visualization mapping is in effect."""
    service = report.get_report_service()
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "visualization_mapping": "csv" if settings.mapping_override_enabled else "built-in",
        "visualization_types": len(service.visualization_classifier.mapping),
    }


from app.api import report

app.include_router(report.router, prefix="/api", tags=["Assessment Report"])
