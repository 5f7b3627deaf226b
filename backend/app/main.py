"""
Atelier Checkout - Backend API
Order intake, payment reconciliation and fulfillment
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

import httpx
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import admin, orders
from app.connectors.razorpay_connector import RazorpayConnector
from app.core.config import settings
from app.core.database import Database
from app.core.errors import AppError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Acquire the database pool and gateway client; release them on shutdown"""
    database = Database(settings.DATABASE_URL, settings.DB_POOL_MIN, settings.DB_POOL_MAX)
    database.open()
    http_client = httpx.AsyncClient()

    app.state.database = database
    app.state.gateway = RazorpayConnector(
        key_id=settings.RAZORPAY_KEY_ID,
        key_secret=settings.RAZORPAY_KEY_SECRET,
        client=http_client,
        api_url=settings.RAZORPAY_API_URL,
        timeout=settings.GATEWAY_TIMEOUT_SECONDS,
    )
    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} started")

    try:
        yield
    finally:
        await http_client.aclose()
        database.close()


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
)


# ============================================================================
# Error handlers
# ============================================================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Domain errors: stable kind + message"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are user-correctable validation errors"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "ValidationError", "detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Anything else: log with full context, answer generically"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "InternalError", "detail": "Internal server error"},
    )


# Include API routers
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": settings.API_TITLE,
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
def health(request: Request):
    """Health check endpoint - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"

    try:
        database: Database = request.app.state.database
        db_status = "connected" if database.ping() else "disconnected"
    except Exception:
        logger.exception("Health check database ping failed")
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
        },
        "total_latency_ms": round((time.time() - start_time) * 1000, 2),
    }
