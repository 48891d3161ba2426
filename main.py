"""
FastAPI application entry point with async lifespan.
"""
import logging
import sys
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.core.database import AsyncSessionLocal, init_db, close_db
from app.core.errors import LedgerError
from app.handlers.oracles import bootstrap_oracle
from app.routes import health, devices, oracles, credits, marketplace, reports

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async lifespan manager for startup and shutdown."""
    # Startup: the initial oracle exists before any request is served
    await init_db()
    async with AsyncSessionLocal() as session:
        await bootstrap_oracle(session, settings.initial_oracle)
    logger.info("%s %s ready", settings.app_name, settings.app_version)
    yield
    # Shutdown
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Carbon credit registry and marketplace ledger",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    """Surface ledger rejections verbatim with their status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message}
    )


# Register routes
app.include_router(health.router)
app.include_router(devices.router)
app.include_router(oracles.router)
app.include_router(credits.router)
app.include_router(marketplace.router)
app.include_router(reports.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    uvicorn.run(
        app,
        host='0.0.0.0',
        port=settings.port,
        log_level=settings.log_level.lower()
    )
