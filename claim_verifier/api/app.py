"""FastAPI application for the Claim Verifier service."""

import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..infrastructure.dependencies import get_service_container
from .endpoints import health, verification

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application.

    Providers are created on the first verification request and shut
    down when the application stops.
    """
    logger.info("🚀 Claim Verifier starting")

    yield  # Application runs here

    await get_service_container().shutdown()
    logger.info("👋 Claim Verifier stopped")


# Create FastAPI application
app = FastAPI(
    title="Claim Verifier API",
    description="Claim extraction, verification and trust analysis",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(verification.router)
