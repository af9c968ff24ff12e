"""
Flight Log Exchange - FastAPI Backend

Main application entry point and configuration.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flightlog.api.conversions import router as convert_router, channels_router, documents_router
from flightlog.config import CHANNEL_COUNT, DATA_FOLDER_ENV, DEFAULT_DATA_FOLDER
from flightlog.services.channels import ChannelPool


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Flight Log Exchange Backend")

    data_folder = Path(os.getenv(DATA_FOLDER_ENV, str(DEFAULT_DATA_FOLDER)))
    if not data_folder.exists():
        logger.info(f"Data folder not found: {data_folder}; relative paths will not resolve")
    app.state.data_folder = data_folder
    app.state.channel_pool = ChannelPool(size=CHANNEL_COUNT)
    logger.info(f"Decoder channel pool ready with {CHANNEL_COUNT} channels")

    yield

    logger.info("Shutting down Flight Log Exchange Backend")


# Create FastAPI app
app = FastAPI(
    title="Flight Log Exchange",
    description="""
    Converts MAVLink telemetry logs into GUTMA flight logging documents.

    ## Data Flow
    1. Convert a .tlog via POST /convert
    2. Read the document back via GET /documents/{name}
    3. Check decoder channel usage via GET /channels
    """,
    version=VERSION,
    lifespan=lifespan,
)


# CORS middleware (allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(convert_router)
app.include_router(channels_router)
app.include_router(documents_router)


@app.get("/")
async def root():
    """Root endpoint - basic health check."""
    return {
        "name": "Flight Log Exchange",
        "version": VERSION,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    pool: ChannelPool = app.state.channel_pool
    return {
        "status": "healthy",
        "data_folder": str(app.state.data_folder),
        "channels_available": pool.available,
    }
