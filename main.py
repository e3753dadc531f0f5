"""
FastAPI Application Entry Point

Integrates:
  - Transcription proxy (POST /api/transcribe)
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 3000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from config import Config, get_config
from transport.transcription import router as transcription_router

config = get_config()

# Setup logging
logging.basicConfig(
    level=getattr(logging, config.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Transcription proxy starting up...")
    logger.info(f"Environment: {config.environment}")
    logger.info(f"Upstream: {config.elevenlabs_api_url} (model {config.model_id})")
    logger.info(f"Max upload: {config.max_upload_mb}MB")
    if not config.validate():
        logger.warning("ELEVENLABS_API_KEY not found in environment variables!")
        logger.warning("Create a .env file with: ELEVENLABS_API_KEY=your_key_here")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Transcription proxy shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Transcription Proxy",
    description="Relays audio uploads to the ElevenLabs speech-to-text API",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.cors_origins),
    allow_credentials="*" not in config.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(e)},
        )


# Include routers
app.include_router(transcription_router)


@app.get("/health")
async def health(settings: Config = Depends(get_config)):
    """Health check with credential status (prefix only)."""
    return {
        "status": "ok",
        "message": "Transcription proxy is running",
        "apiKeySet": settings.api_key_set,
        "apiKeyPrefix": settings.api_key_prefix,
    }


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Transcription Proxy",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "transcribe": "POST /api/transcribe",
            "health": "GET /health",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=config.port,
        reload=config.is_development,
    )
