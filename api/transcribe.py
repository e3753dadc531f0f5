"""
Serverless Transcription Function

Same contract as POST /api/transcribe on the standalone server, mounted at
the function root for platforms that route /api/transcribe to this file.
Answers OPTIONS itself so a browser client can call it cross-origin.

Run locally: uvicorn api.transcribe:app --port 3001
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_config
from transport.transcription import create_transcription_router

config = get_config()

logging.basicConfig(
    level=getattr(logging, config.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Transcription Function",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.cors_origins),
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(create_transcription_router("/", expose_traceback=False))
