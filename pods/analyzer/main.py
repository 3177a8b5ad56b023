"""Analyzer Pod - Key detection service.

Decodes uploaded audio into a SampleBuffer, reduces it to mono, optionally
decimates it, and returns the detected musical key over HTTP.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, UploadFile, File, HTTPException

from kfaudio import downsample, reduce_to_mono
from kfcore.audio import duration_of_bytes, load_buffer_bytes
from kfcore.errors import KeyDetectionError, PreconditionError
from kfcore.logging import setup_logging, setup_tracing
from kffeatures import KeyClassifier
from pods.analyzer.config import Config

logger = logging.getLogger(__name__)

classifier = KeyClassifier()


# ============================================================================
# Startup/Shutdown
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    # Startup
    logger.info("Analyzer pod starting up")
    yield
    # Shutdown
    logger.info("Analyzer pod shutting down")


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Analyzer Pod",
    description="Musical key detection service",
    version=Config.SERVICE_VERSION,
    lifespan=lifespan,
)


# ============================================================================
# Endpoints
# ============================================================================

@app.post("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": Config.SERVICE_NAME}


@app.post("/analyze/key")
async def analyze_key(file: UploadFile = File(...)):
    """Detect musical key from audio file.

    Args:
        file: Audio file (WAV, FLAC)

    Returns:
        JSON with detected key label, key code, and the analysed layout
    """
    audio_bytes = await file.read()
    if len(audio_bytes) > Config.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=413, detail="Uploaded file is too large")

    try:
        # header check before any samples are ingested
        duration = duration_of_bytes(audio_bytes)
        if duration > Config.MAX_AUDIO_DURATION:
            raise HTTPException(
                status_code=413,
                detail=f"Audio is {duration:.0f}s long (max {Config.MAX_AUDIO_DURATION}s)",
            )

        buffer = load_buffer_bytes(audio_bytes)
        reduce_to_mono(buffer)
        downsample(buffer, Config.DOWNSAMPLE_FACTOR)
        key = classifier.detect_key(buffer)

    except HTTPException:
        raise
    except PreconditionError as e:
        logger.error(f"Unusable audio: {e}")
        raise HTTPException(
            status_code=400,
            detail=f"Unusable audio: {str(e)}"
        )
    except KeyDetectionError as e:
        logger.error(f"Key detection error: {e}")
        raise HTTPException(
            status_code=422,
            detail=f"Failed to detect key: {str(e)}"
        )
    except Exception as e:
        logger.error(f"Key analysis input error: {e}")
        raise HTTPException(
            status_code=400,
            detail=f"Failed to read audio: {str(e)}"
        )

    return {
        "key": key.label,
        "code": int(key),
        "frame_rate": buffer.get_frame_rate(),
        "frame_count": buffer.get_frame_count(),
    }


# ============================================================================
# Root
# ============================================================================

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "service": Config.SERVICE_NAME,
        "version": Config.SERVICE_VERSION,
        "endpoints": {
            "health": "POST /health",
            "analyze_key": "POST /analyze/key",
        }
    }


# ============================================================================
# Logging Setup
# ============================================================================

if __name__ == "__main__":
    setup_logging(Config.LOG_LEVEL)
    setup_tracing(service_name="keyfinder-analyzer")
    import uvicorn

    port = int(os.getenv("ANALYZER_PORT", Config.SERVICE_PORT))
    uvicorn.run(
        "pods.analyzer.main:app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("ENV", "dev") == "dev",
    )
