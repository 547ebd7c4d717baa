"""
Pronunciation audio server.

Wires together:
  - /audio routes (candidate list, recordings, TTS)
  - AudioServiceError -> status code + {"message": ...}
  - Request logging with timing; unexpected errors become a bare 500
  - Liveness / readiness probes

Run: uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.audio import router as audio_router
from audio.errors import AudioServiceError
from config import Config
from infra.bootstrap import AudioBootstrap, bootstrap_infrastructure

logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build backends on startup; close the synthesizer's HTTP client on shutdown."""
    bootstrap = bootstrap_infrastructure()
    logger.info(f"Pronunciation audio server ready ({Config.ENVIRONMENT}): {bootstrap!r}")

    yield

    closer = getattr(bootstrap.tts_backend, "aclose", None)
    if closer is not None:
        await closer()
    logger.info("Pronunciation audio server stopped")


app = FastAPI(
    title="Pronunciation Audio API",
    description="Pre-recorded pronunciation lookup with pitch-accent TTS fallback",
    version="1.0.0",
    lifespan=lifespan,
)

# Dictionary browser extensions fetch candidates cross-origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(AudioServiceError)
async def audio_service_error_handler(request: Request, exc: AudioServiceError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Framework errors (unknown route, wrong method) in the same {"message"} shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request with its duration; anything unhandled becomes a 500."""
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal Server Error"},
        )

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug(f"{request.method} {request.url.path} {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


app.include_router(audio_router)


@app.get("/health/live")
async def health_live():
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Ready once server settings validate and backends are built."""
    try:
        Config.validate()
        bootstrap = AudioBootstrap.get_instance()
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": str(e)},
        )
    return {"status": "ready", "backends": repr(bootstrap)}


@app.get("/")
async def root():
    return {
        "service": "pronunciation-audio",
        "version": app.version,
        "routes": [
            "GET /audio/list?term=&reading=&sources=",
            "GET /audio/get/{source}/[{folder}/]{file}",
            "GET /audio/tts?term=&reading=&pitch=",
            "GET /health/live",
            "GET /health/ready",
        ],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=Config.AUDIO_PORT)
