import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import (
    CORS_ORIGINS,
    GRID_DATUM_SHIFT,
    GRID_DEFAULT_DIGITS,
    LOG_LEVEL,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_ENABLED,
)
from .grid.errors import ConvergenceError
from .routers import grid

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=RATE_LIMIT_ENABLED,
)

app = FastAPI(
    title="OS Grid Reference API",
    description="Conversion between WGS84 latitude/longitude and British National Grid references.",
    version="1.0.0",
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(ConvergenceError)
async def convergence_handler(request: Request, exc: ConvergenceError):
    logger.error("Inverse projection failed for %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Grid conversion failed to converge"},
    )


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(grid.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    """Health check endpoint; reports the active conversion settings."""
    return {
        "status": "ok",
        "version": app.version,
        "datum_shift": GRID_DATUM_SHIFT,
        "default_digits": GRID_DEFAULT_DIGITS,
    }


@app.get("/")
def root():
    return {
        "message": "OS Grid Reference API",
        "docs": "/docs",
    }
