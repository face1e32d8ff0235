"""
Concert Buddy App Package
=========================
FastAPI app factory with lifespan, CORS, rate limiting, and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from concert_buddy.config import CORS_ORIGINS, LOG_LEVEL, RATE_LIMIT_ENABLED, SEED_DEMO_DATA

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

from concert_buddy.database import database  # noqa: E402
from concert_buddy.realtime import RealtimeError  # noqa: E402
from concert_buddy.responses import error_response  # noqa: E402
from concert_buddy.state import booth_boards  # noqa: E402
from concert_buddy.store import StoreError, store  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.connect()
    if SEED_DEMO_DATA:
        from concert_buddy.seed import seed_demo_data
        try:
            await seed_demo_data(store)
        except StoreError as e:
            logger.error("Demo data seeding failed: %s", e)
    yield
    # Stop any booth polling timers still running
    await booth_boards.shutdown()
    await database.disconnect()


app = FastAPI(
    title="Concert Buddy",
    description="Share your seat with friends and check merch lines at live events",
    version="0.1.0",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return error_response(str(exc), status_code=503)


@app.exception_handler(RealtimeError)
async def realtime_error_handler(request: Request, exc: RealtimeError):
    logger.error("Realtime failure on %s %s: %s", request.method, request.url.path, exc)
    return error_response(str(exc), status_code=503)


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
from concert_buddy.routers import (  # noqa: E402
    health as health_router, auth as auth_router, venues as venues_router,
    booths as booths_router, rooms as rooms_router, live as live_router,
)

app.include_router(health_router.router)
app.include_router(auth_router.router)
app.include_router(venues_router.router)
app.include_router(booths_router.router)
app.include_router(rooms_router.router)
app.include_router(live_router.router)
