import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from app.config import Settings
from app.exceptions.custom import ProviderError, RateLimitedError
from app.exceptions.handlers import (
    provider_error_handler,
    rate_limited_error_handler,
    validation_error_handler,
)
from app.rate_limiter import RATE_LIMITS, RateLimiter
from app.routers.search import router as search_router
from app.services.fallback import FallbackSource
from app.services.orchestrator import SearchOrchestrator
from app.services.registry import build_adapters


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        app.state.orchestrator = SearchOrchestrator(
            build_adapters(client, settings),
            FallbackSource(settings.default_currency),
            timeout=settings.provider_timeout,
            currency=settings.default_currency,
        )
        app.state.rate_limiter = RateLimiter()
        app.state.search_limit = RATE_LIMITS["SEARCH"].model_copy(update={
            "max_requests": settings.rate_limit_search_max_requests,
            "window_ms": settings.rate_limit_search_window_ms,
        })

        yield


app = FastAPI(title="Travel Search", lifespan=lifespan)

app.add_exception_handler(RateLimitedError, rate_limited_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(ProviderError, provider_error_handler)

app.include_router(search_router)
