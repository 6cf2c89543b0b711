import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.rate_limiter import rate_limit_headers

from .custom import ProviderError, RateLimitedError

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc if p != "body"]
    return ".".join(parts) or "body"


def _message(msg: str) -> str:
    return msg.removeprefix(_VALUE_ERROR_PREFIX)


async def rate_limited_error_handler(request: Request, exc: RateLimitedError) -> JSONResponse:
    logger.warning("Rate limit exceeded on %s (retry in %ss)", request.url.path, exc.retry_after_seconds)
    headers = rate_limit_headers(exc.result, exc.config)
    headers["Retry-After"] = str(exc.retry_after_seconds)
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": str(exc), "retryAfter": exc.retry_after_seconds},
        headers=headers,
    )


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(tuple(err.get("loc", ()))), "message": _message(err.get("msg", ""))}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "validationErrors": errors, "data": []},
    )


async def provider_error_handler(_request: Request, exc: ProviderError) -> JSONResponse:
    logger.error("Provider error: %s (status=%s)", exc, exc.status_code)
    return JSONResponse(
        status_code=502,
        content={"success": False, "error": f"{exc.provider} error: {exc.message}"},
    )
