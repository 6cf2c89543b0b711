from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.rate_limiter import RateLimitConfig, RateLimitResult


class ProviderError(Exception):
    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")


class RateLimitError(Exception):
    """A provider answered 429."""

    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Rate limit exceeded for {service}")


class RateLimitedError(Exception):
    """The caller was throttled by our own limiter."""

    def __init__(self, result: RateLimitResult, config: RateLimitConfig):
        self.result = result
        self.config = config
        super().__init__("Too many requests. Please try again later.")

    @property
    def retry_after_seconds(self) -> int:
        return math.ceil(self.result.retry_after_ms / 1000)
