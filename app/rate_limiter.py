from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping

from pydantic import BaseModel

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_MS = 60_000
UNKNOWN_CLIENT = "unknown"

# Checked in order; the first header with a value wins.
CLIENT_IP_HEADERS = (
    "cf-connecting-ip",  # Cloudflare
    "x-real-ip",  # Nginx
    "x-forwarded-for",
    "x-client-ip",  # Apache
    "true-client-ip",  # Akamai
    "x-cluster-client-ip",  # Rackspace
)


class RateLimitConfig(BaseModel):
    model_config = {"frozen": True}

    window_ms: int
    max_requests: int
    key_prefix: str | None = None


class RateLimitResult(BaseModel):
    allowed: bool
    remaining: int
    reset_at: int  # epoch milliseconds
    retry_after_ms: int


class RateLimitEntry(BaseModel):
    count: int
    reset_at: int


RATE_LIMITS: dict[str, RateLimitConfig] = {
    "SEARCH": RateLimitConfig(window_ms=60_000, max_requests=30, key_prefix="search"),
    "AI": RateLimitConfig(window_ms=60_000, max_requests=10, key_prefix="ai"),
    "AUTOCOMPLETE": RateLimitConfig(window_ms=60_000, max_requests=60, key_prefix="autocomplete"),
    "BOOKING": RateLimitConfig(window_ms=60_000, max_requests=5, key_prefix="booking"),
    "PAYMENT": RateLimitConfig(window_ms=60_000, max_requests=3, key_prefix="payment"),
}


def _now_ms() -> int:
    return int(time.time() * 1000)


def get_client_ip(headers: Mapping[str, str]) -> str:
    """Return the first client address found in the forwarding headers.

    ``x-forwarded-for`` may hold a chain of addresses; only the first one is
    kept. Requests without any of the headers share the ``"unknown"`` bucket.
    """
    for name in CLIENT_IP_HEADERS:
        value = headers.get(name)
        if value:
            ip = value.split(",")[0].strip()
            if ip:
                return ip
    return UNKNOWN_CLIENT


def rate_limit_headers(result: RateLimitResult, config: RateLimitConfig) -> dict[str, str]:
    return {
        "X-RateLimit-Limit": str(config.max_requests),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(-(-result.reset_at // 1000)),
    }


class RateLimiter:
    """Fixed-window admission control keyed by ``prefix:client_id``.

    Entries live in a process-local dict. Expired entries are swept lazily,
    at most once per ``sweep_interval_ms``, from inside ``admit``. A client
    can burst up to twice the quota across a window boundary; presets are
    tuned against that behaviour.
    """

    def __init__(
        self,
        clock: Callable[[], int] = _now_ms,
        sweep_interval_ms: int = SWEEP_INTERVAL_MS,
    ) -> None:
        self._entries: dict[str, RateLimitEntry] = {}
        self._clock = clock
        self._sweep_interval_ms = sweep_interval_ms
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get_entry(self, client_id: str, config: RateLimitConfig) -> RateLimitEntry | None:
        return self._entries.get(self._key(client_id, config))

    @staticmethod
    def _key(client_id: str, config: RateLimitConfig) -> str:
        return f"{config.key_prefix}:{client_id}" if config.key_prefix else client_id

    def sweep(self, force: bool = False) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            if not force and now - self._last_sweep < self._sweep_interval_ms:
                return 0
            self._last_sweep = now
            expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %d expired rate limit entries", len(expired))
        return len(expired)

    def admit(self, client_id: str, config: RateLimitConfig) -> RateLimitResult:
        self.sweep()

        key = self._key(client_id, config)
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)

            if entry is None or now >= entry.reset_at:
                entry = RateLimitEntry(count=1, reset_at=now + config.window_ms)
                self._entries[key] = entry
                return RateLimitResult(
                    allowed=True,
                    remaining=config.max_requests - 1,
                    reset_at=entry.reset_at,
                    retry_after_ms=0,
                )

            if entry.count >= config.max_requests:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_at=entry.reset_at,
                    retry_after_ms=entry.reset_at - now,
                )

            entry.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=config.max_requests - entry.count,
                reset_at=entry.reset_at,
                retry_after_ms=0,
            )
