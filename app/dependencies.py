from typing import Annotated

from fastapi import Depends, Request, Response

from app.exceptions.custom import RateLimitedError
from app.rate_limiter import RateLimitConfig, RateLimiter, RateLimitResult, get_client_ip, rate_limit_headers
from app.services.orchestrator import SearchOrchestrator


def get_orchestrator(request: Request) -> SearchOrchestrator:
    return request.app.state.orchestrator


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_search_limit(request: Request) -> RateLimitConfig:
    return request.app.state.search_limit


OrchestratorDep = Annotated[SearchOrchestrator, Depends(get_orchestrator)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
SearchLimitDep = Annotated[RateLimitConfig, Depends(get_search_limit)]


def admit_search(
    request: Request,
    response: Response,
    limiter: RateLimiterDep,
    config: SearchLimitDep,
) -> RateLimitResult:
    """Admit the caller against the search preset or raise ``RateLimitedError``."""
    result = limiter.admit(get_client_ip(request.headers), config)
    if not result.allowed:
        raise RateLimitedError(result, config)
    response.headers.update(rate_limit_headers(result, config))
    return result


SearchAdmissionDep = Annotated[RateLimitResult, Depends(admit_search)]
