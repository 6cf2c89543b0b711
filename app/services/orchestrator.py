import asyncio
import logging
from collections import Counter
from collections.abc import Mapping, Sequence

from app.exceptions.custom import ProviderError, RateLimitError
from app.schemas.results import (
    AggregatedResponse,
    CanonicalResult,
    Domain,
    GroupedResults,
    PackageResponse,
)
from app.schemas.search import PackageSearchRequest, SearchRequest
from app.services.base import ProviderAdapter
from app.services.fallback import FallbackSource

logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """Fans a search out to every configured provider of a domain and merges the results.

    Each provider call runs under its own timeout; a provider that fails or
    times out contributes nothing and never delays the others past that
    timeout. When no provider returns anything the fallback source answers
    and the response is flagged ``mock``.

    Results are ordered by price amount with no currency conversion. Prices
    in ``currency`` come first, then any other currency, each group cheapest
    first.
    """

    def __init__(
        self,
        adapters: Mapping[Domain, Sequence[ProviderAdapter]],
        fallback: FallbackSource,
        timeout: float = 8.0,
        currency: str = "EUR",
    ):
        self._adapters = {domain: list(items) for domain, items in adapters.items()}
        self._fallback = fallback
        self._timeout = timeout
        self._currency = currency

    def providers(self, domain: Domain) -> list[str]:
        return [adapter.name for adapter in self._adapters.get(domain, [])]

    async def _run_adapter(self, adapter: ProviderAdapter, request: SearchRequest) -> list[CanonicalResult]:
        try:
            async with asyncio.timeout(self._timeout):
                return await adapter.search(request)
        except TimeoutError:
            logger.warning("%s timed out after %.1fs", adapter.name, self._timeout)
        except RateLimitError as exc:
            logger.warning("%s", exc)
        except ProviderError as exc:
            logger.warning("%s search failed: %s", adapter.name, exc)
        except Exception:
            logger.exception("Unexpected error from %s", adapter.name)
        return []

    async def search(
        self,
        domain: Domain,
        request: SearchRequest,
        group_by_source: bool = False,
    ) -> AggregatedResponse:
        adapters = self._adapters.get(domain, [])
        logger.info("Dispatching %s search to %d providers", domain, len(adapters))

        per_provider = await asyncio.gather(*(self._run_adapter(a, request) for a in adapters))
        merged = [result for results in per_provider for result in results]

        mock = not merged
        if mock:
            logger.info("No %s results from providers, using fallback", domain)
            merged = self._fallback.search(domain, request)

        # amounts are only comparable within one currency; ties keep provider order
        merged = sorted(merged, key=lambda r: (r.price.currency != self._currency, r.price.amount))
        sources = dict(Counter(r.source for r in merged))

        if group_by_source:
            grouped: dict[str, list[CanonicalResult]] = {}
            for result in merged:
                grouped.setdefault(result.source, []).append(result)
            data = GroupedResults(by_source=grouped)
            return AggregatedResponse(data=data, mock=mock, sources=sources)

        return AggregatedResponse(data=merged, mock=mock, sources=sources)

    async def search_package(self, request: PackageSearchRequest, group_by_source: bool = False) -> PackageResponse:
        flights, hotels = await asyncio.gather(
            self.search(Domain.flight, request.flight_request(), group_by_source),
            self.search(Domain.hotel, request.hotel_request(), group_by_source),
        )
        return PackageResponse(flights=flights, hotels=hotels)
