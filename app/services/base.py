import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

import httpx

from app.exceptions.custom import ProviderError, RateLimitError
from app.mappers.fields import FieldTable
from app.mappers.normalizer import NormalizationContext, normalize
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import SearchRequest

logger = logging.getLogger(__name__)


def rapidapi_headers(api_key: str, host: str) -> dict[str, str]:
    return {"X-RapidAPI-Key": api_key, "X-RapidAPI-Host": host}


class ProviderAdapter(ABC):
    """One external inventory source for one domain.

    ``search`` may raise ``ProviderError`` or ``RateLimitError``; the
    orchestrator turns any failure into an empty result list for this
    provider.
    """

    name: ClassVar[str]
    domain: ClassVar[Domain]
    table: ClassVar[FieldTable]

    def __init__(self, client: httpx.AsyncClient, currency: str = "EUR"):
        self._client = client
        self._currency = currency

    @abstractmethod
    async def search(self, request: SearchRequest) -> list[CanonicalResult]:
        ...

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> Any:
        resp = await self._client.request(method, url, params=params, headers=headers, data=data)

        if resp.status_code == 429:
            raise RateLimitError(self.name)
        if resp.status_code >= 400:
            raise ProviderError(self.name, resp.text[:500], status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError(self.name, f"invalid JSON response: {exc}") from exc

    async def _get_json(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return await self._request_json("GET", url, params=params, headers=headers)

    def _context(self, location: str, **kwargs: Any) -> NormalizationContext:
        return NormalizationContext(
            source=self.name,
            location=location,
            currency=kwargs.pop("currency", None) or self._currency,
            **kwargs,
        )

    def _normalize_all(self, items: Any, context: NormalizationContext) -> list[CanonicalResult]:
        if not isinstance(items, Iterable) or isinstance(items, (str, bytes, Mapping)):
            logger.info("%s returned no result list", self.name)
            return []
        results = [
            normalize(item, self.domain, self.table, context)
            for item in items
            if isinstance(item, Mapping)
        ]
        logger.info("%s returned %d results", self.name, len(results))
        return results
