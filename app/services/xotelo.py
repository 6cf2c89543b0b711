import logging

from app.mappers import field_tables
from app.mappers.location_match import best_match
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import HotelSearchRequest
from app.services.base import ProviderAdapter

logger = logging.getLogger(__name__)

SEARCH_URL = "https://data.xotelo.com/api/search"
LIST_URL = "https://data.xotelo.com/api/list"

MAX_RESULTS = 20


class XoteloAdapter(ProviderAdapter):
    """Keyless hotel price ranges indexed by TripAdvisor location keys."""

    name = "xotelo"
    domain = Domain.hotel
    table = field_tables.XOTELO

    async def resolve_location_key(self, query: str) -> str | None:
        data = await self._get_json(SEARCH_URL, params={"query": query, "location_type": "geo"})
        result = data.get("result") if isinstance(data, dict) else None
        candidates = result.get("list") if isinstance(result, dict) else None
        match = best_match(query, candidates or [], lambda loc: loc.get("name") or loc.get("short_place_name"))
        if match is None or not match.get("location_key"):
            logger.info("No Xotelo location for: %s", query)
            return None
        return str(match["location_key"])

    async def search(self, request: HotelSearchRequest) -> list[CanonicalResult]:
        location_key = await self.resolve_location_key(request.location)
        if location_key is None:
            return []

        params = {
            "location_key": location_key,
            "offset": "0",
            "limit": str(MAX_RESULTS),
            "sort": "best_value",
        }
        data = await self._get_json(LIST_URL, params=params)
        if isinstance(data, dict) and data.get("error"):
            logger.warning("Xotelo error for %s: %s", location_key, data["error"])
            return []
        result = data.get("result") if isinstance(data, dict) else None
        hotels = result.get("list") if isinstance(result, dict) else None
        return self._normalize_all(hotels or [], self._context(request.location, currency="USD"))
