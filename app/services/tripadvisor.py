import logging

import httpx

from app.mappers import field_tables
from app.mappers.location_match import best_match
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import HotelSearchRequest
from app.services.base import ProviderAdapter, rapidapi_headers

logger = logging.getLogger(__name__)

TRIPADVISOR_HOST = "tripadvisor16.p.rapidapi.com"
LOCATION_URL = f"https://{TRIPADVISOR_HOST}/api/v1/hotels/searchLocation"
SEARCH_URL = f"https://{TRIPADVISOR_HOST}/api/v1/hotels/searchHotels"


class TripAdvisorAdapter(ProviderAdapter):
    name = "tripadvisor"
    domain = Domain.hotel
    table = field_tables.TRIPADVISOR

    def __init__(self, client: httpx.AsyncClient, api_key: str, currency: str = "EUR"):
        super().__init__(client, currency)
        self._headers = rapidapi_headers(api_key, TRIPADVISOR_HOST)

    async def resolve_geo_id(self, query: str) -> str | None:
        """Search for a location and return its geoId, or None."""
        data = await self._get_json(LOCATION_URL, params={"query": query}, headers=self._headers)
        locations = data.get("data") if isinstance(data, dict) else None
        match = best_match(query, locations or [], lambda loc: loc.get("title"))
        if match is None or not match.get("geoId"):
            logger.info("No TripAdvisor location for: %s", query)
            return None
        return str(match["geoId"])

    async def search(self, request: HotelSearchRequest) -> list[CanonicalResult]:
        geo_id = await self.resolve_geo_id(request.location)
        if geo_id is None:
            return []

        params = {
            "geoId": geo_id,
            "checkIn": request.check_in.isoformat(),
            "checkOut": request.check_out.isoformat(),
            "adults": str(request.adults),
            "rooms": str(request.rooms),
            "currencyCode": self._currency,
            "pageNumber": "1",
        }
        data = await self._get_json(SEARCH_URL, params=params, headers=self._headers)
        hotels = (data.get("data") or {}).get("data") if isinstance(data, dict) else None
        return self._normalize_all(hotels or [], self._context(request.location))
