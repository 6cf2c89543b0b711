import logging
from collections.abc import Mapping
from typing import Any

import httpx

from app.mappers import field_tables
from app.mappers.location_match import best_match
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import CarRentalSearchRequest, HotelSearchRequest
from app.services.base import ProviderAdapter, rapidapi_headers

logger = logging.getLogger(__name__)

PRICELINE_HOST = "priceline-com-provider.p.rapidapi.com"
HOTEL_LOCATIONS_URL = f"https://{PRICELINE_HOST}/v1/hotels/locations"
HOTEL_SEARCH_URL = f"https://{PRICELINE_HOST}/v1/hotels/search"
CAR_LOCATIONS_URL = f"https://{PRICELINE_HOST}/v1/car-rentals/locations"
CAR_SEARCH_URL = f"https://{PRICELINE_HOST}/v1/car-rentals/search"

MAX_RESULTS = 20


def _as_list(value: Any) -> list[Any]:
    # Priceline returns either arrays or objects keyed by id
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, list):
        return value
    return []


class PricelineHotelAdapter(ProviderAdapter):
    name = "priceline"
    domain = Domain.hotel
    table = field_tables.PRICELINE_HOTEL

    def __init__(self, client: httpx.AsyncClient, api_key: str, currency: str = "EUR"):
        super().__init__(client, currency)
        self._headers = rapidapi_headers(api_key, PRICELINE_HOST)

    async def resolve_city_id(self, query: str) -> str | None:
        data = await self._get_json(
            HOTEL_LOCATIONS_URL,
            params={"name": query, "search_type": "CITY"},
            headers=self._headers,
        )
        match = best_match(query, _as_list(data), lambda loc: loc.get("itemName") or loc.get("cityName"))
        city_id = (match.get("cityID") or match.get("id")) if match else None
        if not city_id:
            logger.info("No Priceline city for: %s", query)
            return None
        return str(city_id)

    async def search(self, request: HotelSearchRequest) -> list[CanonicalResult]:
        city_id = await self.resolve_city_id(request.location)
        if city_id is None:
            return []

        params = {
            "location_id": city_id,
            "date_checkin": request.check_in.isoformat(),
            "date_checkout": request.check_out.isoformat(),
            "rooms_number": str(request.rooms),
            "sort_order": "PRICE",
        }
        data = await self._get_json(HOTEL_SEARCH_URL, params=params, headers=self._headers)
        hotels = _as_list(data.get("hotels")) if isinstance(data, dict) else []
        return self._normalize_all(hotels[:MAX_RESULTS], self._context(request.location))


class PricelineCarAdapter(ProviderAdapter):
    name = "priceline"
    domain = Domain.car
    table = field_tables.PRICELINE_CAR

    def __init__(self, client: httpx.AsyncClient, api_key: str, currency: str = "EUR"):
        super().__init__(client, currency)
        self._headers = rapidapi_headers(api_key, PRICELINE_HOST)

    async def resolve_location_id(self, query: str) -> str | None:
        data = await self._get_json(CAR_LOCATIONS_URL, params={"name": query}, headers=self._headers)
        match = best_match(query, _as_list(data), lambda loc: loc.get("itemName") or loc.get("cityName"))
        location_id = (match.get("id") or match.get("cityID")) if match else None
        if not location_id:
            logger.info("No Priceline car location for: %s", query)
            return None
        return str(location_id)

    async def search(self, request: CarRentalSearchRequest) -> list[CanonicalResult]:
        pickup_id = await self.resolve_location_id(request.pickup_location)
        if pickup_id is None:
            return []

        dropoff_id = pickup_id
        if request.dropoff_location and request.dropoff_location != request.pickup_location:
            dropoff_id = await self.resolve_location_id(request.dropoff_location)
            if dropoff_id is None:
                return []

        params = {
            "location_pickup": pickup_id,
            "location_return": dropoff_id,
            "date_time_pickup": f"{request.pickup_date.isoformat()} {request.pickup_time}:00",
            "date_time_return": f"{request.dropoff_date.isoformat()} {request.dropoff_time}:00",
        }
        data = await self._get_json(CAR_SEARCH_URL, params=params, headers=self._headers)
        vehicles = _as_list(data.get("vehicleRates")) if isinstance(data, dict) else []
        return self._normalize_all(vehicles[:MAX_RESULTS], self._context(request.pickup_location))
