import logging

import httpx

from app.mappers import field_tables
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import CarRentalSearchRequest, HotelSearchRequest
from app.services.base import ProviderAdapter, rapidapi_headers

logger = logging.getLogger(__name__)

BOOKING_HOST = "booking-com15.p.rapidapi.com"
HOTEL_DESTINATION_URL = f"https://{BOOKING_HOST}/api/v1/hotels/searchDestination"
HOTEL_SEARCH_URL = f"https://{BOOKING_HOST}/api/v1/hotels/searchHotels"
CAR_DESTINATION_URL = f"https://{BOOKING_HOST}/api/v1/cars/searchDestination"
CAR_SEARCH_URL = f"https://{BOOKING_HOST}/api/v1/cars/searchCarRentals"

MAX_RESULTS = 20


class BookingHotelAdapter(ProviderAdapter):
    name = "booking"
    domain = Domain.hotel
    table = field_tables.BOOKING_HOTEL

    def __init__(self, client: httpx.AsyncClient, api_key: str, currency: str = "EUR"):
        super().__init__(client, currency)
        self._headers = rapidapi_headers(api_key, BOOKING_HOST)

    async def resolve_destination(self, query: str) -> tuple[str, str] | None:
        """Return ``(dest_id, search_type)`` for a free-text location, or None."""
        data = await self._get_json(HOTEL_DESTINATION_URL, params={"query": query}, headers=self._headers)
        destinations = data.get("data") if isinstance(data, dict) else None
        if not destinations:
            logger.info("No Booking.com destination for: %s", query)
            return None

        first = destinations[0]
        dest_id = first.get("dest_id") or first.get("id")
        if not dest_id:
            return None
        return str(dest_id), str(first.get("search_type") or first.get("dest_type") or "CITY").upper()

    async def search(self, request: HotelSearchRequest) -> list[CanonicalResult]:
        destination = await self.resolve_destination(request.location)
        if destination is None:
            return []

        dest_id, search_type = destination
        params = {
            "dest_id": dest_id,
            "search_type": search_type,
            "arrival_date": request.check_in.isoformat(),
            "departure_date": request.check_out.isoformat(),
            "adults": str(request.adults),
            "children_age": ",".join(["8"] * request.children) if request.children else None,
            "room_qty": str(request.rooms),
            "page_number": "1",
            "currency_code": self._currency,
        }
        data = await self._get_json(
            HOTEL_SEARCH_URL,
            params={k: v for k, v in params.items() if v is not None},
            headers=self._headers,
        )
        hotels = (data.get("data") or {}).get("hotels") if isinstance(data, dict) else None
        return self._normalize_all((hotels or [])[:MAX_RESULTS], self._context(request.location))


class BookingCarAdapter(ProviderAdapter):
    name = "booking"
    domain = Domain.car
    table = field_tables.BOOKING_CAR

    def __init__(self, client: httpx.AsyncClient, api_key: str, currency: str = "EUR"):
        super().__init__(client, currency)
        self._headers = rapidapi_headers(api_key, BOOKING_HOST)

    async def resolve_coordinates(self, query: str) -> tuple[float, float] | None:
        data = await self._get_json(CAR_DESTINATION_URL, params={"query": query}, headers=self._headers)
        places = data.get("data") if isinstance(data, dict) else None
        if not places:
            logger.info("No Booking.com car location for: %s", query)
            return None

        coordinates = places[0].get("coordinates") or places[0]
        lat, lon = coordinates.get("latitude"), coordinates.get("longitude")
        if lat is None or lon is None:
            return None
        return float(lat), float(lon)

    async def search(self, request: CarRentalSearchRequest) -> list[CanonicalResult]:
        pickup = await self.resolve_coordinates(request.pickup_location)
        if pickup is None:
            return []

        dropoff = pickup
        if request.dropoff_location and request.dropoff_location != request.pickup_location:
            dropoff = await self.resolve_coordinates(request.dropoff_location)
            if dropoff is None:
                return []

        params = {
            "pick_up_latitude": str(pickup[0]),
            "pick_up_longitude": str(pickup[1]),
            "drop_off_latitude": str(dropoff[0]),
            "drop_off_longitude": str(dropoff[1]),
            "pick_up_date": request.pickup_date.isoformat(),
            "drop_off_date": request.dropoff_date.isoformat(),
            "pick_up_time": request.pickup_time,
            "drop_off_time": request.dropoff_time,
            "currency_code": self._currency,
        }
        data = await self._get_json(CAR_SEARCH_URL, params=params, headers=self._headers)
        cars = (data.get("data") or {}).get("search_results") if isinstance(data, dict) else None
        return self._normalize_all((cars or [])[:MAX_RESULTS], self._context(request.pickup_location))
