from datetime import date

import httpx

from app.mappers import field_tables
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import FlightSearchRequest
from app.services.base import ProviderAdapter, rapidapi_headers

KIWI_HOST = "kiwi-com-cheapest-flights.p.rapidapi.com"
SEARCH_URL = f"https://{KIWI_HOST}/v2/search"

MAX_RESULTS = 30

_CABIN_CODES = {"ECONOMY": "M", "PREMIUM_ECONOMY": "W", "BUSINESS": "C", "FIRST": "F"}


def kiwi_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


class KiwiAdapter(ProviderAdapter):
    name = "kiwi"
    domain = Domain.flight
    table = field_tables.KIWI

    def __init__(self, client: httpx.AsyncClient, api_key: str, currency: str = "EUR"):
        super().__init__(client, currency)
        self._headers = rapidapi_headers(api_key, KIWI_HOST)

    async def search(self, request: FlightSearchRequest) -> list[CanonicalResult]:
        departure = kiwi_date(request.departure_date)
        params = {
            "fly_from": request.origin.upper(),
            "fly_to": request.destination.upper(),
            "date_from": departure,
            "date_to": departure,
            "adults": str(request.adults),
            "children": str(request.children),
            "selected_cabins": _CABIN_CODES.get(request.travel_class, "M"),
            "curr": self._currency,
            "limit": str(MAX_RESULTS),
            "sort": "price",
        }
        if request.return_date:
            params["return_from"] = kiwi_date(request.return_date)
            params["return_to"] = kiwi_date(request.return_date)

        data = await self._get_json(SEARCH_URL, params=params, headers=self._headers)
        flights = data.get("data") if isinstance(data, dict) else None
        context = self._context(
            request.destination,
            origin=request.origin,
            currency=data.get("currency") if isinstance(data, dict) else None,
            travel_class=request.travel_class,
        )
        return self._normalize_all(flights or [], context)
