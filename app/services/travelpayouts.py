import httpx

from app.mappers import field_tables
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import FlightSearchRequest
from app.services.base import ProviderAdapter

PRICES_URL = "https://api.travelpayouts.com/aviasales/v3/prices_for_dates"

MAX_RESULTS = 30


class TravelpayoutsAdapter(ProviderAdapter):
    """Cached Aviasales fares; cheap to call but prices may be a few days old."""

    name = "travelpayouts"
    domain = Domain.flight
    table = field_tables.TRAVELPAYOUTS

    def __init__(self, client: httpx.AsyncClient, token: str, currency: str = "EUR"):
        super().__init__(client, currency)
        self._token = token

    async def search(self, request: FlightSearchRequest) -> list[CanonicalResult]:
        params = {
            "origin": request.origin.upper(),
            "destination": request.destination.upper(),
            "departure_at": request.departure_date.isoformat(),
            "one_way": "false" if request.return_date else "true",
            "direct": "false",
            "currency": self._currency.lower(),
            "sorting": "price",
            "limit": str(MAX_RESULTS),
            "token": self._token,
        }
        if request.return_date:
            params["return_at"] = request.return_date.isoformat()

        data = await self._get_json(PRICES_URL, params=params)
        if not isinstance(data, dict) or data.get("success") is False:
            return []
        fares = data.get("data")
        context = self._context(
            request.destination,
            origin=request.origin,
            currency=str(data.get("currency") or "").upper() or None,
            travel_class=request.travel_class,
        )
        return self._normalize_all(fares or [], context)
