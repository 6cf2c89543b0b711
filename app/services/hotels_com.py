import httpx

from app.mappers import field_tables
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import HotelSearchRequest
from app.services.base import ProviderAdapter, rapidapi_headers

HOTELS_COM_HOST = "hotels-com-provider.p.rapidapi.com"
SEARCH_URL = f"https://{HOTELS_COM_HOST}/v2/hotels/search"

MAX_RESULTS = 15


class HotelsComAdapter(ProviderAdapter):
    name = "hotels-com"
    domain = Domain.hotel
    table = field_tables.HOTELS_COM

    def __init__(self, client: httpx.AsyncClient, api_key: str, currency: str = "EUR"):
        super().__init__(client, currency)
        self._headers = rapidapi_headers(api_key, HOTELS_COM_HOST)

    async def search(self, request: HotelSearchRequest) -> list[CanonicalResult]:
        params = {
            "q": request.location,
            "locale": "fr_FR",
            "checkin": request.check_in.isoformat(),
            "checkout": request.check_out.isoformat(),
            "adults": str(request.adults),
            "currency": self._currency,
        }
        data = await self._get_json(SEARCH_URL, params=params, headers=self._headers)
        hotels = (data.get("properties") or data.get("hotels")) if isinstance(data, dict) else None
        return self._normalize_all((hotels or [])[:MAX_RESULTS], self._context(request.location))
