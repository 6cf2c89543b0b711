import httpx

from app.mappers import field_tables
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import HotelSearchRequest
from app.services.base import ProviderAdapter, rapidapi_headers

AIRBNB_HOST = "airbnb13.p.rapidapi.com"
SEARCH_URL = f"https://{AIRBNB_HOST}/search-location"


class AirbnbAdapter(ProviderAdapter):
    name = "airbnb"
    domain = Domain.hotel
    table = field_tables.AIRBNB

    def __init__(self, client: httpx.AsyncClient, api_key: str, currency: str = "EUR"):
        super().__init__(client, currency)
        self._headers = rapidapi_headers(api_key, AIRBNB_HOST)

    async def search(self, request: HotelSearchRequest) -> list[CanonicalResult]:
        params = {
            "location": request.location,
            "checkin": request.check_in.isoformat(),
            "checkout": request.check_out.isoformat(),
            "adults": str(request.adults),
            "children": str(request.children),
            "currency": self._currency,
        }
        data = await self._get_json(SEARCH_URL, params=params, headers=self._headers)
        listings = data.get("results") if isinstance(data, dict) else None
        return self._normalize_all(listings or [], self._context(request.location))
