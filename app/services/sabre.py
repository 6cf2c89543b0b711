import base64
import logging
import time
from typing import Any

import httpx

from app.exceptions.custom import ProviderError
from app.mappers import field_tables
from app.schemas.results import CanonicalResult, Domain
from app.schemas.search import FlightSearchRequest
from app.services.base import ProviderAdapter

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v2/auth/token"
INSTAFLIGHTS_PATH = "/v1/shop/flights"

MAX_RESULTS = 50
TOKEN_MARGIN_SECONDS = 60

_CABIN_CODES = {"ECONOMY": "Y", "PREMIUM_ECONOMY": "S", "BUSINESS": "C", "FIRST": "F"}


def _b64(value: str) -> str:
    return base64.b64encode(value.encode()).decode()


def basic_credentials(client_id: str, client_secret: str) -> str:
    """Sabre wants each credential encoded on its own, then the pair encoded again."""
    return _b64(f"{_b64(client_id)}:{_b64(client_secret)}")


class SabreAdapter(ProviderAdapter):
    name = "sabre"
    domain = Domain.flight
    table = field_tables.SABRE

    def __init__(
        self,
        client: httpx.AsyncClient,
        client_id: str,
        client_secret: str,
        base_url: str = "https://api.cert.platform.sabre.com",
        currency: str = "EUR",
    ):
        super().__init__(client, currency)
        self._credentials = basic_credentials(client_id, client_secret)
        self._base_url = base_url.rstrip("/")
        self._token: str | None = None
        self._token_expires = 0.0

    async def _ensure_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires:
            return self._token

        data = await self._request_json(
            "POST",
            f"{self._base_url}{TOKEN_PATH}",
            headers={"Authorization": f"Basic {self._credentials}"},
            data={"grant_type": "client_credentials"},
        )
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise ProviderError(self.name, "token response without access_token")

        self._token = token
        self._token_expires = time.monotonic() + float(data.get("expires_in", 604800)) - TOKEN_MARGIN_SECONDS
        logger.info("Sabre token refreshed")
        return token

    async def search(self, request: FlightSearchRequest) -> list[CanonicalResult]:
        token = await self._ensure_token()

        params: dict[str, Any] = {
            "origin": request.origin.upper(),
            "destination": request.destination.upper(),
            "departuredate": request.departure_date.isoformat(),
            "passengercount": str(request.adults + request.children),
            "pointofsalecountry": "FR",
            "limit": str(MAX_RESULTS),
        }
        if request.return_date:
            params["returndate"] = request.return_date.isoformat()
        cabin = _CABIN_CODES.get(request.travel_class)
        if cabin:
            params["outboundflightcabin"] = cabin

        data = await self._get_json(
            f"{self._base_url}{INSTAFLIGHTS_PATH}",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )
        itineraries = data.get("PricedItineraries") if isinstance(data, dict) else None
        context = self._context(
            request.destination,
            origin=request.origin,
            travel_class=request.travel_class,
        )
        return self._normalize_all(itineraries or [], context)
