"""Amadeus Self-Service flight offers with a cached OAuth2 client-credentials token."""

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

TOKEN_PATH = "/v1/security/oauth2/token"
OFFERS_PATH = "/v2/shopping/flight-offers"

MAX_RESULTS = 50
# Refresh a minute before the advertised expiry
TOKEN_MARGIN_SECONDS = 60


class AmadeusAdapter(ProviderAdapter):
    name = "amadeus"
    domain = Domain.flight
    table = field_tables.AMADEUS

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        api_secret: str,
        base_url: str = "https://test.api.amadeus.com",
        currency: str = "EUR",
    ):
        super().__init__(client, currency)
        self._api_key = api_key
        self._api_secret = api_secret
        self._base_url = base_url.rstrip("/")
        self._token: str | None = None
        self._token_expires = 0.0

    async def _ensure_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires:
            return self._token

        data = await self._request_json(
            "POST",
            f"{self._base_url}{TOKEN_PATH}",
            data={
                "grant_type": "client_credentials",
                "client_id": self._api_key,
                "client_secret": self._api_secret,
            },
        )
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise ProviderError(self.name, "token response without access_token")

        self._token = token
        self._token_expires = time.monotonic() + float(data.get("expires_in", 1799)) - TOKEN_MARGIN_SECONDS
        logger.info("Amadeus token refreshed")
        return token

    async def search(self, request: FlightSearchRequest) -> list[CanonicalResult]:
        token = await self._ensure_token()

        params: dict[str, Any] = {
            "originLocationCode": request.origin.upper(),
            "destinationLocationCode": request.destination.upper(),
            "departureDate": request.departure_date.isoformat(),
            "adults": str(request.adults),
            "travelClass": request.travel_class,
            "currencyCode": self._currency,
            "max": str(MAX_RESULTS),
        }
        if request.return_date:
            params["returnDate"] = request.return_date.isoformat()
        if request.children > 0:
            params["children"] = str(request.children)

        data = await self._get_json(
            f"{self._base_url}{OFFERS_PATH}",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )
        offers = data.get("data") if isinstance(data, dict) else None
        context = self._context(
            request.destination,
            origin=request.origin,
            travel_class=request.travel_class,
        )
        return self._normalize_all(offers or [], context)
