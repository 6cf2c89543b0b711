from datetime import date, timedelta

import pytest
import respx
from httpx import AsyncClient, Response

from app.exceptions.custom import ProviderError
from app.schemas.search import FlightSearchRequest
from app.services.amadeus import AmadeusAdapter

BASE = "https://test.api.amadeus.com"
TOKEN_URL = f"{BASE}/v1/security/oauth2/token"
OFFERS_URL = f"{BASE}/v2/shopping/flight-offers"

DEPARTURE = date.today() + timedelta(days=40)

OFFER = {
    "id": "1",
    "itineraries": [{"duration": "PT6H10M", "segments": [
        {"departure": {"iataCode": "CDG", "at": "2026-12-01T10:00:00"},
         "arrival": {"iataCode": "ABJ", "at": "2026-12-01T16:10:00"},
         "carrierCode": "AF", "number": "702"},
    ]}],
    "price": {"grandTotal": "689.41", "currency": "EUR"},
    "validatingAirlineCodes": ["AF"],
}


@pytest.fixture
def adapter():
    return AmadeusAdapter(AsyncClient(), "key", "secret")


@pytest.fixture
def flight_request():
    return FlightSearchRequest(
        origin="cdg",
        destination="abj",
        departure_date=DEPARTURE,
        return_date=DEPARTURE + timedelta(days=7),
        adults=2,
        children=1,
        travel_class="business",
    )


@respx.mock
@pytest.mark.asyncio
async def test_search(adapter, flight_request):
    token = respx.post(TOKEN_URL).mock(
        return_value=Response(200, json={"access_token": "tok-1", "expires_in": 1799})
    )
    offers = respx.get(OFFERS_URL).mock(return_value=Response(200, json={"data": [OFFER]}))

    results = await adapter.search(flight_request)

    assert b"grant_type=client_credentials" in token.calls.last.request.content
    request = offers.calls.last.request
    assert request.headers["Authorization"] == "Bearer tok-1"
    assert request.url.params["originLocationCode"] == "CDG"
    assert request.url.params["destinationLocationCode"] == "ABJ"
    assert request.url.params["travelClass"] == "BUSINESS"
    assert request.url.params["returnDate"] == (DEPARTURE + timedelta(days=7)).isoformat()
    assert request.url.params["children"] == "1"

    assert len(results) == 1
    assert results[0].airline == "Air France"
    assert results[0].flight_number == "AF702"
    assert results[0].price.amount == 689.41
    assert results[0].travel_class == "BUSINESS"


@respx.mock
@pytest.mark.asyncio
async def test_token_is_cached(adapter, flight_request):
    token = respx.post(TOKEN_URL).mock(
        return_value=Response(200, json={"access_token": "tok-1", "expires_in": 1799})
    )
    respx.get(OFFERS_URL).mock(return_value=Response(200, json={"data": []}))

    await adapter.search(flight_request)
    await adapter.search(flight_request)

    assert token.call_count == 1


@respx.mock
@pytest.mark.asyncio
async def test_expired_token_is_refreshed(adapter, flight_request):
    token = respx.post(TOKEN_URL).mock(
        return_value=Response(200, json={"access_token": "tok-1", "expires_in": 30})
    )
    respx.get(OFFERS_URL).mock(return_value=Response(200, json={"data": []}))

    await adapter.search(flight_request)
    await adapter.search(flight_request)

    # expires_in below the refresh margin means every call fetches a new token
    assert token.call_count == 2


@respx.mock
@pytest.mark.asyncio
async def test_auth_failure(adapter, flight_request):
    respx.post(TOKEN_URL).mock(return_value=Response(401, json={"error": "invalid_client"}))

    with pytest.raises(ProviderError) as exc_info:
        await adapter.search(flight_request)
    assert exc_info.value.status_code == 401


@respx.mock
@pytest.mark.asyncio
async def test_token_response_without_token(adapter, flight_request):
    respx.post(TOKEN_URL).mock(return_value=Response(200, json={"state": "approved"}))

    with pytest.raises(ProviderError):
        await adapter.search(flight_request)
