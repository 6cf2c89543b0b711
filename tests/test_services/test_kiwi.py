from datetime import date, timedelta

import pytest
import respx
from httpx import AsyncClient, Response

from app.schemas.search import FlightSearchRequest
from app.services.kiwi import SEARCH_URL, KiwiAdapter, kiwi_date

DEPARTURE = date.today() + timedelta(days=60)


def test_kiwi_date():
    assert kiwi_date(date(2027, 3, 9)) == "09/03/2027"


@respx.mock
@pytest.mark.asyncio
async def test_search():
    route = respx.get(SEARCH_URL).mock(
        return_value=Response(200, json={"currency": "EUR", "data": [{
            "id": "abc",
            "flyFrom": "CDG",
            "flyTo": "DXB",
            "local_departure": "2027-01-10T09:00:00.000Z",
            "local_arrival": "2027-01-10T18:45:00.000Z",
            "price": 412,
            "duration": {"departure": 24300, "return": 0},
            "route": [
                {"airline": "TK", "flight_no": 1822, "flyFrom": "CDG", "flyTo": "IST", "return": 0},
                {"airline": "TK", "flight_no": 760, "flyFrom": "IST", "flyTo": "DXB", "return": 0},
            ],
        }]})
    )
    request = FlightSearchRequest(
        origin="CDG",
        destination="DXB",
        departure_date=DEPARTURE,
        return_date=DEPARTURE + timedelta(days=5),
        adults=1,
        travel_class="FIRST",
    )

    results = await KiwiAdapter(AsyncClient(), "key").search(request)

    params = route.calls.last.request.url.params
    assert params["date_from"] == kiwi_date(DEPARTURE)
    assert params["return_from"] == kiwi_date(DEPARTURE + timedelta(days=5))
    assert params["selected_cabins"] == "F"
    assert results[0].airline == "Turkish Airlines"
    assert results[0].flight_number == "TK1822"
    assert results[0].stops == 1
    assert results[0].duration == "6h 45min"
    assert results[0].price.amount == 412.0
    assert results[0].travel_class == "FIRST"
