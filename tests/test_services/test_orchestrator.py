import asyncio
import time
from datetime import date, timedelta

import pytest

from app.exceptions.custom import ProviderError, RateLimitError
from app.mappers import field_tables
from app.mappers.normalizer import NormalizationContext, normalize
from app.schemas.results import Domain, GroupedResults
from app.schemas.search import FlightSearchRequest, HotelSearchRequest, PackageSearchRequest
from app.services.base import ProviderAdapter
from app.services.fallback import FallbackSource
from app.services.orchestrator import SearchOrchestrator

START = date.today() + timedelta(days=30)


def hotel(source: str, hotel_id: str, price: float, rating: float = 4.0, currency: str = "EUR"):
    raw = {"id": hotel_id, "name": f"Hotel {hotel_id}", "price": {"total": price}, "rating": rating}
    context = NormalizationContext(source=source, location="Paris", currency=currency)
    return normalize(raw, Domain.hotel, field_tables.AIRBNB, context)


class FakeAdapter(ProviderAdapter):
    domain = Domain.hotel
    table = field_tables.AIRBNB

    def __init__(self, name, results=(), error=None, delay=0.0):
        super().__init__(client=None)
        self.name = name
        self._results = list(results)
        self._error = error
        self._delay = delay
        self.calls = 0

    async def search(self, request):
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error:
            raise self._error
        return self._results


@pytest.fixture
def hotel_request():
    return HotelSearchRequest(location="Paris", check_in=START, check_out=START + timedelta(days=3), adults=2)


def orchestrator(*adapters, timeout=1.0):
    return SearchOrchestrator({Domain.hotel: list(adapters)}, FallbackSource(), timeout=timeout)


@pytest.mark.asyncio
async def test_merges_and_sorts_by_price(hotel_request):
    a = FakeAdapter("booking", [hotel("booking", "1", 260), hotel("booking", "2", 140)])
    b = FakeAdapter("airbnb", [hotel("airbnb", "3", 95)])

    response = await orchestrator(a, b).search(Domain.hotel, hotel_request)

    assert response.success is True
    assert response.mock is False
    assert [r.price.amount for r in response.data] == [95, 140, 260]
    assert response.sources == {"airbnb": 1, "booking": 2}
    assert a.calls == b.calls == 1


@pytest.mark.asyncio
async def test_other_currencies_sort_after_default(hotel_request):
    a = FakeAdapter("booking", [hotel("booking", "1", 140), hotel("booking", "2", 95)])
    b = FakeAdapter("xotelo", [hotel("xotelo", "3", 50, currency="USD"), hotel("xotelo", "4", 30, currency="USD")])

    response = await orchestrator(a, b).search(Domain.hotel, hotel_request)

    assert [(r.price.currency, r.price.amount) for r in response.data] == [
        ("EUR", 95), ("EUR", 140), ("USD", 30), ("USD", 50),
    ]


@pytest.mark.asyncio
async def test_failing_provider_is_isolated(hotel_request):
    ok = FakeAdapter("airbnb", [hotel("airbnb", "1", 120)])
    errors = [
        FakeAdapter("booking", error=ProviderError("booking", "boom", 500)),
        FakeAdapter("tripadvisor", error=RateLimitError("tripadvisor")),
        FakeAdapter("priceline", error=KeyError("unexpected")),
    ]

    response = await orchestrator(ok, *errors).search(Domain.hotel, hotel_request)

    assert response.mock is False
    assert [r.id for r in response.data] == ["airbnb-1"]
    assert response.sources == {"airbnb": 1}


@pytest.mark.asyncio
async def test_slow_provider_times_out(hotel_request):
    fast = FakeAdapter("airbnb", [hotel("airbnb", "1", 120)])
    slow = FakeAdapter("booking", [hotel("booking", "2", 50)], delay=5)

    started = time.monotonic()
    response = await orchestrator(fast, slow, timeout=0.1).search(Domain.hotel, hotel_request)

    assert time.monotonic() - started < 2
    assert [r.source for r in response.data] == ["airbnb"]


@pytest.mark.asyncio
async def test_all_empty_uses_fallback(hotel_request):
    response = await orchestrator(
        FakeAdapter("booking"),
        FakeAdapter("airbnb", error=ProviderError("airbnb", "down")),
    ).search(Domain.hotel, hotel_request)

    assert response.mock is True
    assert len(response.data) == 5
    assert response.sources == {"mock": 5}
    assert [r.price.amount for r in response.data] == sorted(r.price.amount for r in response.data)


@pytest.mark.asyncio
async def test_no_configured_providers_uses_fallback(hotel_request):
    response = await orchestrator().search(Domain.hotel, hotel_request)
    assert response.mock is True
    assert response.data


@pytest.mark.asyncio
async def test_group_by_source(hotel_request):
    a = FakeAdapter("booking", [hotel("booking", "1", 260), hotel("booking", "2", 140)])
    b = FakeAdapter("airbnb", [hotel("airbnb", "3", 95)])

    response = await orchestrator(a, b).search(Domain.hotel, hotel_request, group_by_source=True)

    assert isinstance(response.data, GroupedResults)
    assert [r.id for r in response.data.by_source["booking"]] == ["booking-2", "booking-1"]
    assert [r.id for r in response.data.by_source["airbnb"]] == ["airbnb-3"]


@pytest.mark.asyncio
async def test_paris_scenario(hotel_request):
    booking = FakeAdapter("booking", [hotel("booking", "b1", 189, 8.6), hotel("booking", "b2", 142, 4.1)])
    airbnb = FakeAdapter("airbnb", error=ProviderError("airbnb", "403 not subscribed", 403))
    tripadvisor = FakeAdapter("tripadvisor", [hotel("tripadvisor", "t1", 175, 4.5)], delay=5)

    response = await orchestrator(booking, airbnb, tripadvisor, timeout=0.1).search(Domain.hotel, hotel_request)

    assert response.mock is False
    assert [(r.id, r.price.amount, r.rating) for r in response.data] == [
        ("booking-b2", 142, 8.2),
        ("booking-b1", 189, 8.6),
    ]
    assert response.sources == {"booking": 2}


@pytest.mark.asyncio
async def test_package_falls_back_per_half():
    hotels = FakeAdapter("booking", [hotel("booking", "1", 200)])
    engine = SearchOrchestrator({Domain.hotel: [hotels], Domain.flight: []}, FallbackSource(), timeout=1.0)
    request = PackageSearchRequest(
        origin="CDG",
        destination="Paris",
        departure_date=START,
        return_date=START + timedelta(days=4),
    )

    response = await engine.search_package(request)

    assert response.hotels.mock is False
    assert response.hotels.sources == {"booking": 1}
    assert response.flights.mock is True
    assert len(response.flights.data) == 6


def test_providers_lists_names():
    engine = SearchOrchestrator({Domain.hotel: [FakeAdapter("booking"), FakeAdapter("xotelo")]}, FallbackSource())
    assert engine.providers(Domain.hotel) == ["booking", "xotelo"]
    assert engine.providers(Domain.flight) == []


@pytest.mark.asyncio
async def test_flight_request_reaches_fallback():
    request = FlightSearchRequest(origin="CDG", destination="ABJ", departure_date=START, adults=1)
    response = await SearchOrchestrator({}, FallbackSource()).search(Domain.flight, request)
    assert response.mock is True
    assert response.data[0].price.amount == 350.0
