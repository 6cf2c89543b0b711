from datetime import date, timedelta

import pytest

START = date.today() + timedelta(days=20)


def hotel_body(**overrides):
    body = {
        "location": "Paris",
        "checkIn": START.isoformat(),
        "checkOut": (START + timedelta(days=2)).isoformat(),
        "adults": 2,
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_search_hotels_falls_back_to_mock(client):
    response = await client.post("/search-hotels", json=hotel_body())

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["mock"] is True
    assert data["sources"] == {"mock": 5}
    assert len(data["data"]) == 5
    first = data["data"][0]
    assert first["source"] == "mock"
    assert "reviewCount" in first
    assert first["price"]["currency"] == "EUR"
    prices = [item["price"]["amount"] for item in data["data"]]
    assert prices == sorted(prices)


@pytest.mark.asyncio
async def test_success_carries_rate_limit_headers(client):
    response = await client.post("/search-hotels", json=hotel_body())

    assert response.headers["X-RateLimit-Limit"] == "3"
    assert response.headers["X-RateLimit-Remaining"] == "2"
    assert int(response.headers["X-RateLimit-Reset"]) > 0


@pytest.mark.asyncio
async def test_group_by_source(client):
    response = await client.post("/search-hotels?groupBySource=true", json=hotel_body())

    assert response.status_code == 200
    assert list(response.json()["data"]["bySource"]) == ["mock"]


@pytest.mark.asyncio
async def test_check_out_before_check_in(client):
    response = await client.post(
        "/search-hotels",
        json=hotel_body(checkOut=(START - timedelta(days=1)).isoformat()),
    )

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "Validation failed"
    assert data["data"] == []
    assert {"field": "checkOut", "message": "Check-out date must be after check-in date"} in data["validationErrors"]


@pytest.mark.asyncio
async def test_missing_and_out_of_range_fields(client):
    response = await client.post("/search-hotels", json={"checkIn": START.isoformat(), "adults": 0})

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["validationErrors"]}
    assert {"location", "checkOut", "adults"} <= fields


@pytest.mark.asyncio
async def test_past_departure_rejected(client):
    response = await client.post(
        "/search-flights",
        json={"origin": "CDG", "destination": "ABJ", "departureDate": "2020-01-01", "adults": 1},
    )

    assert response.status_code == 400
    assert response.json()["validationErrors"] == [
        {"field": "departureDate", "message": "Departure date cannot be in the past"}
    ]


@pytest.mark.asyncio
async def test_search_flights(client):
    response = await client.post(
        "/search-flights",
        json={
            "origin": "CDG",
            "destination": "DSS",
            "departureDate": START.isoformat(),
            "adults": 1,
            "travelClass": "business",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["mock"] is True
    assert len(data["data"]) == 6
    assert data["data"][0]["airlineCode"] == "AF"
    assert data["data"][0]["travelClass"] == "BUSINESS"


@pytest.mark.asyncio
async def test_car_rental(client):
    response = await client.post(
        "/car-rental",
        json={
            "pickupLocation": "Dakar",
            "pickupDate": START.isoformat(),
            "dropoffDate": (START + timedelta(days=2)).isoformat(),
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["mock"] is True
    assert data["data"][0]["category"] == "Economy"
    assert data["data"][0]["price"]["amount"] == 70.0


@pytest.mark.asyncio
async def test_car_rental_bad_time(client):
    response = await client.post(
        "/car-rental",
        json={
            "pickupLocation": "Dakar",
            "pickupDate": START.isoformat(),
            "dropoffDate": (START + timedelta(days=2)).isoformat(),
            "pickupTime": "9h",
        },
    )

    assert response.status_code == 400
    assert response.json()["validationErrors"][0]["field"] == "pickupTime"


@pytest.mark.asyncio
async def test_packages(client):
    response = await client.post(
        "/search-flight-hotel-packages",
        json={
            "origin": "CDG",
            "destination": "Dubai",
            "departureDate": START.isoformat(),
            "returnDate": (START + timedelta(days=5)).isoformat(),
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["flights"]["mock"] is True
    assert data["hotels"]["mock"] is True
    assert data["hotels"]["data"][0]["location"] == "Dubai"


@pytest.mark.asyncio
async def test_rate_limited(client):
    for _ in range(3):
        assert (await client.post("/search-hotels", json=hotel_body())).status_code == 200

    response = await client.post("/search-hotels", json=hotel_body())

    assert response.status_code == 429
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "Too many requests. Please try again later."
    assert 0 < data["retryAfter"] <= 60
    assert response.headers["Retry-After"] == str(data["retryAfter"])
    assert response.headers["X-RateLimit-Limit"] == "3"
    assert response.headers["X-RateLimit-Remaining"] == "0"


@pytest.mark.asyncio
async def test_rate_limit_is_per_client(client):
    for _ in range(3):
        await client.post("/search-hotels", json=hotel_body(), headers={"x-forwarded-for": "10.0.0.1"})

    blocked = await client.post("/search-hotels", json=hotel_body(), headers={"x-forwarded-for": "10.0.0.1"})
    other = await client.post("/search-hotels", json=hotel_body(), headers={"x-forwarded-for": "10.0.0.2, 10.0.0.1"})

    assert blocked.status_code == 429
    assert other.status_code == 200


@pytest.mark.asyncio
async def test_location_is_sanitized(client):
    response = await client.post("/search-hotels", json=hotel_body(location="  <Paris>  "))

    assert response.status_code == 200
    assert response.json()["data"][0]["location"] == "Paris"


@pytest.mark.asyncio
async def test_location_only_brackets_rejected(client):
    response = await client.post("/search-hotels", json=hotel_body(location="<a>"))

    assert response.status_code == 400
    assert "location" in {e["field"] for e in response.json()["validationErrors"]}
