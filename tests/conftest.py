import httpx
import pytest
from httpx import ASGITransport

PROVIDER_ENV = (
    "BOOKING_API_KEY",
    "AIRBNB_API_KEY",
    "RAPIDAPI_KEY",
    "AMADEUS_API_KEY",
    "AMADEUS_API_SECRET",
    "SABRE_CLIENT_ID",
    "SABRE_CLIENT_SECRET",
    "TRAVELPAYOUTS_TOKEN",
)


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    # No .env lookup and no real credentials: every search goes to the fallback
    monkeypatch.chdir(tmp_path)
    for name in PROVIDER_ENV:
        monkeypatch.setenv(name, "")
    monkeypatch.setenv("XOTELO_ENABLED", "false")
    monkeypatch.setenv("RATE_LIMIT_SEARCH_MAX_REQUESTS", "3")


@pytest.fixture
async def client(mock_env):
    from app.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
