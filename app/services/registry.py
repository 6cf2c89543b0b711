import logging

import httpx

from app.config import Settings
from app.schemas.results import Domain
from app.services.airbnb import AirbnbAdapter
from app.services.amadeus import AmadeusAdapter
from app.services.base import ProviderAdapter
from app.services.booking import BookingCarAdapter, BookingHotelAdapter
from app.services.hotels_com import HotelsComAdapter
from app.services.kiwi import KiwiAdapter
from app.services.priceline import PricelineCarAdapter, PricelineHotelAdapter
from app.services.sabre import SabreAdapter
from app.services.travelpayouts import TravelpayoutsAdapter
from app.services.tripadvisor import TripAdvisorAdapter
from app.services.xotelo import XoteloAdapter

logger = logging.getLogger(__name__)


def build_adapters(client: httpx.AsyncClient, settings: Settings) -> dict[Domain, list[ProviderAdapter]]:
    """Construct every provider whose credentials are configured.

    Providers without credentials are left out entirely so they are never
    dispatched.
    """
    currency = settings.default_currency
    adapters: dict[Domain, list[ProviderAdapter]] = {domain: [] for domain in Domain}

    def add(adapter: ProviderAdapter) -> None:
        adapters[adapter.domain].append(adapter)

    if settings.booking_api_key:
        add(BookingHotelAdapter(client, settings.booking_api_key, currency))
        add(BookingCarAdapter(client, settings.booking_api_key, currency))
    if settings.airbnb_api_key:
        add(AirbnbAdapter(client, settings.airbnb_api_key, currency))
    if settings.rapidapi_key:
        add(HotelsComAdapter(client, settings.rapidapi_key, currency))
        add(TripAdvisorAdapter(client, settings.rapidapi_key, currency))
        add(PricelineHotelAdapter(client, settings.rapidapi_key, currency))
        add(PricelineCarAdapter(client, settings.rapidapi_key, currency))
        add(KiwiAdapter(client, settings.rapidapi_key, currency))
    if settings.xotelo_enabled:
        add(XoteloAdapter(client, currency))
    if settings.amadeus_api_key and settings.amadeus_api_secret:
        add(AmadeusAdapter(
            client,
            settings.amadeus_api_key,
            settings.amadeus_api_secret,
            settings.amadeus_base_url,
            currency,
        ))
    if settings.sabre_client_id and settings.sabre_client_secret:
        add(SabreAdapter(
            client,
            settings.sabre_client_id,
            settings.sabre_client_secret,
            settings.sabre_base_url,
            currency,
        ))
    if settings.travelpayouts_token:
        add(TravelpayoutsAdapter(client, settings.travelpayouts_token, currency))

    for domain, items in adapters.items():
        logger.info("%s providers: %s", domain, ", ".join(a.name for a in items) or "none")
    return adapters
