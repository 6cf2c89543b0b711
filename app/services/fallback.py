"""Deterministic stand-in results used when every provider comes back empty."""

import logging
from datetime import datetime, time, timedelta

from app.mappers.images import CAR_PLACEHOLDER, airline_logo, placeholder_image
from app.mappers.normalizer import airline_name, format_duration
from app.schemas.results import (
    CanonicalResult,
    CarResult,
    Domain,
    FlightEndpoint,
    FlightResult,
    HotelResult,
    Price,
)
from app.schemas.search import (
    CarRentalSearchRequest,
    FlightSearchRequest,
    HotelSearchRequest,
    SearchRequest,
)

logger = logging.getLogger(__name__)

SOURCE = "mock"

# (brand, nightly price, review score out of 10, review count)
_HOTELS = (
    ("Sofitel", 275.0, 9.2, 812),
    ("Pullman", 220.0, 8.8, 640),
    ("Novotel", 145.0, 8.4, 1203),
    ("Ibis Styles", 85.0, 7.8, 958),
    ("Radisson Blu", 195.0, 8.9, 437),
)
_HOTEL_AMENITIES = ["WiFi gratuit", "Piscine", "Restaurant", "Spa", "Parking"]

_AIRLINES = ("AF", "ET", "TK", "EK", "KQ", "AT")

# (category, example model, daily price, seats, transmission)
_CARS = (
    ("Economy", "Peugeot 208", 35.0, 5, "Manual"),
    ("Compact", "Volkswagen Golf", 45.0, 5, "Manual"),
    ("SUV", "Toyota RAV4", 70.0, 5, "Automatic"),
    ("Van", "Renault Trafic", 85.0, 9, "Manual"),
    ("Premium", "Mercedes-Benz Classe C", 95.0, 5, "Automatic"),
)
_CAR_AMENITIES = ["Climatisation", "Kilométrage illimité", "Annulation gratuite"]


class FallbackSource:
    """Same input, same output: no clock, no randomness, no I/O."""

    def __init__(self, currency: str = "EUR"):
        self._currency = currency

    def search(self, domain: Domain, request: SearchRequest) -> list[CanonicalResult]:
        if domain is Domain.hotel and isinstance(request, HotelSearchRequest):
            results = self.hotels(request)
        elif domain is Domain.flight and isinstance(request, FlightSearchRequest):
            results = self.flights(request)
        elif domain is Domain.car and isinstance(request, CarRentalSearchRequest):
            results = self.cars(request)
        else:
            raise TypeError(f"{type(request).__name__} is not a {domain} search")
        logger.info("Serving %d fallback %s results", len(results), domain)
        return results

    def _price(self, amount: float) -> Price:
        return Price(amount=round(amount, 2), currency=self._currency)

    def hotels(self, request: HotelSearchRequest) -> list[HotelResult]:
        location = request.location
        image = placeholder_image(location)
        nights = max(request.nights, 1)
        return [
            HotelResult(
                id=f"{SOURCE}-hotel-{index}",
                name=f"{brand} {location}",
                location=location,
                address=f"Centre-ville, {location}",
                price=self._price(nightly * nights * request.rooms),
                rating=score,
                review_count=reviews,
                images=[image],
                amenities=list(_HOTEL_AMENITIES),
                source=SOURCE,
            )
            for index, (brand, nightly, score, reviews) in enumerate(_HOTELS)
        ]

    def flights(self, request: FlightSearchRequest) -> list[FlightResult]:
        passengers = request.adults + request.children
        results = []
        for index, code in enumerate(_AIRLINES):
            departure = datetime.combine(request.departure_date, time(6 + index * 2, 30 if index % 2 == 0 else 0))
            minutes = (3 + index // 2) * 60 + 15 + (index % 3) * 15
            arrival = departure + timedelta(minutes=minutes)
            results.append(
                FlightResult(
                    id=f"{SOURCE}-flight-{index}",
                    name=f"{airline_name(code)} {request.origin} - {request.destination}",
                    location=f"{request.origin} - {request.destination}",
                    price=self._price((350 + index * 75) * passengers),
                    rating=8.0,
                    images=[airline_logo(code)],
                    source=SOURCE,
                    airline=airline_name(code),
                    airline_code=code,
                    flight_number=f"{code}{1000 + index * 111}",
                    departure=FlightEndpoint(airport=request.origin, at=departure.isoformat()),
                    arrival=FlightEndpoint(airport=request.destination, at=arrival.isoformat()),
                    duration=format_duration(minutes),
                    stops=0 if index % 3 == 0 else 1,
                    travel_class=request.travel_class,
                )
            )
        return results

    def cars(self, request: CarRentalSearchRequest) -> list[CarResult]:
        days = max(request.rental_days, 1)
        return [
            CarResult(
                id=f"{SOURCE}-car-{index}",
                name=f"{model} ou similaire",
                location=request.pickup_location,
                price=self._price(daily * days),
                rating=8.0,
                images=[CAR_PLACEHOLDER],
                amenities=list(_CAR_AMENITIES),
                source=SOURCE,
                supplier="Location Partenaire",
                category=category,
                seats=seats,
                transmission=transmission,
            )
            for index, (category, model, daily, seats, transmission) in enumerate(_CARS)
        ]
