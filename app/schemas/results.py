from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Domain(StrEnum):
    hotel = "hotel"
    flight = "flight"
    car = "car"


class _Canonical(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Price(_Canonical):
    amount: float
    currency: str


class CanonicalResult(_Canonical):
    id: str
    name: str
    location: str
    price: Price
    rating: float = Field(ge=0, le=10)
    review_count: int = 0
    images: list[str] = []
    amenities: list[str] = []
    source: str


class HotelResult(CanonicalResult):
    address: str | None = None


class FlightEndpoint(_Canonical):
    airport: str
    at: str | None = None


class FlightResult(CanonicalResult):
    airline: str
    airline_code: str
    flight_number: str
    departure: FlightEndpoint
    arrival: FlightEndpoint
    duration: str | None = None
    stops: int = 0
    travel_class: str = "ECONOMY"


class CarResult(CanonicalResult):
    supplier: str | None = None
    category: str | None = None
    seats: int | None = None
    transmission: str | None = None


class GroupedResults(_Canonical):
    by_source: dict[str, list[HotelResult | FlightResult | CarResult]]


class AggregatedResponse(_Canonical):
    success: bool = True
    data: list[HotelResult | FlightResult | CarResult] | GroupedResults
    mock: bool
    sources: dict[str, int]


class PackageResponse(_Canonical):
    success: bool = True
    flights: AggregatedResponse
    hotels: AggregatedResponse
