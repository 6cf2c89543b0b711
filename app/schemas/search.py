import re
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

TravelClass = Literal["ECONOMY", "PREMIUM_ECONOMY", "BUSINESS", "FIRST"]

_TIME_RE = r"^\d{2}:\d{2}$"


def sanitize_text(value: str, max_length: int = 1000) -> str:
    """Trim, truncate, and strip angle brackets from free text."""
    return re.sub(r"[<>]", "", value.strip()[:max_length])


def _not_in_past(value: date, label: str) -> date:
    if value < date.today():
        raise ValueError(f"{label} cannot be in the past")
    return value


def _after(value: date, start: date | None, message: str) -> date:
    # start is missing when it failed its own validation
    if start is not None and value <= start:
        raise ValueError(message)
    return value


class SearchRequest(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )


class HotelSearchRequest(SearchRequest):
    location: str = Field(min_length=2, max_length=200)
    check_in: date
    check_out: date
    adults: int = Field(ge=1, le=30)
    children: int = Field(default=0, ge=0, le=30)
    rooms: int = Field(default=1, ge=1, le=10)

    @field_validator("location", mode="before")
    @classmethod
    def _clean_location(cls, v: object) -> object:
        return sanitize_text(v) if isinstance(v, str) else v

    @field_validator("check_in")
    @classmethod
    def _check_in_not_past(cls, v: date) -> date:
        return _not_in_past(v, "Check-in date")

    @field_validator("check_out")
    @classmethod
    def _check_out_after_check_in(cls, v: date, info: ValidationInfo) -> date:
        return _after(v, info.data.get("check_in"), "Check-out date must be after check-in date")

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


class FlightSearchRequest(SearchRequest):
    origin: str = Field(min_length=3, max_length=100)
    destination: str = Field(min_length=3, max_length=100)
    departure_date: date
    return_date: date | None = None
    adults: int = Field(ge=1, le=9)
    children: int = Field(default=0, ge=0, le=9)
    travel_class: TravelClass = "ECONOMY"

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def _clean_place(cls, v: object) -> object:
        return sanitize_text(v) if isinstance(v, str) else v

    @field_validator("travel_class", mode="before")
    @classmethod
    def _upper_travel_class(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("departure_date")
    @classmethod
    def _departure_not_past(cls, v: date) -> date:
        return _not_in_past(v, "Departure date")

    @field_validator("return_date")
    @classmethod
    def _return_after_departure(cls, v: date | None, info: ValidationInfo) -> date | None:
        if v is None:
            return v
        return _after(v, info.data.get("departure_date"), "Return date must be after departure date")


class CarRentalSearchRequest(SearchRequest):
    pickup_location: str = Field(min_length=2, max_length=200)
    dropoff_location: str | None = Field(default=None, min_length=2, max_length=200)
    pickup_date: date
    dropoff_date: date
    pickup_time: str = Field(default="10:00", pattern=_TIME_RE)
    dropoff_time: str = Field(default="10:00", pattern=_TIME_RE)

    @field_validator("pickup_location", "dropoff_location", mode="before")
    @classmethod
    def _clean_location(cls, v: object) -> object:
        return sanitize_text(v) if isinstance(v, str) else v

    @field_validator("pickup_date")
    @classmethod
    def _pickup_not_past(cls, v: date) -> date:
        return _not_in_past(v, "Pickup date")

    @field_validator("dropoff_date")
    @classmethod
    def _dropoff_after_pickup(cls, v: date, info: ValidationInfo) -> date:
        return _after(v, info.data.get("pickup_date"), "Dropoff date must be after pickup date")

    @property
    def effective_dropoff_location(self) -> str:
        return self.dropoff_location or self.pickup_location

    @property
    def rental_days(self) -> int:
        return (self.dropoff_date - self.pickup_date).days


class PackageSearchRequest(SearchRequest):
    origin: str = Field(min_length=3, max_length=100)
    destination: str = Field(min_length=3, max_length=100)
    departure_date: date
    return_date: date
    adults: int = Field(default=1, ge=1, le=9)
    children: int = Field(default=0, ge=0, le=9)
    rooms: int = Field(default=1, ge=1, le=10)
    travel_class: TravelClass = "ECONOMY"

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def _clean_place(cls, v: object) -> object:
        return sanitize_text(v) if isinstance(v, str) else v

    @field_validator("travel_class", mode="before")
    @classmethod
    def _upper_travel_class(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("departure_date")
    @classmethod
    def _departure_not_past(cls, v: date) -> date:
        return _not_in_past(v, "Departure date")

    @field_validator("return_date")
    @classmethod
    def _return_after_departure(cls, v: date, info: ValidationInfo) -> date:
        return _after(v, info.data.get("departure_date"), "Return date must be after departure date")

    def flight_request(self) -> FlightSearchRequest:
        return FlightSearchRequest(
            origin=self.origin,
            destination=self.destination,
            departure_date=self.departure_date,
            return_date=self.return_date,
            adults=self.adults,
            children=self.children,
            travel_class=self.travel_class,
        )

    def hotel_request(self) -> HotelSearchRequest:
        return HotelSearchRequest(
            location=self.destination,
            check_in=self.departure_date,
            check_out=self.return_date,
            adults=self.adults,
            children=self.children,
            rooms=self.rooms,
        )
