"""Turn one raw provider item into one canonical result.

Every function here is pure and never raises on malformed input: missing or
unparseable fields resolve to documented defaults.
"""

from __future__ import annotations

import hashlib
import json
import math
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from app.mappers.fields import FieldTable, field, resolve_all
from app.mappers.images import CAR_PLACEHOLDER, airline_logo, pick_images, placeholder_image
from app.schemas.results import (
    CanonicalResult,
    CarResult,
    Domain,
    FlightEndpoint,
    FlightResult,
    HotelResult,
    Price,
)

DEFAULT_RATING = 4.0  # on the 5-point scale, normalizes to 8.0
DEFAULT_PRICES = {Domain.hotel: 80.0, Domain.flight: 350.0, Domain.car: 45.0}
DEFAULT_HOTEL_NAME = "Hôtel"
MAX_AMENITIES = 6

AIRLINE_NAMES = {
    "AF": "Air France", "ET": "Ethiopian Airlines", "TK": "Turkish Airlines",
    "EK": "Emirates", "KQ": "Kenya Airways", "AT": "Royal Air Maroc",
    "SN": "Brussels Airlines", "MS": "EgyptAir", "QR": "Qatar Airways",
    "LH": "Lufthansa", "BA": "British Airways", "KL": "KLM",
    "SA": "South African Airways", "W3": "Asky Airlines", "HF": "Air Côte d'Ivoire",
}

_NUMBER_RE = re.compile(r"-?\d+(?:[.,]\d+)?")
_ISO_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?", re.IGNORECASE)


class NormalizationContext(BaseModel):
    model_config = {"frozen": True}

    source: str
    location: str
    origin: str | None = None
    currency: str = "EUR"
    travel_class: str = "ECONOMY"


def to_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        cleaned = value.replace(" ", "").replace("\u00a0", "")
        # "1,234.50" and "1.234,50" both appear in provider payloads
        if "," in cleaned and "." in cleaned:
            if cleaned.rfind(".") > cleaned.rfind(","):
                cleaned = cleaned.replace(",", "")
            else:
                cleaned = cleaned.replace(".", "").replace(",", ".")
        elif re.search(r",\d{3}(?!\d)", cleaned):
            cleaned = cleaned.replace(",", "")
        match = _NUMBER_RE.search(cleaned)
        if match:
            number = float(match.group(0).replace(",", "."))
            return number if math.isfinite(number) else None
    return None


def to_int(value: Any) -> int | None:
    number = to_float(value)
    return int(number) if number is not None else None


def normalize_rating(value: Any) -> float:
    rating = to_float(value)
    if rating is None:
        rating = DEFAULT_RATING
    if rating <= 5:
        rating *= 2
    return round(min(max(rating, 0.0), 10.0), 1)


def normalize_price(value: Any, currency: Any, domain: Domain, context: NormalizationContext) -> Price:
    amount = to_float(value)
    if amount is None or amount <= 0:
        amount = DEFAULT_PRICES[domain]
    code = currency if isinstance(currency, str) and currency.strip() else context.currency
    return Price(amount=round(amount, 2), currency=code.strip().upper())


def format_duration(value: Any) -> str | None:
    """Render minutes or an ISO-8601 ``PT#H#M`` string as ``"4h 30min"``."""
    if isinstance(value, str):
        match = _ISO_DURATION_RE.match(value.strip())
        if match and (match.group(1) or match.group(2)):
            minutes = int(match.group(1) or 0) * 60 + int(match.group(2) or 0)
        else:
            return value.strip() or None
    else:
        number = to_float(value)
        if number is None:
            return None
        minutes = int(number)
    return f"{minutes // 60}h {minutes % 60:02d}min"


def airline_name(code: str | None) -> str:
    if not code:
        return "Airline"
    return AIRLINE_NAMES.get(code.upper(), code)


def _stable_id(source: str, raw: Mapping[str, Any]) -> str:
    payload = json.dumps(raw, sort_keys=True, default=str)
    return f"{source}-{hashlib.sha1(payload.encode()).hexdigest()[:12]}"


def _labels(values: list[Any]) -> list[str]:
    labels: list[str] = []
    for value in values:
        if isinstance(value, Mapping):
            value = value.get("name") or value.get("label") or value.get("title")
        if isinstance(value, str) and value.strip() and value.strip() not in labels:
            labels.append(value.strip())
        if len(labels) >= MAX_AMENITIES:
            break
    return labels


def _text(value: Any) -> str | None:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        text = str(value).strip()
        return text or None
    return None


def _common(
    table: FieldTable,
    raw: Mapping[str, Any],
    domain: Domain,
    context: NormalizationContext,
) -> dict[str, Any]:
    raw_id = _text(field(table, raw, "id"))
    return {
        "id": f"{context.source}-{raw_id}" if raw_id else _stable_id(context.source, raw),
        "price": normalize_price(field(table, raw, "price"), field(table, raw, "currency"), domain, context),
        "rating": normalize_rating(field(table, raw, "rating")),
        "review_count": max(to_int(field(table, raw, "review_count")) or 0, 0),
        "amenities": _labels(resolve_all(raw, table.get("amenities", ()))),
        "source": context.source,
    }


def normalize_hotel(raw: Mapping[str, Any], table: FieldTable, context: NormalizationContext) -> HotelResult:
    return HotelResult(
        **_common(table, raw, Domain.hotel, context),
        name=_text(field(table, raw, "name")) or DEFAULT_HOTEL_NAME,
        location=_text(field(table, raw, "location")) or context.location,
        address=_text(field(table, raw, "address")),
        images=pick_images(resolve_all(raw, table.get("images", ())), placeholder_image(context.location)),
    )


def normalize_flight(raw: Mapping[str, Any], table: FieldTable, context: NormalizationContext) -> FlightResult:
    code = (_text(field(table, raw, "airline_code")) or "XX").upper()
    number = _text(field(table, raw, "flight_number"))
    if number is None:
        flight_number = code
    elif number.upper().startswith(code):
        flight_number = number.upper()
    else:
        flight_number = f"{code}{number}"

    departure = FlightEndpoint(
        airport=_text(field(table, raw, "departure_airport")) or context.origin or "",
        at=_text(field(table, raw, "departure_at")),
    )
    arrival = FlightEndpoint(
        airport=_text(field(table, raw, "arrival_airport")) or context.location,
        at=_text(field(table, raw, "arrival_at")),
    )
    name = airline_name(code)
    return FlightResult(
        **_common(table, raw, Domain.flight, context),
        name=name,
        location=f"{departure.airport} - {arrival.airport}",
        images=[airline_logo(code)],
        airline=name,
        airline_code=code,
        flight_number=flight_number,
        departure=departure,
        arrival=arrival,
        duration=format_duration(field(table, raw, "duration")),
        stops=max(to_int(field(table, raw, "stops")) or 0, 0),
        travel_class=(_text(field(table, raw, "travel_class")) or context.travel_class).upper(),
    )


def normalize_car(raw: Mapping[str, Any], table: FieldTable, context: NormalizationContext) -> CarResult:
    return CarResult(
        **_common(table, raw, Domain.car, context),
        name=_text(field(table, raw, "name")) or "Car",
        location=_text(field(table, raw, "location")) or context.location,
        images=pick_images(resolve_all(raw, table.get("images", ())), CAR_PLACEHOLDER),
        supplier=_text(field(table, raw, "supplier")),
        category=_text(field(table, raw, "category")),
        seats=to_int(field(table, raw, "seats")),
        transmission=_text(field(table, raw, "transmission")),
    )


_BUILDERS = {
    Domain.hotel: normalize_hotel,
    Domain.flight: normalize_flight,
    Domain.car: normalize_car,
}


def normalize(
    raw: Mapping[str, Any],
    domain: Domain,
    table: FieldTable,
    context: NormalizationContext,
) -> CanonicalResult:
    return _BUILDERS[domain](raw, table, context)
