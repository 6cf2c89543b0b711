"""Per-provider field tables consumed by the normalizer.

Each canonical attribute maps to an ordered chain of accessors into the raw
provider item (see ``app.mappers.fields``). The order is the precedence:
documented fields first, legacy or alternate names after.
"""

import re
from collections.abc import Mapping
from typing import Any

from app.mappers.fields import FieldTable, get_path

_RANK_PREFIX_RE = re.compile(r"^\d+\.\s*")


def _tripadvisor_title(raw: Mapping[str, Any]) -> str:
    return _RANK_PREFIX_RE.sub("", raw["title"])


def _tripadvisor_photos(raw: Mapping[str, Any]) -> list[str]:
    return [
        photo["sizes"]["urlTemplate"].replace("{width}", "800").replace("{height}", "600")
        for photo in raw["cardPhotos"]
    ]


def _amadeus_stops(raw: Mapping[str, Any]) -> int:
    return len(raw["itineraries"][0]["segments"]) - 1


def _amadeus_bags(raw: Mapping[str, Any]) -> list[str]:
    fare = raw["travelerPricings"][0]["fareDetailsBySegment"][0]
    labels = []
    bags = fare.get("includedCheckedBags") or {}
    if bags.get("quantity"):
        labels.append(f"{bags['quantity']} checked bag(s)")
    elif bags.get("weight"):
        labels.append(f"Checked bag {bags['weight']}{bags.get('weightUnit', 'KG').lower()}")
    if fare.get("brandedFare"):
        labels.append(fare["brandedFare"])
    return labels


def _kiwi_duration_minutes(raw: Mapping[str, Any]) -> int:
    return raw["duration"]["departure"] // 60


def _kiwi_stops(raw: Mapping[str, Any]) -> int:
    outbound = [leg for leg in raw["route"] if not leg.get("return")]
    return len(outbound) - 1


_SABRE_OPTION = "AirItinerary.OriginDestinationOptions.OriginDestinationOption.0"
_SABRE_SEGMENTS = f"{_SABRE_OPTION}.FlightSegment"


def _sabre_stops(raw: Mapping[str, Any]) -> int:
    return len(get_path(raw, _SABRE_SEGMENTS)) - 1


def _booking_car_features(raw: Mapping[str, Any]) -> list[str]:
    info = raw["vehicle_info"]
    features = []
    if info.get("aircon"):
        features.append("Air conditioning")
    if info.get("doors"):
        features.append(f"{info['doors']} doors")
    if info.get("mileage"):
        features.append(str(info["mileage"]))
    suitcases = info.get("suitcases") or {}
    if suitcases.get("big"):
        features.append(f"{suitcases['big']} large bag(s)")
    return features


def _priceline_car_rate(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    return next(iter(raw["rates"].values()), None) or {}


def _priceline_car_price(raw: Mapping[str, Any]) -> Any:
    rate = _priceline_car_rate(raw)
    return rate.get("totalAllInclusivePrice") or rate.get("dailyRate")


def _priceline_car_currency(raw: Mapping[str, Any]) -> Any:
    return _priceline_car_rate(raw).get("currencyCode")


BOOKING_HOTEL: FieldTable = {
    "id": ("hotel_id", "property.id", "id"),
    "name": ("hotel_name", "name", "property.name"),
    "location": ("city", "city_trans", "property.wishlistName"),
    "address": ("address", "district"),
    "price": (
        "min_total_price",
        "composite_price_breakdown.gross_amount.value",
        "property.priceBreakdown.grossPrice.value",
    ),
    "currency": (
        "currencycode",
        "composite_price_breakdown.gross_amount.currency",
        "property.priceBreakdown.grossPrice.currency",
        "property.currency",
    ),
    "rating": ("review_score", "property.reviewScore", "class", "property.propertyClass"),
    "review_count": ("review_nr", "property.reviewCount"),
    "images": ("max_photo_url", "main_photo_url", "property.photoUrls", "photos"),
    "amenities": ("facilities", "hotel_facilities_list"),
}

AIRBNB: FieldTable = {
    "id": ("id", "listingId"),
    "name": ("name", "listingName"),
    "location": ("city", "address"),
    "address": ("address",),
    "price": ("price.total", "price.rate", "price.priceItems.0.amount"),
    "currency": ("price.currency",),
    "rating": ("rating", "avgRating"),
    "review_count": ("reviewsCount", "reviewCount"),
    "images": ("images", "thumbnail"),
    "amenities": ("previewAmenities", "amenities"),
}

HOTELS_COM: FieldTable = {
    "id": ("id", "hotel_id"),
    "name": ("name", "hotel_name"),
    "location": ("neighborhood.name",),
    "address": ("address", "neighborhood.name"),
    "price": ("price.lead.amount", "ratePlan.price.current", "price.strikeOut.amount"),
    "currency": ("price.lead.currencyInfo.code",),
    "rating": ("reviews.score", "guestReviews.rating", "star", "star_rating"),
    "review_count": ("reviews.total", "guestReviews.total"),
    "images": ("propertyImage.image.url", "image"),
    "amenities": ("amenities",),
}

TRIPADVISOR: FieldTable = {
    "id": ("id",),
    "name": (_tripadvisor_title, "name"),
    "location": ("secondaryInfo",),
    "price": ("priceForDisplay", "strikethroughPrice"),
    "rating": ("bubbleRating.rating",),
    "review_count": ("bubbleRating.count",),
    "images": (_tripadvisor_photos,),
    "amenities": ("badge.type",),
}

PRICELINE_HOTEL: FieldTable = {
    "id": ("hotelId", "id"),
    "name": ("name",),
    "location": ("location.address.cityName",),
    "address": ("location.address.addressLine1",),
    "price": ("ratesSummary.minPrice", "ratesSummary.minStrikePrice"),
    "currency": ("ratesSummary.minCurrencyCode",),
    "rating": ("overallGuestRating", "starRating"),
    "review_count": ("totalReviewCount",),
    "images": ("thumbnailUrl", "media.url"),
    "amenities": ("hotelFeatures.features", "hotelFeatures.hotelAmenities"),
}

XOTELO: FieldTable = {
    "id": ("key",),
    "name": ("name",),
    "price": ("price_ranges.minimum", "price_ranges.maximum"),
    "rating": ("review_summary.rating",),
    "review_count": ("review_summary.count",),
    "images": ("image",),
    "amenities": ("mentions", "accommodation_type"),
}

AMADEUS: FieldTable = {
    "id": ("id",),
    "airline_code": ("validatingAirlineCodes.0", "itineraries.0.segments.0.carrierCode"),
    "flight_number": ("itineraries.0.segments.0.number",),
    "departure_airport": ("itineraries.0.segments.0.departure.iataCode",),
    "departure_at": ("itineraries.0.segments.0.departure.at",),
    "arrival_airport": ("itineraries.0.segments.-1.arrival.iataCode",),
    "arrival_at": ("itineraries.0.segments.-1.arrival.at",),
    "duration": ("itineraries.0.duration",),
    "stops": (_amadeus_stops,),
    "price": ("price.grandTotal", "price.total"),
    "currency": ("price.currency",),
    "travel_class": ("travelerPricings.0.fareDetailsBySegment.0.cabin",),
    "amenities": (_amadeus_bags,),
}

SABRE: FieldTable = {
    "id": ("SequenceNumber",),
    "airline_code": ("TPA_Extensions.ValidatingCarrier.Code", f"{_SABRE_SEGMENTS}.0.MarketingAirline.Code"),
    "flight_number": (f"{_SABRE_SEGMENTS}.0.FlightNumber",),
    "departure_airport": (f"{_SABRE_SEGMENTS}.0.DepartureAirport.LocationCode",),
    "departure_at": (f"{_SABRE_SEGMENTS}.0.DepartureDateTime",),
    "arrival_airport": (f"{_SABRE_SEGMENTS}.-1.ArrivalAirport.LocationCode",),
    "arrival_at": (f"{_SABRE_SEGMENTS}.-1.ArrivalDateTime",),
    "duration": (f"{_SABRE_OPTION}.ElapsedTime",),
    "stops": (_sabre_stops,),
    "price": (
        "AirItineraryPricingInfo.ItinTotalFare.TotalFare.Amount",
        "AirItineraryPricingInfo.0.ItinTotalFare.TotalFare.Amount",
    ),
    "currency": (
        "AirItineraryPricingInfo.ItinTotalFare.TotalFare.CurrencyCode",
        "AirItineraryPricingInfo.0.ItinTotalFare.TotalFare.CurrencyCode",
    ),
}

KIWI: FieldTable = {
    "id": ("id",),
    "airline_code": ("route.0.airline", "airlines.0"),
    "flight_number": ("route.0.flight_no",),
    "departure_airport": ("flyFrom", "route.0.flyFrom"),
    "departure_at": ("local_departure", "route.0.local_departure"),
    "arrival_airport": ("flyTo", "route.-1.flyTo"),
    "arrival_at": ("local_arrival", "route.-1.local_arrival"),
    "duration": (_kiwi_duration_minutes, "fly_duration"),
    "stops": (_kiwi_stops,),
    "price": ("price", "conversion.EUR"),
    "currency": ("currency",),
}

TRAVELPAYOUTS: FieldTable = {
    "airline_code": ("airline",),
    "flight_number": ("flight_number",),
    "departure_airport": ("origin_airport", "origin"),
    "departure_at": ("departure_at",),
    "arrival_airport": ("destination_airport", "destination"),
    "duration": ("duration_to", "duration"),
    "stops": ("transfers",),
    "price": ("price", "value"),
    "currency": ("currency",),
}

BOOKING_CAR: FieldTable = {
    "id": ("vehicle_id", "vehicle_info.vehicle_id"),
    "name": ("vehicle_info.v_name", "vehicle_info.label"),
    "location": ("route_info.pickup.name", "supplier_info.address"),
    "supplier": ("supplier_info.name",),
    "category": ("vehicle_info.group", "vehicle_info.label"),
    "seats": ("vehicle_info.seats",),
    "transmission": ("vehicle_info.transmission",),
    "price": ("pricing_info.drive_away_price", "pricing_info.price"),
    "currency": ("pricing_info.currency",),
    "rating": ("rating_info.average",),
    "review_count": ("rating_info.no_of_ratings",),
    "images": ("vehicle_info.image_url", "vehicle_info.image_thumbnail_url"),
    "amenities": (_booking_car_features,),
}

PRICELINE_CAR: FieldTable = {
    "id": ("id", "vehicleCode"),
    "name": ("vehicleInfo.description", "vehicleInfo.carExample"),
    "location": ("pickupLocation.name",),
    "supplier": ("partnerInfo.partnerName", "partner.name"),
    "category": ("vehicleInfo.vehicleClassName", "vehicleInfo.carTypeName"),
    "seats": ("vehicleInfo.peopleCapacity",),
    "transmission": ("vehicleInfo.transmission",),
    "price": (_priceline_car_price,),
    "currency": (_priceline_car_currency,),
    "rating": ("ratingInfo.averageOverallRating",),
    "review_count": ("ratingInfo.totalReviews",),
    "images": ("vehicleInfo.images.SIZE268X144", "vehicleInfo.images.SIZE134X72"),
    "amenities": ("vehicleInfo.features",),
}
