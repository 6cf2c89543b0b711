import logging

from fastapi import APIRouter, Query

from app.dependencies import OrchestratorDep, SearchAdmissionDep
from app.schemas.results import AggregatedResponse, Domain, PackageResponse
from app.schemas.search import (
    CarRentalSearchRequest,
    FlightSearchRequest,
    HotelSearchRequest,
    PackageSearchRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_GROUP_BY_SOURCE = Query(False, alias="groupBySource")


@router.post("/search-hotels", response_model=AggregatedResponse, response_model_by_alias=True)
async def search_hotels(
    body: HotelSearchRequest,
    orchestrator: OrchestratorDep,
    _admission: SearchAdmissionDep,
    group_by_source: bool = _GROUP_BY_SOURCE,
) -> AggregatedResponse:
    logger.info("Hotel search: %s %s -> %s", body.location, body.check_in, body.check_out)
    return await orchestrator.search(Domain.hotel, body, group_by_source)


@router.post("/search-flights", response_model=AggregatedResponse, response_model_by_alias=True)
async def search_flights(
    body: FlightSearchRequest,
    orchestrator: OrchestratorDep,
    _admission: SearchAdmissionDep,
    group_by_source: bool = _GROUP_BY_SOURCE,
) -> AggregatedResponse:
    logger.info("Flight search: %s -> %s on %s", body.origin, body.destination, body.departure_date)
    return await orchestrator.search(Domain.flight, body, group_by_source)


@router.post("/car-rental", response_model=AggregatedResponse, response_model_by_alias=True)
async def search_cars(
    body: CarRentalSearchRequest,
    orchestrator: OrchestratorDep,
    _admission: SearchAdmissionDep,
    group_by_source: bool = _GROUP_BY_SOURCE,
) -> AggregatedResponse:
    logger.info("Car rental search: %s %s -> %s", body.pickup_location, body.pickup_date, body.dropoff_date)
    return await orchestrator.search(Domain.car, body, group_by_source)


@router.post("/search-flight-hotel-packages", response_model=PackageResponse, response_model_by_alias=True)
async def search_packages(
    body: PackageSearchRequest,
    orchestrator: OrchestratorDep,
    _admission: SearchAdmissionDep,
    group_by_source: bool = _GROUP_BY_SOURCE,
) -> PackageResponse:
    logger.info("Package search: %s -> %s", body.origin, body.destination)
    return await orchestrator.search_package(body, group_by_source)
