# backend/studio_booking/routes/v1/studios.py
"""
Studio routes - API v1

Endpoints:
    POST /studios                          → Create a studio
    GET /studios/{studio_id}               → Studio with rooms, services, availability, reviews
    PATCH /studios/{studio_id}             → Update studio settings
    GET /studios/{studio_id}/stats         → Booking/revenue/rating statistics
    PUT /studios/{studio_id}/availability  → Replace weekly availability
    GET /studios/{studio_id}/availability  → Weekly availability
    GET /studios/{studio_id}/slots         → Bookable slots for a date
    POST|GET /studios/{studio_id}/rooms    → Rooms
    POST|GET /studios/{studio_id}/services → Add-on service catalog
"""

from datetime import date
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.services import (
    get_availability_service,
    get_slot_service,
    get_studio_service,
)
from ...core.exceptions import DomainException
from ...schemas.availability import (
    AvailabilityReplaceRequest,
    AvailabilityRuleResponse,
    AvailableSlotsResponse,
    TimeSlotResponse,
)
from ...schemas.review import ReviewResponse
from ...schemas.studio import (
    RoomCreate,
    RoomResponse,
    ServiceCreate,
    ServiceResponse,
    StudioCreate,
    StudioDetailResponse,
    StudioResponse,
    StudioStatsResponse,
    StudioUpdate,
)
from ...services.availability_service import AvailabilityService
from ...services.slot_service import SlotService
from ...services.studio_service import StudioService
from ._common import StudioId, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["studios-v1"])


@router.post("/studios", response_model=StudioResponse, status_code=status.HTTP_201_CREATED)
def create_studio(
    payload: StudioCreate,
    service: StudioService = Depends(get_studio_service),
) -> StudioResponse:
    try:
        studio = service.create_studio(payload.model_dump(exclude_none=True))
    except DomainException as exc:
        handle_domain_exception(exc)
    return StudioResponse.model_validate(studio)


@router.get("/studios/{studio_id}", response_model=StudioDetailResponse)
def get_studio(
    studio_id: StudioId,
    service: StudioService = Depends(get_studio_service),
) -> StudioDetailResponse:
    try:
        studio = service.get_studio(studio_id)
        reviews = service.get_recent_public_reviews(studio_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    response = StudioDetailResponse.model_validate(studio)
    response.reviews = [ReviewResponse.model_validate(review) for review in reviews]
    return response


@router.patch("/studios/{studio_id}", response_model=StudioResponse)
def update_studio(
    payload: StudioUpdate,
    studio_id: StudioId,
    service: StudioService = Depends(get_studio_service),
) -> StudioResponse:
    try:
        studio = service.update_studio(studio_id, payload.model_dump(exclude_none=True))
    except DomainException as exc:
        handle_domain_exception(exc)
    return StudioResponse.model_validate(studio)


@router.get("/studios/{studio_id}/stats", response_model=StudioStatsResponse)
def get_studio_stats(
    studio_id: StudioId,
    service: StudioService = Depends(get_studio_service),
) -> StudioStatsResponse:
    try:
        stats = service.get_studio_stats(studio_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return StudioStatsResponse(**stats)


# Availability


@router.put("/studios/{studio_id}/availability", response_model=List[AvailabilityRuleResponse])
def replace_availability(
    payload: AvailabilityReplaceRequest,
    studio_id: StudioId,
    service: AvailabilityService = Depends(get_availability_service),
) -> List[AvailabilityRuleResponse]:
    try:
        rules = service.replace_all(studio_id, [rule.model_dump() for rule in payload.rules])
    except DomainException as exc:
        handle_domain_exception(exc)
    return [AvailabilityRuleResponse.model_validate(rule) for rule in rules]


@router.get("/studios/{studio_id}/availability", response_model=List[AvailabilityRuleResponse])
def get_availability(
    studio_id: StudioId,
    service: AvailabilityService = Depends(get_availability_service),
) -> List[AvailabilityRuleResponse]:
    try:
        rules = service.get_studio_availability(studio_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return [AvailabilityRuleResponse.model_validate(rule) for rule in rules]


@router.get("/studios/{studio_id}/slots", response_model=AvailableSlotsResponse)
def get_available_slots(
    studio_id: StudioId,
    target_date: date = Query(..., alias="date", description="Calendar date in the studio timezone"),
    duration_minutes: int = Query(..., ge=1),
    room_id: Optional[str] = Query(None),
    service: SlotService = Depends(get_slot_service),
) -> AvailableSlotsResponse:
    """
    Bookable slots for a date.

    Advisory only: creation re-checks the slot atomically.
    """
    try:
        slots = service.get_available_slots(studio_id, target_date, duration_minutes, room_id=room_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return AvailableSlotsResponse(
        studio_id=studio_id,
        date=target_date.isoformat(),
        duration_minutes=duration_minutes,
        slots=[TimeSlotResponse(start=slot.start, end=slot.end) for slot in slots],
    )


# Rooms


@router.post(
    "/studios/{studio_id}/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED
)
def add_room(
    payload: RoomCreate,
    studio_id: StudioId,
    service: StudioService = Depends(get_studio_service),
) -> RoomResponse:
    try:
        room = service.add_room(studio_id, payload.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    return RoomResponse.model_validate(room)


@router.get("/studios/{studio_id}/rooms", response_model=List[RoomResponse])
def list_rooms(
    studio_id: StudioId,
    service: StudioService = Depends(get_studio_service),
) -> List[RoomResponse]:
    try:
        rooms = service.list_rooms(studio_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return [RoomResponse.model_validate(room) for room in rooms]


# Service catalog


@router.post(
    "/studios/{studio_id}/services",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_service(
    payload: ServiceCreate,
    studio_id: StudioId,
    service: StudioService = Depends(get_studio_service),
) -> ServiceResponse:
    try:
        created = service.add_service(studio_id, payload.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    return ServiceResponse.model_validate(created)


@router.get("/studios/{studio_id}/services", response_model=List[ServiceResponse])
def list_services(
    studio_id: StudioId,
    active_only: bool = Query(False),
    service: StudioService = Depends(get_studio_service),
) -> List[ServiceResponse]:
    try:
        services = service.list_services(studio_id, active_only=active_only)
    except DomainException as exc:
        handle_domain_exception(exc)
    return [ServiceResponse.model_validate(item) for item in services]
