# backend/studio_booking/routes/v1/clients.py
"""
Client routes - API v1

Endpoints:
    POST /clients                        → Find or create a studio client by email
    GET /clients/{client_id}             → Client profile
    GET /clients/{client_id}/bookings    → Client booking history
    GET /studios/{studio_id}/clients     → Studio client list
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ...api.dependencies.services import get_client_service
from ...core.exceptions import DomainException
from ...schemas.booking import BookingResponse
from ...schemas.client import ClientCreate, ClientResponse
from ...services.client_service import ClientService
from ._common import ClientId, StudioId, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["clients-v1"])


@router.post("/clients", response_model=ClientResponse)
def get_or_create_client(
    payload: ClientCreate,
    response: Response,
    client_service: ClientService = Depends(get_client_service),
) -> ClientResponse:
    """Returns 201 when a new client was created, 200 when an existing one matched."""
    try:
        client, created = client_service.get_or_create_client(
            payload.studio_id, payload.email, payload.name, payload.phone
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ClientResponse.model_validate(client)


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: ClientId,
    client_service: ClientService = Depends(get_client_service),
) -> ClientResponse:
    try:
        client = client_service.get_client(client_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return ClientResponse.model_validate(client)


@router.get("/clients/{client_id}/bookings", response_model=List[BookingResponse])
def list_client_bookings(
    client_id: ClientId,
    client_service: ClientService = Depends(get_client_service),
) -> List[BookingResponse]:
    try:
        bookings = client_service.get_client_bookings(client_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return [BookingResponse.model_validate(booking) for booking in bookings]


@router.get("/studios/{studio_id}/clients", response_model=List[ClientResponse])
def list_studio_clients(
    studio_id: StudioId,
    client_service: ClientService = Depends(get_client_service),
) -> List[ClientResponse]:
    try:
        clients = client_service.get_studio_clients(studio_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return [ClientResponse.model_validate(client) for client in clients]
