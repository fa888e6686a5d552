# backend/studio_booking/services/client_service.py
"""Client Service: lazy find-or-create of studio clients and their history."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..models.booking import Booking
from ..models.client import Client
from ..repositories import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class ClientService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_client_repository(db)
        self.studio_repository = RepositoryFactory.create_studio_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("get_or_create_client")
    def get_or_create_client(
        self, studio_id: str, email: str, name: str, phone: Optional[str] = None
    ) -> Tuple[Client, bool]:
        """
        Find the studio's client by email or create it.

        Emails are compared case-insensitively; the same address is a
        separate client in each studio.

        Returns:
            (client, created)
        """
        if not self.studio_repository.exists(id=studio_id):
            raise NotFoundException("Studio not found", details={"studio_id": studio_id})

        normalized_email = email.strip().lower()
        with self.transaction():
            client, created = self.repository.get_or_create(
                studio_id, normalized_email, name.strip(), phone
            )

        if created:
            self.log_operation("client_created", client_id=client.id, studio_id=studio_id)
        return client, created

    def get_client(self, client_id: str) -> Client:
        client = self.repository.get_by_id(client_id, load_relationships=False)
        if not client:
            raise NotFoundException("Client not found", details={"client_id": client_id})
        return client

    def get_client_bookings(self, client_id: str) -> List[Booking]:
        self.get_client(client_id)
        return self.booking_repository.get_client_bookings(client_id)

    def get_studio_clients(self, studio_id: str) -> List[Client]:
        if not self.studio_repository.exists(id=studio_id):
            raise NotFoundException("Studio not found", details={"studio_id": studio_id})
        return self.repository.list_for_studio(studio_id)
