# backend/studio_booking/repositories/client_repository.py
"""Client Repository: find-or-create on the unique (email, studio) key."""

import logging
from typing import List, Optional, Tuple, cast

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_QUERY_LIMIT
from ..core.exceptions import RepositoryException
from ..models.client import Client
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ClientRepository(BaseRepository[Client]):
    def __init__(self, db: Session):
        super().__init__(db, Client)

    def get_by_email(self, studio_id: str, email: str) -> Optional[Client]:
        try:
            return cast(
                Optional[Client],
                self.db.query(Client)
                .filter(Client.studio_id == studio_id, Client.email == email)
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting client {email} for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to get client: {str(e)}")

    def get_or_create(
        self, studio_id: str, email: str, name: str, phone: Optional[str] = None
    ) -> Tuple[Client, bool]:
        """
        Return the studio's client for ``email``, creating it if missing.

        A concurrent insert of the same (email, studio) pair loses on the
        unique constraint; the savepoint is rolled back and the winner's row
        returned instead.

        Returns:
            (client, created)
        """
        existing = self.get_by_email(studio_id, email)
        if existing is not None:
            return existing, False

        try:
            with self.db.begin_nested():
                client = Client(studio_id=studio_id, email=email, name=name, phone=phone)
                self.db.add(client)
                self.db.flush()
            return client, True
        except IntegrityError:
            self.logger.info(
                "client_create_race_lost", extra={"studio_id": studio_id, "email": email}
            )
            winner = self.get_by_email(studio_id, email)
            if winner is None:
                raise RepositoryException("Client insert conflicted but no row was found")
            return winner, False
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating client {email} for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to create client: {str(e)}")

    def list_for_studio(self, studio_id: str, limit: int = DEFAULT_QUERY_LIMIT) -> List[Client]:
        try:
            return cast(
                List[Client],
                self.db.query(Client)
                .filter(Client.studio_id == studio_id)
                .order_by(Client.name)
                .limit(limit)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing clients for studio {studio_id}: {str(e)}")
            raise RepositoryException(f"Failed to list clients: {str(e)}")
