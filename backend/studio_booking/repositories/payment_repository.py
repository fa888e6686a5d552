# backend/studio_booking/repositories/payment_repository.py
"""
Payment Repository for the studio booking backend.

Payments are read with a row lock during confirmation and refund so that
concurrent confirmations of the same payment serialize.
"""

import logging
from typing import List, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.payment import Payment
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class PaymentRepository(BaseRepository[Payment]):
    """Repository for payment ledger rows."""

    def __init__(self, db: Session):
        super().__init__(db, Payment)

    def get_payments_for_booking(self, booking_id: str) -> List[Payment]:
        """All payment attempts for a booking, newest first."""
        try:
            return cast(
                List[Payment],
                self.db.query(Payment)
                .filter(Payment.booking_id == booking_id)
                .order_by(Payment.created_at.desc())
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting payments for booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to get payments: {str(e)}")
