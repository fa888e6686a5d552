# backend/studio_booking/models/client.py
"""Client model: a person booking a studio, unique per (email, studio)."""

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base
from .types import UTCDateTime, new_ulid


class Client(Base):
    """Studio client. The same email may be a distinct client in each studio."""

    __tablename__ = "clients"

    id = Column(String(26), primary_key=True, index=True, default=new_ulid)
    studio_id = Column(String(26), ForeignKey("studios.id", ondelete="CASCADE"), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(30), nullable=True)
    created_at = Column(UTCDateTime, server_default=func.now())

    # Relationships
    studio = relationship("Studio", back_populates="clients")
    bookings = relationship("Booking", back_populates="client")

    __table_args__ = (UniqueConstraint("email", "studio_id", name="unique_client_email_per_studio"),)

    def __repr__(self) -> str:
        return f"<Client {self.id}: {self.email} (studio={self.studio_id})>"
