"""Client DTOs."""

from typing import Optional

from pydantic import EmailStr, Field

from ._strict_base import StrictRequestModel
from .base import StandardizedModel


class ClientCreate(StrictRequestModel):
    studio_id: str
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)


class ClientResponse(StandardizedModel):
    id: str
    studio_id: str
    email: str
    name: str
    phone: Optional[str] = None
