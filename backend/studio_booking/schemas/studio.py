"""Studio, room and service catalog DTOs."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field

from ._strict_base import StrictRequestModel
from .availability import AvailabilityRuleResponse
from .base import Money, StandardizedModel
from .review import ReviewResponse

DepositTypeLiteral = Literal["PERCENTAGE", "FIXED"]
ServiceCategoryLiteral = Literal["RECORDING", "MIXING", "MASTERING", "PRODUCTION", "OTHER"]


class StudioSettingsFields(StrictRequestModel):
    """Policy settings shared by create and update requests."""

    timezone: Optional[str] = Field(None, max_length=64)
    hourly_rate: Optional[Money] = None
    booking_buffer_minutes: Optional[int] = Field(None, ge=0, le=240)
    min_booking_minutes: Optional[int] = Field(None, ge=30)
    max_booking_minutes: Optional[int] = Field(None, ge=30)
    require_deposit: Optional[bool] = None
    deposit_type: Optional[DepositTypeLiteral] = None
    deposit_amount: Optional[Money] = None
    cancellation_hours: Optional[int] = Field(None, ge=0)
    cancellation_fee_percent: Optional[Money] = None


class StudioCreate(StudioSettingsFields):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    description: Optional[str] = None
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=30)
    owner_id: Optional[str] = Field(None, max_length=64)


class StudioUpdate(StudioSettingsFields):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    description: Optional[str] = None
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=30)


class RoomCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    capacity: int = Field(1, ge=1)
    is_active: bool = True


class RoomResponse(StandardizedModel):
    id: str
    studio_id: str
    name: str
    description: Optional[str] = None
    capacity: int
    is_active: bool


class ServiceCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: Money
    duration_minutes: Optional[int] = Field(None, ge=0)
    category: ServiceCategoryLiteral = "OTHER"
    is_active: bool = True


class ServiceResponse(StandardizedModel):
    id: str
    studio_id: str
    name: str
    description: Optional[str] = None
    price: Money
    duration_minutes: Optional[int] = None
    category: str
    is_active: bool


class StudioResponse(StandardizedModel):
    id: str
    name: str
    email: str
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    timezone: str
    hourly_rate: Money
    booking_buffer_minutes: int
    min_booking_minutes: int
    max_booking_minutes: int
    require_deposit: bool
    deposit_type: str
    deposit_amount: Money
    cancellation_hours: int
    cancellation_fee_percent: Money
    created_at: Optional[datetime] = None


class StudioDetailResponse(StudioResponse):
    rooms: List[RoomResponse] = Field(default_factory=list)
    services: List[ServiceResponse] = Field(default_factory=list)
    availability_rules: List[AvailabilityRuleResponse] = Field(default_factory=list)
    reviews: List[ReviewResponse] = Field(default_factory=list)


class StudioStatsResponse(StandardizedModel):
    total_bookings: int
    total_revenue: Money
    average_rating: Optional[float] = None
    upcoming_bookings: int
