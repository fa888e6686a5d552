"""Centralized pricing calculations for bookings."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from ..models.booking import BookingStatus
from ..models.studio import DepositType, Studio

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
MINUTES_PER_HOUR = Decimal("60")


def to_money(value: Number) -> Decimal:
    """Quantize a value to cents, rounding half up."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    """Major currency units to gateway minor units (cents)."""
    return int((to_money(amount) * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PriceQuote:
    """Amounts fixed on a booking at creation time."""

    total_amount: Decimal
    deposit_amount: Decimal
    initial_status: BookingStatus


class PricingService:
    """
    Compute booking totals and deposits.

    Pricing is linear in duration plus flat add-on prices. All arithmetic is
    Decimal; results are rounded to cents half up.
    """

    @staticmethod
    def calculate_total(
        duration_minutes: int,
        hourly_rate: Number,
        service_prices: Optional[Iterable[Number]] = None,
    ) -> Decimal:
        rate = Decimal(str(hourly_rate))
        base = Decimal(duration_minutes) / MINUTES_PER_HOUR * rate
        add_ons = sum((Decimal(str(price)) for price in (service_prices or [])), Decimal("0"))
        return to_money(base + add_ons)

    @staticmethod
    def calculate_deposit(
        total: Number,
        require_deposit: bool,
        deposit_type: str,
        deposit_amount: Number,
    ) -> Decimal:
        """
        Deposit owed up front.

        PERCENTAGE takes ``deposit_amount`` percent of the total; FIXED is the
        flat ``deposit_amount`` regardless of total.
        """
        if not require_deposit:
            return to_money(0)
        if deposit_type == DepositType.PERCENTAGE.value:
            return to_money(Decimal(str(total)) * Decimal(str(deposit_amount)) / HUNDRED)
        return to_money(deposit_amount)

    def quote(
        self,
        studio: Studio,
        duration_minutes: int,
        service_prices: Optional[Iterable[Number]] = None,
    ) -> PriceQuote:
        total = self.calculate_total(duration_minutes, studio.hourly_rate, service_prices)
        deposit = self.calculate_deposit(
            total, bool(studio.require_deposit), studio.deposit_type, studio.deposit_amount
        )
        initial_status = BookingStatus.PENDING if studio.require_deposit else BookingStatus.CONFIRMED
        return PriceQuote(total_amount=total, deposit_amount=deposit, initial_status=initial_status)
