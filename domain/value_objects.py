"""Domain Value Objects"""
import calendar
from pydantic import BaseModel, Field, validator
from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID
from typing import Iterator, Optional

from domain.enums import BookingStatus


class DateRange(BaseModel):
    """Half-open stay window [check_in, check_out)"""
    check_in: date
    check_out: date

    @validator('check_out')
    def check_out_after_check_in(cls, v, values):
        if 'check_in' in values and v <= values['check_in']:
            raise ValueError('Check-out date must be after check-in date')
        return v

    def nights(self) -> int:
        """Calculate number of nights"""
        return (self.check_out - self.check_in).days

    def contains(self, day: date) -> bool:
        """The check-out day itself is free for the next guest"""
        return self.check_in <= day < self.check_out

    def overlaps(self, other: "DateRange") -> bool:
        return self.check_in < other.check_out and self.check_out > other.check_in

    def days(self) -> Iterator[date]:
        current = self.check_in
        while current < self.check_out:
            yield current
            current += timedelta(days=1)

    class Config:
        frozen = True


class CalendarMonth(BaseModel):
    """A calendar month, inclusive of its first and last day"""
    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def days(self) -> Iterator[date]:
        for day in range(1, self.last_day.day + 1):
            yield date(self.year, self.month, day)

    class Config:
        frozen = True


class Money(BaseModel):
    """Value Object for monetary amounts"""
    amount: Decimal = Field(ge=0)
    currency: str = "INR"

    class Config:
        frozen = True


class BookingFilter(BaseModel):
    """Optional criteria for listing bookings; unset fields match everything"""
    property_id: Optional[UUID] = None
    room_id: Optional[UUID] = None
    status: Optional[BookingStatus] = None

    def matches(self, booking) -> bool:
        if self.property_id and booking.property_id != self.property_id:
            return False
        if self.room_id and booking.room_id != self.room_id:
            return False
        if self.status and booking.booking_status != self.status:
            return False
        return True

    class Config:
        frozen = True
