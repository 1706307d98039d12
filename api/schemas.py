"""API Schemas - Request and Response DTOs

JSON uses camelCase keys; the Python side keeps snake_case through aliases.
Request fields are lenient: numbers become strings and presence and format
are checked by the booking service.
"""
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from typing import Any, List, Optional

from domain.enums import UserRole


class ApiModel(BaseModel):
    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True


# ============================================================================
# BOOKING SCHEMAS
# ============================================================================

class CreateBookingRequest(ApiModel):
    """Create booking request DTO; presence is checked by the booking service"""
    property_id: Optional[str] = Field(None, alias="propertyId")
    room_id: Optional[str] = Field(None, alias="roomId")
    guest_name: Optional[str] = Field(None, alias="guestName")
    guest_email: Optional[str] = Field(None, alias="guestEmail")
    guest_phone: Optional[str] = Field(None, alias="guestPhone")
    guest_address: Optional[str] = Field(None, alias="guestAddress")
    check_in_date: Optional[str] = Field(None, alias="checkInDate")
    check_out_date: Optional[str] = Field(None, alias="checkOutDate")


class UpdateBookingStatusRequest(ApiModel):
    """Update booking status request DTO"""
    booking_status: Any = Field(None, alias="bookingStatus")


class PropertySummary(ApiModel):
    property_id: UUID = Field(alias="id")
    name: str
    location: str


class RoomSummary(ApiModel):
    room_id: UUID = Field(alias="id")
    room_category: Optional[str] = Field(None, alias="roomCategory")
    capacity: str


class PropertyResponse(PropertySummary):
    host_id: str = Field(alias="hostId")
    phone_number: str = Field(alias="phoneNumber")
    alternate_number: Optional[str] = Field(None, alias="alternateNumber")
    upi_id: str = Field(alias="upiId")
    bank_account_name: str = Field(alias="bankAccountName")


class RoomResponse(RoomSummary):
    property_id: UUID = Field(alias="propertyId")
    pricing_type: str = Field(alias="pricingType")
    rate_per_room: Optional[Decimal] = Field(None, alias="ratePerRoom")
    amenities: List[str] = []
    extra_person_charge: Optional[Decimal] = Field(None, alias="extraPersonCharge")
    agent_commission: Optional[Decimal] = Field(None, alias="agentCommission")
    advance_amount: Optional[Decimal] = Field(None, alias="advanceAmount")


class BookingResponse(ApiModel):
    """Booking response DTO"""
    booking_id: UUID = Field(alias="id")
    booking_code: str = Field(alias="bookingCode")
    property_id: UUID = Field(alias="propertyId")
    room_id: UUID = Field(alias="roomId")
    guest_name: str = Field(alias="guestName")
    guest_email: str = Field(alias="guestEmail")
    guest_phone: str = Field(alias="guestPhone")
    guest_address: str = Field(alias="guestAddress")
    check_in_date: date = Field(alias="checkInDate")
    check_out_date: date = Field(alias="checkOutDate")
    payment_screenshot_url: Optional[str] = Field(None, alias="paymentScreenshotUrl")
    booking_status: str = Field(alias="bookingStatus")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    property_info: Optional[PropertySummary] = Field(None, alias="property")
    room_info: Optional[RoomSummary] = Field(None, alias="room")


class BookingDetailResponse(BookingResponse):
    """Single booking with the full property and room documents"""
    property_info: Optional[PropertyResponse] = Field(None, alias="property")
    room_info: Optional[RoomResponse] = Field(None, alias="room")


class BookingMutationResponse(ApiModel):
    message: str
    booking: BookingResponse


class PaymentUploadResponse(ApiModel):
    message: str
    screenshot_url: str = Field(alias="screenshotUrl")


class PaymentInstructionsResponse(ApiModel):
    booking_id: UUID = Field(alias="bookingId")
    booking_code: str = Field(alias="bookingCode")
    upi_id: str = Field(alias="upiId")
    bank_account_name: str = Field(alias="bankAccountName")
    nights: int
    rate_per_room: Optional[Decimal] = Field(None, alias="ratePerRoom")
    total_amount: Decimal = Field(alias="totalAmount")
    currency: str
    advance_amount: Optional[Decimal] = Field(None, alias="advanceAmount")


# ============================================================================
# AVAILABILITY SCHEMAS
# ============================================================================

class RoomAvailabilityResponse(ApiModel):
    """Unavailable days of one calendar month"""
    room_id: UUID = Field(alias="roomId")
    year: int
    month: int
    unavailable_dates: List[date] = Field(alias="unavailableDates")


# ============================================================================
# SYSTEM SCHEMAS
# ============================================================================

class StoreStatusResponse(ApiModel):
    success: bool
    message: str
    details: dict = {}


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str

class TokenData(BaseModel):
    """Token payload DTO"""
    username: Optional[str] = None

class UserResponse(BaseModel):
    """User response DTO"""
    uid: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[UserRole] = None
    disabled: bool
