"""Domain Entities - Aggregates"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List

from domain.enums import BookingStatus, PricingType, RoomCapacity
from domain.exceptions import InvalidStateError
from domain.value_objects import DateRange, Money


class Property(BaseModel):
    """Property listed by a host (reference data for the booking core)"""

    property_id: UUID = Field(default_factory=uuid4)
    host_id: str
    name: str
    location: str
    number_of_rooms: str = "1"
    images: List[str] = []
    phone_number: str
    alternate_number: Optional[str] = None

    # Shown to the guest during the payment step
    upi_id: str
    bank_account_name: str

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True


class Room(BaseModel):
    """Room belonging to a property; the join key for availability"""

    room_id: UUID = Field(default_factory=uuid4)
    property_id: UUID
    pricing_type: PricingType = PricingType.ROOM
    room_category: Optional[str] = None
    rate_per_room: Optional[Decimal] = Field(default=None, ge=0)
    capacity: RoomCapacity
    amenities: List[str] = []
    images: List[str] = []
    extra_person_charge: Optional[Decimal] = None
    agent_commission: Optional[Decimal] = None
    advance_amount: Optional[Decimal] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True

    def belongs_to(self, property_id: UUID) -> bool:
        return self.property_id == property_id

    def price_for(self, stay: DateRange) -> Money:
        """Simple nights x rate; rooms without a rate price at zero"""
        rate = self.rate_per_room or Decimal("0")
        return Money(amount=rate * stay.nights())


class RoomCategory(BaseModel):
    """Lookup entry; (property_id, name) is unique"""

    category_id: UUID = Field(default_factory=uuid4)
    property_id: UUID
    name: str
    description: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True


class Booking(BaseModel):
    """Booking Aggregate Root Entity"""

    # Identity
    booking_id: UUID = Field(default_factory=uuid4)
    booking_code: str

    # References into the entity store
    property_id: UUID
    room_id: UUID

    # Guest details, immutable after creation
    guest_name: str
    guest_email: str
    guest_phone: str
    guest_address: str

    stay: DateRange
    payment_screenshot_url: Optional[str] = None
    booking_status: BookingStatus = BookingStatus.PENDING

    # Metadata
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    version: int = 1

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        booking_code: str,
        property_id: UUID,
        room_id: UUID,
        guest_name: str,
        guest_email: str,
        guest_phone: str,
        guest_address: str,
        stay: DateRange
    ) -> "Booking":
        """Create a new booking; always starts PENDING without payment proof"""
        return Booking(
            booking_code=booking_code,
            property_id=property_id,
            room_id=room_id,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_phone=guest_phone,
            guest_address=guest_address,
            stay=stay,
            booking_status=BookingStatus.PENDING
        )

    # ==================== STATE TRANSITION METHODS ====================
    def update_status(self, new_status: BookingStatus) -> bool:
        """Apply a status transition.

        Returns False when the booking is already in ``new_status``. Moving a
        confirmed or rejected booking anywhere else raises InvalidStateError.
        """
        if new_status == self.booking_status:
            return False

        if self.booking_status.is_terminal:
            raise InvalidStateError(
                f"Cannot change booking status from {self.booking_status.value} to {new_status.value}"
            )

        self.booking_status = new_status
        self._touch()
        return True

    def attach_payment_proof(self, screenshot_url: str) -> None:
        """Replace the payment screenshot; earlier screenshots are not kept"""
        self.payment_screenshot_url = screenshot_url
        self._touch()

    # ==================== QUERY METHODS ====================
    @property
    def check_in_date(self) -> date:
        return self.stay.check_in

    @property
    def check_out_date(self) -> date:
        return self.stay.check_out

    @property
    def blocks_room(self) -> bool:
        """Rejected bookings release their dates"""
        return self.booking_status != BookingStatus.REJECTED

    def conflicts_with(self, room_id: UUID, stay: DateRange) -> bool:
        return self.blocks_room and self.room_id == room_id and self.stay.overlaps(stay)

    def _touch(self) -> None:
        self.updated_at = datetime.utcnow()
        self.version += 1


class BookingDetails(BaseModel):
    """Booking with its property and room references resolved"""
    booking: Booking
    property_info: Optional[Property] = None
    room_info: Optional[Room] = None


class PaymentInstructions(BaseModel):
    """What the guest needs to pay for a booking and where to send it"""
    booking_id: UUID
    booking_code: str
    upi_id: str
    bank_account_name: str
    nights: int
    rate_per_room: Optional[Decimal] = None
    total_amount: Money
    advance_amount: Optional[Decimal] = None
