"""Application Services - Business use cases"""
import logging
from uuid import UUID
from datetime import date
from typing import Callable, List, Optional, Union

from domain.auth import User
from domain.repositories import BookingRepository, PropertyRepository, RoomRepository
from domain.entities import Booking, BookingDetails, PaymentInstructions
from domain.enums import BookingStatus, PaymentImageType
from domain.exceptions import (
    BookingError, ConflictError, DuplicateBookingCodeError, InvalidArgumentError,
    MissingFieldError, NotFoundError, RoomNotInPropertyError, UnauthorizedError
)
from domain.value_objects import BookingFilter, CalendarMonth, DateRange
from application.booking_codes import BookingCodeGenerator
from application.validation import (
    parse_booking_status, parse_calendar_date, parse_entity_id, parse_optional_entity_id,
    parse_positive_int, require_fields
)

logger = logging.getLogger(__name__)

REQUIRED_BOOKING_FIELDS = {
    "property_id": "propertyId",
    "room_id": "roomId",
    "guest_name": "guestName",
    "guest_email": "guestEmail",
    "guest_phone": "guestPhone",
    "guest_address": "guestAddress",
    "check_in_date": "checkInDate",
    "check_out_date": "checkOutDate",
}
ALLOWED_PAYMENT_TYPES = frozenset(t.value for t in PaymentImageType)
DEFAULT_MAX_SCREENSHOT_BYTES = 5 * 1024 * 1024
CODE_WRITE_ATTEMPTS = 3

ImageEncoder = Callable[[bytes, str], str]


class BookingService:
    """Service for the booking lifecycle: creation, status changes and payment proof"""

    def __init__(self,
                 repository: BookingRepository,
                 property_repo: PropertyRepository,
                 room_repo: RoomRepository,
                 image_encoder: ImageEncoder,
                 code_generator: Optional[BookingCodeGenerator] = None,
                 max_screenshot_bytes: int = DEFAULT_MAX_SCREENSHOT_BYTES):
        self.repository = repository
        self.property_repo = property_repo
        self.room_repo = room_repo
        self.image_encoder = image_encoder
        self.code_generator = code_generator or BookingCodeGenerator(repository)
        self.max_screenshot_bytes = max_screenshot_bytes

    async def create_booking(
        self,
        property_id: Union[str, UUID, None],
        room_id: Union[str, UUID, None],
        guest_name: Optional[str],
        guest_email: Optional[str],
        guest_phone: Optional[str],
        guest_address: Optional[str],
        check_in_date: Union[str, date, None],
        check_out_date: Union[str, date, None]
    ) -> Booking:
        """Create a PENDING booking after validating references and dates.

        The overlap query here gives the caller an early 409; the write itself
        goes through add_if_available, which repeats the check atomically so
        two concurrent requests cannot both take the same nights.
        """
        require_fields(locals(), REQUIRED_BOOKING_FIELDS)

        property_uuid = parse_entity_id(property_id, "Invalid property or room ID")
        room_uuid = parse_entity_id(room_id, "Invalid property or room ID")

        property_ = await self.property_repo.find_by_id(property_uuid)
        if not property_:
            raise NotFoundError("Property")

        room = await self.room_repo.find_by_id(room_uuid)
        if not room:
            raise NotFoundError("Room")

        if not room.belongs_to(property_uuid):
            raise RoomNotInPropertyError()

        check_in = parse_calendar_date(check_in_date, "Invalid check-in or check-out date format")
        check_out = parse_calendar_date(check_out_date, "Invalid check-in or check-out date format")
        if check_in >= check_out:
            raise InvalidArgumentError("Check-out date must be after check-in date")
        stay = DateRange(check_in=check_in, check_out=check_out)

        conflicting = await self.repository.find_overlapping(room_uuid, stay)
        if conflicting:
            logger.warning(
                "Rejected booking for room %s (%s -> %s): overlaps %s",
                room_uuid, check_in, check_out, [b.booking_code for b in conflicting]
            )
            raise ConflictError()

        for _ in range(CODE_WRITE_ATTEMPTS):
            booking = Booking.create(
                booking_code=await self.code_generator.generate(),
                property_id=property_uuid,
                room_id=room_uuid,
                guest_name=guest_name.strip(),
                guest_email=guest_email.strip(),
                guest_phone=guest_phone.strip(),
                guest_address=guest_address.strip(),
                stay=stay
            )
            try:
                await self.repository.add_if_available(booking)
            except DuplicateBookingCodeError:
                logger.warning("Booking code %s taken at write time, retrying", booking.booking_code)
                continue

            logger.info(
                "Created booking %s (%s) for room %s, %s -> %s",
                booking.booking_code, booking.booking_id, room_uuid, check_in, check_out
            )
            return booking

        raise BookingError("Could not allocate a unique booking code")

    async def get_booking(self, booking_id: Union[str, UUID, None]) -> BookingDetails:
        """Get booking by ID with property and room resolved"""
        booking = await self._load(booking_id)
        return (await self._resolve([booking]))[0]

    async def get_booking_by_code(self, booking_code: str) -> BookingDetails:
        """Get booking by guest-facing code"""
        booking = await self.repository.find_by_code(booking_code.strip().upper())
        if not booking:
            raise NotFoundError("Booking")
        return (await self._resolve([booking]))[0]

    async def list_bookings(
        self,
        property_id: Union[str, UUID, None] = None,
        room_id: Union[str, UUID, None] = None,
        status: Union[str, BookingStatus, None] = None
    ) -> List[BookingDetails]:
        """List bookings newest first, optionally filtered"""
        booking_filter = BookingFilter(
            property_id=parse_optional_entity_id(property_id, "Invalid property ID"),
            room_id=parse_optional_entity_id(room_id, "Invalid room ID"),
            status=parse_booking_status(status) if status else None
        )
        bookings = await self.repository.find_all(booking_filter)
        return await self._resolve(bookings)

    async def update_status(
        self,
        booking_id: Union[str, UUID, None],
        new_status: Union[str, BookingStatus, None],
        caller: Optional[User]
    ) -> Booking:
        """Move a booking out of PENDING.

        Any authenticated caller may do this; ownership of the property is
        not checked. Confirmed and rejected bookings are final.
        """
        if caller is None or caller.disabled:
            raise UnauthorizedError()

        booking_uuid = parse_entity_id(booking_id, "Invalid booking ID")
        status = parse_booking_status(new_status)
        booking = await self._load(booking_uuid)

        previous = booking.booking_status
        if booking.update_status(status):
            await self.repository.update(booking)
            logger.info(
                "Booking %s status %s -> %s by %s",
                booking.booking_code, previous.value, status.value, caller.uid
            )
        return booking

    async def attach_payment_proof(
        self,
        booking_id: Union[str, UUID, None],
        image_bytes: Optional[bytes],
        mime_type: Optional[str]
    ) -> Booking:
        """Store a payment screenshot on the booking, replacing any earlier one"""
        booking_uuid = parse_entity_id(booking_id, "Valid bookingId is required")
        if not image_bytes:
            raise MissingFieldError("screenshot")

        booking = await self._load(booking_uuid)

        if (mime_type or "").lower() not in ALLOWED_PAYMENT_TYPES:
            raise InvalidArgumentError("Unsupported file type. Only JPEG, PNG, and WebP images are allowed.")

        if len(image_bytes) > self.max_screenshot_bytes:
            raise InvalidArgumentError(
                f"File too large. Maximum size is {self.max_screenshot_bytes // (1024 * 1024)}MB."
            )

        booking.attach_payment_proof(self.image_encoder(image_bytes, mime_type.lower()))
        await self.repository.update(booking)
        logger.info("Attached %d byte payment proof to booking %s", len(image_bytes), booking.booking_code)
        return booking

    async def get_payment_instructions(self, booking_id: Union[str, UUID, None]) -> PaymentInstructions:
        """Amount due and payee details for the guest's payment step"""
        details = await self.get_booking(booking_id)
        if not details.property_info:
            raise NotFoundError("Property")
        if not details.room_info:
            raise NotFoundError("Room")

        booking, property_, room = details.booking, details.property_info, details.room_info
        return PaymentInstructions(
            booking_id=booking.booking_id,
            booking_code=booking.booking_code,
            upi_id=property_.upi_id,
            bank_account_name=property_.bank_account_name,
            nights=booking.stay.nights(),
            rate_per_room=room.rate_per_room,
            total_amount=room.price_for(booking.stay),
            advance_amount=room.advance_amount
        )

    async def _load(self, booking_id: Union[str, UUID, None]) -> Booking:
        booking = await self.repository.find_by_id(parse_entity_id(booking_id, "Invalid booking ID"))
        if not booking:
            raise NotFoundError("Booking")
        return booking

    async def _resolve(self, bookings: List[Booking]) -> List[BookingDetails]:
        properties = {p.property_id: p for p in await self.property_repo.find_by_ids([b.property_id for b in bookings])}
        rooms = {r.room_id: r for r in await self.room_repo.find_by_ids([b.room_id for b in bookings])}
        return [
            BookingDetails(
                booking=b,
                property_info=properties.get(b.property_id),
                room_info=rooms.get(b.room_id)
            )
            for b in bookings
        ]


class AvailabilityService:
    """Service for room availability calendars"""

    def __init__(self, booking_repo: BookingRepository, room_repo: RoomRepository):
        self.booking_repo = booking_repo
        self.room_repo = room_repo

    async def get_unavailable_dates(
        self,
        room_id: Union[str, UUID, None],
        year: Union[str, int, None],
        month: Union[str, int, None]
    ) -> List[date]:
        """Days of the month taken by a pending or confirmed booking, ascending.

        A day is taken when check_in <= day < check_out, so a check-out day
        stays bookable.
        """
        room_uuid = parse_entity_id(room_id, "Valid roomId is required")
        period_error = "Valid year and month (1-12) are required"
        year_number = parse_positive_int(year, period_error)
        month_number = parse_positive_int(month, period_error)
        if month_number > 12 or year_number > 9999:
            raise InvalidArgumentError(period_error)
        period = CalendarMonth(year=year_number, month=month_number)

        room = await self.room_repo.find_by_id(room_uuid)
        if not room:
            raise NotFoundError("Room")

        bookings = await self.booking_repo.find_touching_window(room_uuid, period.first_day, period.last_day)
        return [day for day in period.days() if any(b.stay.contains(day) for b in bookings)]

