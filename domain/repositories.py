"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import Optional, List
from uuid import UUID
from datetime import date

from domain.entities import Booking, Property, Room, RoomCategory
from domain.value_objects import BookingFilter, DateRange


class PropertyRepository(ABC):
    """Repository interface for Property reference data"""

    @abstractmethod
    async def save(self, property_: Property) -> Property:
        """Save property"""
        pass

    @abstractmethod
    async def find_by_id(self, property_id: UUID) -> Optional[Property]:
        """Find property by ID"""
        pass

    @abstractmethod
    async def find_by_ids(self, property_ids: List[UUID]) -> List[Property]:
        """Find several properties at once"""
        pass


class RoomRepository(ABC):
    """Repository interface for Room reference data"""

    @abstractmethod
    async def save(self, room: Room) -> Room:
        """Save room"""
        pass

    @abstractmethod
    async def find_by_id(self, room_id: UUID) -> Optional[Room]:
        """Find room by ID"""
        pass

    @abstractmethod
    async def find_by_ids(self, room_ids: List[UUID]) -> List[Room]:
        """Find several rooms at once"""
        pass


class RoomCategoryRepository(ABC):
    """Repository interface for RoomCategory lookup data"""

    @abstractmethod
    async def save(self, category: RoomCategory) -> RoomCategory:
        """Save category; (property_id, name) must be unique"""
        pass

    @abstractmethod
    async def find_by_property(self, property_id: UUID) -> List[RoomCategory]:
        """Find categories defined for a property"""
        pass


class BookingRepository(ABC):
    """Repository interface for Booking Aggregate"""

    @abstractmethod
    async def add_if_available(self, booking: Booking) -> Booking:
        """Atomically re-check overlap for the booking's room and insert.

        Raises ConflictError when a non-rejected booking overlaps, and
        DuplicateBookingCodeError when the code is already taken.
        """
        pass

    @abstractmethod
    async def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        """Find booking by ID"""
        pass

    @abstractmethod
    async def find_by_code(self, booking_code: str) -> Optional[Booking]:
        """Find booking by guest-facing code"""
        pass

    @abstractmethod
    async def code_exists(self, booking_code: str) -> bool:
        """Check whether a booking code is already in use"""
        pass

    @abstractmethod
    async def find_overlapping(self, room_id: UUID, stay: DateRange) -> List[Booking]:
        """Non-rejected bookings on the room with check_in < stay.check_out and check_out > stay.check_in"""
        pass

    @abstractmethod
    async def find_touching_window(self, room_id: UUID, start: date, end: date) -> List[Booking]:
        """Non-rejected bookings on the room with check_in <= end and check_out >= start"""
        pass

    @abstractmethod
    async def find_all(self, booking_filter: Optional[BookingFilter] = None) -> List[Booking]:
        """Find matching bookings, newest created first"""
        pass

    @abstractmethod
    async def update(self, booking: Booking) -> Booking:
        """Persist a modified booking.

        The stored version must be exactly one behind ``booking.version``,
        otherwise ConcurrentModificationError is raised.
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check the store is reachable"""
        pass
