"""In-Memory Repository Implementations

These behave like a document store: callers always receive copies, so an
entity mutated in the application layer is only persisted through an explicit
write.
"""
import asyncio
import itertools
import logging
from typing import Optional, List, Dict
from uuid import UUID
from datetime import date

from domain.repositories import BookingRepository, PropertyRepository, RoomRepository, RoomCategoryRepository
from domain.entities import Booking, Property, Room, RoomCategory
from domain.exceptions import ConflictError, ConcurrentModificationError, DuplicateBookingCodeError, NotFoundError
from domain.value_objects import BookingFilter, DateRange

logger = logging.getLogger(__name__)


class InMemoryPropertyRepository(PropertyRepository):
    """In-memory implementation of PropertyRepository"""

    def __init__(self):
        self._storage: Dict[UUID, Property] = {}

    async def save(self, property_: Property) -> Property:
        self._storage[property_.property_id] = property_.model_copy(deep=True)
        return property_

    async def find_by_id(self, property_id: UUID) -> Optional[Property]:
        found = self._storage.get(property_id)
        return found.model_copy(deep=True) if found else None

    async def find_by_ids(self, property_ids: List[UUID]) -> List[Property]:
        return [self._storage[pid].model_copy(deep=True) for pid in set(property_ids) if pid in self._storage]


class InMemoryRoomRepository(RoomRepository):
    """In-memory implementation of RoomRepository"""

    def __init__(self):
        self._storage: Dict[UUID, Room] = {}

    async def save(self, room: Room) -> Room:
        self._storage[room.room_id] = room.model_copy(deep=True)
        return room

    async def find_by_id(self, room_id: UUID) -> Optional[Room]:
        found = self._storage.get(room_id)
        return found.model_copy(deep=True) if found else None

    async def find_by_ids(self, room_ids: List[UUID]) -> List[Room]:
        return [self._storage[rid].model_copy(deep=True) for rid in set(room_ids) if rid in self._storage]


class InMemoryRoomCategoryRepository(RoomCategoryRepository):
    """In-memory implementation of RoomCategoryRepository"""

    def __init__(self):
        self._storage: Dict[tuple, RoomCategory] = {}

    async def save(self, category: RoomCategory) -> RoomCategory:
        key = (category.property_id, category.name)
        existing = self._storage.get(key)
        if existing and existing.category_id != category.category_id:
            raise ConflictError(f"Category '{category.name}' already exists for this property")
        self._storage[key] = category.model_copy(deep=True)
        return category

    async def find_by_property(self, property_id: UUID) -> List[RoomCategory]:
        return [c.model_copy(deep=True) for (pid, _), c in self._storage.items() if pid == property_id]


class InMemoryBookingRepository(BookingRepository):
    """In-memory implementation of BookingRepository

    ``_codes`` plays the role of the unique index on booking codes and
    ``_write_lock`` serialises writes, which makes add_if_available a true
    check-and-insert.
    """

    def __init__(self):
        self._storage: Dict[UUID, Booking] = {}
        self._codes: Dict[str, UUID] = {}
        self._sequence: Dict[UUID, int] = {}
        self._counter = itertools.count()
        self._write_lock = asyncio.Lock()

    async def add_if_available(self, booking: Booking) -> Booking:
        async with self._write_lock:
            clashes = self._overlapping(booking.room_id, booking.stay)
            if clashes:
                logger.warning(
                    "Write-time overlap for room %s (%s -> %s) against %s",
                    booking.room_id, booking.check_in_date, booking.check_out_date,
                    [b.booking_code for b in clashes]
                )
                raise ConflictError()
            self._insert(booking)
        return booking

    async def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        found = self._storage.get(booking_id)
        return found.model_copy(deep=True) if found else None

    async def find_by_code(self, booking_code: str) -> Optional[Booking]:
        booking_id = self._codes.get(booking_code)
        if booking_id is None:
            return None
        return await self.find_by_id(booking_id)

    async def code_exists(self, booking_code: str) -> bool:
        return booking_code in self._codes

    async def find_overlapping(self, room_id: UUID, stay: DateRange) -> List[Booking]:
        return [b.model_copy(deep=True) for b in self._overlapping(room_id, stay)]

    async def find_touching_window(self, room_id: UUID, start: date, end: date) -> List[Booking]:
        return [
            b.model_copy(deep=True) for b in self._storage.values()
            if b.room_id == room_id and b.blocks_room
            and b.check_in_date <= end and b.check_out_date >= start
        ]

    async def find_all(self, booking_filter: Optional[BookingFilter] = None) -> List[Booking]:
        booking_filter = booking_filter or BookingFilter()
        matching = [b.model_copy(deep=True) for b in self._storage.values() if booking_filter.matches(b)]
        # insertion sequence breaks created_at ties, later inserts first
        return sorted(matching, key=lambda b: (b.created_at, self._sequence[b.booking_id]), reverse=True)

    async def update(self, booking: Booking) -> Booking:
        async with self._write_lock:
            stored = self._storage.get(booking.booking_id)
            if stored is None:
                raise NotFoundError("Booking")
            if stored.version != booking.version - 1:
                raise ConcurrentModificationError()
            self._storage[booking.booking_id] = booking.model_copy(deep=True)
        return booking

    async def ping(self) -> bool:
        return True

    def _overlapping(self, room_id: UUID, stay: DateRange) -> List[Booking]:
        return [b for b in self._storage.values() if b.conflicts_with(room_id, stay)]

    def _insert(self, booking: Booking) -> None:
        if booking.booking_code in self._codes:
            raise DuplicateBookingCodeError()
        self._storage[booking.booking_id] = booking.model_copy(deep=True)
        self._codes[booking.booking_code] = booking.booking_id
        self._sequence[booking.booking_id] = next(self._counter)
