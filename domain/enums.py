"""Domain Enums"""
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.PENDING


class UserRole(str, Enum):
    AGENT = "agent"
    HOST = "host"


class PricingType(str, Enum):
    ROOM = "room"
    PERSON = "person"


class RoomCapacity(str, Enum):
    SINGLE = "Single room"
    DOUBLE = "Double room"
    TRIPLE = "Triple room"
    FOUR = "Four room"
    DORMITORY = "Dormitory"


class PaymentImageType(str, Enum):
    JPEG = "image/jpeg"
    JPG = "image/jpg"
    PNG = "image/png"
    WEBP = "image/webp"
