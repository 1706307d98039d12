"""Shared fixtures for the booking API test suite"""
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from main import app, get_booking_service, get_availability_service, get_booking_repository
from application.services import BookingService, AvailabilityService
from domain.entities import Property, Room
from domain.enums import RoomCapacity, PricingType
from infrastructure.image_encoding import to_data_uri
from infrastructure.repositories.in_memory_repositories import (
    InMemoryBookingRepository, InMemoryPropertyRepository, InMemoryRoomRepository
)


def make_property(**overrides) -> Property:
    fields = dict(
        host_id="host-0001",
        name="Lakeview Homestay",
        location="Munnar",
        phone_number="9000000001",
        upi_id="lakeview@upi",
        bank_account_name="Lakeview Stays"
    )
    fields.update(overrides)
    return Property(**fields)


def make_room(property_id, **overrides) -> Room:
    fields = dict(
        property_id=property_id,
        pricing_type=PricingType.ROOM,
        room_category="Deluxe",
        rate_per_room=Decimal("2500"),
        capacity=RoomCapacity.DOUBLE,
        amenities=["wifi", "balcony"],
        advance_amount=Decimal("1000")
    )
    fields.update(overrides)
    return Room(**fields)


def booking_payload(property_id, room_id, check_in="2025-07-10", check_out="2025-07-15", **overrides) -> dict:
    payload = {
        "propertyId": str(property_id),
        "roomId": str(room_id),
        "guestName": "Asha Menon",
        "guestEmail": "asha@example.com",
        "guestPhone": "9876543210",
        "guestAddress": "12 Beach Road, Kochi",
        "checkInDate": check_in,
        "checkOutDate": check_out,
    }
    payload.update(overrides)
    return payload


def put_booking(repository, booking):
    """Store a booking as-is, without the availability check, to model existing data"""
    repository._insert(booking)
    return booking


# ============================================================================
# REPOSITORY & SERVICE FIXTURES
# ============================================================================

@pytest.fixture
def booking_repository():
    return InMemoryBookingRepository()


@pytest.fixture
def property_repository():
    return InMemoryPropertyRepository()


@pytest.fixture
def room_repository():
    return InMemoryRoomRepository()


@pytest.fixture
def sample_property():
    return make_property()


@pytest.fixture
def sample_room(sample_property):
    return make_room(sample_property.property_id)


@pytest.fixture
async def seeded_repositories(property_repository, room_repository, sample_property, sample_room):
    await property_repository.save(sample_property)
    await room_repository.save(sample_room)
    return property_repository, room_repository


@pytest.fixture
def booking_service(booking_repository, seeded_repositories):
    property_repository, room_repository = seeded_repositories
    return BookingService(booking_repository, property_repository, room_repository, image_encoder=to_data_uri)


@pytest.fixture
def availability_service(booking_repository, seeded_repositories):
    _, room_repository = seeded_repositories
    return AvailabilityService(booking_repository, room_repository)


@pytest.fixture
def stay_dates():
    return date(2025, 7, 10), date(2025, 7, 15)


# ============================================================================
# API FIXTURES
# ============================================================================

@pytest.fixture
def client(booking_service, availability_service, booking_repository):
    """FastAPI test client wired to fresh repositories"""
    app.dependency_overrides[get_booking_service] = lambda: booking_service
    app.dependency_overrides[get_availability_service] = lambda: availability_service
    app.dependency_overrides[get_booking_repository] = lambda: booking_repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def host_headers(client):
    """Bearer headers for the development host account"""
    response = client.post("/token", data={"username": "host", "password": "host123"})
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
