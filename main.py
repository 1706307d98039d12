import logging

from fastapi import FastAPI, HTTPException, Depends, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from datetime import timedelta
from typing import List, Optional

from api.schemas import (
    # Bookings
    CreateBookingRequest, UpdateBookingStatusRequest, BookingResponse, BookingDetailResponse,
    BookingMutationResponse, PaymentUploadResponse, PaymentInstructionsResponse,
    PropertyResponse, PropertySummary, RoomResponse, RoomSummary,
    # Availability
    RoomAvailabilityResponse,
    # System
    StoreStatusResponse,
    # Auth
    Token, UserResponse
)

from api.dependencies import get_current_user, get_optional_user, fake_users_db, get_user
from infrastructure.config import get_settings
from infrastructure.logging_config import configure_logging
from infrastructure.image_encoding import to_data_uri
from infrastructure.seed import load_seed_file
from infrastructure.security import verify_password, create_access_token
from domain.auth import User
from domain.entities import Booking, BookingDetails
from domain.enums import BookingStatus
from domain.exceptions import BookingError

from application.booking_codes import BookingCodeGenerator
from application.services import BookingService, AvailabilityService
from infrastructure.repositories.in_memory_repositories import (
    InMemoryBookingRepository, InMemoryPropertyRepository, InMemoryRoomCategoryRepository, InMemoryRoomRepository
)

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    description="Room availability, booking lifecycle and payment proof for hosted properties",
    version=settings.APP_VERSION
)

# Initialize repositories
booking_repo = InMemoryBookingRepository()
property_repo = InMemoryPropertyRepository()
room_repo = InMemoryRoomRepository()
category_repo = InMemoryRoomCategoryRepository()

# Dependency injection
def get_booking_service() -> BookingService:
    code_generator = BookingCodeGenerator(
        booking_repo,
        prefix=settings.BOOKING_CODE_PREFIX,
        length=settings.BOOKING_CODE_LENGTH,
        max_attempts=settings.BOOKING_CODE_MAX_ATTEMPTS
    )
    return BookingService(
        booking_repo, property_repo, room_repo,
        image_encoder=to_data_uri,
        code_generator=code_generator,
        max_screenshot_bytes=settings.MAX_PAYMENT_SCREENSHOT_BYTES
    )

def get_availability_service() -> AvailabilityService:
    return AvailabilityService(booking_repo, room_repo)

def get_booking_repository() -> InMemoryBookingRepository:
    return booking_repo

@app.on_event("startup")
async def load_reference_data():
    """Fill the property, category and room stores from the configured seed file"""
    await load_seed_file(settings.SEED_FILE, property_repo, category_repo, room_repo)

# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = _validation_message(exc.errors())
    logger.info("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"detail": message})

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

@app.get("/api/db-status", response_model=StoreStatusResponse, tags=["Health"])
async def store_status(repository: InMemoryBookingRepository = Depends(get_booking_repository)):
    """Report whether the entity store answers"""
    try:
        reachable = await repository.ping()
    except Exception as e:
        logger.exception("Entity store ping failed")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Failed to reach entity store", "details": {"error": type(e).__name__}}
        )
    if not reachable:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Entity store connection not established", "details": {}}
        )
    return StoreStatusResponse(success=True, message="Entity store reachable", details={"store": type(repository).__name__})

@app.get("/api/enums/booking-status", tags=["Enum Reference"])
async def get_booking_statuses():
    """Get all BookingStatus enum values"""
    return {
        "values": [item.value for item in BookingStatus],
        "description": "Booking status values: pending, confirmed, rejected"
    }

# ============================================================================
# AUTH ENDPOINTS
# ============================================================================

@app.post("/token", response_model=Token, tags=["Auth"])
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    user = get_user(fake_users_db, form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(
        data={"sub": form_data.username, "uid": user.uid, "role": user.role.value if user.role else None},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "token_type": "bearer"}

@app.get("/users/me", response_model=UserResponse, tags=["Auth"])
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user

# ============================================================================
# BOOKING ENDPOINTS
# ============================================================================

@app.get("/bookings", response_model=List[BookingResponse], tags=["Bookings"])
async def list_bookings(
    propertyId: Optional[str] = None,
    roomId: Optional[str] = None,
    status: Optional[str] = None,
    service: BookingService = Depends(get_booking_service)
):
    """List bookings newest first, optionally filtered by property, room or status"""
    bookings = await service.list_bookings(property_id=propertyId, room_id=roomId, status=status)
    return [_booking_to_response(b) for b in bookings]

@app.post("/bookings", response_model=BookingMutationResponse, status_code=201, tags=["Bookings"])
async def create_booking(
    request: CreateBookingRequest,
    service: BookingService = Depends(get_booking_service)
):
    """Create a pending booking from the public booking form"""
    booking = await service.create_booking(
        property_id=request.property_id,
        room_id=request.room_id,
        guest_name=request.guest_name,
        guest_email=request.guest_email,
        guest_phone=request.guest_phone,
        guest_address=request.guest_address,
        check_in_date=request.check_in_date,
        check_out_date=request.check_out_date
    )
    return BookingMutationResponse(
        message="Booking created successfully",
        booking=_booking_to_response(BookingDetails(booking=booking))
    )

@app.get("/bookings/code/{booking_code}", response_model=BookingDetailResponse, tags=["Bookings"])
async def get_booking_by_code(
    booking_code: str,
    service: BookingService = Depends(get_booking_service)
):
    """Get booking by its guest-facing code"""
    details = await service.get_booking_by_code(booking_code)
    return _booking_to_detail_response(details)

@app.get("/bookings/{booking_id}", response_model=BookingDetailResponse, tags=["Bookings"])
async def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service)
):
    """Get booking by ID"""
    details = await service.get_booking(booking_id)
    return _booking_to_detail_response(details)

@app.patch(
    "/bookings/{booking_id}",
    response_model=BookingMutationResponse,
    tags=["Bookings"],
    openapi_extra={"requestBody": {"content": {"application/json": {
        "schema": UpdateBookingStatusRequest.model_json_schema(by_alias=True)
    }}}}
)
async def update_booking_status(
    booking_id: str,
    request: Request,
    service: BookingService = Depends(get_booking_service),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Confirm or reject a pending booking

    The body is read by hand so an anonymous caller gets 401 whatever it sent.
    """
    body = await _read_status_request(request)
    booking = await service.update_status(booking_id, body.booking_status, current_user)
    return BookingMutationResponse(
        message="Booking status updated successfully",
        booking=_booking_to_response(BookingDetails(booking=booking))
    )

@app.get("/bookings/{booking_id}/payment-details", response_model=PaymentInstructionsResponse, tags=["Bookings"])
async def get_payment_details(
    booking_id: str,
    service: BookingService = Depends(get_booking_service)
):
    """Amount due and payee details shown in the payment step"""
    instructions = await service.get_payment_instructions(booking_id)
    return PaymentInstructionsResponse(
        booking_id=instructions.booking_id,
        booking_code=instructions.booking_code,
        upi_id=instructions.upi_id,
        bank_account_name=instructions.bank_account_name,
        nights=instructions.nights,
        rate_per_room=instructions.rate_per_room,
        total_amount=instructions.total_amount.amount,
        currency=instructions.total_amount.currency,
        advance_amount=instructions.advance_amount
    )

@app.post("/upload-payment", response_model=PaymentUploadResponse, tags=["Bookings"])
async def upload_payment_screenshot(
    bookingId: Optional[str] = Form(None),
    screenshot: Optional[UploadFile] = File(None),
    service: BookingService = Depends(get_booking_service)
):
    """Attach a payment screenshot to a booking"""
    # one byte past the limit is enough for the service to refuse the file
    image_bytes = await screenshot.read(service.max_screenshot_bytes + 1) if screenshot is not None else None
    mime_type = screenshot.content_type if screenshot is not None else None
    booking = await service.attach_payment_proof(bookingId, image_bytes, mime_type)
    return PaymentUploadResponse(
        message="Payment screenshot uploaded successfully",
        screenshot_url=booking.payment_screenshot_url
    )

# ============================================================================
# AVAILABILITY ENDPOINTS
# ============================================================================

@app.get("/room-availability", response_model=RoomAvailabilityResponse, tags=["Availability"])
async def get_room_availability(
    roomId: Optional[str] = None,
    year: Optional[str] = None,
    month: Optional[str] = None,
    service: AvailabilityService = Depends(get_availability_service)
):
    """Unavailable dates of one month for a room"""
    unavailable = await service.get_unavailable_dates(roomId, year, month)
    return RoomAvailabilityResponse(
        room_id=roomId.strip(),
        year=int(year),
        month=int(month),
        unavailable_dates=unavailable
    )

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _validation_message(errors) -> str:
    """First framework validation error, phrased like the booking service's own messages"""
    if not errors:
        return "Invalid request"
    error = errors[0]
    field = ".".join(str(part) for part in error.get("loc", ())[1:] if isinstance(part, str))
    if error.get("type") == "missing":
        return f"Missing required field: {field}" if field else "Request body is required"
    if error.get("type") == "json_invalid":
        return "Request body is not valid JSON"
    return f"Invalid value for field: {field}" if field else "Invalid request body"

async def _read_status_request(request: Request) -> UpdateBookingStatusRequest:
    """Lenient PATCH body; anything unusable leaves the status unset for the service to refuse"""
    try:
        body = await request.json()
    except ValueError:
        body = None
    return UpdateBookingStatusRequest.model_validate(body if isinstance(body, dict) else {})

def _booking_fields(booking: Booking) -> dict:
    return dict(
        booking_id=booking.booking_id,
        booking_code=booking.booking_code,
        property_id=booking.property_id,
        room_id=booking.room_id,
        guest_name=booking.guest_name,
        guest_email=booking.guest_email,
        guest_phone=booking.guest_phone,
        guest_address=booking.guest_address,
        check_in_date=booking.check_in_date,
        check_out_date=booking.check_out_date,
        payment_screenshot_url=booking.payment_screenshot_url,
        booking_status=booking.booking_status.value,
        created_at=booking.created_at,
        updated_at=booking.updated_at
    )

def _booking_to_response(details: BookingDetails) -> BookingResponse:
    """Convert a Booking with summary references to BookingResponse"""
    property_, room = details.property_info, details.room_info
    return BookingResponse(
        **_booking_fields(details.booking),
        property_info=PropertySummary(
            property_id=property_.property_id,
            name=property_.name,
            location=property_.location
        ) if property_ else None,
        room_info=RoomSummary(
            room_id=room.room_id,
            room_category=room.room_category,
            capacity=room.capacity.value
        ) if room else None
    )

def _booking_to_detail_response(details: BookingDetails) -> BookingDetailResponse:
    """Convert a Booking with full property and room documents to BookingDetailResponse"""
    property_, room = details.property_info, details.room_info
    return BookingDetailResponse(
        **_booking_fields(details.booking),
        property_info=PropertyResponse(
            property_id=property_.property_id,
            name=property_.name,
            location=property_.location,
            host_id=property_.host_id,
            phone_number=property_.phone_number,
            alternate_number=property_.alternate_number,
            upi_id=property_.upi_id,
            bank_account_name=property_.bank_account_name
        ) if property_ else None,
        room_info=RoomResponse(
            room_id=room.room_id,
            room_category=room.room_category,
            capacity=room.capacity.value,
            property_id=room.property_id,
            pricing_type=room.pricing_type.value,
            rate_per_room=room.rate_per_room,
            amenities=room.amenities,
            extra_person_charge=room.extra_person_charge,
            agent_commission=room.agent_commission,
            advance_amount=room.advance_amount
        ) if room else None
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
