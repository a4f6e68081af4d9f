"""Guest endpoints under /api/user.

Provides REST endpoints for:
- Booking a listing and cancelling own bookings
- Listing own bookings, optionally by dashboard bucket
- Reviewing a booked listing
- Applying to become a vendor
- Reading and acknowledging notifications
"""

from fastapi import APIRouter, Depends, Query
from starlette.status import HTTP_201_CREATED

from roombook.api.dependencies import (
    get_booking_service,
    get_notification_service,
    get_review_service,
    get_vendor_request_service,
)
from roombook.api.models.common import (
    BookingResponse,
    DataResponse,
    ReviewCreate,
    ReviewResponse,
    SuccessMessage,
    UnreadCount,
    VendorRequestResponse,
)
from roombook.api.security import get_current_claims, get_current_user
from roombook.models import (
    BookingCreate,
    BookingFilter,
    BookingWithProperty,
    Notification,
    TokenClaims,
    User,
    VendorRequestCreate,
)
from roombook.services.bookings import BookingService
from roombook.services.notifications import NotificationService
from roombook.services.reviews import ReviewService
from roombook.services.vendor_requests import VendorRequestService

router = APIRouter(prefix="/user", tags=["user"])


@router.post(
    "/book-property",
    summary="Book a listing",
    description="""
Reserve a stay.

**Requires a session.**

Validation runs in a fixed order: required fields, check-in not in the past,
check-out after check-in, listing exists, not the caller's own listing,
guest count within capacity, inside the availability window, no overlap
with existing bookings. The total is computed from the listing price.
""",
    response_model=BookingResponse,
    status_code=HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid stay"},
        403: {"description": "Own listing"},
        404: {"description": "Property not found"},
        409: {"description": "Listing changed concurrently"},
    },
)
async def book_property(
    body: BookingCreate,
    user: User = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = bookings.book(user.user_id, user.username, body)
    return BookingResponse(data=booking)


@router.get(
    "/getBookings",
    summary="Own bookings",
    response_model=DataResponse[list[BookingWithProperty]],
)
async def get_bookings(
    filter: BookingFilter | None = Query(
        None, description="Keep only upcoming, current or past stays"
    ),
    claims: TokenClaims = Depends(get_current_claims),
    bookings: BookingService = Depends(get_booking_service),
) -> DataResponse[list[BookingWithProperty]]:
    return DataResponse(data=bookings.list_for_user(claims.user_id, which=filter))


@router.delete(
    "/properties/bookings/{booking_id}",
    summary="Cancel own booking",
    response_model=SuccessMessage,
    responses={403: {"description": "Not the booking owner"}, 404: {"description": "Booking not found"}},
)
async def cancel_booking(
    booking_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    bookings: BookingService = Depends(get_booking_service),
) -> SuccessMessage:
    bookings.cancel(booking_id, user_id=claims.user_id)
    return SuccessMessage(message="Booking canceled successfully.")


@router.post(
    "/properties/reviews/{property_id}",
    summary="Review a booked listing",
    response_model=ReviewResponse,
    responses={
        400: {"description": "Already reviewed"},
        403: {"description": "No booking on this listing"},
        404: {"description": "Property not found"},
    },
)
async def add_review(
    property_id: str,
    body: ReviewCreate,
    user: User = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    review = reviews.add_review(
        property_id, user.user_id, user.username, body.rating, body.comment
    )
    return ReviewResponse(data=review)


@router.post(
    "/postVendorRequest",
    summary="Apply to become a vendor",
    response_model=VendorRequestResponse,
    status_code=HTTP_201_CREATED,
    responses={400: {"description": "Missing fields, not eligible or already pending"}},
)
async def post_vendor_request(
    body: VendorRequestCreate,
    claims: TokenClaims = Depends(get_current_claims),
    requests: VendorRequestService = Depends(get_vendor_request_service),
) -> VendorRequestResponse:
    return VendorRequestResponse(data=requests.submit(claims.user_id, body))


@router.get(
    "/notifications",
    summary="Own notifications",
    response_model=list[Notification],
)
async def get_notifications(
    claims: TokenClaims = Depends(get_current_claims),
    notifications: NotificationService = Depends(get_notification_service),
) -> list[Notification]:
    return notifications.list_for_user(claims.user_id)


@router.get(
    "/notifications/unread-count",
    summary="Unread notification count",
    response_model=UnreadCount,
)
async def get_unread_count(
    claims: TokenClaims = Depends(get_current_claims),
    notifications: NotificationService = Depends(get_notification_service),
) -> UnreadCount:
    return UnreadCount(unread_count=notifications.unread_count(claims.user_id))


@router.put(
    "/notifications/mark-as-read",
    summary="Mark all notifications read",
    response_model=SuccessMessage,
)
async def mark_notifications_read(
    claims: TokenClaims = Depends(get_current_claims),
    notifications: NotificationService = Depends(get_notification_service),
) -> SuccessMessage:
    changed = notifications.mark_all_read(claims.user_id)
    return SuccessMessage(message=f"{changed} notifications marked as read")
