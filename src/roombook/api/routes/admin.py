"""Administrator moderation endpoints under /api/admin.

Every endpoint requires the admin role.
"""

from fastapi import APIRouter, Depends, Query

from roombook.api.dependencies import (
    get_booking_service,
    get_property_service,
    get_user_service,
    get_vendor_request_service,
)
from roombook.api.models.common import DataResponse, SuccessMessage
from roombook.api.security import require_role
from roombook.models import (
    BookingWithProperty,
    Property,
    User,
    UserRole,
    UserSummary,
    VendorRequestDecision,
    VendorRequestWithRequester,
)
from roombook.services.bookings import BookingService
from roombook.services.properties import PropertyService
from roombook.services.users import DEFAULT_PAGE_SIZE, UserService
from roombook.services.vendor_requests import VendorRequestService

router = APIRouter(prefix="/admin", tags=["admin"])

require_admin = require_role(UserRole.ADMIN)


@router.get(
    "/getUsers",
    summary="List users",
    description="Users sorted by most recent login. An unknown `role` is ignored.",
    response_model=DataResponse[list[UserSummary]],
)
async def get_users(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    role: str | None = Query(None),
    admin: User = Depends(require_admin),
    users: UserService = Depends(get_user_service),
) -> DataResponse[list[UserSummary]]:
    return DataResponse(data=users.list_users(page=page, limit=limit, role=role))


@router.get(
    "/getVendorRequests",
    summary="Pending vendor requests",
    response_model=DataResponse[list[VendorRequestWithRequester]],
)
async def get_vendor_requests(
    admin: User = Depends(require_admin),
    requests: VendorRequestService = Depends(get_vendor_request_service),
) -> DataResponse[list[VendorRequestWithRequester]]:
    return DataResponse(data=requests.list_pending())


@router.put(
    "/updateVendorRequest",
    summary="Approve or reject a vendor request",
    response_model=SuccessMessage,
    responses={
        400: {"description": "Invalid action"},
        404: {"description": "Request or requester not found"},
    },
)
async def update_vendor_request(
    body: VendorRequestDecision,
    admin: User = Depends(require_admin),
    requests: VendorRequestService = Depends(get_vendor_request_service),
) -> SuccessMessage:
    requests.resolve(body.request_id, body.action)
    return SuccessMessage(message="Request processed, user updated, and notification saved")


@router.get(
    "/getProperties",
    summary="All listings",
    response_model=DataResponse[list[Property]],
)
async def get_all_properties(
    admin: User = Depends(require_admin),
    properties: PropertyService = Depends(get_property_service),
) -> DataResponse[list[Property]]:
    return DataResponse(data=properties.list_all())


@router.delete(
    "/deleteProperty/{property_id}",
    summary="Remove any listing",
    response_model=SuccessMessage,
    responses={404: {"description": "Property not found"}},
)
async def delete_any_property(
    property_id: str,
    admin: User = Depends(require_admin),
    properties: PropertyService = Depends(get_property_service),
) -> SuccessMessage:
    properties.delete(property_id)
    return SuccessMessage(message="Property deleted successfully")


@router.get(
    "/getBookings",
    summary="All bookings",
    response_model=DataResponse[list[BookingWithProperty]],
)
async def get_all_bookings(
    admin: User = Depends(require_admin),
    bookings: BookingService = Depends(get_booking_service),
) -> DataResponse[list[BookingWithProperty]]:
    return DataResponse(data=bookings.list_all())


@router.delete(
    "/deleteBooking/{booking_id}",
    summary="Cancel any booking",
    response_model=SuccessMessage,
    responses={404: {"description": "Booking not found"}},
)
async def delete_any_booking(
    booking_id: str,
    admin: User = Depends(require_admin),
    bookings: BookingService = Depends(get_booking_service),
) -> SuccessMessage:
    bookings.cancel(booking_id)
    return SuccessMessage(message="Booking canceled successfully.")
