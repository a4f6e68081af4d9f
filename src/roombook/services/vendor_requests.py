"""Applications from regular users to become vendors."""

import datetime as dt
import uuid
from typing import TYPE_CHECKING

from boto3.dynamodb.conditions import Attr

from roombook.models import (
    BookingError,
    ErrorCode,
    NotificationType,
    PendingStatus,
    Requester,
    UserRole,
    VendorRequest,
    VendorRequestAction,
    VendorRequestCreate,
    VendorRequestStatus,
    VendorRequestWithRequester,
)
from roombook.models.vendor_request import MAX_REQUEST_MESSAGE_LENGTH
from roombook.services.dynamodb import to_item
from roombook.utils.logging import get_logger, log_booking_event

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService
    from .notifications import NotificationService
    from .users import UserService

logger = get_logger(__name__)

DECISION_MESSAGES = {
    VendorRequestAction.APPROVE: "Your vendor request has been approved! 🎉",
    VendorRequestAction.REJECT: "Your vendor request has been rejected.",
}


class VendorRequestService:
    """Service for requests stored in the ``vendor-requests`` table."""

    TABLE = "vendor-requests"

    def __init__(
        self,
        db: "DynamoDBService",
        users: "UserService",
        notifications: "NotificationService",
    ) -> None:
        """Initialize vendor request service.

        Args:
            db: DynamoDB service instance
            users: Account updates on submission and decision
            notifications: Used to tell requesters about the decision
        """
        self.db = db
        self.users = users
        self.notifications = notifications

    def submit(self, requester_id: str, body: VendorRequestCreate) -> VendorRequest:
        """File a request and mark the requester as pending.

        Raises:
            BookingError: MISSING_FIELDS for blank or overlong fields,
                NOT_ELIGIBLE_FOR_VENDOR or REQUEST_ALREADY_PENDING.
        """
        missing = body.missing_fields()
        if missing:
            raise BookingError(ErrorCode.MISSING_FIELDS, details={"fields": ", ".join(missing)})
        message = body.message.strip()
        if len(message) > MAX_REQUEST_MESSAGE_LENGTH:
            raise BookingError(
                ErrorCode.MISSING_FIELDS,
                message=f"Message must be at most {MAX_REQUEST_MESSAGE_LENGTH} characters",
            )

        user = self.users.require_user(requester_id)
        if user.role != UserRole.USER:
            raise BookingError(ErrorCode.NOT_ELIGIBLE_FOR_VENDOR)
        if user.pending_status == PendingStatus.PENDING or self._pending_for(requester_id):
            raise BookingError(ErrorCode.REQUEST_ALREADY_PENDING)

        request = VendorRequest(
            request_id=uuid.uuid4().hex,
            requester_id=requester_id,
            first_name=body.first_name.strip(),
            last_name=body.last_name.strip(),
            email=body.email.strip(),
            mobile=body.mobile.strip(),
            message=message,
            created_at=dt.datetime.now(dt.UTC),
        )
        self.db.put_item(self.TABLE, to_item(request))
        self.users.set_pending_status(requester_id, PendingStatus.PENDING)
        log_booking_event(
            logger,
            "vendor_request_submitted",
            user_id=requester_id,
            request_id=request.request_id,
        )
        return request

    def _pending_for(self, requester_id: str) -> bool:
        items = self.db.scan(self.TABLE, Attr("requester_id").eq(requester_id))
        return any(i.get("status") == VendorRequestStatus.PENDING.value for i in items)

    def list_pending(self) -> list[VendorRequestWithRequester]:
        """Open requests, oldest first, with requester details attached."""
        items = self.db.scan(
            self.TABLE, Attr("status").eq(VendorRequestStatus.PENDING.value)
        )
        results = []
        for item in items:
            user = self.users.get_user(item["requester_id"])
            requester = (
                Requester(
                    user_id=user.user_id,
                    username=user.username,
                    email=user.email,
                    role=user.role,
                )
                if user
                else None
            )
            results.append(
                VendorRequestWithRequester.model_validate({**item, "requester": requester})
            )
        return sorted(results, key=lambda r: r.created_at)

    def resolve(self, request_id: str, action: str) -> VendorRequest:
        """Approve or reject a request.

        Either way the requester leaves the pending state, gets a
        notification and the request is removed. Approval grants the vendor
        role.

        Raises:
            BookingError: INVALID_ACTION, VENDOR_REQUEST_NOT_FOUND or
                USER_NOT_FOUND.
        """
        try:
            decision = VendorRequestAction((action or "").strip().lower())
        except ValueError:
            raise BookingError(ErrorCode.INVALID_ACTION, details={"action": str(action)}) from None

        item = self.db.get_item(self.TABLE, {"request_id": request_id}) if request_id else None
        if item is None:
            raise BookingError(
                ErrorCode.VENDOR_REQUEST_NOT_FOUND, details={"request_id": str(request_id)}
            )
        request = VendorRequest.model_validate(item)

        approved = decision == VendorRequestAction.APPROVE
        self.users.resolve_vendor_status(request.requester_id, approved=approved)
        self.notifications.send(
            request.requester_id,
            DECISION_MESSAGES[decision],
            NotificationType.VENDOR_REQUEST,
        )
        self.db.delete_item(self.TABLE, {"request_id": request_id})

        log_booking_event(
            logger,
            "vendor_request_resolved",
            user_id=request.requester_id,
            request_id=request_id,
            action=decision.value,
        )
        return request
