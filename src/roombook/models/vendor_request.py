"""Vendor application models."""

from datetime import datetime

from pydantic import Field

from .base import CamelModel
from .enums import UserRole, VendorRequestStatus

MAX_REQUEST_MESSAGE_LENGTH = 100


class VendorRequestCreate(CamelModel):
    """Body of the become-a-vendor form."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    mobile: str = ""
    message: str = ""

    def missing_fields(self) -> list[str]:
        return [
            name
            for name, value in self.model_dump().items()
            if not str(value).strip()
        ]


class VendorRequest(CamelModel):
    """A pending application from a user to become a vendor."""

    request_id: str = Field(..., alias="_id")
    requester_id: str = Field(..., alias="requesterID")
    first_name: str
    last_name: str
    email: str
    mobile: str
    message: str = Field(..., min_length=1, max_length=MAX_REQUEST_MESSAGE_LENGTH)
    status: VendorRequestStatus = VendorRequestStatus.PENDING
    created_at: datetime


class Requester(CamelModel):
    """Requester details attached to a vendor request for admins."""

    user_id: str = Field(..., alias="_id")
    username: str
    email: str
    role: UserRole


class VendorRequestWithRequester(VendorRequest):
    requester: Requester | None = None


class VendorRequestDecision(CamelModel):
    """Admin decision body."""

    request_id: str = ""
    action: str = ""
