"""Form state for the vendor application and stay booking."""

import datetime as dt
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING

from roombook.models import Booking, BookingError, ErrorCode, Property
from roombook.services import booking_rules

if TYPE_CHECKING:
    from .http import RoomBookClient

DEFAULT_COUNTRY_CODE = "+880"
HOME_PATH = "/"


@dataclass
class VendorRequestForm:
    """Become-a-vendor form.

    The phone number is entered as a country code plus a local number and
    sent joined together.
    """

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    country_code: str = DEFAULT_COUNTRY_CODE
    mobile: str = ""
    message: str = ""

    def payload(self) -> dict[str, str]:
        return {
            "firstName": self.first_name.strip(),
            "lastName": self.last_name.strip(),
            "email": self.email.strip(),
            "mobile": f"{self.country_code}{self.mobile.strip()}",
            "message": self.message.strip(),
        }

    def reset(self) -> None:
        """Put every field back to its default value."""
        for f in fields(self):
            setattr(self, f.name, f.default)

    def submit(self, client: "RoomBookClient") -> str:
        """Send the application, clear the form and return where to navigate.

        Raises:
            ApiError: if the server rejects the application; the form keeps
                its values in that case.
        """
        client.post_vendor_request(self.payload())
        self.reset()
        return HOME_PATH


@dataclass(frozen=True)
class StayQuote:
    nights: int
    total: float


@dataclass
class BookingForm:
    """Stay selection on a listing's detail page."""

    listing: Property
    check_in: dt.date | None = None
    check_out: dt.date | None = None
    guests: int = 1
    errors: list[str] = field(default_factory=list)

    def quote(self) -> StayQuote:
        """Nights and price for the selected dates.

        Raises:
            BookingError: when dates are missing or out of order.
        """
        if self.check_in is None or self.check_out is None:
            raise BookingError(ErrorCode.MISSING_BOOKING_DETAILS)
        nights = booking_rules.count_nights(self.check_in, self.check_out)
        return StayQuote(nights=nights, total=nights * self.listing.price)

    def validate(self, booker_id: str, today: dt.date | None = None) -> bool:
        """Run the listing's booking rules locally and record the first failure."""
        self.errors.clear()
        try:
            if self.check_in is None or self.check_out is None:
                raise BookingError(ErrorCode.MISSING_BOOKING_DETAILS)
            booking_rules.validate_stay(
                self.listing, self.check_in, self.check_out, self.guests, booker_id, today
            )
        except BookingError as e:
            self.errors.append(e.message)
            return False
        return True

    def submit(self, client: "RoomBookClient", booker_id: str) -> Booking | None:
        """Book the stay if it passes local validation.

        Returns:
            The created booking, or None when validation failed and no
            request was sent (see ``errors``).
        """
        if not self.validate(booker_id):
            return None
        return client.book_property(
            self.listing.property_id,
            self.check_in,
            self.check_out,
            self.guests,
            price_per_night=self.listing.price,
        )
