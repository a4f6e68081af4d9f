"""RoomBook: property listings, bookings and vendor moderation."""

__version__ = "0.1.0"
