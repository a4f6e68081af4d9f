"""Domain services backed by DynamoDB."""

from .bookings import BookingService
from .dynamodb import DynamoDBService, get_dynamodb_service, reset_dynamodb_service
from .google_oauth import GoogleOAuthClient, GoogleProfile
from .images import ImageStorage, ImageUpload
from .notifications import NotificationService
from .properties import PropertyService
from .reviews import ReviewService
from .users import UserService
from .vendor_requests import VendorRequestService

__all__ = [
    "BookingService",
    "DynamoDBService",
    "GoogleOAuthClient",
    "GoogleProfile",
    "ImageStorage",
    "ImageUpload",
    "NotificationService",
    "PropertyService",
    "ReviewService",
    "UserService",
    "VendorRequestService",
    "get_dynamodb_service",
    "reset_dynamodb_service",
]
