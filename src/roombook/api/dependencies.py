"""FastAPI dependency injection providers for shared services.

Factory functions use @lru_cache so each service is built once per process
and shared by every request.

Usage in routes:
    from roombook.api.dependencies import get_booking_service

    @router.post("/book-property")
    async def book_property(
        service: BookingService = Depends(get_booking_service),
    ):
        ...

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── UserService
        ├── NotificationService
        ├── PropertyService (+ ImageStorage, NotificationService)
        │       └── BookingService
        │               └── ReviewService
        └── VendorRequestService (+ UserService, NotificationService)

Testing:
    Use reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from roombook.config import get_settings
from roombook.services.bookings import BookingService
from roombook.services.dynamodb import get_dynamodb_service
from roombook.services.google_oauth import GoogleOAuthClient
from roombook.services.images import ImageStorage
from roombook.services.notifications import NotificationService
from roombook.services.properties import PropertyService
from roombook.services.reviews import ReviewService
from roombook.services.users import UserService
from roombook.services.vendor_requests import VendorRequestService


@lru_cache
def get_user_service() -> UserService:
    return UserService(db=get_dynamodb_service())


@lru_cache
def get_notification_service() -> NotificationService:
    return NotificationService(db=get_dynamodb_service())


@lru_cache
def get_image_storage() -> ImageStorage:
    """Get cached ImageStorage rooted at UPLOAD_DIR."""
    settings = get_settings()
    return ImageStorage(settings.upload_dir, settings.max_upload_bytes)


@lru_cache
def get_property_service() -> PropertyService:
    return PropertyService(
        db=get_dynamodb_service(),
        images=get_image_storage(),
        notifications=get_notification_service(),
    )


@lru_cache
def get_booking_service() -> BookingService:
    """Get cached BookingService instance.

    Returns:
        BookingService configured with all required dependencies.
    """
    return BookingService(
        db=get_dynamodb_service(),
        properties=get_property_service(),
        notifications=get_notification_service(),
    )


@lru_cache
def get_review_service() -> ReviewService:
    return ReviewService(
        properties=get_property_service(),
        bookings=get_booking_service(),
        notifications=get_notification_service(),
    )


@lru_cache
def get_vendor_request_service() -> VendorRequestService:
    return VendorRequestService(
        db=get_dynamodb_service(),
        users=get_user_service(),
        notifications=get_notification_service(),
    )


@lru_cache
def get_google_oauth_client() -> GoogleOAuthClient:
    return GoogleOAuthClient(get_settings())


def reset_services() -> None:
    """Clear all cached service instances.

    Call this in test fixtures to ensure clean state between tests.
    Also resets the underlying DynamoDB singleton and cached settings.
    """
    from roombook.services.dynamodb import reset_dynamodb_service

    get_user_service.cache_clear()
    get_notification_service.cache_clear()
    get_image_storage.cache_clear()
    get_property_service.cache_clear()
    get_booking_service.cache_clear()
    get_review_service.cache_clear()
    get_vendor_request_service.cache_clear()
    get_google_oauth_client.cache_clear()
    get_settings.cache_clear()

    reset_dynamodb_service()
