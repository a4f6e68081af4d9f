"""User accounts: signup, credential login, roles and social login."""

import datetime as dt
import re
import uuid
from typing import TYPE_CHECKING, Any

from boto3.dynamodb.conditions import Attr
from passlib.context import CryptContext
from pydantic import EmailStr, TypeAdapter, ValidationError

from roombook.models import (
    BookingError,
    Credentials,
    ErrorCode,
    PendingStatus,
    User,
    UserCreate,
    UserRole,
    UserSummary,
)
from roombook.services.dynamodb import to_item
from roombook.utils.logging import get_logger

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)

# 8+ chars with lower, upper, digit and one special character from @$!%*?&
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
)
MIN_PASSWORD_LENGTH = 8
DEFAULT_PAGE_SIZE = 10


def normalize_email(email: str) -> str:
    """Trim, lower-case and validate an email address.

    Raises:
        BookingError: INVALID_EMAIL when the address is malformed.
    """
    candidate = (email or "").strip().lower()
    try:
        _email_adapter.validate_python(candidate)
    except ValidationError:
        raise BookingError(ErrorCode.INVALID_EMAIL) from None
    return candidate


class UserService:
    """Service for account records stored in the ``users`` table."""

    TABLE = "users"

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize user service.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    # Lookups

    def get_user(self, user_id: str) -> User | None:
        item = self.db.get_item(self.TABLE, {"user_id": user_id})
        return User.model_validate(item) if item else None

    def require_user(self, user_id: str) -> User:
        """Get a user or raise USER_NOT_FOUND."""
        user = self.get_user(user_id)
        if user is None:
            raise BookingError(ErrorCode.USER_NOT_FOUND)
        return user

    def _get_item_by_email(self, email: str) -> dict[str, Any] | None:
        results = self.db.query_by_gsi(
            table=self.TABLE,
            index_name="email-index",
            partition_key_name="email",
            partition_key_value=email,
        )
        return results[0] if results else None

    def get_user_by_email(self, email: str) -> User | None:
        item = self._get_item_by_email(email.strip().lower())
        return User.model_validate(item) if item else None

    def list_users(
        self,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        role: str | None = None,
    ) -> list[UserSummary]:
        """Page through users, most recently active first.

        An unknown role filter is ignored rather than rejected.
        """
        page = max(page, 1)
        limit = limit if limit > 0 else DEFAULT_PAGE_SIZE

        filter_expression = None
        if role in {r.value for r in UserRole}:
            filter_expression = Attr("role").eq(role)

        items = self.db.scan(self.TABLE, filter_expression)
        users = [UserSummary.model_validate(item) for item in items]
        users.sort(
            key=lambda u: u.last_login or dt.datetime.min.replace(tzinfo=dt.UTC),
            reverse=True,
        )
        start = (page - 1) * limit
        return users[start : start + limit]

    # Registration and login

    def signup(self, body: UserCreate) -> User:
        """Register a regular user.

        Raises:
            BookingError: MISSING_FIELDS, INVALID_EMAIL, WEAK_PASSWORD or USER_EXISTS.
        """
        username = (body.username or "").strip()
        if not username or not body.email.strip() or not body.password:
            raise BookingError(ErrorCode.MISSING_FIELDS)

        email = normalize_email(body.email)
        if not PASSWORD_PATTERN.match(body.password):
            raise BookingError(ErrorCode.WEAK_PASSWORD)

        if self._get_item_by_email(email):
            raise BookingError(ErrorCode.USER_EXISTS)

        now = dt.datetime.now(dt.UTC)
        user = User(
            user_id=uuid.uuid4().hex,
            username=username,
            email=email,
            role=UserRole.USER,
            last_login=now,
            created_at=now,
            updated_at=now,
        )
        self._create(user, password=body.password)
        logger.info("User signed up: %s", user.user_id)
        return user

    def create_user(
        self,
        username: str,
        email: str,
        password: str | None,
        role: UserRole = UserRole.USER,
        google_id: str | None = None,
    ) -> User:
        """Create an account directly (seeding, social login)."""
        now = dt.datetime.now(dt.UTC)
        user = User(
            user_id=uuid.uuid4().hex,
            username=username.strip(),
            email=normalize_email(email),
            role=role,
            google_id=google_id,
            created_at=now,
            updated_at=now,
        )
        self._create(user, password=password)
        return user

    def _create(self, user: User, password: str | None) -> None:
        item = to_item(user)
        if password:
            item["password_hash"] = pwd_context.hash(password)
        created = self.db.put_item(
            self.TABLE, item, condition_expression="attribute_not_exists(user_id)"
        )
        if not created:
            raise BookingError(ErrorCode.USER_EXISTS)

    def authenticate(self, body: Credentials, admin: bool = False) -> User:
        """Check credentials and record the login time.

        Args:
            body: Email and password
            admin: Only accept accounts with the admin role

        Raises:
            BookingError: INVALID_EMAIL for a malformed address, WEAK_PASSWORD
                for a short admin password, INVALID_CREDENTIALS for unknown
                accounts, non-admins on the admin login or wrong passwords.
        """
        email = normalize_email(body.email)
        if admin and len(body.password) < MIN_PASSWORD_LENGTH:
            raise BookingError(ErrorCode.WEAK_PASSWORD, message="Invalid password format")

        item = self._get_item_by_email(email)
        if not item or (admin and item.get("role") != UserRole.ADMIN.value):
            raise BookingError(ErrorCode.INVALID_CREDENTIALS)

        password_hash = item.get("password_hash")
        if not password_hash or not pwd_context.verify(body.password, password_hash):
            raise BookingError(ErrorCode.INVALID_CREDENTIALS)

        return self.touch_last_login(item["user_id"])

    def touch_last_login(self, user_id: str) -> User:
        now = dt.datetime.now(dt.UTC).isoformat()
        attrs = self.db.update_item(
            table=self.TABLE,
            key={"user_id": user_id},
            update_expression="SET last_login = :now, updated_at = :now",
            expression_attribute_values={":now": now},
            condition_expression="attribute_exists(user_id)",
        )
        if attrs is None:
            raise BookingError(ErrorCode.USER_NOT_FOUND)
        return User.model_validate(attrs)

    def login_with_google(self, google_id: str, email: str, name: str | None) -> User:
        """Find or create the account behind a Google identity.

        An existing email/password account is linked to the Google ID.
        """
        email = normalize_email(email)
        item = self._get_item_by_email(email)
        if item is None:
            username = (name or email.split("@")[0]).strip()
            user = self.create_user(username, email, password=None, google_id=google_id)
            logger.info("Created account from Google login: %s", user.user_id)
            return self.touch_last_login(user.user_id)

        if item.get("google_id") != google_id:
            self.db.update_item(
                table=self.TABLE,
                key={"user_id": item["user_id"]},
                update_expression="SET google_id = :gid",
                expression_attribute_values={":gid": google_id},
            )
        return self.touch_last_login(item["user_id"])

    # Role and vendor status

    def set_pending_status(self, user_id: str, status: PendingStatus) -> User:
        return self._update_fields(user_id, {"pending_status": status.value})

    def resolve_vendor_status(self, user_id: str, approved: bool) -> User:
        """Clear the pending flag and promote the user when approved."""
        fields: dict[str, Any] = {"pending_status": PendingStatus.NOT_PENDING.value}
        if approved:
            fields["role"] = UserRole.VENDOR.value
        return self._update_fields(user_id, fields)

    def _update_fields(self, user_id: str, fields: dict[str, Any]) -> User:
        fields = {**fields, "updated_at": dt.datetime.now(dt.UTC).isoformat()}
        names = {f"#{k}": k for k in fields}
        values = {f":{k}": v for k, v in fields.items()}
        expression = "SET " + ", ".join(f"#{k} = :{k}" for k in fields)

        attrs = self.db.update_item(
            table=self.TABLE,
            key={"user_id": user_id},
            update_expression=expression,
            expression_attribute_values=values,
            expression_attribute_names=names,
            condition_expression="attribute_exists(user_id)",
        )
        if attrs is None:
            raise BookingError(ErrorCode.USER_NOT_FOUND)
        return User.model_validate(attrs)
