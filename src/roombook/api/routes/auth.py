"""Session and public listing endpoints under /api/auth.

Provides REST endpoints for:
- Signup, login, admin login and logout (cookie session)
- The current session user
- Public property search and property details
"""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.status import HTTP_201_CREATED

from roombook.api.dependencies import get_property_service, get_user_service
from roombook.api.models.common import AuthResponse, DataResponse, SuccessMessage, UserEnvelope
from roombook.api.security import (
    clear_session_cookie,
    get_current_claims,
    get_optional_claims,
    set_session_cookie,
)
from roombook.models import Credentials, Property, PropertySearch, TokenClaims, UserCreate
from roombook.services.properties import PropertyService
from roombook.services.users import UserService

router = APIRouter(prefix="/auth", tags=["auth"])

SEARCH_PARAMS = set(PropertySearch.model_fields) | {
    field.alias for field in PropertySearch.model_fields.values() if field.alias
}


def get_search_filters(request: Request) -> PropertySearch:
    """Build search filters from query parameters; blank values are ignored."""
    values = {
        key: value
        for key, value in request.query_params.items()
        if key in SEARCH_PARAMS and value.strip()
    }
    try:
        return PropertySearch.model_validate(values)
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("query", *err["loc"])} for err in e.errors()]
        ) from None


@router.get(
    "/me",
    summary="Current session user",
    response_model=UserEnvelope,
    responses={401: {"description": "No valid session"}},
)
async def me(
    claims: TokenClaims = Depends(get_current_claims),
    users: UserService = Depends(get_user_service),
) -> UserEnvelope:
    return UserEnvelope(user=users.require_user(claims.user_id))


@router.post(
    "/signup",
    summary="Create an account",
    response_model=AuthResponse,
    status_code=HTTP_201_CREATED,
    responses={400: {"description": "Missing fields, bad email, weak password or existing user"}},
)
async def signup(
    body: UserCreate,
    response: Response,
    users: UserService = Depends(get_user_service),
) -> AuthResponse:
    """Register a regular user and start a session."""
    user = users.signup(body)
    set_session_cookie(response, user)
    return AuthResponse(message="Signup successful, please log in", user=user)


@router.post(
    "/login",
    summary="Log in with email and password",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials"}},
)
async def login(
    body: Credentials,
    response: Response,
    users: UserService = Depends(get_user_service),
) -> AuthResponse:
    user = users.authenticate(body)
    set_session_cookie(response, user)
    return AuthResponse(message="Login successful", user=user)


@router.post(
    "/admin/login",
    summary="Administrator login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Malformed email or password"},
        401: {"description": "Not an administrator or wrong password"},
    },
)
async def admin_login(
    body: Credentials,
    response: Response,
    users: UserService = Depends(get_user_service),
) -> AuthResponse:
    user = users.authenticate(body, admin=True)
    set_session_cookie(response, user)
    return AuthResponse(message="Admin login successful", user=user)


@router.post("/logout", summary="End the session", response_model=SuccessMessage)
async def logout(response: Response) -> SuccessMessage:
    clear_session_cookie(response)
    return SuccessMessage(message="Logout successful")


@router.get(
    "/getProperties",
    summary="Search listings",
    description="""
Search listings with optional filters.

**Public endpoint.** A signed-in caller never sees their own listings.

**Query parameters:** `type`, `location` (matches location or address),
`price` (maximum nightly price), `maxGuests` (minimum capacity),
`checkIn`/`checkOut` (free for the whole stay), `averageRating` (minimum).
""",
    response_model=DataResponse[list[Property]],
)
async def search_properties(
    search: PropertySearch = Depends(get_search_filters),
    claims: TokenClaims | None = Depends(get_optional_claims),
    properties: PropertyService = Depends(get_property_service),
) -> DataResponse[list[Property]]:
    exclude = claims.user_id if claims else None
    return DataResponse(data=properties.search(search, exclude_owner=exclude))


@router.get(
    "/getProperty/{property_id}",
    summary="Listing details",
    response_model=DataResponse[Property],
    responses={404: {"description": "Property not found"}},
)
async def get_property(
    property_id: str,
    properties: PropertyService = Depends(get_property_service),
) -> DataResponse[Property]:
    return DataResponse(data=properties.require_property(property_id))
