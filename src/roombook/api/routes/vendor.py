"""Vendor listing management under /api/vendor.

Listings are submitted as multipart forms: scalar fields as text,
``amenities`` and ``availability`` as JSON strings, ``images`` as files and,
on update, ``removedImages`` repeated once per image path to drop.
"""

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import FormData, UploadFile
from starlette.status import HTTP_201_CREATED

from roombook.api.dependencies import get_property_service
from roombook.api.models.common import DataResponse, SuccessMessage
from roombook.api.security import require_role
from roombook.models import Property, PropertyDraft, User, UserRole
from roombook.services.images import ImageUpload
from roombook.services.properties import PropertyService

router = APIRouter(prefix="/vendor", tags=["vendor"])

require_vendor = require_role(UserRole.VENDOR)

LISTING_FIELDS = tuple(
    field.alias or name for name, field in PropertyDraft.model_fields.items()
)


async def _read_listing_form(request: Request) -> tuple[dict[str, str], list[ImageUpload], FormData]:
    form = await request.form()
    fields: dict[str, str] = {}
    for key in LISTING_FIELDS:
        value = form.get(key)
        if isinstance(value, str):
            fields[key] = value
    uploads = [
        ImageUpload(
            filename=upload.filename or "",
            content_type=upload.content_type or "",
            data=await upload.read(),
        )
        for upload in form.getlist("images")
        if isinstance(upload, UploadFile)
    ]
    return fields, uploads, form


@router.post(
    "/create-property",
    summary="Create listing",
    response_model=SuccessMessage,
    status_code=HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid input format"},
        403: {"description": "Vendor role required"},
        413: {"description": "Image larger than the upload limit"},
        415: {"description": "Unsupported image type"},
    },
)
async def create_property(
    request: Request,
    vendor: User = Depends(require_vendor),
    properties: PropertyService = Depends(get_property_service),
) -> SuccessMessage:
    fields, uploads, _ = await _read_listing_form(request)
    properties.create(vendor.user_id, fields, uploads)
    return SuccessMessage(message="Property Created")


@router.put(
    "/update-property/{property_id}",
    summary="Edit listing",
    response_model=DataResponse[Property],
    responses={
        400: {"description": "Invalid input format"},
        403: {"description": "Not the listing owner"},
        404: {"description": "Property not found"},
        409: {"description": "Listing changed concurrently"},
    },
)
async def update_property(
    property_id: str,
    request: Request,
    vendor: User = Depends(require_vendor),
    properties: PropertyService = Depends(get_property_service),
) -> DataResponse[Property]:
    fields, uploads, form = await _read_listing_form(request)
    removed = [value for value in form.getlist("removedImages") if isinstance(value, str)]
    updated = properties.update(property_id, vendor.user_id, fields, uploads, removed)
    return DataResponse(message="Property Updated", data=updated)


@router.get(
    "/getProperties",
    summary="Own listings",
    response_model=DataResponse[list[Property]],
)
async def get_own_properties(
    vendor: User = Depends(require_vendor),
    properties: PropertyService = Depends(get_property_service),
) -> DataResponse[list[Property]]:
    return DataResponse(data=properties.list_by_owner(vendor.user_id))


@router.get(
    "/getProperty/{property_id}",
    summary="Own listing details",
    response_model=DataResponse[Property],
    responses={403: {"description": "Not the listing owner"}, 404: {"description": "Property not found"}},
)
async def get_own_property(
    property_id: str,
    vendor: User = Depends(require_vendor),
    properties: PropertyService = Depends(get_property_service),
) -> DataResponse[Property]:
    return DataResponse(data=properties.require_owned(property_id, vendor.user_id))


@router.delete(
    "/deleteProperty/{property_id}",
    summary="Delete listing",
    description="""
Delete an owned listing.

Stored images are removed and every booking on the listing is deleted; the
affected guests receive a notification.
""",
    response_model=SuccessMessage,
    responses={403: {"description": "Not the listing owner"}, 404: {"description": "Property not found"}},
)
async def delete_property(
    property_id: str,
    vendor: User = Depends(require_vendor),
    properties: PropertyService = Depends(get_property_service),
) -> SuccessMessage:
    properties.delete(property_id, owner_id=vendor.user_id)
    return SuccessMessage(message="Property deleted successfully")
