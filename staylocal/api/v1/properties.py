"""Property listing routes: public search, host CRUD, admin approval."""

import logging
import uuid
from decimal import Decimal
from enum import Enum

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.api.deps import Pagination, get_db, require_admin, require_host
from staylocal.auth.permissions import ensure_owner_or_admin, is_admin
from staylocal.config import settings
from staylocal.errors import NotFoundError
from staylocal.models.enums import Amenity, NotificationType, PropertyType
from staylocal.models.property import Property
from staylocal.models.user import User
from staylocal.schemas.auth import MessageResponse
from staylocal.schemas.property import (
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)
from staylocal.services.notification_service import notify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])

LISTING_PAGE_SIZE = 12


class PropertySort(str, Enum):
    newest = "newest"
    price_asc = "price_asc"
    price_desc = "price_desc"
    rating = "rating"


_SORT_ORDER = {
    PropertySort.newest: Property.created_at.desc(),
    PropertySort.price_asc: Property.price_per_night.asc(),
    PropertySort.price_desc: Property.price_per_night.desc(),
    PropertySort.rating: Property.rating_average.desc(),
}


def _column_values(body: PropertyCreate | PropertyUpdate, *, partial: bool) -> dict:
    """Request body as plain column values (enum members become their strings)."""
    values = body.model_dump(exclude_unset=partial)
    if values.get("property_type") is not None:
        values["property_type"] = values["property_type"].value
    if values.get("amenities") is not None:
        values["amenities"] = [a.value for a in values["amenities"]]
    return values


async def _get_property(db: AsyncSession, property_id: uuid.UUID) -> Property:
    prop = await db.get(Property, property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    return prop


async def _page(db: AsyncSession, filters: list, order_by, pagination: Pagination) -> PropertyListResponse:
    total = (await db.execute(select(func.count()).select_from(Property).where(*filters))).scalar_one()
    result = await db.execute(
        select(Property)
        .where(*filters)
        .order_by(order_by, Property.id)
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in result.scalars().all()],
        total=total,
        page=pagination.page,
        pages=pagination.pages(total),
    )


def get_listing_pagination(
    page: int = Query(1, ge=1),
    limit: int = Query(LISTING_PAGE_SIZE, ge=1, le=settings.max_page_size),
) -> Pagination:
    return Pagination(page=page, limit=limit)


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------


@router.get("", response_model=PropertyListResponse, summary="Search bookable properties")
async def list_properties(
    search: str | None = Query(None, max_length=100),
    city: str | None = Query(None, max_length=120),
    type: PropertyType | None = Query(None),
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    guests: int | None = Query(None, ge=1),
    bedrooms: int | None = Query(None, ge=0),
    amenities: str | None = Query(None, description="Comma-separated; all must be present"),
    sort: PropertySort = Query(PropertySort.newest),
    pagination: Pagination = Depends(get_listing_pagination),
    db: AsyncSession = Depends(get_db),
) -> PropertyListResponse:
    """Return available, approved properties matching every given filter."""
    filters = [Property.is_available.is_(True), Property.is_approved.is_(True)]

    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                Property.title.ilike(pattern),
                Property.description.ilike(pattern),
                Property.city.ilike(pattern),
            )
        )
    if city:
        filters.append(Property.city.ilike(f"%{city}%"))
    if type is not None:
        filters.append(Property.property_type == type.value)
    if min_price is not None:
        filters.append(Property.price_per_night >= min_price)
    if max_price is not None:
        filters.append(Property.price_per_night <= max_price)
    if guests is not None:
        filters.append(Property.max_guests >= guests)
    if bedrooms is not None:
        filters.append(Property.bedrooms >= bedrooms)
    if amenities:
        # Unknown amenity names are ignored; known ones are matched on the serialised JSON list.
        wanted = [a.strip() for a in amenities.split(",") if a.strip() in Amenity._value2member_map_]
        amenity_text = cast(Property.amenities, String)
        filters.extend(amenity_text.like(f'%"{name}"%') for name in wanted)

    return await _page(db, filters, _SORT_ORDER[sort], pagination)


# ---------------------------------------------------------------------------
# Host / admin views (declared before /{property_id})
# ---------------------------------------------------------------------------


@router.get("/host/mine", response_model=PropertyListResponse, summary="List the caller's properties")
async def list_my_properties(
    pagination: Pagination = Depends(get_listing_pagination),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_host),
) -> PropertyListResponse:
    return await _page(db, [Property.host_id == current_user.id], Property.created_at.desc(), pagination)


@router.get("/admin/pending", response_model=PropertyListResponse, summary="List properties awaiting approval")
async def list_pending_properties(
    pagination: Pagination = Depends(get_listing_pagination),
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> PropertyListResponse:
    return await _page(db, [Property.is_approved.is_(False)], Property.created_at.asc(), pagination)


@router.get("/{property_id}", response_model=PropertyResponse, summary="Get a property by ID")
async def get_property(property_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> PropertyResponse:
    return PropertyResponse.model_validate(await _get_property(db, property_id))


# ---------------------------------------------------------------------------
# Host CRUD
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_host),
) -> PropertyResponse:
    """Create a property hosted by the caller. Admin listings skip the approval queue."""
    prop = Property(
        host_id=current_user.id,
        is_approved=is_admin(current_user),
        **_column_values(body, partial=False),
    )
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    logger.info("Property %s created by %s (approved=%s)", prop.id, current_user.id, prop.is_approved)
    return PropertyResponse.model_validate(prop)


@router.put("/{property_id}", response_model=PropertyResponse, summary="Update a property")
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_host),
) -> PropertyResponse:
    """Partially update a property. Only explicitly set fields are changed."""
    prop = await _get_property(db, property_id)
    ensure_owner_or_admin(current_user, prop.host_id, "Not authorized to update this property")

    for field, value in _column_values(body, partial=True).items():
        if value is None and field not in {"state", "zip_code", "full_address"}:
            continue
        setattr(prop, field, value)

    await db.flush()
    await db.refresh(prop)
    return PropertyResponse.model_validate(prop)


@router.delete("/{property_id}", response_model=MessageResponse, summary="Delete a property")
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_host),
) -> MessageResponse:
    """Delete a property; its reservations are removed with it."""
    prop = await _get_property(db, property_id)
    ensure_owner_or_admin(current_user, prop.host_id, "Not authorized to delete this property")

    await db.delete(prop)
    await db.flush()
    logger.info("Property %s deleted by %s", property_id, current_user.id)
    return MessageResponse(message="Property deleted")


# ---------------------------------------------------------------------------
# Admin approval
# ---------------------------------------------------------------------------


@router.put("/{property_id}/approve", response_model=PropertyResponse, summary="Approve a property")
async def approve_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> PropertyResponse:
    prop = await _get_property(db, property_id)
    prop.is_approved = True
    await db.flush()
    await db.refresh(prop)
    logger.info("Property %s approved by admin %s", prop.id, admin.id)

    await notify(
        db,
        recipient_id=prop.host_id,
        sender_id=admin.id,
        type=NotificationType.property_approved,
        title="Property Approved",
        message=f"Your property {prop.title} has been approved and is now listed",
        related_property_id=prop.id,
    )
    return PropertyResponse.model_validate(prop)
