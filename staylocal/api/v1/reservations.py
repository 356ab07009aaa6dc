"""Reservation routes: booking, host decisions, cancellation, review, admin overrides."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.api.deps import Pagination, get_current_user, get_db, get_pagination, require_admin, require_host
from staylocal.auth.permissions import ensure_participant_or_admin, is_admin
from staylocal.models.enums import ReservationStatus
from staylocal.models.user import User
from staylocal.schemas.reservation import (
    CancelRequest,
    PaymentStatusUpdate,
    ReservationCreate,
    ReservationDetailResponse,
    ReservationListResponse,
    ReservationResponse,
    ReservationStatusUpdate,
    ReviewCreate,
)
from staylocal.services import reservation_service
from staylocal.services.receipt import receipt_filename, render_receipt_pdf
from staylocal.services.reservation_service import BookingRequest, ReservationPage

router = APIRouter(prefix="/api/v1/reservations", tags=["reservations"])


def _list_response(page: ReservationPage, pagination: Pagination) -> ReservationListResponse:
    return ReservationListResponse(
        items=[ReservationDetailResponse.model_validate(r) for r in page.items],
        total=page.total,
        page=pagination.page,
        pages=pagination.pages(page.total),
    )


# ---------------------------------------------------------------------------
# Booking and listing
# ---------------------------------------------------------------------------


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    body: ReservationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReservationResponse:
    """Request a stay. The reservation starts ``pending`` until the host decides."""
    reservation = await reservation_service.create_reservation(
        db,
        current_user,
        BookingRequest(**body.model_dump()),
    )
    return ReservationResponse.model_validate(reservation)


@router.get("", response_model=ReservationListResponse)
async def list_my_reservations(
    status_filter: ReservationStatus | None = Query(None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReservationListResponse:
    """The caller's own bookings as a guest; admins see every reservation."""
    guest_id = None if is_admin(current_user) else current_user.id
    page = await reservation_service.list_reservations(
        db,
        guest_id=guest_id,
        status=status_filter,
        offset=pagination.offset,
        limit=pagination.limit,
    )
    return _list_response(page, pagination)


@router.get("/host", response_model=ReservationListResponse)
async def list_host_reservations(
    status_filter: ReservationStatus | None = Query(None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_host),
) -> ReservationListResponse:
    """Reservations on the caller's properties."""
    page = await reservation_service.list_reservations(
        db,
        host_id=current_user.id,
        status=status_filter,
        offset=pagination.offset,
        limit=pagination.limit,
    )
    return _list_response(page, pagination)


@router.get("/admin/all", response_model=ReservationListResponse)
async def list_all_reservations(
    status_filter: ReservationStatus | None = Query(None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> ReservationListResponse:
    page = await reservation_service.list_reservations(
        db,
        status=status_filter,
        offset=pagination.offset,
        limit=pagination.limit,
    )
    return _list_response(page, pagination)


@router.get("/{reservation_id}", response_model=ReservationDetailResponse)
async def get_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReservationDetailResponse:
    reservation = await reservation_service.get_reservation_for_participant(db, reservation_id, current_user)
    return ReservationDetailResponse.model_validate(reservation)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@router.put("/{reservation_id}/confirm", response_model=ReservationDetailResponse)
async def confirm_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_host),
) -> ReservationDetailResponse:
    reservation = await reservation_service.confirm_reservation(db, reservation_id, current_user)
    return ReservationDetailResponse.model_validate(reservation)


@router.put("/{reservation_id}/reject", response_model=ReservationDetailResponse)
async def reject_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_host),
) -> ReservationDetailResponse:
    reservation = await reservation_service.reject_reservation(db, reservation_id, current_user)
    return ReservationDetailResponse.model_validate(reservation)


@router.put("/{reservation_id}/cancel", response_model=ReservationDetailResponse)
async def cancel_reservation(
    reservation_id: uuid.UUID,
    body: CancelRequest | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReservationDetailResponse:
    """Cancel as guest, host or admin. The full total is recorded as the refund."""
    reason = body.reason if body is not None else None
    reservation = await reservation_service.cancel_reservation(db, reservation_id, current_user, reason)
    return ReservationDetailResponse.model_validate(reservation)


@router.put("/{reservation_id}/review", response_model=ReservationDetailResponse)
async def add_review(
    reservation_id: uuid.UUID,
    body: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReservationDetailResponse:
    reservation = await reservation_service.add_review(db, reservation_id, current_user, body.rating, body.comment)
    return ReservationDetailResponse.model_validate(reservation)


# ---------------------------------------------------------------------------
# Admin overrides
# ---------------------------------------------------------------------------


@router.put("/{reservation_id}/status", response_model=ReservationDetailResponse)
async def force_status(
    reservation_id: uuid.UUID,
    body: ReservationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ReservationDetailResponse:
    reservation = await reservation_service.force_status(db, reservation_id, admin, body.status)
    return ReservationDetailResponse.model_validate(reservation)


@router.put("/{reservation_id}/payment-status", response_model=ReservationDetailResponse)
async def set_payment_status(
    reservation_id: uuid.UUID,
    body: PaymentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ReservationDetailResponse:
    reservation = await reservation_service.set_payment_status(db, reservation_id, admin, body.payment_status)
    return ReservationDetailResponse.model_validate(reservation)


# ---------------------------------------------------------------------------
# Receipt
# ---------------------------------------------------------------------------


@router.get("/{reservation_id}/receipt", response_class=Response)
async def download_receipt(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    reservation = await reservation_service.get_reservation(db, reservation_id)
    ensure_participant_or_admin(current_user, reservation, "Not authorized to view this receipt")
    return Response(
        content=render_receipt_pdf(reservation),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={receipt_filename(reservation)}"},
    )
