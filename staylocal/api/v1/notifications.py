"""Notification inbox routes. Every route is scoped to the caller's own notifications."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.api.deps import Pagination, get_current_user, get_db, get_pagination
from staylocal.models.user import User
from staylocal.schemas.auth import BulkResultResponse, MessageResponse
from staylocal.schemas.notification import NotificationListResponse, NotificationResponse
from staylocal.services import notification_service

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread: bool = Query(False, description="Only unread notifications"),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationListResponse:
    """Newest first, with the caller's total unread count."""
    page = await notification_service.list_notifications(
        db,
        current_user.id,
        unread_only=unread,
        offset=pagination.offset,
        limit=pagination.limit,
    )
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in page.items],
        total=page.total,
        unread_count=page.unread_count,
        page=pagination.page,
        pages=pagination.pages(page.total),
    )


@router.put("/read-all", response_model=BulkResultResponse)
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BulkResultResponse:
    count = await notification_service.mark_all_read(db, current_user.id)
    return BulkResultResponse(message="All notifications marked as read", count=count)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationResponse:
    notification = await notification_service.mark_read(db, notification_id, current_user.id)
    return NotificationResponse.model_validate(notification)


@router.delete("", response_model=BulkResultResponse)
async def delete_all_notifications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BulkResultResponse:
    count = await notification_service.delete_all(db, current_user.id)
    return BulkResultResponse(message="All notifications deleted", count=count)


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    await notification_service.delete_notification(db, notification_id, current_user.id)
    return MessageResponse(message="Notification deleted")
