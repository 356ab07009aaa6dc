"""Pydantic v2 response schemas for notification endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationSender(BaseModel):
    id: uuid.UUID
    name: str
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationResponse(BaseModel):
    id: uuid.UUID
    recipient_id: uuid.UUID
    sender: NotificationSender | None = None
    type: str
    title: str
    message: str
    related_property_id: uuid.UUID | None = None
    related_reservation_id: uuid.UUID | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    """Paginated notifications plus the recipient's total unread count."""

    items: list[NotificationResponse]
    total: int
    unread_count: int
    page: int
    pages: int
