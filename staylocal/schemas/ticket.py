"""Pydantic v2 request/response schemas for support tickets."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from staylocal.models.enums import TicketCategory, TicketPriority, TicketStatus

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TicketCreate(BaseModel):
    """Open a ticket; ``message`` becomes the first entry of the thread."""

    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    category: TicketCategory = TicketCategory.other
    priority: TicketPriority = TicketPriority.medium


class TicketReply(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)


class TicketStatusUpdate(BaseModel):
    status: TicketStatus


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TicketMessageResponse(BaseModel):
    id: uuid.UUID
    sender_id: uuid.UUID
    sender_role: str
    message: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TicketResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    subject: str
    category: str
    priority: str
    status: str
    messages: list[TicketMessageResponse]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TicketListResponse(BaseModel):
    items: list[TicketResponse]
    total: int
    page: int
    pages: int
