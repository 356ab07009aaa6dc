"""Support ticket routes."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from staylocal.api.deps import Pagination, get_current_user, get_db, get_pagination, require_admin
from staylocal.models.enums import TicketStatus
from staylocal.models.user import User
from staylocal.schemas.auth import MessageResponse
from staylocal.schemas.ticket import (
    TicketCreate,
    TicketListResponse,
    TicketReply,
    TicketResponse,
    TicketStatusUpdate,
)
from staylocal.services import ticket_service

router = APIRouter(prefix="/api/v1/tickets", tags=["tickets"])


@router.get("", response_model=TicketListResponse)
async def list_tickets(
    status_filter: TicketStatus | None = Query(None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TicketListResponse:
    page = await ticket_service.list_tickets(
        db,
        current_user,
        status=status_filter,
        offset=pagination.offset,
        limit=pagination.limit,
    )
    return TicketListResponse(
        items=[TicketResponse.model_validate(t) for t in page.items],
        total=page.total,
        page=pagination.page,
        pages=pagination.pages(page.total),
    )


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(
    ticket_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TicketResponse:
    return TicketResponse.model_validate(await ticket_service.get_ticket_for(db, ticket_id, current_user))


@router.post("", response_model=TicketResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    body: TicketCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TicketResponse:
    ticket = await ticket_service.open_ticket(
        db,
        current_user,
        subject=body.subject,
        message=body.message,
        category=body.category,
        priority=body.priority,
    )
    return TicketResponse.model_validate(ticket)


@router.post("/{ticket_id}/reply", response_model=TicketResponse)
async def reply_to_ticket(
    ticket_id: uuid.UUID,
    body: TicketReply,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TicketResponse:
    ticket = await ticket_service.reply(db, ticket_id, current_user, body.message)
    return TicketResponse.model_validate(ticket)


@router.put("/{ticket_id}/status", response_model=TicketResponse)
async def update_ticket_status(
    ticket_id: uuid.UUID,
    body: TicketStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> TicketResponse:
    ticket = await ticket_service.set_status(db, ticket_id, admin, body.status)
    return TicketResponse.model_validate(ticket)


@router.delete("/{ticket_id}", response_model=MessageResponse)
async def delete_ticket(
    ticket_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> MessageResponse:
    await ticket_service.delete_ticket(db, ticket_id)
    return MessageResponse(message="Ticket deleted")
