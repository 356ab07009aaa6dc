"""Tests for the notification emitter and the recipient-side queries."""

import uuid
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from staylocal.errors import NotFoundError
from staylocal.models.enums import NotificationType
from staylocal.models.notification import Notification
from staylocal.services import notification_service as svc


async def _send(db, recipient, **overrides):
    values = {
        "recipient_id": recipient.id,
        "type": NotificationType.system_message,
        "title": "Hello",
        "message": "Welcome to StayLocal",
    }
    values.update(overrides)
    return await svc.notify(db, **values)


class TestNotify:
    async def test_persists_unread(self, db_session, traveler, admin):
        notification = await _send(db_session, traveler, sender_id=admin.id)
        assert notification is not None
        assert notification.is_read is False
        assert notification.read_at is None
        assert notification.type == "system_message"
        assert notification.sender_id == admin.id

    async def test_long_text_is_clipped(self, db_session, traveler):
        notification = await _send(db_session, traveler, title="t" * 150, message="m" * 600)
        assert len(notification.title) == svc.TITLE_MAX_LENGTH
        assert len(notification.message) == svc.MESSAGE_MAX_LENGTH

    async def test_failure_is_swallowed(self, db_session, traveler, caplog):
        with patch.object(db_session, "begin_nested", side_effect=RuntimeError("database is down")):
            result = await _send(db_session, traveler)

        assert result is None
        assert "Failed to create system_message notification" in caplog.text
        count = (await db_session.execute(select(func.count()).select_from(Notification))).scalar_one()
        assert count == 0

    async def test_failed_insert_keeps_outer_transaction(self, db_session, traveler):
        """A notification for a missing user fails alone; earlier work survives."""
        kept = await _send(db_session, traveler, title="kept")
        dropped = await _send(db_session, traveler, recipient_id=uuid.uuid4(), title="dropped")

        assert kept is not None
        assert dropped is None
        titles = (await db_session.execute(select(Notification.title))).scalars().all()
        assert titles == ["kept"]


class TestInbox:
    async def test_list_and_unread_count(self, db_session, traveler, host):
        for i in range(3):
            await _send(db_session, traveler, title=f"n{i}")
        await _send(db_session, host)

        page = await svc.list_notifications(db_session, traveler.id)
        assert page.total == 3
        assert page.unread_count == 3
        assert {n.recipient_id for n in page.items} == {traveler.id}

    async def test_mark_read_is_idempotent(self, db_session, traveler):
        notification = await _send(db_session, traveler)
        await svc.mark_read(db_session, notification.id, traveler.id)
        first_read_at = notification.read_at
        assert notification.is_read is True
        assert first_read_at is not None

        await svc.mark_read(db_session, notification.id, traveler.id)
        assert notification.read_at == first_read_at

    async def test_unread_filter(self, db_session, traveler):
        read = await _send(db_session, traveler, title="read")
        await _send(db_session, traveler, title="unread")
        await svc.mark_read(db_session, read.id, traveler.id)

        page = await svc.list_notifications(db_session, traveler.id, unread_only=True)
        assert [n.title for n in page.items] == ["unread"]
        assert page.unread_count == 1

    async def test_someone_elses_notification_is_not_found(self, db_session, traveler, host):
        notification = await _send(db_session, traveler)
        with pytest.raises(NotFoundError):
            await svc.mark_read(db_session, notification.id, host.id)
        with pytest.raises(NotFoundError):
            await svc.delete_notification(db_session, notification.id, host.id)

    async def test_bulk_operations_only_touch_own(self, db_session, traveler, host):
        await _send(db_session, traveler)
        await _send(db_session, traveler)
        await _send(db_session, host)

        assert await svc.mark_all_read(db_session, traveler.id) == 2
        assert await svc.mark_all_read(db_session, traveler.id) == 0
        assert (await svc.list_notifications(db_session, host.id)).unread_count == 1

        assert await svc.delete_all(db_session, traveler.id) == 2
        assert (await svc.list_notifications(db_session, traveler.id)).total == 0
        assert (await svc.list_notifications(db_session, host.id)).total == 1
