"""SQLAlchemy models for StayLocal.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from staylocal.models.notification import Notification
from staylocal.models.property import Property
from staylocal.models.reservation import Reservation
from staylocal.models.ticket import Ticket, TicketMessage
from staylocal.models.user import User

__all__ = [
    "Notification",
    "Property",
    "Reservation",
    "Ticket",
    "TicketMessage",
    "User",
]
