"""Closed vocabularies shared by models, schemas and services.

Values are stored as plain strings; the ``str`` mixin keeps comparisons with
column values working in both directions.
"""

import enum


class Role(str, enum.Enum):
    traveler = "traveler"
    host = "host"
    admin = "admin"


class PropertyType(str, enum.Enum):
    villa = "villa"
    apartment = "apartment"
    suite = "suite"
    eco_lodge = "eco-lodge"
    cabin = "cabin"
    hotel = "hotel"
    house = "house"
    cottage = "cottage"
    room = "room"
    eco = "eco"


class Amenity(str, enum.Enum):
    wifi = "wifi"
    parking = "parking"
    pool = "pool"
    kitchen = "kitchen"
    ac = "ac"
    heating = "heating"
    tv = "tv"
    washer = "washer"
    dryer = "dryer"
    balcony = "balcony"
    garden = "garden"
    bbq = "bbq"
    gym = "gym"
    hot_tub = "hot-tub"
    fireplace = "fireplace"
    beach_access = "beach-access"
    mountain_view = "mountain-view"
    pet_friendly = "pet-friendly"


class ReservationStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"
    rejected = "rejected"


# Statuses that hold the dates; everything else frees them.
BLOCKING_STATUSES = (ReservationStatus.pending, ReservationStatus.confirmed)

# Statuses that count as earned revenue in reports.
REVENUE_STATUSES = (ReservationStatus.confirmed, ReservationStatus.completed)


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"
    refunded = "refunded"
    failed = "failed"


class NotificationType(str, enum.Enum):
    reservation_request = "reservation_request"
    reservation_confirmed = "reservation_confirmed"
    reservation_cancelled = "reservation_cancelled"
    reservation_completed = "reservation_completed"
    new_review = "new_review"
    property_approved = "property_approved"
    property_rejected = "property_rejected"
    payment_received = "payment_received"
    payment_refunded = "payment_refunded"
    system_message = "system_message"


class TicketCategory(str, enum.Enum):
    bug = "bug"
    feature = "feature"
    complaint = "complaint"
    question = "question"
    other = "other"


class TicketPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class TicketStatus(str, enum.Enum):
    open = "open"
    in_progress = "in-progress"
    resolved = "resolved"
    closed = "closed"


class SenderRole(str, enum.Enum):
    user = "user"
    admin = "admin"
