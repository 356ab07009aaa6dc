"""Seed the database with demo hosts, travelers, listings and reservations.

Idempotent: demo accounts (and, through ON DELETE CASCADE, everything they
own) are removed and re-created on every run.

Run:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete

from staylocal.auth.passwords import hash_password
from staylocal.database import async_session_factory, engine
from staylocal.models.enums import PaymentStatus, ReservationStatus, Role
from staylocal.models.property import Property
from staylocal.models.reservation import Reservation
from staylocal.models.user import User
from staylocal.services.pricing import calculate_price
from staylocal.services.reservation_service import recompute_property_rating

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_PASSWORD = "demo1234"

HOSTS = [
    {"email": "maya.host@staylocal.com", "name": "Maya Fernandes", "phone": "+15035550101"},
    {"email": "tom.host@staylocal.com", "name": "Tom Becker", "phone": "+15035550102"},
]

TRAVELERS = [
    {"email": "emma.traveler@staylocal.com", "name": "Emma Thompson", "phone": "+61412345678"},
    {"email": "james.traveler@staylocal.com", "name": "James Wilson", "phone": None},
    {"email": "yuki.traveler@staylocal.com", "name": "Yuki Tanaka", "phone": "+819012345678"},
]

PROPERTIES = [
    {
        "host": "maya.host@staylocal.com",
        "title": "Cedar Cabin by the Creek",
        "description": "Two-bedroom log cabin with a wood stove, hot tub and a deck over the creek.",
        "property_type": "cabin",
        "city": "Bend",
        "state": "OR",
        "price_per_night": Decimal("145.00"),
        "max_guests": 4,
        "bedrooms": 2,
        "beds": 3,
        "amenities": ["wifi", "parking", "hot-tub", "fireplace", "mountain-view"],
    },
    {
        "host": "maya.host@staylocal.com",
        "title": "Pearl District Loft",
        "description": "Bright open-plan loft within walking distance of galleries and food carts.",
        "property_type": "apartment",
        "city": "Portland",
        "state": "OR",
        "price_per_night": Decimal("110.00"),
        "max_guests": 2,
        "amenities": ["wifi", "kitchen", "washer", "dryer", "ac"],
    },
    {
        "host": "tom.host@staylocal.com",
        "title": "Dune Cottage",
        "description": "Shingled beach cottage with a garden, a barbecue and a path to the sand.",
        "property_type": "cottage",
        "city": "Cannon Beach",
        "state": "OR",
        "price_per_night": Decimal("199.00"),
        "max_guests": 6,
        "bedrooms": 3,
        "beds": 4,
        "bathrooms": 2,
        "amenities": ["wifi", "parking", "garden", "bbq", "beach-access", "pet-friendly"],
    },
]

# (property title, traveler email, check-in offset, nights, guests, status, payment, rating)
RESERVATIONS = [
    ("Cedar Cabin by the Creek", "emma.traveler@staylocal.com", -40, 3, 2, "completed", "paid", 5),
    ("Cedar Cabin by the Creek", "james.traveler@staylocal.com", -20, 4, 4, "completed", "paid", 4),
    ("Cedar Cabin by the Creek", "yuki.traveler@staylocal.com", 10, 2, 2, "confirmed", "paid", None),
    ("Pearl District Loft", "emma.traveler@staylocal.com", 5, 3, 2, "pending", "pending", None),
    ("Pearl District Loft", "yuki.traveler@staylocal.com", -10, 2, 1, "cancelled", "refunded", None),
    ("Dune Cottage", "james.traveler@staylocal.com", -30, 5, 5, "completed", "paid", 5),
    ("Dune Cottage", "yuki.traveler@staylocal.com", 20, 7, 3, "pending", "pending", None),
]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    emails = [u["email"] for u in HOSTS + TRAVELERS]
    async with async_session_factory() as session:
        await session.execute(delete(User).where(User.email.in_(emails)))
        await session.flush()

        users: dict[str, User] = {}
        for role, rows in ((Role.host, HOSTS), (Role.traveler, TRAVELERS)):
            for row in rows:
                user = User(hashed_password=hash_password(DEMO_PASSWORD), role=role.value, **row)
                session.add(user)
                users[row["email"]] = user
        await session.flush()
        print(f"✅ Created {len(users)} users (password: {DEMO_PASSWORD})")

        properties: dict[str, Property] = {}
        for row in PROPERTIES:
            data = dict(row)
            host = users[data.pop("host")]
            prop = Property(host_id=host.id, is_approved=True, **data)
            session.add(prop)
            properties[prop.title] = prop
            print(f"   🏠 {prop.title} ({prop.city}, ${prop.price_per_night}/night)")
        await session.flush()

        today = date.today()
        for title, email, offset, nights, guests, status, payment, rating in RESERVATIONS:
            prop = properties[title]
            price = calculate_price(prop.price_per_night, nights, currency=prop.currency)
            check_in = today + timedelta(days=offset)
            reservation = Reservation(
                property_id=prop.id,
                guest_id=users[email].id,
                host_id=prop.host_id,
                check_in=check_in,
                check_out=check_in + timedelta(days=nights),
                num_guests=guests,
                price_per_night=price.price_per_night,
                nights=price.nights,
                subtotal=price.subtotal,
                service_fee=price.service_fee,
                taxes=price.taxes,
                total=price.total,
                currency=price.currency,
                status=ReservationStatus(status).value,
                payment_status=PaymentStatus(payment).value,
                review_rating=rating,
                refund_amount=price.total if status == "cancelled" else None,
            )
            session.add(reservation)
        await session.flush()

        for prop in properties.values():
            await recompute_property_rating(session, prop.id)

        await session.commit()

        print(f"✅ Created {len(RESERVATIONS)} reservations")
        print("🎉 Done! Log in at /api/v1/auth/login")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
