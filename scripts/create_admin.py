"""Create the bootstrap admin account from settings.

Uses ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME (see staylocal.config). If a
user with that e-mail already exists it is promoted to admin and reactivated;
its password is only replaced with ``--reset-password``.

Run:
    python -m scripts.create_admin [--reset-password]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

from staylocal.auth.passwords import hash_password
from staylocal.config import settings
from staylocal.database import async_session_factory, engine
from staylocal.models.enums import Role
from staylocal.models.user import User


async def create_admin(reset_password: bool = False) -> None:
    email = settings.admin_email.lower()
    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None:
            user = User(
                email=email,
                hashed_password=hash_password(settings.admin_password),
                name=settings.admin_name,
                role=Role.admin.value,
                is_active=True,
            )
            session.add(user)
            await session.commit()
            print(f"✅ Created admin user: {email}")
        else:
            user.role = Role.admin.value
            user.is_active = True
            if reset_password:
                user.hashed_password = hash_password(settings.admin_password)
            await session.commit()
            print(f"⚠️  User '{email}' already exists; ensured admin role" + (" and reset password" if reset_password else ""))

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--reset-password", action="store_true", help="Overwrite the existing admin password")
    args = parser.parse_args()
    asyncio.run(create_admin(reset_password=args.reset_password))


if __name__ == "__main__":
    main()
