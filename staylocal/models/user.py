"""User model: authentication, profile and role."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from staylocal.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from staylocal.models.enums import Role


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A traveler, host or platform administrator."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default=Role.traveler.value, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def role_enum(self) -> Role:
        return Role(self.role)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
