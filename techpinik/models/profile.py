"""Profile SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from techpinik.core.database import Base, utc_now


class Profile(Base):
    """Back-office role for a user of the hosted auth provider."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="User ID issued by the auth provider",
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), default="user", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Profile {self.email} role={self.role}>"
