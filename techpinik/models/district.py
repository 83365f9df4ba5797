"""District SQLAlchemy model."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from techpinik.core.database import Base, utc_now


class District(Base):
    """Delivery district with its flat delivery charge."""

    __tablename__ = "districts"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="District name; uniqueness is also checked case-insensitively",
    )
    delivery_charge: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        default=Decimal("0"),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=utc_now,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<District {self.name} charge={self.delivery_charge}>"
