"""Address database model."""

from datetime import UTC, datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from rentledger.core.database import Base


class Address(Base):
    """Postal address owned by exactly one property, landlord or tenant."""

    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    country: Mapped[str] = mapped_column(String(45))
    city: Mapped[str] = mapped_column(String(45), index=True)
    street: Mapped[str] = mapped_column(String(100))
    building_number: Mapped[str] = mapped_column(String(10))
    flat_number: Mapped[str | None] = mapped_column(String(10), nullable=True)
    postal_code: Mapped[str] = mapped_column(String(16), index=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
    is_deleted: Mapped[bool] = mapped_column(default=False)
