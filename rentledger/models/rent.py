"""Rent database model - the tenancy contract."""

from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from rentledger.core.database import Base
from rentledger.models.enums import RentPurpose


class Rent(Base):
    """Contract between a landlord and a tenant for one property."""

    __tablename__ = "rents"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Foreign keys
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id"), index=True)
    landlord_id: Mapped[int] = mapped_column(ForeignKey("landlords.id"), index=True)

    rent_purpose: Mapped[RentPurpose] = mapped_column(String(10))
    start_rent: Mapped[date] = mapped_column(index=True)
    end_rent: Mapped[date] = mapped_column(index=True)
    tenant_count: Mapped[int] = mapped_column(SmallInteger)
    rent_deposit: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2))
    pay_day_delay: Mapped[int] = mapped_column(SmallInteger)
    send_state_day: Mapped[int] = mapped_column(SmallInteger)
    landlord_comment: Mapped[str | None] = mapped_column(String(255), nullable=True)
    photo_required: Mapped[bool] = mapped_column(default=False)

    # Bumped by every ledger write; writers compare-and-swap on it
    ledger_version: Mapped[int] = mapped_column(default=0)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
    is_deleted: Mapped[bool] = mapped_column(default=False)
