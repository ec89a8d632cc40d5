"""Tenant database model."""

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from rentledger.core.database import Base


class Tenant(Base):
    """Party renting a property and receiving invoices."""

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str | None] = mapped_column(String(45), nullable=True)
    surname: Mapped[str | None] = mapped_column(String(45), nullable=True, index=True)
    is_company: Mapped[bool] = mapped_column(default=False)
    company_name: Mapped[str | None] = mapped_column(String(45), nullable=True)
    nip: Mapped[str | None] = mapped_column(String(10), nullable=True)
    pesel: Mapped[str | None] = mapped_column(String(11), nullable=True)
    regon: Mapped[str | None] = mapped_column(String(9), nullable=True)
    phone_prefix: Mapped[str | None] = mapped_column(String(4), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(10), nullable=True)
    bank_account: Mapped[str | None] = mapped_column(String(26), nullable=True)
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    landlord_comment: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Opaque principal id of the external identity provider
    identity_subject: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Foreign keys
    address_id: Mapped[int] = mapped_column(ForeignKey("addresses.id"), unique=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
    is_deleted: Mapped[bool] = mapped_column(default=False)
