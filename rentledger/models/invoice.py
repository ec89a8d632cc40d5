"""Invoice database models."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, LargeBinary, Numeric, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentledger.core.database import Base
from rentledger.models.enums import ChargeKind, UtilityCategory


def _amount() -> Numeric:
    return Numeric(precision=12, scale=2)


class Invoice(Base):
    """Bill for the period between a state and its predecessor.

    Prices are copied into the invoice lines when the invoice is issued, so
    later rate changes never alter an issued invoice.
    """

    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Foreign keys
    rent_id: Mapped[int] = mapped_column(ForeignKey("rents.id"), index=True)
    state_id: Mapped[int] = mapped_column(ForeignKey("states.id"), unique=True)
    previous_state_id: Mapped[int] = mapped_column(ForeignKey("states.id"))
    rate_id: Mapped[int] = mapped_column(ForeignKey("rates.id"))

    total_net: Mapped[Decimal] = mapped_column(_amount())
    total_vat: Mapped[Decimal] = mapped_column(_amount())
    total_gross: Mapped[Decimal] = mapped_column(_amount())

    landlord_comment: Mapped[str | None] = mapped_column(String(255), nullable=True)
    document: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_distributed: Mapped[bool] = mapped_column(default=False)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    lines: Mapped[list["InvoiceLine"]] = relationship(
        order_by="InvoiceLine.position",
        cascade="all, delete-orphan",
    )


class InvoiceLine(Base):
    """One priced charge of an invoice."""

    __tablename__ = "invoice_lines"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    invoice_id: Mapped[int] = mapped_column(
        ForeignKey("invoices.id", ondelete="CASCADE"), index=True
    )
    position: Mapped[int] = mapped_column(SmallInteger)
    kind: Mapped[ChargeKind] = mapped_column(String(20))
    category: Mapped[UtilityCategory | None] = mapped_column(String(20), nullable=True)

    # Metered lines only
    previous_value: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=12, scale=3), nullable=True
    )
    current_value: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=12, scale=3), nullable=True
    )
    consumption: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=12, scale=3), nullable=True
    )

    unit_price: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=4))
    vat_rate: Mapped[Decimal] = mapped_column(Numeric(precision=5, scale=2))
    net_amount: Mapped[Decimal] = mapped_column(_amount())
    vat_amount: Mapped[Decimal] = mapped_column(_amount())
    gross_amount: Mapped[Decimal] = mapped_column(_amount())
