"""Property database model."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rentledger.core.database import Base
from rentledger.models.enums import ALWAYS_APPLICABLE, UtilityCategory


class Property(Base):
    """Rentable flat with its utility availability flags."""

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    flat_label: Mapped[str] = mapped_column(String(255))
    room_count: Mapped[int] = mapped_column(SmallInteger)
    flat_size: Mapped[Decimal] = mapped_column(Numeric(precision=8, scale=2))
    has_gas: Mapped[bool] = mapped_column(default=False)
    has_hot_water: Mapped[bool] = mapped_column(default=False)
    has_heat: Mapped[bool] = mapped_column(default=False)
    landlord_comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Foreign keys
    landlord_id: Mapped[int] = mapped_column(ForeignKey("landlords.id"), index=True)
    address_id: Mapped[int] = mapped_column(ForeignKey("addresses.id"), unique=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
    is_deleted: Mapped[bool] = mapped_column(default=False)

    def get_utilities(self) -> frozenset[UtilityCategory]:
        """Return the utility categories billed for this property."""
        optional = {
            UtilityCategory.HOT_WATER: self.has_hot_water,
            UtilityCategory.GAS: self.has_gas,
            UtilityCategory.HEAT: self.has_heat,
        }
        return ALWAYS_APPLICABLE | {category for category, present in optional.items() if present}
