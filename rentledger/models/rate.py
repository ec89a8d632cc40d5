"""Rate database model - the versioned price list of a property."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, text
from sqlalchemy.orm import Mapped, mapped_column

from rentledger.core.database import Base
from rentledger.models.enums import UtilityCategory

_PRICE_COLUMNS = {
    UtilityCategory.COLD_WATER: "cold_water_price",
    UtilityCategory.HOT_WATER: "hot_water_price",
    UtilityCategory.GAS: "gas_price",
    UtilityCategory.ENERGY: "energy_price",
    UtilityCategory.HEAT: "heat_price",
}

# Cold and hot water share one VAT rate
_VAT_COLUMNS = {
    UtilityCategory.COLD_WATER: "water_vat",
    UtilityCategory.HOT_WATER: "water_vat",
    UtilityCategory.GAS: "gas_vat",
    UtilityCategory.ENERGY: "energy_vat",
    UtilityCategory.HEAT: "heat_vat",
}

_SUBSCRIPTION_COLUMNS = {
    UtilityCategory.GAS: "gas_subscription",
    UtilityCategory.ENERGY: "energy_subscription",
    UtilityCategory.HEAT: "heat_subscription",
}


def _money() -> Numeric:
    return Numeric(precision=12, scale=4)


def _percent() -> Numeric:
    return Numeric(precision=5, scale=2)


class Rate(Base):
    """One version of a property's prices.

    Rows are never edited in place: a price change deactivates the current
    row and inserts a new one, so states keep pointing at the version that
    was in force when they were captured.
    """

    __tablename__ = "rates"
    __table_args__ = (
        Index(
            "uq_rates_active_property",
            "property_id",
            unique=True,
            sqlite_where=text("is_active"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)

    # Flat charges
    landlord_rent: Mapped[Decimal] = mapped_column(_money(), default=Decimal("0"))
    housing_rent: Mapped[Decimal] = mapped_column(_money(), default=Decimal("0"))

    # Unit prices
    cold_water_price: Mapped[Decimal] = mapped_column(_money())
    hot_water_price: Mapped[Decimal | None] = mapped_column(_money(), nullable=True)
    gas_price: Mapped[Decimal | None] = mapped_column(_money(), nullable=True)
    energy_price: Mapped[Decimal] = mapped_column(_money())
    heat_price: Mapped[Decimal | None] = mapped_column(_money(), nullable=True)

    # Monthly subscriptions
    gas_subscription: Mapped[Decimal | None] = mapped_column(_money(), nullable=True)
    energy_subscription: Mapped[Decimal | None] = mapped_column(_money(), nullable=True)
    heat_subscription: Mapped[Decimal | None] = mapped_column(_money(), nullable=True)

    # VAT in percent (23 means 23%)
    landlord_rent_vat: Mapped[Decimal | None] = mapped_column(_percent(), nullable=True)
    housing_rent_vat: Mapped[Decimal | None] = mapped_column(_percent(), nullable=True)
    water_vat: Mapped[Decimal | None] = mapped_column(_percent(), nullable=True)
    gas_vat: Mapped[Decimal | None] = mapped_column(_percent(), nullable=True)
    energy_vat: Mapped[Decimal | None] = mapped_column(_percent(), nullable=True)
    heat_vat: Mapped[Decimal | None] = mapped_column(_percent(), nullable=True)

    # Versioning
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    superseded_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def get_unit_price(self, category: UtilityCategory) -> Decimal | None:
        """Price per unit of consumption, None when the rate has no price."""
        return getattr(self, _PRICE_COLUMNS[category])

    def get_unpriced(self, utilities: frozenset[UtilityCategory]) -> list[UtilityCategory]:
        """Utilities among ``utilities`` this rate has no unit price for, in enum order."""
        return [c for c in UtilityCategory if c in utilities and self.get_unit_price(c) is None]

    def get_vat_rate(self, category: UtilityCategory) -> Decimal | None:
        """VAT percentage applied to a utility and its subscription."""
        return getattr(self, _VAT_COLUMNS[category])

    def get_subscription(self, category: UtilityCategory) -> Decimal | None:
        """Fixed monthly fee, None for unsubscribed or fee-less categories."""
        column = _SUBSCRIPTION_COLUMNS.get(category)
        return getattr(self, column) if column else None
