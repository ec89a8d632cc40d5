"""State database model - one meter-reading snapshot in a rent's ledger."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from rentledger.core.database import Base
from rentledger.models.enums import UtilityCategory

_REGISTER_COLUMNS = {
    UtilityCategory.COLD_WATER: "cold_water",
    UtilityCategory.HOT_WATER: "hot_water",
    UtilityCategory.GAS: "gas",
    UtilityCategory.ENERGY: "energy",
    UtilityCategory.HEAT: "heat",
}


def _register() -> Numeric:
    return Numeric(precision=12, scale=3)


class State(Base):
    """Cumulative register values of all meters of a rented property."""

    __tablename__ = "states"
    __table_args__ = (
        UniqueConstraint("rent_id", "sequence", name="uq_states_rent_sequence"),
        Index(
            "uq_states_initial_per_rent",
            "rent_id",
            unique=True,
            sqlite_where=text("is_initial"),
            postgresql_where=text("is_initial"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    rent_id: Mapped[int] = mapped_column(ForeignKey("rents.id"), index=True)

    # Insertion order within the rent; authoritative over created_at
    sequence: Mapped[int] = mapped_column()

    # Register values, NULL when the property has no such utility
    cold_water: Mapped[Decimal] = mapped_column(_register())
    hot_water: Mapped[Decimal | None] = mapped_column(_register(), nullable=True)
    gas: Mapped[Decimal | None] = mapped_column(_register(), nullable=True)
    energy: Mapped[Decimal] = mapped_column(_register())
    heat: Mapped[Decimal | None] = mapped_column(_register(), nullable=True)

    is_initial: Mapped[bool] = mapped_column(default=False)
    is_confirmed: Mapped[bool] = mapped_column(default=False)

    # Rate version active when the readings were captured
    rate_id: Mapped[int | None] = mapped_column(ForeignKey("rates.id"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def get_readings(self) -> dict[UtilityCategory, Decimal]:
        """Return the register values of the utilities this state measures."""
        readings: dict[UtilityCategory, Decimal] = {}
        for category, column in _REGISTER_COLUMNS.items():
            value = getattr(self, column)
            if value is not None:
                readings[category] = value
        return readings

    def set_readings(self, readings: dict[UtilityCategory, Decimal]) -> None:
        """Replace all register values; categories not given become NULL."""
        for category, column in _REGISTER_COLUMNS.items():
            setattr(self, column, readings.get(category))
