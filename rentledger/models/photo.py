"""Photo database model - evidence images for a state's meter readings."""

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from rentledger.core.database import Base
from rentledger.models.enums import UtilityCategory

_IMAGE_COLUMNS = {
    UtilityCategory.COLD_WATER: ("cold_water_photo", "cold_water_exif"),
    UtilityCategory.HOT_WATER: ("hot_water_photo", "hot_water_exif"),
    UtilityCategory.GAS: ("gas_photo", "gas_exif"),
    UtilityCategory.ENERGY: ("energy_photo", "energy_exif"),
    UtilityCategory.HEAT: ("heat_photo", "heat_exif"),
}


class Photo(Base):
    """Meter photos of one state, one image per utility."""

    __tablename__ = "photos"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    state_id: Mapped[int] = mapped_column(ForeignKey("states.id"), unique=True)

    cold_water_photo: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    hot_water_photo: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    gas_photo: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    energy_photo: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    heat_photo: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)

    # Capture time read from the image EXIF data
    cold_water_exif: Mapped[datetime | None] = mapped_column(nullable=True)
    hot_water_exif: Mapped[datetime | None] = mapped_column(nullable=True)
    gas_exif: Mapped[datetime | None] = mapped_column(nullable=True)
    energy_exif: Mapped[datetime | None] = mapped_column(nullable=True)
    heat_exif: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def get_image(self, category: UtilityCategory) -> tuple[bytes | None, datetime | None]:
        """Return the image and its EXIF capture time for a utility."""
        image_column, exif_column = _IMAGE_COLUMNS[category]
        return getattr(self, image_column), getattr(self, exif_column)

    def set_image(
        self,
        category: UtilityCategory,
        content: bytes,
        taken_at: datetime | None,
    ) -> None:
        """Store the image of a utility, replacing any earlier one."""
        image_column, exif_column = _IMAGE_COLUMNS[category]
        setattr(self, image_column, content)
        setattr(self, exif_column, taken_at)

    def get_categories(self) -> list[UtilityCategory]:
        """Utilities that have an image stored."""
        return [c for c, (column, _) in _IMAGE_COLUMNS.items() if getattr(self, column) is not None]
