"""Photo service: meter images attached to a state."""

import logging
from datetime import datetime
from io import BytesIO

from PIL import Image, UnidentifiedImageError
from sqlalchemy.orm import Session

from rentledger.core.config import settings
from rentledger.core.errors import NotFoundError, ValidationError
from rentledger.models.enums import UtilityCategory
from rentledger.models.photo import Photo
from rentledger.services.state_ledger import get_state

logger = logging.getLogger(__name__)

_EXIF_IFD = 0x8769
_DATETIME_ORIGINAL = 36867
_DATETIME = 306
_EXIF_FORMAT = "%Y:%m:%d %H:%M:%S"


def read_capture_time(content: bytes) -> datetime | None:
    """Return the EXIF capture time of an image, None when it carries none.

    Raises ValidationError when the content is not a readable image.
    """
    try:
        with Image.open(BytesIO(content)) as image:
            exif = image.getexif()
    except UnidentifiedImageError as exc:
        raise ValidationError("Uploaded file is not an image") from exc

    raw = exif.get_ifd(_EXIF_IFD).get(_DATETIME_ORIGINAL) or exif.get(_DATETIME)
    if not raw:
        return None
    try:
        return datetime.strptime(str(raw).strip("\x00 "), _EXIF_FORMAT)
    except ValueError:
        logger.warning("Ignoring malformed EXIF time %r", raw)
        return None


def get_photo(db: Session, state_id: int) -> Photo:
    """Get the photo record of a state."""
    photo = db.query(Photo).filter(Photo.state_id == state_id).first()
    if not photo:
        raise NotFoundError(f"State {state_id} has no photos")
    return photo


def upload_photo(
    db: Session,
    state_id: int,
    category: UtilityCategory,
    content: bytes,
) -> Photo:
    """Attach the meter image of one utility to a state, replacing an earlier one."""
    state = get_state(db, state_id)
    if state.is_initial:
        raise ValidationError("The initial state takes no photos")
    if category not in state.get_readings():
        raise ValidationError(f"State {state_id} has no {category.value} reading")
    if not content:
        raise ValidationError("Uploaded file is empty")
    if len(content) > settings.MAX_PHOTO_BYTES:
        raise ValidationError(f"Photo exceeds {settings.MAX_PHOTO_BYTES} bytes")

    taken_at = read_capture_time(content)

    photo = db.query(Photo).filter(Photo.state_id == state_id).first()
    if not photo:
        photo = Photo(state_id=state_id)
        db.add(photo)
    photo.set_image(category, content, taken_at)

    db.commit()
    db.refresh(photo)
    logger.info("Stored %s photo for state %s", category.value, state_id)
    return photo


def download_photo(
    db: Session,
    state_id: int,
    category: UtilityCategory,
) -> tuple[bytes, datetime | None]:
    """Return the image of one utility and its capture time."""
    content, taken_at = get_photo(db, state_id).get_image(category)
    if content is None:
        raise NotFoundError(f"State {state_id} has no {category.value} photo")
    return content, taken_at
