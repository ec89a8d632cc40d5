"""State API routes: confirmation, correction, invoicing and meter photos."""

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session

from rentledger.core.config import settings
from rentledger.core.database import get_db
from rentledger.models.enums import UtilityCategory
from rentledger.schemas.invoice import InvoiceIssue, InvoiceResponse
from rentledger.schemas.photo import PhotoResponse
from rentledger.schemas.state import StateCorrection, StateResponse
from rentledger.services import invoicing, state_ledger
from rentledger.services import photo as photo_service

router = APIRouter(prefix="/states", tags=["states"])


@router.get("/{state_id}", response_model=StateResponse)
def get_state(state_id: int, db: Session = Depends(get_db)):
    """Get a state by ID."""
    return state_ledger.get_state(db, state_id)


@router.get("/{state_id}/previous", response_model=StateResponse)
def get_previous_state(state_id: int, db: Session = Depends(get_db)):
    """Get the state this one is billed against."""
    return state_ledger.previous_state(db, state_id)


@router.post("/{state_id}/confirm", response_model=StateResponse)
def confirm_state(state_id: int, db: Session = Depends(get_db)):
    """Confirm the readings of a state."""
    return state_ledger.confirm_state(db, state_id)


@router.put("/{state_id}", response_model=StateResponse)
def correct_state(
    state_id: int,
    correction: StateCorrection,
    db: Session = Depends(get_db),
):
    """Replace the readings of the latest, not yet invoiced state."""
    return state_ledger.correct_state(db, state_id, correction.to_mapping())


@router.delete("/{state_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_state(state_id: int, db: Session = Depends(get_db)) -> None:
    """Delete the latest state of a rent."""
    state_ledger.delete_state(db, state_id)


@router.post("/{state_id}/invoice", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
def issue_invoice(
    state_id: int,
    issue: InvoiceIssue | None = None,
    db: Session = Depends(get_db),
):
    """Bill a confirmed state against its predecessor."""
    return invoicing.issue_invoice(db, state_id, issue.landlord_comment if issue else None)


@router.get("/{state_id}/photos", response_model=PhotoResponse)
def get_photos(state_id: int, db: Session = Depends(get_db)):
    """List which meter photos a state has."""
    photo = photo_service.get_photo(db, state_id)
    return PhotoResponse(
        id=photo.id,
        state_id=photo.state_id,
        categories=photo.get_categories(),
        created_at=photo.created_at,
    )


@router.put("/{state_id}/photos/{category}", response_model=PhotoResponse)
def upload_photo(
    state_id: int,
    category: UtilityCategory,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Upload the meter photo of one utility."""
    content = file.file.read(settings.MAX_PHOTO_BYTES + 1)
    photo = photo_service.upload_photo(db, state_id, category, content)
    return PhotoResponse(
        id=photo.id,
        state_id=photo.state_id,
        categories=photo.get_categories(),
        created_at=photo.created_at,
    )


@router.get("/{state_id}/photos/{category}")
def download_photo(
    state_id: int,
    category: UtilityCategory,
    db: Session = Depends(get_db),
) -> Response:
    """Download the meter photo of one utility."""
    content, taken_at = photo_service.download_photo(db, state_id, category)
    headers = {"X-Taken-At": taken_at.isoformat()} if taken_at else None
    return Response(content=content, media_type="application/octet-stream", headers=headers)
