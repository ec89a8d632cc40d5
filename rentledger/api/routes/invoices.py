"""Invoice API routes."""

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session

from rentledger.core.database import get_db
from rentledger.schemas.invoice import InvoiceResponse
from rentledger.services import invoicing

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: int, db: Session = Depends(get_db)):
    """Get an invoice with its lines."""
    return invoicing.get_invoice(db, invoice_id)


@router.post("/{invoice_id}/distribute", response_model=InvoiceResponse)
def distribute_invoice(invoice_id: int, db: Session = Depends(get_db)):
    """Mark an invoice as handed to the tenant."""
    return invoicing.mark_distributed(db, invoice_id)


@router.put("/{invoice_id}/document", response_model=InvoiceResponse)
def upload_document(
    invoice_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Attach a rendered document to an undistributed invoice."""
    file_name = file.filename or f"invoice-{invoice_id}"
    return invoicing.attach_document(db, invoice_id, file_name, file.file.read())


@router.get("/{invoice_id}/document")
def download_document(invoice_id: int, db: Session = Depends(get_db)) -> Response:
    """Download the stored document of an invoice."""
    file_name, content = invoicing.get_document(db, invoice_id)
    return Response(
        content=content,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(invoice_id: int, db: Session = Depends(get_db)) -> None:
    """Delete an invoice that was not distributed yet."""
    invoicing.delete_invoice(db, invoice_id)
