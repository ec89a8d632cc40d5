"""Invoicing service: issuing, distributing and removing stored invoices."""

import logging

from sqlalchemy.orm import Session

from rentledger.core.database import commit_or_conflict
from rentledger.core.errors import NotFoundError, ValidationError
from rentledger.models.invoice import Invoice, InvoiceLine
from rentledger.services.invoice_calculator import compute_invoice
from rentledger.services.rate_catalog import get_rate
from rentledger.services.state_ledger import claim_ledger, get_state, lock_rent, previous_state

logger = logging.getLogger(__name__)


def get_invoice(db: Session, invoice_id: int) -> Invoice:
    """Get an invoice by ID."""
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if not invoice:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    return invoice


def get_invoice_for_state(db: Session, state_id: int) -> Invoice | None:
    return db.query(Invoice).filter(Invoice.state_id == state_id).first()


def get_invoices_for_rent(db: Session, rent_id: int) -> list[Invoice]:
    """Invoices of a rent, oldest first."""
    return (
        db.query(Invoice)
        .filter(Invoice.rent_id == rent_id)
        .order_by(Invoice.id)
        .all()
    )


def issue_invoice(
    db: Session,
    state_id: int,
    landlord_comment: str | None = None,
) -> Invoice:
    """Compute and store the invoice of a state, exactly once.

    The state is billed against its predecessor with the rate that was active
    when the state was captured. Raises ValidationError for the initial state,
    an unconfirmed state or one that already has an invoice, NotFoundError when
    the state was captured before the property had any rate.
    """
    state = get_state(db, state_id)
    rent = lock_rent(db, state.rent_id)
    try:
        if rent.is_deleted:
            raise ValidationError(f"Rent {rent.id} is deleted")
        if state.is_initial:
            raise ValidationError("The initial state cannot be billed")
        if not state.is_confirmed:
            raise ValidationError(f"State {state_id} is not confirmed")
        if get_invoice_for_state(db, state_id):
            raise ValidationError(f"State {state_id} is already invoiced")
        if state.rate_id is None:
            raise NotFoundError(f"State {state_id} was captured before the property had a rate")
        draft = compute_invoice(state, previous_state(db, state_id), get_rate(db, state.rate_id))
    except (ValidationError, NotFoundError) as exc:
        db.rollback()
        logger.warning("Rejected invoice for state %s: %s", state_id, exc.message)
        raise

    claim_ledger(db, rent)
    invoice = Invoice(
        rent_id=draft.rent_id,
        state_id=draft.state_id,
        previous_state_id=draft.previous_state_id,
        rate_id=draft.rate_id,
        total_net=draft.total_net,
        total_vat=draft.total_vat,
        total_gross=draft.total_gross,
        landlord_comment=landlord_comment,
        lines=[
            InvoiceLine(position=position, **line.model_dump())
            for position, line in enumerate(draft.lines)
        ],
    )
    db.add(invoice)
    commit_or_conflict(db, f"State {state_id} is already invoiced")
    db.refresh(invoice)
    logger.info(
        "Issued invoice %s for state %s of rent %s: gross %s",
        invoice.id,
        state_id,
        rent.id,
        invoice.total_gross,
    )
    return invoice


def mark_distributed(db: Session, invoice_id: int) -> Invoice:
    """Record that the invoice was handed to the tenant."""
    invoice = get_invoice(db, invoice_id)
    if not invoice.is_distributed:
        invoice.is_distributed = True
        db.commit()
        db.refresh(invoice)
        logger.info("Marked invoice %s as distributed", invoice_id)
    return invoice


def attach_document(db: Session, invoice_id: int, file_name: str, content: bytes) -> Invoice:
    """Store the rendered document of an invoice that was not yet distributed."""
    invoice = get_invoice(db, invoice_id)
    if invoice.is_distributed:
        logger.warning("Rejected document for distributed invoice %s", invoice_id)
        raise ValidationError(f"Invoice {invoice_id} was already distributed")
    if not content:
        raise ValidationError("Document is empty")
    invoice.document = content
    invoice.file_name = file_name
    db.commit()
    db.refresh(invoice)
    logger.info("Attached document %s to invoice %s", file_name, invoice_id)
    return invoice


def get_document(db: Session, invoice_id: int) -> tuple[str, bytes]:
    invoice = get_invoice(db, invoice_id)
    if invoice.document is None:
        raise NotFoundError(f"Invoice {invoice_id} has no document")
    return invoice.file_name or f"invoice-{invoice_id}", invoice.document


def delete_invoice(db: Session, invoice_id: int) -> None:
    """Remove an invoice that was not yet distributed, so its state can be corrected."""
    invoice = get_invoice(db, invoice_id)
    rent = lock_rent(db, invoice.rent_id)
    if invoice.is_distributed:
        db.rollback()
        logger.warning("Rejected deletion of distributed invoice %s", invoice_id)
        raise ValidationError(f"Invoice {invoice_id} was already distributed")

    claim_ledger(db, rent)
    db.delete(invoice)
    commit_or_conflict(db, f"Ledger of rent {rent.id} was modified concurrently")
    logger.info("Deleted invoice %s of rent %s", invoice_id, rent.id)
