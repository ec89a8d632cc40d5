"""Invoice Pydantic schemas: computed drafts and stored invoices."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from rentledger.models.enums import ChargeKind, UtilityCategory


class InvoiceLineDraft(BaseModel):
    """A priced charge, computed but not yet stored."""

    model_config = ConfigDict(frozen=True)

    kind: ChargeKind
    category: UtilityCategory | None = None
    previous_value: Decimal | None = None
    current_value: Decimal | None = None
    consumption: Decimal | None = None
    unit_price: Decimal
    vat_rate: Decimal
    net_amount: Decimal
    vat_amount: Decimal
    gross_amount: Decimal


class InvoiceDraft(BaseModel):
    """Self-describing result of billing one state against its predecessor."""

    model_config = ConfigDict(frozen=True)

    rent_id: int
    state_id: int
    previous_state_id: int
    rate_id: int
    lines: tuple[InvoiceLineDraft, ...]
    total_net: Decimal
    total_vat: Decimal
    total_gross: Decimal

    def get_line(self, kind: ChargeKind, category: UtilityCategory | None = None) -> InvoiceLineDraft | None:
        """Find the line of a given kind and utility."""
        return next(
            (line for line in self.lines if line.kind == kind and line.category == category),
            None,
        )


class InvoiceIssue(BaseModel):
    """Schema for issuing the invoice of a state."""

    landlord_comment: str | None = Field(default=None, max_length=255)


class InvoiceLineResponse(BaseModel):
    """Schema for a stored invoice line."""

    position: int
    kind: ChargeKind
    category: UtilityCategory | None
    previous_value: Decimal | None
    current_value: Decimal | None
    consumption: Decimal | None
    unit_price: Decimal
    vat_rate: Decimal
    net_amount: Decimal
    vat_amount: Decimal
    gross_amount: Decimal

    model_config = {"from_attributes": True}


class InvoiceResponse(BaseModel):
    """Schema for invoice response; the document itself is served separately."""

    id: int
    rent_id: int
    state_id: int
    previous_state_id: int
    rate_id: int
    total_net: Decimal
    total_vat: Decimal
    total_gross: Decimal
    landlord_comment: str | None
    file_name: str | None
    is_distributed: bool
    created_at: datetime
    lines: list[InvoiceLineResponse]

    model_config = {"from_attributes": True}
