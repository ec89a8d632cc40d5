"""Database models."""

from rentledger.models.address import Address
from rentledger.models.invoice import Invoice, InvoiceLine
from rentledger.models.landlord import Landlord
from rentledger.models.photo import Photo
from rentledger.models.property import Property
from rentledger.models.rate import Rate
from rentledger.models.rent import Rent
from rentledger.models.state import State
from rentledger.models.tenant import Tenant

__all__ = [
    "Address",
    "Invoice",
    "InvoiceLine",
    "Landlord",
    "Photo",
    "Property",
    "Rate",
    "Rent",
    "State",
    "Tenant",
]
