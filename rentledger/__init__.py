"""Rental management backend: rents, meter states, invoices."""
