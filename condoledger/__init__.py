"""Condominium ledger accounts, payment lifecycle and audit trail."""

__version__ = "0.1.0"
