"""Ledger, payment lifecycle and audit services."""
