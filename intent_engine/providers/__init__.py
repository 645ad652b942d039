"""Ledger and name service backends."""
