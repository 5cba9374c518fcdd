"""Shrike Guard utilities: structured logging and trace identifiers."""
