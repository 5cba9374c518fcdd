"""Shrike Guard interception package.

  - extract.py     — per-provider user-content extractors (tagged-union dispatch)
  - interceptor.py — PENDING_SCAN → BLOCKED | FORWARDED state machine shared by all wrappers
"""
