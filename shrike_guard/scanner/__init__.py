"""Shrike Guard scanner package.

Provides the remote scan pipeline: verdict vocabulary tables (definitions.py),
the IP-protection sanitizer (sanitizer.py) and the async scan transport with
its fail-open/fail-closed policy (transport.py).
"""
