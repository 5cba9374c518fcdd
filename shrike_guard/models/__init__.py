"""Shrike Guard models package.

Defines the shared data contracts used across the scanner and the interception wrappers:

  - verdict.py — ScanVerdict, ThreatType, Severity, Confidence (the public scan contract)
  - block.py   — builders for the blocking error and the local size-limit verdict

These models are the single source of truth for what a caller may ever see of a scan.
"""
