"""
Error taxonomy shared by the scheduling and standings engines.
"""
from __future__ import annotations


class InvalidInput(ValueError):
    """Input rejected before any output is produced (too few participants, bad result fields)."""
