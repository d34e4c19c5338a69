"""
Core utilities shared by every Slotkeeper app.

This package holds the exception hierarchy, the DRF exception handler and the
cache key helpers.
"""

__version__ = "1.0.0"
