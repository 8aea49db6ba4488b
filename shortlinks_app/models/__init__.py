"""
Database models for the SQL link store.
"""

from .link import Link

__all__ = ["Link"]
