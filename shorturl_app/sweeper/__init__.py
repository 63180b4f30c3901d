"""
Background maintenance for the URL store.
"""

from .expiry_worker import ExpirySweeper

__all__ = ["ExpirySweeper"]
