"""
CRUD helpers for the Auto aggregate.
"""

from .cascade_delete import CascadeDeleteService

__all__ = ["CascadeDeleteService"]
