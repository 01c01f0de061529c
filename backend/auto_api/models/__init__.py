"""
SQLAlchemy ORM Models Package.

- base: Base class and TimestampMixin
- auto: Auto, Engine, Repair, AutoFile
"""

from .base import Base, TimestampMixin
from .auto import Auto, Engine, Repair, AutoFile

__all__ = [
    "Base",
    "TimestampMixin",
    "Auto",
    "Engine",
    "Repair",
    "AutoFile",
]
