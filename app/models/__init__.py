"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .case import EmergencyCase  # noqa: F401

__all__ = [
    "Base",
    "EmergencyCase",
]
