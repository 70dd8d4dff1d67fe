"""FastAPI routers acting as controllers in the MVC architecture."""

from . import cases

__all__ = ["cases"]
