"""HTTP intake for reservations and pickup orders."""

from .app import create_app

__all__ = ["create_app"]
