"""Applications."""

from .models import App
from .repository import AppRepository

__all__ = ["App", "AppRepository"]
