"""Gemini, Gopher and Finger fetching behind a single navigate() call."""

from .errors import NavigationError
from .resolver import Resolver, get_start_page, navigate

__version__ = "0.1.0"

__all__ = ["NavigationError", "Resolver", "get_start_page", "navigate", "__version__"]
