"""
ClairOS household organizer service.

The package exposes the shopping list API, grocery category inference, timers,
client preferences and the authenticated upload gateway.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
