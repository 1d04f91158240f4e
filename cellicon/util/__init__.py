"""
Internal helpers for the signal engine.
"""

from .observer_set import ObserverEntry, ObserverSet

__all__ = ["ObserverEntry", "ObserverSet"]
