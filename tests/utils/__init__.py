"""
Test utilities for cellicon.

Shared helpers for driving and observing signals in tests.
"""

from .signals import EventSignal, Recorder

__all__ = ["EventSignal", "Recorder"]
