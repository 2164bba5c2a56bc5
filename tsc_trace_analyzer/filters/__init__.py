"""Event filters."""

from .event_filter import EventFilter

__all__ = ["EventFilter"]
