"""Broadcast Schedule DB - local cache of Syoboi Calendar schedules and titles."""

__version__ = "0.1.0"
