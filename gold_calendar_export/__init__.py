"""Turn a saved UCSB GOLD schedule page into recurring calendar events."""

__version__ = "0.3.0"
