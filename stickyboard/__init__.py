"""StickyBoard: async client for the StickyBoard boards API."""

__version__ = "0.3.0"
