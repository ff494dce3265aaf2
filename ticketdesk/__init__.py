"""Conversational match ticket booking: dialog state machine plus seat inventory."""

__version__ = "0.1.0"
