"""Javadoc chat bot: command dispatch and interaction state."""

__version__ = "0.3.0"
