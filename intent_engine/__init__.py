"""Text-to-transaction intents engine."""

__version__ = "0.1.0"
