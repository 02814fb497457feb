"""Discord dictionary bot: interactions webhook and queue-backed worker."""

__version__ = "0.1.0"
