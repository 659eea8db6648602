"""bumpbot — chat-driven build triggering bot."""

__version__ = "0.1.0"
