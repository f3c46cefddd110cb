"""Task tracking backend with attachments and a cached user directory."""

__version__ = "0.1.0"
