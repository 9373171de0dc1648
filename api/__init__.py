"""Sale Triage Platform API package."""

__version__ = "0.1.0"
