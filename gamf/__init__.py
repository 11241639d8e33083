"""GitHub App Manifest flow broker."""

__version__ = "0.1.0"
