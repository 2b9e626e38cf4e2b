"""Role assignments for user-created repositories."""

__version__ = "0.1.0"
