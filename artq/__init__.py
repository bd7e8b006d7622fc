"""artq: compile glob patterns into artifact repository item queries."""

__version__ = "0.1.0"
