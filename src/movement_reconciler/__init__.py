"""Bank movement validation against balance control points."""

__version__ = "1.0.0"
