"""Product sales API: seeded product transactions with monthly search and statistics."""

__version__ = "1.0.0"
