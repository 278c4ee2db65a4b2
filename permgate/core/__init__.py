"""Core engine and settings for permgate."""
