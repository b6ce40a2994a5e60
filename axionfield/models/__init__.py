"""Data models — geometry, field profiles, configuration and results."""
