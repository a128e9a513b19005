"""Gradle wrapper CI step."""

__version__ = "0.1.0"
