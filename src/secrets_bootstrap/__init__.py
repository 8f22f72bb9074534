"""Resolve AWS Secrets Manager references into environment variables and ``.env`` files."""

__version__ = "1.0.0"
