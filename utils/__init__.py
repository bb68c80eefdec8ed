"""Shared helpers for environment, files and logging."""
