"""Packaged data files (default settings)."""
