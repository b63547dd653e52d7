"""Command-line interface for pbpup."""
