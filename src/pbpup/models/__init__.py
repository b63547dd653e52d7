"""Data models shared by the forum flows."""
