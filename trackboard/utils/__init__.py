"""Utility helpers shared by the trackboard engine and CLI."""
