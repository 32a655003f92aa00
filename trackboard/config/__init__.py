"""Configuration constants and environment settings for trackboard."""
