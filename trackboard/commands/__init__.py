"""CLI commands for trackboard."""
