"""Command-line interface for bootstrap-token."""
