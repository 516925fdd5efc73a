"""CLI commands for modlists."""
