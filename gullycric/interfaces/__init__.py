"""Command-line frontends."""
