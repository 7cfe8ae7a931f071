"""Command-line interface for Overstory."""
