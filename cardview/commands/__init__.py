"""Command implementations behind the click CLI."""
