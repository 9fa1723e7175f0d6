"""Command line entry point for the extension base library."""
