"""Command line interface for codeorbit."""
