"""Core infrastructure: bootstrap, logging and error handling."""
