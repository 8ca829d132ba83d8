"""Ports, result envelope and application state."""
