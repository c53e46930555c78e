"""Screens for the explorer TUI."""
