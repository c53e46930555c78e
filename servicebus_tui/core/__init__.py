"""Core state machine: resource tree, panes and their coordination."""
