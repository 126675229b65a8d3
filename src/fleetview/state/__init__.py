"""State layer.

This package is the single source of truth for how feed events and user
actions are merged into the live fleet snapshot and the view state
derived from it (alerts, trail, selection, filtered list).
"""
