"""
Version 1 of the API.

This subpackage bundles the meeting and vote endpoints consumed by the
BoardTime front‑end.
"""
