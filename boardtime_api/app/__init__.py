"""
Application package initializer.

The project is organised into a few logical pieces: ``core`` holds
configuration, persistence and security primitives, ``services`` holds
the meeting, vote ledger and tally logic, ``schemas`` the wire models
and ``api`` the versioned HTTP routers that expose them.
"""

from .main import app  # noqa: F401
