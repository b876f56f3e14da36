"""
Authentication boundary for the Studio data layer.

The hosted backend owns sign-in; this package only observes its session.
"""

from .session import LOCAL_USER_ID, SessionObserver

__all__ = [
    "LOCAL_USER_ID",
    "SessionObserver",
]
