"""
Persisted user settings for the studio.
"""

from .preferences import Language, Preferences, Profile

__all__ = ["Language", "Preferences", "Profile"]
