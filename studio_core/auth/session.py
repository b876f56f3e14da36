# =============================================================================
# studio_core/auth/session.py
# Observer for the hosted backend's authentication session
# =============================================================================
"""
Sign-in, sign-up, OAuth redirects and sign-out all belong to the Supabase auth
surface. This module only watches the session so records can carry an owner id
and the app can react to sign-in / sign-out.

Without a configured backend there is a single local owner, "user-1".
"""

from __future__ import annotations
from typing import Any, Callable, List, Optional

from studio_core.logging import get_logger

logger = get_logger(__name__)

LOCAL_USER_ID = "user-1"

AuthCallback = Callable[[str, Optional[Any]], None]


class SessionObserver:
    """Tracks the current auth session of an optional Supabase client."""

    def __init__(self, client: Optional[Any] = None):
        self.client = client
        self._callbacks: List[AuthCallback] = []
        self._subscription = None

    @property
    def is_local(self) -> bool:
        return self.client is None

    def get_session(self) -> Optional[Any]:
        if self.client is None:
            return None
        try:
            return self.client.auth.get_session()
        except Exception as e:
            logger.debug(f"No auth session available: {e}")
            return None

    def is_signed_in(self) -> bool:
        """Local mode is always signed in as the single owner."""
        if self.client is None:
            return True
        return self.get_session() is not None

    def current_user_id(self) -> str:
        """Id of the signed-in user, or the local owner id."""
        if self.client is None:
            return LOCAL_USER_ID
        try:
            response = self.client.auth.get_user()
            user = getattr(response, "user", None) if response else None
            user_id = getattr(user, "id", None)
            return user_id or LOCAL_USER_ID
        except Exception as e:
            logger.debug(f"Could not resolve signed-in user: {e}")
            return LOCAL_USER_ID

    def subscribe(self, callback: AuthCallback) -> Callable[[], None]:
        """
        Register for auth state changes (event name, session).

        Returns:
            Function that removes the callback again
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

        if self.client is not None and self._subscription is None:
            self._subscription = self.client.auth.on_auth_state_change(self._dispatch)
        elif self.client is None:
            # Local mode: report the implicit session straight away
            callback("SIGNED_IN", None)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)
            if not self._callbacks and self._subscription is not None:
                self._subscription.unsubscribe()
                self._subscription = None

        return unsubscribe

    def _dispatch(self, event: Any, session: Optional[Any]) -> None:
        name = getattr(event, "value", event)
        logger.info(f"Auth state changed: {name}")
        for callback in list(self._callbacks):
            try:
                callback(name, session)
            except Exception as e:
                logger.error(f"Error in auth callback: {e}")

    def sign_out(self) -> None:
        if self.client is not None:
            self.client.auth.sign_out()
