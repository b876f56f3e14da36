# =============================================================================
# studio_core/security/pin_gate.py
# Four-digit PIN lock for the studio app
# =============================================================================
"""
SecurityGate - locks the app behind an optional four-digit PIN.

State machine:

    start()                     -> LOCKED if a PIN is set, else UNLOCKED
    on_visibility_change(False) -> LOCKED (when a PIN is set)
    lock()                      -> LOCKED (when a PIN is set)
    enter("1234")  correct      -> UNLOCKED, input cleared
    enter("0000")  wrong        -> LOCKED, error shown; input cleared by
                                   tick() once clear_delay has passed

The PIN is kept in the obfuscated store under "secure_pin". It is not hashed.
"""

from __future__ import annotations
import re
import time
from enum import Enum
from typing import Callable, Optional

from studio_core.errors import DataValidationError
from studio_core.logging import get_logger
from studio_core.offline.obfuscated_store import ObfuscatedStore

logger = get_logger(__name__)

PIN_KEY = "secure_pin"
PIN_LENGTH = 4

_NON_DIGITS = re.compile(r"\D")
_PIN_PATTERN = re.compile(r"^\d{4}$")


class GateState(Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class SecurityGate:
    """Lock screen state plus PIN management."""

    def __init__(
        self,
        store: ObfuscatedStore,
        clear_delay: float = 0.6,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.clear_delay = clear_delay
        self._clock = clock
        self._state = GateState.UNLOCKED
        self._input = ""
        self._error = False
        self._clear_at: Optional[float] = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_locked(self) -> bool:
        return self._state is GateState.LOCKED

    @property
    def error(self) -> bool:
        return self._error

    @property
    def input(self) -> str:
        return self._input

    # =========================================================================
    # PIN MANAGEMENT
    # =========================================================================

    def _stored_pin(self) -> Optional[str]:
        value = self.store.read(PIN_KEY)
        return value if isinstance(value, str) and value else None

    def has_pin(self) -> bool:
        """True when a PIN entry exists, even if it can no longer be decoded."""
        return self.store.exists(PIN_KEY)

    def set_pin(self, pin: str, confirm: Optional[str] = None) -> None:
        """
        Store a new PIN.

        Raises:
            DataValidationError: If pin is not four digits, or a PIN already
                exists and confirm does not match
        """
        if not isinstance(pin, str) or not _PIN_PATTERN.match(pin):
            raise DataValidationError("PIN must be exactly four digits", field="pin")
        if self.has_pin() and confirm != pin:
            raise DataValidationError("PINs do not match!", field="confirm")

        self.store.write(PIN_KEY, pin)
        logger.info("Security PIN updated")

    def remove_pin(self) -> None:
        self.store.remove(PIN_KEY)
        self._state = GateState.UNLOCKED
        self._reset_input()
        logger.info("Security PIN removed")

    def verify_pin(self, pin: str) -> bool:
        """Any input passes when no PIN is configured; nothing matches a corrupt one."""
        if not self.has_pin():
            return True
        stored = self._stored_pin()
        if stored is None:
            logger.warning("Stored PIN is unreadable; input rejected")
            return False
        return pin == stored

    # =========================================================================
    # LOCK STATE
    # =========================================================================

    def start(self) -> GateState:
        self._reset_input()
        self._state = GateState.LOCKED if self.has_pin() else GateState.UNLOCKED
        return self._state

    def lock(self) -> GateState:
        if self.has_pin():
            self._state = GateState.LOCKED
            self._reset_input()
        return self._state

    def on_visibility_change(self, visible: bool) -> GateState:
        """The app locks as soon as it is hidden."""
        if not visible:
            return self.lock()
        return self._state

    def enter(self, text: str) -> GateState:
        """
        Update the PIN field with the typed text; checks it once four digits are in.
        """
        if self._state is GateState.UNLOCKED:
            return self._state

        self._input = _NON_DIGITS.sub("", text or "")[:PIN_LENGTH]
        if len(self._input) < PIN_LENGTH:
            return self._state

        if self.verify_pin(self._input):
            self._state = GateState.UNLOCKED
            self._reset_input()
            logger.info("App unlocked")
        else:
            self._error = True
            self._clear_at = self._clock() + self.clear_delay
            logger.info("Wrong PIN entered")
        return self._state

    def tick(self, now: Optional[float] = None) -> None:
        """Clear a rejected PIN once clear_delay has passed."""
        if self._clear_at is None:
            return
        now = self._clock() if now is None else now
        if now >= self._clear_at:
            self._reset_input()

    def _reset_input(self) -> None:
        self._input = ""
        self._error = False
        self._clear_at = None
