# =============================================================================
# studio_core/state/preferences.py
# Typed access to the studio's stored settings
# =============================================================================

from __future__ import annotations
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict

from studio_core.logging import get_logger
from studio_core.models.entities import CURRENCIES, Currency, CurrencyCode
from studio_core.offline.obfuscated_store import ObfuscatedStore

logger = get_logger(__name__)

CURRENCY_KEY = "currency"
AUTO_SYNC_KEY = "auto_sync"
PROFILE_KEY = "profile_info"
LANGUAGE_KEY = "lang"


class Language(str, Enum):
    EN = "EN"
    MM = "MM"


@dataclass
class Profile:
    """Studio owner shown on invoices and the settings page."""
    name: str = "Htet Htet Mu"
    address: str = "Yangon, Myanmar"
    avatar_url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Profile:
        defaults = cls()
        values = {}
        for key, default in asdict(defaults).items():
            value = data.get(key, default)
            values[key] = value if isinstance(value, str) else default
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class Preferences:
    """
    Settings persisted in the obfuscated store, one key each.

    Unknown or unreadable stored values fall back to the defaults.

    Usage:
        prefs = Preferences(store)
        prefs.currency = CurrencyCode.USD
        symbol = prefs.get_currency().symbol
    """

    def __init__(self, store: ObfuscatedStore):
        self.store = store

    # =========================================================================
    # CURRENCY
    # =========================================================================

    @property
    def currency(self) -> CurrencyCode:
        value = self.store.read(CURRENCY_KEY, CurrencyCode.MMK.value)
        try:
            return CurrencyCode(value)
        except ValueError:
            logger.warning(f"Unknown stored currency {value!r}, using MMK")
            return CurrencyCode.MMK

    @currency.setter
    def currency(self, code: CurrencyCode) -> None:
        self.store.write(CURRENCY_KEY, CurrencyCode(code).value)

    def get_currency(self) -> Currency:
        return CURRENCIES[self.currency]

    # =========================================================================
    # AUTO SYNC
    # =========================================================================

    @property
    def auto_sync(self) -> bool:
        return self.store.read(AUTO_SYNC_KEY, False) is True

    @auto_sync.setter
    def auto_sync(self, enabled: bool) -> None:
        self.store.write(AUTO_SYNC_KEY, bool(enabled))

    # =========================================================================
    # PROFILE
    # =========================================================================

    @property
    def profile(self) -> Profile:
        data = self.store.read(PROFILE_KEY)
        if not isinstance(data, dict):
            return Profile()
        return Profile.from_dict(data)

    @profile.setter
    def profile(self, profile: Profile) -> None:
        self.store.write(PROFILE_KEY, profile.to_dict())

    # =========================================================================
    # LANGUAGE
    # =========================================================================

    @property
    def language(self) -> Language:
        value = self.store.read(LANGUAGE_KEY, Language.EN.value)
        try:
            return Language(value)
        except ValueError:
            return Language.EN

    @language.setter
    def language(self, language: Language) -> None:
        self.store.write(LANGUAGE_KEY, Language(language).value)
