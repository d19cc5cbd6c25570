"""
Localised message lookup.
"""

import logging

from ..config.messages import BUNDLES
from ..config.settings import Settings

logger = logging.getLogger("CryptFacade.Messages")


class MessagesBundle:
    """
    Look up message templates by key.

    Locale resolution falls back ``pt_BR`` → ``pt`` → ``en``. A missing
    key never raises; it renders as ``!key!``.
    """

    FALLBACK_LOCALE = "en"

    def __init__(self, bundle_name: str, locale: str | None = None):
        if bundle_name not in BUNDLES:
            raise KeyError(f"Unknown message bundle: {bundle_name}")
        self.bundle_name = bundle_name
        self.locale      = locale or Settings.MESSAGES_LOCALE
        self._chain      = self._resolve(BUNDLES[bundle_name], self.locale)

    @classmethod
    def _resolve(cls, tables: dict, locale: str) -> list[dict]:
        candidates = [locale]
        if "_" in locale:
            candidates.append(locale.split("_", 1)[0])
        candidates.append(cls.FALLBACK_LOCALE)
        return [tables[c] for c in dict.fromkeys(candidates) if c in tables]

    def get_string(self, key: str, *args) -> str:
        for table in self._chain:
            if key in table:
                return table[key].format(*args) if args else table[key]
        logger.warning("Missing message %r in bundle %s", key,
                       self.bundle_name)
        return f"!{key}!"
