"""
ProviderRegistry — ordered list of installed providers.

Lookups without an explicit provider walk the list in preference order
and use the first provider that implements the name.

The process-wide registry is global mutable state:
    get_default_registry()    creates it on first use with
                              CryptographyProvider installed
    reset_default_registry()  discards it (next call rebuilds it)

Providers added to it stay installed until removed explicitly;
nothing in CipherFacade ever removes one.
"""

from __future__ import annotations

import logging
import threading

from ..exceptions import NoSuchAlgorithmError
from .cipher_base import CipherEngine
from .keys import KeyGenerator
from .provider import Provider

logger = logging.getLogger("CryptFacade.Registry")


class ProviderRegistry:

    def __init__(self, providers: list[Provider] | None = None):
        self._lock      = threading.RLock()
        self._providers: list[Provider] = []
        for provider in providers or []:
            self.add_provider(provider)

    # ── installation ─────────────────────────────────────────────

    def add_provider(self, provider: Provider) -> int:
        """
        Append *provider* at the lowest preference.

        Returns the 1-based position, or -1 if a provider with the same
        name is already installed.
        """
        return self.insert_provider_at(provider, 0)

    def insert_provider_at(self, provider: Provider, position: int) -> int:
        """
        Install *provider* at 1-based *position* (0 or out of range
        appends). Returns the actual position, or -1 if already present.
        """
        if not isinstance(provider, Provider):
            raise TypeError(
                f"provider must be a Provider, got {type(provider).__name__}"
            )
        with self._lock:
            if self._index_of(provider.name) is not None:
                logger.debug("Provider %s already installed", provider.name)
                return -1
            if 1 <= position <= len(self._providers):
                self._providers.insert(position - 1, provider)
            else:
                self._providers.append(provider)
                position = len(self._providers)
            logger.info(
                "Installed provider %s %s at position %d",
                provider.name, provider.version, position,
            )
            return position

    def remove_provider(self, name: str) -> None:
        with self._lock:
            idx = self._index_of(name)
            if idx is None:
                return
            del self._providers[idx]
            logger.info("Removed provider %s", name)

    def get_provider(self, name: str) -> Provider | None:
        with self._lock:
            idx = self._index_of(name)
            return None if idx is None else self._providers[idx]

    def providers(self) -> list[Provider]:
        with self._lock:
            return list(self._providers)

    def _index_of(self, name: str) -> int | None:
        for i, p in enumerate(self._providers):
            if p.name == name:
                return i
        return None

    # ── lookups ──────────────────────────────────────────────────

    def get_cipher(self, transformation: str,
                   provider: Provider | None = None) -> CipherEngine:
        """Create a cipher engine for *transformation*."""
        if provider is not None:
            cipher = provider.get_cipher(transformation)
            logger.debug("Cipher %s from %s", transformation, provider.name)
            return cipher
        for candidate in self.providers():
            try:
                cipher = candidate.get_cipher(transformation)
            except NoSuchAlgorithmError:
                continue
            logger.debug("Cipher %s from %s", transformation, candidate.name)
            return cipher
        raise NoSuchAlgorithmError(
            f"Cannot find any provider supporting {transformation}",
            {"transformation": transformation,
             "providers": [p.name for p in self.providers()]},
        )

    def get_key_generator(self, algorithm: str,
                          provider: Provider | None = None) -> KeyGenerator:
        """Create a key generator for *algorithm*."""
        if provider is not None:
            return provider.get_key_generator(algorithm)
        for candidate in self.providers():
            try:
                return candidate.get_key_generator(algorithm)
            except NoSuchAlgorithmError:
                continue
        raise NoSuchAlgorithmError(
            f"{algorithm} KeyGenerator not available",
            {"algorithm": algorithm,
             "providers": [p.name for p in self.providers()]},
        )

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, item) -> bool:
        name = item.name if isinstance(item, Provider) else item
        return self.get_provider(name) is not None


# ── Process-wide registry ────────────────────────────────────────

_default_registry: ProviderRegistry | None = None
_default_lock = threading.Lock()


def get_default_registry() -> ProviderRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                from .pyca_provider import CryptographyProvider
                _default_registry = ProviderRegistry([CryptographyProvider()])
    return _default_registry


def reset_default_registry() -> None:
    """Drop the process-wide registry (tests only)."""
    global _default_registry
    with _default_lock:
        _default_registry = None
        logger.info("Default provider registry reset")
