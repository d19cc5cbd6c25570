"""
CipherFacade — configure an algorithm, key, optional key size and
optional provider, then encrypt or decrypt byte payloads.

Usage:
    facade = CipherFacade()                    # AES, 128-bit keys
    facade.set_key(facade.generate_key())
    ct = facade.encrypt(b"hello")
    assert facade.decrypt(ct) == b"hello"

Nothing is validated when a setting changes; problems surface when
generate_key(), encrypt() or decrypt() runs. A new cipher engine is
built for every call.

Instances are not thread-safe: configuration fields are plain
attributes read without a snapshot. Use one facade per thread.
"""

from __future__ import annotations

import logging

from .algorithms import AsymmetricAlgorithm, SymmetricAlgorithm
from .config.settings import Settings
from .crypto_engine.cipher_base import CryptMode
from .crypto_engine.provider import Provider
from .crypto_engine.registry import ProviderRegistry, get_default_registry
from .exceptions import (
    CryptOperationError, DecryptionError, EncryptionError,
    KeyGenerationError, MissingKeyError,
)
from .utils.messages import MessagesBundle

logger = logging.getLogger("CryptFacade.Facade")

_messages = MessagesBundle("messages_cryptography")


class CipherFacade:

    def __init__(self, registry: ProviderRegistry | None = None):
        """
        Parameters
        ----------
        registry : ProviderRegistry, optional
            Where providers are looked up and registered. Defaults to
            the process-wide registry.
        """
        self._registry = registry
        self._algorithm: str = ""
        self._key_algorithm: str | None = None
        self._size: int | None = None
        self._provider: Provider | None = None
        self._key = None
        self.set_algorithm(
            SymmetricAlgorithm.from_name(Settings.DEFAULT_SYMMETRIC_ALGORITHM)
        )

    # ── configuration ────────────────────────────────────────────

    def set_algorithm(self, algorithm) -> None:
        """
        Select the transformation.

        - str: used verbatim, nothing else changes.
        - SymmetricAlgorithm: also sets the key algorithm and key size.
        - AsymmetricAlgorithm: only the transformation changes.
        """
        if isinstance(algorithm, SymmetricAlgorithm):
            self._algorithm     = algorithm.algorithm
            self._key_algorithm = algorithm.key_algorithm
            self._size          = algorithm.size
        elif isinstance(algorithm, AsymmetricAlgorithm):
            self._algorithm = algorithm.algorithm
        else:
            self._algorithm = algorithm

    def set_provider(self, provider: Provider | None) -> None:
        """
        Use *provider* for every lookup. A non-None provider is also
        installed in the registry, where it stays after this facade
        switches to another provider or back to None.
        """
        self._provider = provider
        if provider is not None:
            self.registry.add_provider(provider)

    def set_size(self, size: int | None) -> None:
        """Key size in bits; None lets the key generator pick."""
        self._size = size

    def set_key_algorithm(self, key_algorithm: str) -> None:
        self._key_algorithm = key_algorithm

    def set_key(self, key) -> None:
        self._key = key

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def key_algorithm(self) -> str | None:
        return self._key_algorithm

    @property
    def size(self) -> int | None:
        return self._size

    @property
    def provider(self) -> Provider | None:
        return self._provider

    @property
    def key(self):
        return self._key

    @property
    def registry(self) -> ProviderRegistry:
        if self._registry is None:
            return get_default_registry()
        return self._registry

    # ── operations ───────────────────────────────────────────────

    def generate_key(self):
        """
        Generate a symmetric key for the configured key algorithm,
        using the configured size if one is set.
        """
        try:
            generator = self.registry.get_key_generator(
                self._key_algorithm, self._provider,
            )
            if self._size is not None:
                generator.init(self._size)
            return generator.generate_key()
        except Exception as exc:
            raise KeyGenerationError(
                _messages.get_string("error.generate.key"),
                {"key_algorithm": self._key_algorithm, "size": self._size},
            ) from exc

    def encrypt(self, content: bytes) -> bytes:
        try:
            return self._transform(content, CryptMode.ENCRYPT)
        except Exception as exc:
            raise EncryptionError(
                _messages.get_string("error.encrypt"),
                {"algorithm": self._algorithm},
            ) from exc

    def decrypt(self, content: bytes) -> bytes:
        try:
            return self._transform(content, CryptMode.DECRYPT)
        except Exception as exc:
            raise DecryptionError(
                _messages.get_string("error.decrypt"),
                {"algorithm": self._algorithm},
            ) from exc

    def _transform(self, content: bytes, mode: CryptMode) -> bytes:
        if self._key is None:
            raise MissingKeyError(_messages.get_string("error.key.null"))

        provider = self._provider
        try:
            logger.debug(
                "%s %d bytes with %s (provider=%s)",
                "Encrypting" if mode is CryptMode.ENCRYPT else "Decrypting",
                len(content), self._algorithm,
                provider.name if provider else "default",
            )
            cipher = self.registry.get_cipher(self._algorithm, provider)
            cipher.init(mode, self._key)
            return cipher.do_final(content)
        except Exception as exc:
            raise CryptOperationError(
                _messages.get_string("error.crypt", mode),
                mode,
                {"algorithm": self._algorithm},
            ) from exc
