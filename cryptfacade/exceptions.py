"""
Exception hierarchy for CryptFacade.

Facade-level errors (what callers of CipherFacade see):
    MissingKeyError, KeyGenerationError, CryptOperationError,
    EncryptionError, DecryptionError

Backend errors (raised by providers, surfaced as chained causes):
    NoSuchAlgorithmError, NoSuchPaddingError, InvalidKeyError,
    InvalidParameterError, IllegalBlockSizeError, BadPaddingError,
    CipherStateError
"""

from __future__ import annotations

from typing import Any


class CryptographyError(Exception):
    """Base exception for every failure raised by this package."""

    def __init__(self, message: str,
                 details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def cause(self) -> BaseException | None:
        """The directly wrapped exception, if any."""
        return self.__cause__

    @property
    def root_cause(self) -> BaseException:
        """Innermost exception of the ``__cause__`` chain."""
        exc: BaseException = self
        while exc.__cause__ is not None:
            exc = exc.__cause__
        return exc

    @property
    def backend_error(self) -> CryptographyError:
        """
        Innermost CryptographyError of the ``__cause__`` chain.

        Unlike root_cause this skips the library exception (ValueError,
        InvalidTag, ...) that a provider error was raised from.
        """
        found: CryptographyError = self
        exc = self.__cause__
        while exc is not None:
            if isinstance(exc, CryptographyError):
                found = exc
            exc = exc.__cause__
        return found


# ── Facade errors ────────────────────────────────────────────────

class MissingKeyError(CryptographyError):
    """An encrypt/decrypt was attempted with no key configured."""


class KeyGenerationError(CryptographyError):
    """Key-generator lookup or key generation failed."""


class CryptOperationError(CryptographyError):
    """Cipher lookup, initialisation or transformation failed."""

    def __init__(self, message: str, mode,
                 details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.mode = mode


class EncryptionError(CryptographyError):
    """Caller-visible failure of CipherFacade.encrypt()."""


class DecryptionError(CryptographyError):
    """Caller-visible failure of CipherFacade.decrypt()."""


# ── Backend errors ───────────────────────────────────────────────

class ProviderError(CryptographyError):
    """Base class for errors raised inside a provider."""


class NoSuchAlgorithmError(ProviderError):
    """No provider implements the requested algorithm or mode."""


class NoSuchPaddingError(NoSuchAlgorithmError):
    """The padding part of a transformation is not supported."""


class InvalidKeyError(ProviderError):
    """The key does not fit the cipher (type, algorithm or length)."""


class InvalidParameterError(ProviderError):
    """A generator or cipher parameter (e.g. key size) is invalid."""


class IllegalBlockSizeError(ProviderError):
    """Input length is not acceptable for the cipher and padding."""


class BadPaddingError(ProviderError):
    """Padding or authentication tag check failed on decryption."""


class CipherStateError(ProviderError):
    """The cipher was used before init()."""


__all__ = [
    "CryptographyError",
    "MissingKeyError", "KeyGenerationError", "CryptOperationError",
    "EncryptionError", "DecryptionError",
    "ProviderError", "NoSuchAlgorithmError", "NoSuchPaddingError",
    "InvalidKeyError", "InvalidParameterError", "IllegalBlockSizeError",
    "BadPaddingError", "CipherStateError",
]
