"""
CryptFacade — one configurable object for symmetric and asymmetric
encryption over pluggable cryptographic providers.
"""

from .facade     import CipherFacade
from .algorithms import SymmetricAlgorithm, AsymmetricAlgorithm
from .crypto_engine import (
    CryptMode, SecretKey, Provider, CryptographyProvider,
    PyCryptodomeProvider, ProviderRegistry, get_default_registry,
)
from .exceptions import (
    CryptographyError, MissingKeyError, KeyGenerationError,
    CryptOperationError, EncryptionError, DecryptionError,
)

__all__ = [
    "CipherFacade",
    "SymmetricAlgorithm", "AsymmetricAlgorithm",
    "CryptMode", "SecretKey",
    "Provider", "CryptographyProvider", "PyCryptodomeProvider",
    "ProviderRegistry", "get_default_registry",
    "CryptographyError", "MissingKeyError", "KeyGenerationError",
    "CryptOperationError", "EncryptionError", "DecryptionError",
]

__version__ = "1.0.0"
