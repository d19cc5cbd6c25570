"""
CryptFacade crypto engine — providers, cipher engines and key
generators.
"""

# ── Engine interface ─────────────────────────────────────────────
from .cipher_base import CipherEngine, CryptMode, Transformation
from .keys        import SecretKey, KeyGenerator

# ── Providers ────────────────────────────────────────────────────
from .provider              import Provider
from .pyca_provider         import CryptographyProvider
from .pycryptodome_provider import PyCryptodomeProvider
from .registry import (
    ProviderRegistry, get_default_registry, reset_default_registry,
)

# Providers known by name (command line, Settings.DEFAULT_PROVIDER)
AVAILABLE_PROVIDERS = {
    CryptographyProvider.NAME: CryptographyProvider,
    PyCryptodomeProvider.NAME: PyCryptodomeProvider,
}

__all__ = [
    "CipherEngine", "CryptMode", "Transformation",
    "SecretKey", "KeyGenerator",
    "Provider", "CryptographyProvider", "PyCryptodomeProvider",
    "ProviderRegistry", "get_default_registry", "reset_default_registry",
    "AVAILABLE_PROVIDERS",
]
