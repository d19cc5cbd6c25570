"""
Named algorithm choices for CipherFacade.set_algorithm().

A symmetric choice carries the transformation, the paired key-generation
algorithm and the default key size in bits. An asymmetric choice only
carries the transformation; its keys come from outside the facade.
"""

from enum import Enum


class SymmetricAlgorithm(Enum):

    AES      = ("AES", "AES", 128)
    AES_CBC  = ("AES/CBC/PKCS5Padding", "AES", 256)
    AES_GCM  = ("AES/GCM/NoPadding", "AES", 256)
    DES      = ("DES", "DES", 56)
    DESEDE   = ("DESede", "DESede", 168)
    BLOWFISH = ("Blowfish", "Blowfish", 128)
    CAMELLIA = ("Camellia/CBC/PKCS5Padding", "Camellia", 256)
    RC4      = ("ARCFOUR", "ARCFOUR", 128)
    CHACHA20 = ("ChaCha20-Poly1305", "ChaCha20", 256)

    # alias of AES
    DEFAULT  = ("AES", "AES", 128)

    @property
    def algorithm(self) -> str:
        return self.value[0]

    @property
    def key_algorithm(self) -> str:
        return self.value[1]

    @property
    def size(self) -> int:
        return self.value[2]

    @classmethod
    def from_name(cls, name: str) -> "SymmetricAlgorithm":
        """Case-insensitive member lookup, e.g. 'aes_cbc'."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown symmetric algorithm: {name}") from None


class AsymmetricAlgorithm(Enum):

    RSA             = "RSA"
    RSA_OAEP_SHA1   = "RSA/ECB/OAEPWithSHA-1AndMGF1Padding"
    RSA_OAEP_SHA256 = "RSA/ECB/OAEPWithSHA-256AndMGF1Padding"

    # alias of RSA
    DEFAULT         = "RSA"

    @property
    def algorithm(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "AsymmetricAlgorithm":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown asymmetric algorithm: {name}") from None
