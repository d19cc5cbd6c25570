"""
Random material for keys, IVs and nonces.

Everything comes from the operating system CSPRNG through `secrets`.
"""

import secrets


class SecureRandom:

    AEAD_NONCE_BYTES = 12

    @staticmethod
    def generate_bytes(length: int) -> bytes:
        """Raw key material."""
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")
        return secrets.token_bytes(length)

    @staticmethod
    def generate_iv(block_bytes: int) -> bytes:
        """One block of IV (CBC) or initial counter (CTR)."""
        return secrets.token_bytes(block_bytes)

    @classmethod
    def generate_nonce(cls, length: int = AEAD_NONCE_BYTES) -> bytes:
        return secrets.token_bytes(length)
