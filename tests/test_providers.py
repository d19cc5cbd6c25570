import os
import warnings

import pytest
from Crypto.PublicKey import RSA
from cryptography.utils import CryptographyDeprecationWarning

from cryptfacade.crypto_engine import (
    CryptMode, CryptographyProvider, ProviderRegistry, PyCryptodomeProvider,
    SecretKey,
)
from cryptfacade.crypto_engine.pycryptodome_provider import (
    PyCryptodomeBlockEngine,
)
from cryptfacade.exceptions import (
    BadPaddingError, CipherStateError, IllegalBlockSizeError,
    InvalidKeyError, NoSuchAlgorithmError,
)
from cryptfacade.utils import SecureRandom

AES_KEY = SecretKey("AES", os.urandom(32))
DESEDE_KEY = SecretKey("DESede", bytes.fromhex(
    "0123456789abcdeffedcba9876543210891a2b3c4d5e6f70"))
CHACHA_KEY = SecretKey("ChaCha20", os.urandom(32))


def run(provider, transformation, mode, key, data):
    cipher = provider.get_cipher(transformation)
    cipher.init(mode, key)
    return cipher.do_final(data)


def round_trip(provider, transformation, key, data):
    ciphertext = run(provider, transformation, CryptMode.ENCRYPT, key, data)
    return ciphertext, run(provider, transformation, CryptMode.DECRYPT,
                           key, ciphertext)


@pytest.mark.parametrize("transformation, key", [
    ("AES", AES_KEY),
    ("AES/CBC/PKCS5Padding", AES_KEY),
    ("AES/CTR/NoPadding", AES_KEY),
    ("AES/GCM/NoPadding", AES_KEY),
    ("DESede/CBC/PKCS5Padding", DESEDE_KEY),
    ("ChaCha20-Poly1305", CHACHA_KEY),
])
@pytest.mark.parametrize("size", [0, 1, 15, 16, 17, 1000])
def test_round_trip(provider, transformation, key, size):
    data = os.urandom(size)
    _, plaintext = round_trip(provider, transformation, key, data)
    assert plaintext == data


@pytest.mark.parametrize("transformation, expected", [
    ("AES/ECB/PKCS5Padding", 16),
    ("AES/CBC/PKCS5Padding", 16 + 16),
    ("AES/CTR/NoPadding", 16 + 3),
    ("AES/GCM/NoPadding", 12 + 3 + 16),
    ("ChaCha20-Poly1305", 12 + 3 + 16),
])
def test_output_framing(provider, transformation, expected):
    key = CHACHA_KEY if transformation.startswith("ChaCha") else AES_KEY
    assert len(run(provider, transformation, CryptMode.ENCRYPT,
                   key, b"abc")) == expected


@pytest.mark.parametrize("transformation, key", [
    ("AES/ECB/PKCS5Padding", AES_KEY),
    ("AES/CBC/PKCS5Padding", AES_KEY),
    ("AES/CTR/NoPadding", AES_KEY),
    ("AES/GCM/NoPadding", AES_KEY),
    ("DESede/CBC/PKCS5Padding", DESEDE_KEY),
    ("ChaCha20-Poly1305", CHACHA_KEY),
])
def test_interoperability(transformation, key):
    pyca, dome = CryptographyProvider(), PyCryptodomeProvider()
    data = os.urandom(77)
    for src, dst in ((pyca, dome), (dome, pyca)):
        ciphertext = run(src, transformation, CryptMode.ENCRYPT, key, data)
        assert run(dst, transformation, CryptMode.DECRYPT,
                   key, ciphertext) == data


def test_ecb_is_deterministic(provider):
    first = run(provider, "AES", CryptMode.ENCRYPT, AES_KEY, b"block")
    second = run(provider, "AES", CryptMode.ENCRYPT, AES_KEY, b"block")
    assert first == second


def test_cbc_uses_random_iv(provider):
    first = run(provider, "AES/CBC", CryptMode.ENCRYPT, AES_KEY, b"block")
    second = run(provider, "AES/CBC", CryptMode.ENCRYPT, AES_KEY, b"block")
    assert first[:16] != second[:16]


def test_nopadding_requires_full_blocks(provider):
    with pytest.raises(IllegalBlockSizeError):
        run(provider, "AES/CBC/NoPadding", CryptMode.ENCRYPT,
            AES_KEY, b"not sixteen")


def test_bad_padding(provider):
    ciphertext = run(provider, "AES/ECB/NoPadding", CryptMode.ENCRYPT,
                     AES_KEY, bytes(16))
    with pytest.raises(BadPaddingError):
        run(provider, "AES/ECB/PKCS5Padding", CryptMode.DECRYPT,
            AES_KEY, ciphertext)


@pytest.mark.parametrize("transformation, key", [
    ("AES/GCM/NoPadding", AES_KEY),
    ("ChaCha20-Poly1305", CHACHA_KEY),
])
def test_aead_tampering(provider, transformation, key):
    ciphertext = bytearray(run(provider, transformation, CryptMode.ENCRYPT,
                               key, b"authenticated data"))
    ciphertext[-1] ^= 0x01
    with pytest.raises(BadPaddingError):
        run(provider, transformation, CryptMode.DECRYPT,
            key, bytes(ciphertext))


@pytest.mark.parametrize("transformation", ["AES/CBC", "AES/GCM",
                                            "ChaCha20-Poly1305"])
def test_short_input(provider, transformation):
    key = CHACHA_KEY if transformation.startswith("ChaCha") else AES_KEY
    with pytest.raises(IllegalBlockSizeError):
        run(provider, transformation, CryptMode.DECRYPT, key, b"short")


@pytest.mark.parametrize("key", [
    SecretKey("AES", bytes(10)),
    SecretKey("DES", bytes(8)),
    bytes(20),
    "0" * 16,
    None,
])
def test_invalid_aes_key(provider, key):
    cipher = provider.get_cipher("AES")
    with pytest.raises(InvalidKeyError):
        cipher.init(CryptMode.ENCRYPT, key)


def test_chacha_rejects_short_key(provider):
    with pytest.raises(InvalidKeyError):
        provider.get_cipher("ChaCha20-Poly1305").init(
            CryptMode.ENCRYPT, SecretKey("ChaCha20", bytes(16)))


def test_do_final_before_init(provider):
    with pytest.raises(CipherStateError):
        provider.get_cipher("AES").do_final(b"data")


def test_init_requires_crypt_mode(provider):
    with pytest.raises(TypeError):
        provider.get_cipher("AES").init("encrypt", AES_KEY)


@pytest.mark.parametrize("transformation", [
    "Serpent", "AES/OFB/NoPadding", "AES/CBC/ISO10126Padding",
    "ARCFOUR/ECB", "ChaCha20-Poly1305/NONE/NoPadding", "RSA/CBC",
    "DES/GCM/NoPadding",
])
def test_unsupported_transformations(provider, transformation):
    assert not provider.supports_cipher(transformation)
    with pytest.raises(NoSuchAlgorithmError):
        provider.get_cipher(transformation)


def test_camellia_support():
    assert CryptographyProvider().supports_cipher("Camellia/CBC/PKCS5Padding")
    assert not PyCryptodomeProvider().supports_cipher("Camellia")
    assert not PyCryptodomeProvider().supports_key_generator("Camellia")


@pytest.mark.parametrize("transformation", [
    "DES/CTR", "DESede/CTR", "Blowfish/CTR/NoPadding", "Camellia/CTR",
])
def test_pyca_counter_mode_is_aes_only(transformation):
    provider = CryptographyProvider()
    assert not provider.supports_cipher(transformation)
    with pytest.raises(NoSuchAlgorithmError):
        provider.get_cipher(transformation)


@pytest.mark.parametrize("transformation, key", [
    ("DES/CTR", SecretKey("DES", bytes.fromhex("133457799bbcdff1"))),
    ("DESede/CTR", DESEDE_KEY),
    ("Blowfish/CTR", SecretKey("Blowfish", os.urandom(16))),
])
def test_pycryptodome_counter_mode_for_64_bit_ciphers(transformation, key):
    provider = PyCryptodomeProvider()
    data = os.urandom(77)
    ciphertext, plaintext = round_trip(provider, transformation, key, data)
    assert len(ciphertext) == 8 + 77
    assert plaintext == data


@pytest.mark.parametrize("transformation, key", [
    ("Camellia/CBC/PKCS5Padding", SecretKey("Camellia", os.urandom(32))),
    ("DES/CBC/PKCS5Padding", SecretKey("DES", bytes.fromhex("133457799bbcdff1"))),
    ("DESede/CBC/PKCS5Padding", SecretKey("DESede", DESEDE_KEY.encoded[:16])),
    ("DESede/ECB/PKCS5Padding", DESEDE_KEY),
])
def test_pyca_legacy_keys_without_deprecation(transformation, key):
    data = os.urandom(40)
    with warnings.catch_warnings():
        warnings.simplefilter("error", CryptographyDeprecationWarning)
        _, plaintext = round_trip(CryptographyProvider(), transformation,
                                  key, data)
    assert plaintext == data


def test_two_key_desede_interoperability():
    key = SecretKey("DESede", DESEDE_KEY.encoded[:16])
    ciphertext = run(CryptographyProvider(), "DESede/CBC", CryptMode.ENCRYPT,
                     key, b"two-key triple DES")
    assert run(PyCryptodomeProvider(), "DESede/CBC", CryptMode.DECRYPT,
               key, ciphertext) == b"two-key triple DES"

def test_counter_mode_falls_through_to_pycryptodome():
    registry = ProviderRegistry([CryptographyProvider(), PyCryptodomeProvider()])
    assert isinstance(registry.get_cipher("DESede/CTR"), PyCryptodomeBlockEngine)


def test_counter_carry_interoperability(monkeypatch):
    # low 64 bits of the counter wrap after the first block
    iv = bytes(7) + b"\x01" + b"\xff" * 8
    monkeypatch.setattr(SecureRandom, "generate_iv", staticmethod(lambda n: iv))
    data = os.urandom(64)
    ciphertext = run(CryptographyProvider(), "AES/CTR/NoPadding",
                     CryptMode.ENCRYPT, AES_KEY, data)
    assert ciphertext[:16] == iv
    assert run(PyCryptodomeProvider(), "AES/CTR/NoPadding",
               CryptMode.DECRYPT, AES_KEY, ciphertext) == data


def test_provider_info(provider):
    info = provider.info()
    assert info["name"] == provider.name
    assert info["version"]
    assert "AES" in info["ciphers"]
    assert "AES" in info["key_generators"]
    assert provider.name in repr(provider)


def test_engine_info(provider):
    cipher = provider.get_cipher("AES/GCM")
    cipher.init(CryptMode.ENCRYPT, AES_KEY)
    info = cipher.info()
    assert info["iv_bytes"] == 12
    assert info["mode"] == "encrypt"


# ── legacy ciphers ───────────────────────────────────────────────

@pytest.mark.parametrize("transformation, key", [
    ("DES/CBC/PKCS5Padding", SecretKey("DES", bytes.fromhex("133457799bbcdff1"))),
    ("Blowfish/CBC/PKCS5Padding", SecretKey("Blowfish", os.urandom(16))),
    ("ARCFOUR", SecretKey("ARCFOUR", os.urandom(16))),
])
def test_legacy_round_trip(provider, transformation, key, skip_if_unsupported):
    data = os.urandom(100)
    try:
        _, plaintext = round_trip(provider, transformation, key, data)
    except NoSuchAlgorithmError as exc:
        skip_if_unsupported(exc)
        raise
    assert plaintext == data


def test_arcfour_known_answer(provider, skip_if_unsupported):
    # RFC 6229 key 0x0102030405, keystream offset 0
    try:
        keystream = run(provider, "RC4", CryptMode.ENCRYPT,
                        SecretKey("ARCFOUR", bytes.fromhex("0102030405")),
                        bytes(8))
    except NoSuchAlgorithmError as exc:
        skip_if_unsupported(exc)
        raise
    assert keystream == bytes.fromhex("b2396305f03dc027")


# ── RSA ──────────────────────────────────────────────────────────

RSA_TRANSFORMATIONS = [
    "RSA",
    "RSA/ECB/PKCS1Padding",
    "RSA/ECB/OAEPWithSHA-1AndMGF1Padding",
    "RSA/ECB/OAEPWithSHA-256AndMGF1Padding",
]


@pytest.mark.parametrize("transformation", RSA_TRANSFORMATIONS)
def test_rsa_round_trip(provider, rsa_private_key, transformation):
    ciphertext = run(provider, transformation, CryptMode.ENCRYPT,
                     rsa_private_key.public_key(), b"secret")
    assert run(provider, transformation, CryptMode.DECRYPT,
               rsa_private_key, ciphertext) == b"secret"


@pytest.mark.parametrize("transformation", RSA_TRANSFORMATIONS)
def test_rsa_interoperability(rsa_private_key, transformation):
    pyca, dome = CryptographyProvider(), PyCryptodomeProvider()
    for src, dst in ((pyca, dome), (dome, pyca)):
        ciphertext = run(src, transformation, CryptMode.ENCRYPT,
                         rsa_private_key.public_key(), b"portable")
        assert run(dst, transformation, CryptMode.DECRYPT,
                   rsa_private_key, ciphertext) == b"portable"


def test_rsa_accepts_pycryptodome_keys(provider):
    key = RSA.generate(2048)
    ciphertext = run(provider, "RSA", CryptMode.ENCRYPT, key.public_key(), b"k")
    assert run(provider, "RSA", CryptMode.DECRYPT, key, ciphertext) == b"k"


def test_rsa_encrypt_with_private_key(provider, rsa_private_key):
    ciphertext = run(provider, "RSA", CryptMode.ENCRYPT,
                     rsa_private_key, b"private half")
    assert run(provider, "RSA", CryptMode.DECRYPT,
               rsa_private_key, ciphertext) == b"private half"


def test_rsa_decrypt_needs_private_key(provider, rsa_private_key):
    with pytest.raises(InvalidKeyError):
        provider.get_cipher("RSA").init(CryptMode.DECRYPT,
                                        rsa_private_key.public_key())


def test_rsa_rejects_symmetric_key(provider):
    with pytest.raises(InvalidKeyError):
        provider.get_cipher("RSA").init(CryptMode.ENCRYPT, AES_KEY)


@pytest.mark.parametrize("transformation, limit", [
    ("RSA/ECB/PKCS1Padding", 245),
    ("RSA/ECB/OAEPWithSHA-1AndMGF1Padding", 214),
    ("RSA/ECB/OAEPWithSHA-256AndMGF1Padding", 190),
])
def test_rsa_plaintext_limit(provider, rsa_private_key, transformation, limit):
    public = rsa_private_key.public_key()
    assert run(provider, transformation, CryptMode.ENCRYPT,
               public, bytes(limit))
    with pytest.raises(IllegalBlockSizeError):
        run(provider, transformation, CryptMode.ENCRYPT,
            public, bytes(limit + 1))


def test_rsa_wrong_ciphertext_length(provider, rsa_private_key):
    with pytest.raises(IllegalBlockSizeError):
        run(provider, "RSA", CryptMode.DECRYPT, rsa_private_key, bytes(100))


def test_rsa_corrupted_ciphertext(provider, rsa_private_key):
    ciphertext = run(provider, "RSA/ECB/OAEPWithSHA-256AndMGF1Padding",
                     CryptMode.ENCRYPT, rsa_private_key.public_key(), b"x")
    with pytest.raises(BadPaddingError):
        run(provider, "RSA/ECB/OAEPWithSHA-256AndMGF1Padding",
            CryptMode.DECRYPT, rsa_private_key, bytes(len(ciphertext)))
