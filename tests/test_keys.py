import pytest

from cryptfacade.crypto_engine import CryptographyProvider, SecretKey
from cryptfacade.crypto_engine.keys import (
    KEY_SPECS, KeyGenerator, key_bytes, set_des_parity,
)
from cryptfacade.exceptions import InvalidParameterError, NoSuchAlgorithmError


def _odd_parity(key: bytes) -> bool:
    return all(bin(b).count("1") % 2 == 1 for b in key)


@pytest.fixture
def generator(provider):
    def build(algorithm):
        return provider.get_key_generator(algorithm)
    return build


@pytest.mark.parametrize("algorithm, bits", [
    ("AES", 128), ("DES", 56), ("DESede", 168), ("Blowfish", 128),
    ("ARCFOUR", 128), ("ChaCha20", 256),
])
def test_default_sizes(generator, algorithm, bits):
    gen = generator(algorithm)
    assert gen.key_size == bits
    assert gen.algorithm == algorithm


@pytest.mark.parametrize("algorithm, bits, length", [
    ("AES", 192, 24),
    ("DES", 56, 8),
    ("DES", 64, 8),
    ("DESede", 112, 16),
    ("DESede", 168, 24),
    ("DESede", 128, 16),
    ("Blowfish", 32, 4),
    ("Blowfish", 448, 56),
    ("ARCFOUR", 40, 5),
])
def test_key_lengths(generator, algorithm, bits, length):
    gen = generator(algorithm)
    gen.init(bits)
    key = gen.generate_key()
    assert len(key.encoded) == length
    assert key.format == "RAW"


@pytest.mark.parametrize("algorithm", ["DES", "DESede"])
def test_des_keys_have_odd_parity(generator, algorithm):
    for _ in range(20):
        assert _odd_parity(generator(algorithm).generate_key().encoded)


@pytest.mark.parametrize("algorithm, bits", [
    ("AES", 100), ("AES", 512), ("DES", 128), ("Blowfish", 36),
    ("ChaCha20", 128), ("ARCFOUR", 48),
])
def test_invalid_size(generator, algorithm, bits):
    with pytest.raises(InvalidParameterError):
        generator(algorithm).init(bits)


@pytest.mark.parametrize("size", [True, 128.0, "128", None])
def test_non_int_size(generator, size):
    with pytest.raises(InvalidParameterError):
        generator("AES").init(size)


def test_alias_resolves_to_canonical_name(generator):
    assert generator("TripleDES").generate_key().algorithm == "DESede"


@pytest.mark.parametrize("algorithm", ["Serpent", "", "   ", None, "RSA"])
def test_unknown_algorithm(generator, algorithm):
    with pytest.raises(NoSuchAlgorithmError):
        generator(algorithm)


def test_camellia_only_in_pyca():
    assert CryptographyProvider().supports_key_generator("Camellia")


def test_provider_name_recorded(provider):
    assert provider.get_key_generator("AES").provider_name == provider.name


def test_random_source_and_postprocess():
    gen = KeyGenerator("AES", lambda n: bytes(n), "test",
                       postprocess=lambda raw: raw[::-1])
    assert gen.generate_key().encoded == bytes(16)


def test_set_des_parity():
    assert set_des_parity(b"\x00\x01\xfe\xff") == b"\x01\x01\xfe\xfe"


def test_key_specs_defaults_are_allowed():
    for spec in KEY_SPECS.values():
        assert spec.default_bits in spec.allowed_bits


def test_secret_key_repr_hides_material():
    key = SecretKey("AES", b"\xaa" * 16)
    assert "\\xaa" not in repr(key)
    assert "bits=128" in repr(key)


def test_key_bytes():
    aes = frozenset({"AES"})
    assert key_bytes(SecretKey("AES", b"k" * 16), aes) == b"k" * 16
    assert key_bytes(SecretKey("Rijndael", b"k" * 16), aes) == b"k" * 16
    assert key_bytes(bytearray(b"k" * 16), aes) == b"k" * 16
    assert key_bytes(SecretKey("DES", b"k" * 8), aes) is None
    assert key_bytes("k" * 16, aes) is None
