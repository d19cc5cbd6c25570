"""
CryptFacade command line.

    cryptfacade algorithms
    cryptfacade providers
    cryptfacade keygen  -a AES_CBC [--size 192]
    cryptfacade encrypt -a AES_CBC --key <hex> -i plain.bin -o secret.bin
    cryptfacade decrypt -a RSA --pem private.pem -i secret.bin
    cryptfacade verify
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from .algorithms import AsymmetricAlgorithm, SymmetricAlgorithm
from .config.settings import Settings
from .crypto_engine import AVAILABLE_PROVIDERS, Provider, get_default_registry
from .exceptions import CryptographyError
from .facade import CipherFacade

logger = logging.getLogger("CryptFacade.Main")

app = typer.Typer(add_completion=False,
                  help=f"{Settings.APP_NAME} encryption tool")


def configure_logging(level: str) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    # leave handlers installed by an embedding application alone
    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(
            Settings.LOG_FORMAT, datefmt=Settings.LOG_DATEFMT,
        ))
        root_logger.addHandler(console_handler)


@app.callback()
def main(log_level: str = typer.Option(Settings.LOG_LEVEL, "--log-level",
                                       help="Python logging level")):
    configure_logging(log_level)


# ── helpers ──────────────────────────────────────────────────────

def _resolve_provider(name: Optional[str]) -> Optional[Provider]:
    if not name:
        return None
    registered = get_default_registry().get_provider(name)
    if registered is not None:
        return registered
    try:
        return AVAILABLE_PROVIDERS[name]()
    except KeyError:
        raise typer.BadParameter(
            f"Unknown provider {name}. "
            f"Available: {', '.join(AVAILABLE_PROVIDERS)}"
        ) from None


def _resolve_algorithm(name: str):
    """Table member name (e.g. AES_CBC, RSA) or a raw transformation."""
    for table in (SymmetricAlgorithm, AsymmetricAlgorithm):
        try:
            return table.from_name(name)
        except ValueError:
            continue
    return name


def _load_key(key_hex: Optional[str], pem: Optional[typer.FileBinaryRead]):
    if pem is not None:
        data = pem.read()
        try:
            return serialization.load_pem_private_key(data, password=None)
        except ValueError:
            return serialization.load_pem_public_key(data)
    if key_hex:
        try:
            return bytes.fromhex(key_hex)
        except ValueError:
            raise typer.BadParameter("--key must be hexadecimal") from None
    raise typer.BadParameter("Either --key or --pem is required")


def _build_facade(algorithm: str, provider: Optional[str]) -> CipherFacade:
    facade = CipherFacade()
    facade.set_algorithm(_resolve_algorithm(algorithm))
    facade.set_provider(_resolve_provider(provider or Settings.DEFAULT_PROVIDER))
    return facade


def _fail(exc: CryptographyError) -> None:
    typer.echo(f"Error: {exc.message}", err=True)
    cause = exc.__cause__
    while cause is not None:
        typer.echo(f"  caused by {type(cause).__name__}: {cause}", err=True)
        cause = cause.__cause__
    raise typer.Exit(code=1)


# ── commands ─────────────────────────────────────────────────────

@app.command()
def algorithms():
    """List the named symmetric and asymmetric algorithms."""
    typer.echo("Symmetric:")
    for algo in SymmetricAlgorithm:
        typer.echo(
            f"  {algo.name:<10s} {algo.algorithm:<28s} "
            f"key={algo.key_algorithm}/{algo.size}"
        )
    typer.echo("Asymmetric:")
    for algo in AsymmetricAlgorithm:
        typer.echo(f"  {algo.name:<16s} {algo.algorithm}")


@app.command()
def providers():
    """List installed and available providers."""
    installed = get_default_registry().providers()
    for position, provider in enumerate(installed, start=1):
        info = provider.info()
        typer.echo(f"{position}. {info['name']} {info['version']}")
        typer.echo(f"   ciphers: {', '.join(info['ciphers'])}")
        typer.echo(f"   keys:    {', '.join(info['key_generators'])}")
    others = [n for n in AVAILABLE_PROVIDERS
              if n not in {p.name for p in installed}]
    if others:
        typer.echo(f"Not installed: {', '.join(others)}")


@app.command()
def keygen(
    algorithm: str = typer.Option(Settings.DEFAULT_SYMMETRIC_ALGORITHM,
                                  "--algorithm", "-a"),
    size: Optional[int] = typer.Option(None, "--size", "-s",
                                       help="Key size in bits"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p"),
):
    """Print a fresh hex-encoded key for a symmetric algorithm."""
    facade = _build_facade(algorithm, provider)
    if size is not None:
        facade.set_size(size)
    try:
        key = facade.generate_key()
    except CryptographyError as exc:
        _fail(exc)
    typer.echo(key.encoded.hex())


@app.command()
def encrypt(
    algorithm: str = typer.Option(Settings.DEFAULT_SYMMETRIC_ALGORITHM,
                                  "--algorithm", "-a"),
    key: Optional[str] = typer.Option(None, "--key", "-k", help="Hex key"),
    pem: Optional[typer.FileBinaryRead] = typer.Option(None, "--pem"),
    input_file: typer.FileBinaryRead = typer.Option("-", "--input", "-i"),
    output_file: typer.FileBinaryWrite = typer.Option("-", "--output", "-o"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p"),
):
    """Encrypt a file (or stdin)."""
    facade = _build_facade(algorithm, provider)
    facade.set_key(_load_key(key, pem))
    try:
        output_file.write(facade.encrypt(input_file.read()))
    except CryptographyError as exc:
        _fail(exc)


@app.command()
def decrypt(
    algorithm: str = typer.Option(Settings.DEFAULT_SYMMETRIC_ALGORITHM,
                                  "--algorithm", "-a"),
    key: Optional[str] = typer.Option(None, "--key", "-k", help="Hex key"),
    pem: Optional[typer.FileBinaryRead] = typer.Option(None, "--pem"),
    input_file: typer.FileBinaryRead = typer.Option("-", "--input", "-i"),
    output_file: typer.FileBinaryWrite = typer.Option("-", "--output", "-o"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p"),
):
    """Decrypt a file (or stdin)."""
    facade = _build_facade(algorithm, provider)
    facade.set_key(_load_key(key, pem))
    try:
        output_file.write(facade.decrypt(input_file.read()))
    except CryptographyError as exc:
        _fail(exc)


VERIFY_MESSAGES = [
    b"Hello, World!",
    b"",                                     # empty
    b"\x00" * 100,                            # null bytes
    b"A" * 10_000,                            # 10 KB
]


@app.command()
def verify():
    """Round-trip every symmetric algorithm on every known provider."""
    failed = 0
    for provider_name, provider_cls in AVAILABLE_PROVIDERS.items():
        provider = provider_cls()
        typer.echo(f"--- {provider_name} {provider.version}")
        for algo in SymmetricAlgorithm:
            if not (provider.supports_cipher(algo.algorithm)
                    and provider.supports_key_generator(algo.key_algorithm)):
                typer.echo(f"  -  {algo.name:<10s} unsupported")
                continue
            facade = CipherFacade()
            facade.set_algorithm(algo)
            facade.set_provider(provider)
            try:
                facade.set_key(facade.generate_key())
                ok = all(facade.decrypt(facade.encrypt(m)) == m
                         for m in VERIFY_MESSAGES)
            except CryptographyError as exc:
                if isinstance(exc.root_cause, UnsupportedAlgorithm):
                    typer.echo(f"  -  {algo.name:<10s} not in this OpenSSL build")
                    continue
                logger.debug("verify %s failed", algo.name, exc_info=True)
                typer.echo(f"  x  {algo.name:<10s} ERROR: {exc.root_cause}")
                failed += 1
                continue
            if ok:
                typer.echo(f"  ok {algo.name:<10s} {algo.algorithm}")
            else:
                typer.echo(f"  x  {algo.name:<10s} round-trip mismatch")
                failed += 1
    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
