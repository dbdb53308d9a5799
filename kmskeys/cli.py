"""Command line interface for KMS-backed signing keys."""

from __future__ import annotations

import asyncio
import base64
import logging
from pathlib import Path
from typing import Awaitable, NoReturn, Optional, TypeVar

import typer

from kmskeys import (
    HashingAlgorithm,
    KmsError,
    KmsRsaPssProvider,
    RsaPssParams,
    get_kms_provider,
    load_config,
)

T = TypeVar("T")

app = typer.Typer(help="CLI for KMS-backed RSA-PSS keys")


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="Path to a YAML config file"),
    log_level: str = typer.Option("WARNING", help="Python logging level"),
) -> None:
    """kmskeys CLI entry point."""
    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.WARNING))
    ctx.obj = load_config(str(config) if config else None)


def _fail(exc: KmsError) -> NoReturn:
    typer.secho(exc.message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


async def _run_and_close(provider: KmsRsaPssProvider, operation: Awaitable[T]) -> T:
    """Await ``operation``, then close the KMS client on the same event loop."""
    try:
        return await operation
    finally:
        await provider.kms_client.close()


@app.command("public-key")
def public_key(
    ctx: typer.Context,
    key_version_path: str,
    out: Optional[Path] = typer.Option(None, help="Write DER bytes to this file"),
) -> None:
    """
    Retrieve the public key of a KMS key version.

    Writes the DER SubjectPublicKeyInfo to ``--out``, or prints it base64
    encoded when no output file is given.

    Example:
        kmskeys public-key projects/p/locations/global/keyRings/r/cryptoKeys/k/cryptoKeyVersions/1
    """
    provider = get_kms_provider(ctx.obj)
    try:
        key = provider.get_private_key(key_version_path)
        der = asyncio.run(_run_and_close(provider, provider.export_key("spki", key)))
    except KmsError as exc:
        _fail(exc)

    if out:
        out.write_bytes(der)
        typer.echo(f"Wrote {len(der)} bytes to {out}")
    else:
        typer.echo(base64.b64encode(der).decode("ascii"))


@app.command("sign")
def sign(
    ctx: typer.Context,
    key_version_path: str,
    file: Path,
    hash_algorithm: HashingAlgorithm = typer.Option(
        HashingAlgorithm.SHA256, "--hash", help="Digest used by the key version"
    ),
) -> None:
    """Sign FILE with a KMS key version and print the base64 signature."""
    if not file.exists():
        typer.secho("Specified file does not exist", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    provider = get_kms_provider(ctx.obj)
    try:
        key = provider.get_private_key(key_version_path, hash_algorithm)
        signature = asyncio.run(
            _run_and_close(
                provider,
                provider.sign(
                    RsaPssParams(salt_length=hash_algorithm.digest_size),
                    key,
                    file.read_bytes(),
                ),
            )
        )
    except KmsError as exc:
        _fail(exc)

    typer.echo(base64.b64encode(signature).decode("ascii"))


if __name__ == "__main__":
    app()
