"""Command line tools for signing, verifying and inspecting detached JWS tokens."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer

from swedbank_pi.constants import DEFAULT_MAX_SIGNATURE_AGE
from swedbank_pi.security import (
    DEFAULT_ALGORITHM,
    JwsError,
    describe_public_key,
    inspect_signature,
    sign,
    verify,
)
from swedbank_pi.security.keys import read_pem

app = typer.Typer(help="CLI for Swedbank Payment Initiation signatures")

# Command groups
jws_app = typer.Typer(help="Commands for detached JWS tokens")
key_app = typer.Typer(help="Commands for key material")

app.add_typer(jws_app, name="jws")
app.add_typer(key_app, name="key")


@app.callback()
def main() -> None:
    """swedbank-pi CLI entry point."""
    pass


def _read_payload(payload_file: Optional[Path]) -> bytes:
    if payload_file is None:
        return sys.stdin.buffer.read()
    return payload_file.read_bytes()


@jws_app.command("sign")
def jws_sign(
    url: str,
    merchant_id: str = typer.Option(..., help="Merchant ID issued by the bank"),
    country: str = typer.Option("LV", help="Agreement country (LV, EE, LT)"),
    private_key: Path = typer.Option(..., help="PEM private key file"),
    payload_file: Optional[Path] = typer.Option(
        None, "--payload", help="Body to sign (default: stdin)"
    ),
    algorithm: str = typer.Option(DEFAULT_ALGORITHM, help="RS512, ES256, ES256K, ES384 or ES512"),
) -> None:
    """
    Sign a request body for URL and print the x-jws-signature value.

    Example:
        echo -n '{}' | swedbank-pi jws sign https://pi.swedbank.com/public/api/v3/agreement/providers \\
            --merchant-id M1 --private-key merchant.pem
    """
    try:
        token = sign(
            _read_payload(payload_file),
            url,
            merchant_id,
            country.upper(),
            read_pem(private_key),
            algorithm,
        )
    except (JwsError, FileNotFoundError) as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo(token)


@jws_app.command("verify")
def jws_verify(
    token: str,
    public_key: Path = typer.Option(..., help="Bank public key or certificate (PEM)"),
    payload_file: Optional[Path] = typer.Option(
        None, "--payload", help="Exact response body (default: stdin)"
    ),
    max_age: int = typer.Option(DEFAULT_MAX_SIGNATURE_AGE, help="Allowed clock distance in seconds; 0 disables"),
) -> None:
    """Verify a detached token against a response body. Exit code 0 means valid."""
    try:
        valid = verify(token, _read_payload(payload_file), read_pem(public_key), max_age)
    except (JwsError, FileNotFoundError) as e:
        typer.secho(f"{type(e).__name__}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    if not valid:
        typer.secho("Signature does not match", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho("Signature valid", fg=typer.colors.GREEN)


@jws_app.command("inspect")
def jws_inspect(token: str) -> None:
    """Decode a token's header without verifying it."""
    typer.echo(inspect_signature(token).model_dump_json(indent=2))


@key_app.command("info")
def key_info(path: Path) -> None:
    """Describe a public key or X.509 certificate."""
    try:
        pem = read_pem(path)
    except FileNotFoundError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    details = describe_public_key(pem)
    typer.echo(json.dumps(details.model_dump(mode="json"), indent=2))
    if not details.valid:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
