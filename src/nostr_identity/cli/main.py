"""CLI entry point for nostr-identity.

Invoked as::

    nostr-identity [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m nostr_identity.cli.main

Commands
--------
keys generate           Generate a new key pair
keys npub               Convert a public key hex to npub
keys nsec               Convert a private key hex (prompted) to nsec
keys decode             Decode an npub / nsec string to hex
delegation conditions   Parse a conditions string and show its canonical form
delegation create       Sign a delegation tag
delegation verify       Verify a delegation tag for a delegatee
profile encode          Encode a public key and relays as nprofile
profile decode          Decode an nprofile string
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nostr_identity.errors import NostrIdentityError

console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="nostr-identity")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """nostr delegation grants and nprofile identifiers"""
    logging.basicConfig(level=getattr(logging, log_level.upper()))


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from nostr_identity import __version__

    console.print(f"[bold]nostr-identity[/bold] v{__version__}")


# ------------------------------------------------------------------
# keys command group
# ------------------------------------------------------------------


@cli.group(name="keys")
def keys_group() -> None:
    """Generate and convert keys."""


@keys_group.command(name="generate")
def generate_command() -> None:
    """Generate a new secp256k1 key pair."""
    from nostr_identity.keys import PrivateKey

    private_key = PrivateKey.generate()
    public_key = private_key.public_key()

    table = Table(title="New key pair", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", overflow="fold")
    table.add_row("Public (hex)", public_key.as_hex_string())
    table.add_row("Public (npub)", public_key.as_bech32_string())
    table.add_row("Private (hex)", private_key.as_hex_string())
    table.add_row("Private (nsec)", private_key.as_bech32_string())
    console.print(table)
    console.print("[yellow]Keep the private key secret.[/yellow]")


@keys_group.command(name="npub")
@click.argument("pubkey_hex")
def npub_command(pubkey_hex: str) -> None:
    """Print the npub form of PUBKEY_HEX."""
    from nostr_identity.keys import PublicKey

    try:
        click.echo(PublicKey.from_hex(pubkey_hex).as_bech32_string())
    except NostrIdentityError as exc:
        _fail(str(exc))


@keys_group.command(name="nsec")
@click.option(
    "--private-key",
    prompt="Private key hex",
    hide_input=True,
    help="Private key as 64 hex characters (prompted when omitted).",
)
def nsec_command(private_key: str) -> None:
    """Print the nsec form of a private key."""
    from nostr_identity.keys import PrivateKey

    try:
        click.echo(PrivateKey.from_hex(private_key.strip()).as_bech32_string())
    except NostrIdentityError as exc:
        _fail(str(exc))


@keys_group.command(name="decode")
@click.argument("value")
def decode_key_command(value: str) -> None:
    """Decode an npub or nsec string to hex."""
    from nostr_identity.encoding import decode_bech32
    from nostr_identity.keys import PrivateKey, PublicKey
    from nostr_identity.keys.types import NPUB_PREFIX, NSEC_PREFIX

    try:
        hrp, _ = decode_bech32(value)
        if hrp == NPUB_PREFIX:
            click.echo(PublicKey.from_bech32(value).as_hex_string())
        elif hrp == NSEC_PREFIX:
            click.echo(PrivateKey.from_bech32(value).as_hex_string())
        else:
            _fail(f"Unsupported bech32 prefix {hrp!r}; expected npub or nsec")
    except NostrIdentityError as exc:
        _fail(str(exc))


# ------------------------------------------------------------------
# delegation command group
# ------------------------------------------------------------------


@cli.group(name="delegation")
def delegation_group() -> None:
    """Create and verify NIP-26 delegation tags."""


@delegation_group.command(name="conditions")
@click.argument("conditions")
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Reject parts with an unknown prefix instead of ignoring them.",
)
def conditions_command(conditions: str, strict: bool) -> None:
    """Parse CONDITIONS and print its canonical form."""
    from nostr_identity.delegation import DelegationConditions

    try:
        parsed = DelegationConditions.from_string(
            conditions, ignore_unknown=False if strict else None
        )
    except NostrIdentityError as exc:
        _fail(str(exc))
        return

    table = Table(title="Delegation conditions", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in parsed.to_dict().items():
        table.add_row(name, "-" if value is None else str(value))
    console.print(table)
    click.echo(parsed.as_string())


@delegation_group.command(name="create")
@click.option("--delegatee", required=True, help="Delegatee public key (hex or npub).")
@click.option("--conditions", default="", help="Conditions string, e.g. 'kind=1&created_at>0'.")
@click.option(
    "--private-key",
    prompt="Delegator private key (hex or nsec)",
    hide_input=True,
    help="Delegator private key (prompted when omitted).",
)
@click.option(
    "--output",
    type=click.Path(),
    default=None,
    help="Write the tag JSON to this file path.",
)
def create_command(
    delegatee: str,
    conditions: str,
    private_key: str,
    output: str | None,
) -> None:
    """Sign a delegation tag authorising DELEGATEE."""
    from nostr_identity.delegation import DelegationConditions, DelegationTag

    try:
        tag = DelegationTag.create(
            DelegationConditions.from_string(conditions),
            _parse_public_key(delegatee),
            _parse_private_key(private_key.strip()),
        )
    except NostrIdentityError as exc:
        _fail(str(exc))
        return

    tag_json = json.dumps(tag.to_list())
    if output:
        Path(output).write_text(tag_json, encoding="utf-8")
        console.print(f"[green]Tag written to[/green] {output}")
    else:
        click.echo(tag_json)


@delegation_group.command(name="verify")
@click.argument("tag")
@click.option("--delegatee", required=True, help="Delegatee public key (hex or npub).")
def verify_command(tag: str, delegatee: str) -> None:
    """Verify TAG (JSON text or a path to a JSON file) for DELEGATEE."""
    from nostr_identity.delegation import (
        DELEGATION_TAG_NAME,
        DelegatedBy,
        InvalidDelegation,
        check_delegation,
    )
    from nostr_identity.schemas import DelegationTagModel

    try:
        model = DelegationTagModel.model_validate(_load_json(tag))
        delegatee_key = _parse_public_key(delegatee)
    except ValidationError as exc:
        _fail(f"Malformed delegation tag: {exc.errors()[0]['msg']}")
        return
    except NostrIdentityError as exc:
        _fail(str(exc))
        return

    outcome = check_delegation(
        [DELEGATION_TAG_NAME, model.delegator, model.conditions, model.signature],
        delegatee_key,
    )

    if isinstance(outcome, DelegatedBy):
        console.print("  [green]PASS[/green]  Delegation signature is valid.")
        click.echo(f"Delegated by {outcome.pubkey.as_hex_string()}")
    elif isinstance(outcome, InvalidDelegation):
        console.print(f"  [red]FAIL[/red]  {escape(outcome.reason)}")
        sys.exit(1)


# ------------------------------------------------------------------
# profile command group
# ------------------------------------------------------------------


@cli.group(name="profile")
def profile_group() -> None:
    """Encode and decode nprofile identifiers."""


@profile_group.command(name="encode")
@click.argument("pubkey")
@click.option(
    "--relay",
    "-r",
    multiple=True,
    help="Relay URL hint (repeatable, order is preserved).",
)
def encode_profile_command(pubkey: str, relay: tuple[str, ...]) -> None:
    """Encode PUBKEY (hex or npub) and relay hints as an nprofile."""
    from nostr_identity.profile import Profile

    try:
        profile = Profile(pubkey=_parse_public_key(pubkey), relays=relay)
        click.echo(profile.as_bech32_string())
    except NostrIdentityError as exc:
        _fail(str(exc))


@profile_group.command(name="decode")
@click.argument("nprofile")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Reject trailing bytes after the last TLV record.",
)
def decode_profile_command(nprofile: str, as_json: bool, strict: bool) -> None:
    """Decode an NPROFILE string."""
    from nostr_identity.profile import decode_profile
    from nostr_identity.schemas import ProfileModel

    try:
        profile = decode_profile(nprofile, strict=True if strict else None)
    except NostrIdentityError as exc:
        _fail(str(exc))
        return

    if as_json:
        click.echo(ProfileModel.from_profile(profile).model_dump_json())
        return

    console.print(f"  Public key: {profile.pubkey.as_hex_string()}")
    console.print(f"  npub:       {profile.pubkey.as_bech32_string()}")
    if not profile.relays:
        console.print("  Relays:     (none)")
    for index, url in enumerate(profile.relays):
        console.print(f"  Relay {index}:    {url}", markup=False)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _parse_public_key(value: str):  # type: ignore[no-untyped-def]
    """Accept a public key as hex or npub."""
    from nostr_identity.keys import PublicKey

    if value.lower().startswith("npub1"):
        return PublicKey.from_bech32(value)
    return PublicKey.from_hex(value)


def _parse_private_key(value: str):  # type: ignore[no-untyped-def]
    """Accept a private key as hex or nsec."""
    from nostr_identity.keys import PrivateKey

    if value.lower().startswith("nsec1"):
        return PrivateKey.from_bech32(value)
    return PrivateKey.from_hex(value)


def _load_json(value: str) -> object:
    """Parse *value* as JSON, or read JSON from the file it names."""
    path = Path(value)
    text = value
    try:
        if path.is_file():
            text = path.read_text(encoding="utf-8")
    except OSError:
        pass
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        _fail(f"Tag is not valid JSON: {exc}")
        return None


if __name__ == "__main__":
    cli()
