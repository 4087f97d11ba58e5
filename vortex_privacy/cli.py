"""
Command-Line Interface for the Vortex privacy pool

Generate keys, prove knowledge of a factorization, verify proofs locally and
submit them to a local pool.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml
from rich.console import Console
from rich.table import Table

from vortex_privacy import __version__, print_disclaimer
from vortex_privacy.ledger import Address, Ledger, SchemaError, VortexPool, submit_transact
from vortex_privacy.privacy_protocol.exceptions import (
    ConfigurationError,
    PrivacyProtocolError,
    WitnessUnsatisfiable,
)
from vortex_privacy.privacy_protocol.snark import KeyStore, ProofGenerator, generate_keys
from vortex_privacy.privacy_protocol.types import Proof, Witness

CONFIG_KEYS = ("keys_dir", "seed", "sender")

console = Console()


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """
    Read an optional YAML config file.

    Raises:
        ConfigurationError: If the file is not a mapping or has unknown keys
    """
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read config {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigurationError("config file must contain a mapping")
    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigurationError(f"unknown config keys: {', '.join(unknown)}")
    return data


def _key_store(ctx: click.Context) -> KeyStore:
    return KeyStore(ctx.obj.get("keys_dir"))


def _fail(message: str) -> None:
    click.echo(click.style(f"✗ {message}", fg="red"), err=True)
    sys.exit(1)


@click.group()
@click.option("--keys-dir", type=click.Path(file_okay=False), help="Key directory (default: $VORTEX_KEYS_DIR or ./keys)")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML config file")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, keys_dir, config_path, verbose):
    """
    Vortex privacy pool - Groth16 proofs over BN254

    ⚠️  DRAFT - NOT REVIEWED FOR PRODUCTION USE
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        raise click.UsageError(str(e))
    if keys_dir:
        config["keys_dir"] = keys_dir
    ctx.obj = config


@main.command()
@click.option("--seed", type=int, help="Deterministic seed (tests only)")
@click.pass_context
def keygen(ctx, seed):
    """Generate the proving and verification keys."""
    print_disclaimer()
    if seed is None:
        seed = ctx.obj.get("seed")
    store = _key_store(ctx)
    pk = generate_keys(seed=seed)
    paths = store.write_keys(pk)
    click.echo(click.style("✓ Keys generated", fg="green"))
    click.echo(f"  Proving key: {paths.proving_key_hex}")
    click.echo(f"  Verification key: {paths.verification_key_hex}")


@main.command()
@click.option("--a", "a_value", required=True, help="Private factor a")
@click.option("--b", "b_value", required=True, help="Private factor b")
@click.option("--c", "c_value", help="Public product (default: a * b)")
@click.option("--output", type=click.Path(dir_okay=False), help="Write proof JSON to this file")
@click.pass_context
def prove(ctx, a_value, b_value, c_value, output):
    """
    Prove knowledge of a and b with a * b = c.

    Examples:

        vortex-privacy prove --a 5 --b 6 --output proof.json
    """
    store = _key_store(ctx)
    try:
        if c_value is None:
            witness = Witness.create(a_value, b_value)
        else:
            witness = Witness(a=a_value, b=b_value, c=c_value)
        proof = ProofGenerator().generate(witness, store.load_proving_key_bytes())
    except WitnessUnsatisfiable as e:
        _fail(f"Witness does not satisfy a * b = c: {e}")
    except (ValueError, FileNotFoundError, PrivacyProtocolError) as e:
        _fail(f"Proof generation failed: {e}")

    if output:
        Path(output).write_text(proof.to_json(), encoding="utf-8")
        click.echo(click.style(f"✓ Proof saved to: {output}", fg="green"))
    else:
        click.echo(proof.to_json())


@main.command()
@click.option("--proof", "proof_path", required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def verify(ctx, proof_path):
    """Check a proof file locally against the verification key."""
    store = _key_store(ctx)
    try:
        proof = Proof.from_json(Path(proof_path).read_text(encoding="utf-8"))
        ok = ProofGenerator().verify(proof, store.load_verification_key_bytes())
    except (ValueError, FileNotFoundError, PrivacyProtocolError) as e:
        _fail(f"Verification failed: {e}")

    table = Table(title="Local verification")
    table.add_column("Public input")
    table.add_column("Result")
    table.add_row(", ".join(proof.public_inputs), "[green]valid[/green]" if ok else "[red]invalid[/red]")
    console.print(table)
    if not ok:
        sys.exit(1)


@main.command()
@click.option("--a", "a_value", required=True, help="Private factor a")
@click.option("--b", "b_value", required=True, help="Private factor b")
@click.option("--sender", help="Sender address (0x hex)")
@click.pass_context
def transact(ctx, a_value, b_value, sender):
    """
    Prove and submit to a freshly deployed local pool.

    The proof only passes if the sender address equals a * b modulo the
    scalar field order.
    """
    sender = sender or ctx.obj.get("sender")
    if not sender:
        raise click.UsageError("--sender is required (or set 'sender' in the config file)")
    store = _key_store(ctx)
    generator = ProofGenerator()
    try:
        address = Address.from_hex(str(sender))
        proof = generator.generate(
            Witness.create(a_value, b_value), store.load_proving_key_bytes()
        )
        verification_key = store.load_verification_key_bytes()
        if not generator.verify(proof, verification_key):
            _fail("Transaction not submitted: proof failed local verification")
        ledger = Ledger()
        pool_id = VortexPool.init(ledger, verification_key)
    except (ValueError, FileNotFoundError, SchemaError, PrivacyProtocolError) as e:
        _fail(f"Transaction not submitted: {e}")

    result = submit_transact(ledger, address, pool_id, proof)

    table = Table(title="transact")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Sender", str(address))
    table.add_row("Digest", result.digest)
    table.add_row("Status", "[green]success[/green]" if result.success else "[red]aborted[/red]")
    console.print(table)
    if not result.success:
        sys.exit(1)


@main.command()
def version():
    """Print the package version."""
    click.echo(__version__)


if __name__ == "__main__":
    main()
