"""Vortex privacy pool: Groth16 proofs for ``a * b = c`` bound to the submitter."""

__version__ = "0.1.0"

DISCLAIMER = (
    "DRAFT: this software has not had a cryptographic review. "
    "Do not use it to protect real funds or data."
)


def print_disclaimer() -> None:
    from rich.console import Console

    Console(stderr=True).print(f"[yellow]⚠️  {DISCLAIMER}[/yellow]")
