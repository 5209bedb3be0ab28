"""Command line interface for BaseProof.

Commands:
    hash        Print the canonical hash of a proof type name
    types       List proof types from the definitions document
    proofs      List proofs of an address
    has-proof   Check whether an address holds a live proof
    holders     List holders of a proof type
    stats       Show registry statistics
    serve       Run the HTTP API

Network commands read PROOF_REGISTRY_ADDRESS, NETWORK and the RPC
variables from the environment (or .env); --network, --rpc-url and
--address override them.
"""

import asyncio
import dataclasses
import json
import os
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path
from typing import Any, Optional, TypeVar

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from baseproof import __version__
from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.bootstrap.logging import configure_logging
from baseproof.bootstrap.reader import build_reader
from baseproof.config.reader_config import NetworkConfig, ReaderConfig, load_environment
from baseproof.domain.exceptions import BaseProofError
from baseproof.domain.services.proof_type_registry import canonical_hash
from baseproof.infrastructure.adapters.definitions_loader import (
    DefinitionsError,
    load_proof_definitions,
)

T = TypeVar("T")


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


app = typer.Typer(
    name="baseproof",
    help="Read proofs from the BaseProof ProofRegistry contract",
    add_completion=False,
)
console = Console()

_FORMAT_OPTION = typer.Option(
    OutputFormat.text, "--format", "-o", help="Output format: text or json"
)
_NETWORK_OPTION = typer.Option(
    None, "--network", "-n", help="sepolia or mainnet (default: $NETWORK or sepolia)"
)
_RPC_OPTION = typer.Option(None, "--rpc-url", help="RPC endpoint override")
_ADDRESS_OPTION = typer.Option(
    None, "--address", "-a", help="ProofRegistry address (default: $PROOF_REGISTRY_ADDRESS)"
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"baseproof version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """BaseProof registry reader."""
    load_environment()
    configure_logging(log_level=os.getenv("LOG_LEVEL", "WARNING"))


@app.command("hash")
def hash_command(
    name: str = typer.Argument(..., help="Proof type name, e.g. BASE_CONTRACT_DEPLOYER"),
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """Print keccak-256(name), the bytes32 the contract stores.

    Example:
        baseproof hash BASE_CONTRACT_DEPLOYER
    """
    digest = "0x" + canonical_hash(name).hex()
    if output_format == OutputFormat.json:
        _print_json({"proofType": name, "hash": digest})
    else:
        console.print(digest)


@app.command("types")
def types_command(
    definitions: Optional[Path] = typer.Option(
        None,
        "--definitions",
        "-d",
        help="Definitions YAML (default: $PROOF_DEFINITIONS_PATH or proofs/definitions.yaml)",
    ),
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """List proof types from the definitions document with their hashes."""
    path = definitions or Path(os.getenv("PROOF_DEFINITIONS_PATH", "proofs/definitions.yaml"))
    try:
        entries = load_proof_definitions(path)
    except FileNotFoundError:
        _fail(f"Definitions file not found: {path}")
    except DefinitionsError as e:
        _fail(str(e))

    rows = [
        {
            "type": entry.type,
            "name": entry.name,
            "hash": "0x" + canonical_hash(entry.type).hex(),
            "description": entry.description,
        }
        for entry in entries
    ]
    if output_format == OutputFormat.json:
        _print_json({"types": rows})
        return

    table = Table(title=f"Proof types ({path})")
    table.add_column("Type", style="cyan")
    table.add_column("Name")
    table.add_column("Hash", style="dim")
    for row in rows:
        table.add_row(row["type"], row["name"], row["hash"])
    console.print(table)


@app.command("proofs")
def proofs_command(
    subject: str = typer.Argument(..., help="Subject address"),
    include_revoked: bool = typer.Option(
        False, "--all", help="Include revoked proofs"
    ),
    network: Optional[str] = _NETWORK_OPTION,
    rpc_url: Optional[str] = _RPC_OPTION,
    address: Optional[str] = _ADDRESS_OPTION,
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """List the proofs of an address.

    Example:
        baseproof proofs 0x1234... --all
    """

    async def read(reader: ProofRegistryReader) -> list:
        if include_revoked:
            return await reader.get_proof_records(subject)
        return await reader.get_proofs(subject)

    proofs = _run(_config(network, rpc_url, address), read)

    if output_format == OutputFormat.json:
        _print_json({"address": subject, "proofs": [proof.to_dict() for proof in proofs]})
        return

    if not proofs:
        console.print(f"No proofs for {subject}", style="dim")
        return
    table = Table(title=f"Proofs of {subject}")
    table.add_column("ID", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Issuer")
    table.add_column("Timestamp", justify="right")
    table.add_column("Status")
    for proof in proofs:
        table.add_row(
            str(proof.id),
            proof.proof_type.label,
            proof.issuer,
            str(proof.timestamp),
            "[red]revoked[/red]" if proof.revoked else "[green]live[/green]",
        )
    console.print(table)


@app.command("has-proof")
def has_proof_command(
    subject: str = typer.Argument(..., help="Subject address"),
    proof_type: str = typer.Argument(..., help="Proof type name or 0x bytes32 hash"),
    network: Optional[str] = _NETWORK_OPTION,
    rpc_url: Optional[str] = _RPC_OPTION,
    address: Optional[str] = _ADDRESS_OPTION,
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """Check whether an address holds a live proof. Exit code 1 when it does not."""
    result = _run(
        _config(network, rpc_url, address),
        lambda reader: reader.verify(subject, proof_type),
    )

    if output_format == OutputFormat.json:
        _print_json(
            {
                "address": result.address,
                "proofType": result.proof_type,
                "hasProof": result.has_proof,
            }
        )
    elif result.has_proof:
        console.print(f"[green]YES[/green] {subject} holds {proof_type}")
    else:
        console.print(f"[red]NO[/red] {subject} does not hold {proof_type}")

    if not result.has_proof:
        raise typer.Exit(code=1)


@app.command("holders")
def holders_command(
    proof_type: str = typer.Argument(..., help="Proof type name or 0x bytes32 hash"),
    live_only: bool = typer.Option(
        False, "--live-only", help="Drop holders whose proofs are all revoked"
    ),
    network: Optional[str] = _NETWORK_OPTION,
    rpc_url: Optional[str] = _RPC_OPTION,
    address: Optional[str] = _ADDRESS_OPTION,
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """List the holders of a proof type."""
    holder_set = _run(
        _config(network, rpc_url, address),
        lambda reader: reader.get_holder_set(proof_type, live_only=live_only),
    )

    if output_format == OutputFormat.json:
        _print_json(
            {
                "proofType": holder_set.proof_type.label,
                "holders": list(holder_set.holders),
                "count": len(holder_set),
                "liveOnly": holder_set.live_only,
            }
        )
        return

    console.print(f"{len(holder_set)} holder(s) of {holder_set.proof_type.label}")
    for holder in holder_set.holders:
        console.print(f"  {holder}")


@app.command("stats")
def stats_command(
    network: Optional[str] = _NETWORK_OPTION,
    rpc_url: Optional[str] = _RPC_OPTION,
    address: Optional[str] = _ADDRESS_OPTION,
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """Show the issuance counter and the target network."""
    config = _config(network, rpc_url, address)
    total = _run(config, lambda reader: reader.get_total_proofs())

    stats = {
        "totalProofs": str(total),
        "network": config.network.name,
        "chainId": config.network.chain_id,
        "contractAddress": config.proof_registry_address,
    }
    if output_format == OutputFormat.json:
        _print_json(stats)
        return

    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in stats.items():
        table.add_row(key, str(value))
    console.print(table)


@app.command("serve")
def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(3001, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    uvicorn.run("baseproof.api.main:app", host=host, port=port, reload=reload)


def _config(
    network: Optional[str], rpc_url: Optional[str], address: Optional[str]
) -> ReaderConfig:
    """Environment config with command line overrides applied."""
    try:
        config = ReaderConfig.from_environment()
        overrides: dict[str, Any] = {}
        if network:
            selected = NetworkConfig.for_key(network)
            overrides["network"] = selected
            overrides["rpc_url"] = rpc_url or os.getenv(selected.rpc_env_var, "")
        elif rpc_url:
            overrides["rpc_url"] = rpc_url
        if address:
            overrides["proof_registry_address"] = address
        return dataclasses.replace(config, **overrides) if overrides else config
    except ValueError as e:
        _fail(str(e))


def _run(config: ReaderConfig, read: Callable[[ProofRegistryReader], Awaitable[T]]) -> T:
    """Build a reader, run one read, close the reader.

    Domain errors are printed and turned into exit code 2.
    """

    async def runner() -> T:
        async with build_reader(config) as reader:
            return await read(reader)

    try:
        return asyncio.run(runner())
    except BaseProofError as e:
        _fail(str(e), code=2)


def _fail(message: str, code: int = 1) -> None:
    console.print(f"[red]Error:[/red] {message}", style="bold")
    raise typer.Exit(code=code)


def _print_json(payload: dict) -> None:
    console.print_json(json.dumps(payload))


if __name__ == "__main__":
    app()
