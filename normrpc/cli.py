#!/usr/bin/env python3
"""
normrpc.cli
===========

Convert captured chain data into canonical operations from the command line.
Inputs are JSON files as the fetch layer would hand them over; output is the
same JSON the API layer serves.

Usage
-----
# One EVM transaction: {"block", "transaction", "receipt", "trace"}
python -m normrpc.cli evm-tx tx.json --network mainnet

# Block rewards: {"block", "uncles": [uncle headers...]}
python -m normrpc.cli block-rewards block.json

# One extrinsic: {"extrinsic": "0x…", "events": [{"pallet", "variant", "fields", "types"?}]}
python -m normrpc.cli extrinsic ext.json --blockchain polkadot --network westend

# Effective network configuration
python -m normrpc.cli config --network mainnet

Normalization failures print the error payload on stderr and exit with code 1.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

import typer

from normcore import describe
from normcore import logging as nlog
from normcore.address import AddressFormatter, hex_address
from normcore.config import NetworkConfig, load_config, summary
from normcore.errors import NormalizationError, error_to_payload
from normcore.types import Transaction

from evmops.address import checksum_address
from evmops.rewards import build_block_reward_transaction
from evmops.trace import TraceNode
from evmops.transaction import build_transaction
from evmops.types import Block, EvmTransaction, Receipt, Uncle, to_bytes
from eventops.transaction import build_extrinsic_transaction
from eventops.types import Event

from .models import dump_transaction

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Chain operation normalizer.")


# ----------------- helpers -----------------


def _read_json(path: str) -> Dict[str, Any]:
    data = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    try:
        obj = json.loads(data)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"{path!r} is not valid JSON: {e}")
    if not isinstance(obj, dict):
        raise typer.BadParameter(f"{path!r} must contain a JSON object")
    return obj


def _parse(what: str, fn: Callable[[], T]) -> T:
    try:
        return fn()
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise typer.BadParameter(f"malformed {what} document: {e}")


def _emit(tx: Transaction, indent: int) -> None:
    typer.echo(json.dumps(dump_transaction(tx), indent=indent or None))


def _run(fn: Callable[[], Transaction], indent: int) -> None:
    try:
        tx = fn()
    except NormalizationError as e:
        typer.echo(json.dumps(error_to_payload(e)), err=True)
        raise typer.Exit(code=1)
    _emit(tx, indent)


def _config(blockchain: str, network: str, config_file: Optional[Path]) -> NetworkConfig:
    try:
        return load_config(blockchain, network, config_file=config_file)
    except NormalizationError as e:
        raise typer.BadParameter(e.message)


def _evm_formatter(plain_hex: bool) -> AddressFormatter:
    return hex_address if plain_hex else checksum_address


# ----------------- options -----------------

BlockchainOpt = typer.Option("ethereum", "--blockchain", "-b", help="Chain family preset.")
NetworkOpt = typer.Option("dev", "--network", "-n", help="Network preset.")
ConfigFileOpt = typer.Option(None, "--config-file", help="YAML network overrides.")
IndentOpt = typer.Option(2, "--indent", help="JSON indent (0 for compact).")
HexOpt = typer.Option(False, "--hex", help="Lower-case hex addresses instead of EIP-55.")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for stderr."),
    log_format: str = typer.Option("text", "--log-format", help="json|text"),
) -> None:
    nlog.setup_logging(level=log_level, fmt=log_format)


@app.command("evm-tx")
def evm_tx(
    path: str = typer.Argument(..., help='JSON file ("-" for stdin).'),
    blockchain: str = BlockchainOpt,
    network: str = NetworkOpt,
    config_file: Optional[Path] = ConfigFileOpt,
    plain_hex: bool = HexOpt,
    indent: int = IndentOpt,
) -> None:
    """Operations for one EVM transaction (fees, then traces)."""
    doc = _read_json(path)
    cfg = _config(blockchain, network, config_file)
    raw_trace = doc.get("trace")
    block, tx, receipt, trace = _parse(
        "transaction",
        lambda: (
            Block.from_rpc(doc.get("block") or {}),
            EvmTransaction.from_rpc(doc.get("transaction") or {}),
            Receipt.from_rpc(doc.get("receipt") or {}),
            TraceNode.from_call_tracer(raw_trace) if raw_trace else None,
        ),
    )

    def convert() -> Transaction:
        return build_transaction(
            block,
            tx,
            receipt,
            trace,
            config=cfg,
            format_address=_evm_formatter(plain_hex),
            raw_trace=raw_trace,
        )

    _run(convert, indent)


@app.command("block-rewards")
def block_rewards(
    path: str = typer.Argument(..., help='JSON file ("-" for stdin).'),
    blockchain: str = BlockchainOpt,
    network: str = NetworkOpt,
    config_file: Optional[Path] = ConfigFileOpt,
    plain_hex: bool = HexOpt,
    indent: int = IndentOpt,
) -> None:
    """Miner and uncle reward operations for one block."""
    doc = _read_json(path)
    cfg = _config(blockchain, network, config_file)
    block = _parse("block", lambda: Block.from_rpc(doc.get("block") or {}))
    uncles = _parse("block", lambda: [Uncle.from_rpc(u) for u in doc.get("uncles") or ()])

    def convert() -> Transaction:
        return build_block_reward_transaction(
            block,
            uncles,
            config=cfg,
            format_address=_evm_formatter(plain_hex),
        )

    _run(convert, indent)


@app.command("extrinsic")
def extrinsic(
    path: str = typer.Argument(..., help='JSON file ("-" for stdin).'),
    blockchain: str = typer.Option("polkadot", "--blockchain", "-b", help="Chain family preset."),
    network: str = NetworkOpt,
    config_file: Optional[Path] = ConfigFileOpt,
    indent: int = IndentOpt,
) -> None:
    """
    Operations for one extrinsic from its decoded events.

    Event fields are plain JSON: unsigned integers become u128 values and an
    account id is a nested list of its bytes, e.g. [[1, 2, ...]].
    """
    doc = _read_json(path)
    cfg = _config(blockchain, network, config_file)
    events = _parse(
        "extrinsic",
        lambda: [
            Event.from_fields(e["pallet"], e["variant"], e.get("fields") or {}, e.get("types"))
            for e in doc.get("events") or ()
        ],
    )
    encoded = _parse("extrinsic", lambda: to_bytes(doc.get("extrinsic") or ""))

    def convert() -> Transaction:
        return build_extrinsic_transaction(
            encoded, events, currency=cfg.currency, format_address=hex_address
        )

    _run(convert, indent)


@app.command("config")
def config(
    blockchain: str = BlockchainOpt,
    network: str = NetworkOpt,
    config_file: Optional[Path] = ConfigFileOpt,
) -> None:
    """Print the effective network configuration."""
    typer.echo(summary(_config(blockchain, network, config_file)))


@app.command("version")
def version() -> None:
    typer.echo(describe())


if __name__ == "__main__":
    app()
