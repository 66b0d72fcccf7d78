"""CLI: load a Soroban contract's wasm from the ledger → (optional) decompile → print."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys

import httpx
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from stellar_sdk.exceptions import BaseRequestError

from .config import Config, load_config
from .decompiler import get_contract_decompiled
from .loader import ContractSummary, load_contract_result
from .soroban_rpc import SorobanRPC

console = Console()

HEX_PREVIEW = 64


def render_summary(summary: ContractSummary) -> Table:
    table = Table(title=f"Contract {summary.id}", show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value")
    table.add_row("Wasm hash", summary.wasm_id)
    table.add_row("Wasm hash ledger", summary.wasm_id_ledger)
    table.add_row("Wasm size", f"{len(summary.wasm_code) // 2} bytes")
    preview = summary.wasm_code[:HEX_PREVIEW]
    if len(summary.wasm_code) > HEX_PREVIEW:
        preview += "…"
    table.add_row("Wasm code", preview)
    table.add_row("Wasm code ledger", summary.wasm_code_ledger)
    return table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="explorer",
        description="Fetch a Soroban contract's wasm from the ledger and optionally decompile it.",
    )
    parser.add_argument("contract_id", help="contract strkey (C...) or 32-byte contract id as hex")
    parser.add_argument("--decompile", action="store_true", help="send the wasm to the decompile service")
    parser.add_argument("--json", action="store_true", help="print the summary as JSON")
    parser.add_argument("--rpc-url", help="Soroban RPC endpoint (default: $SOROBAN_RPC_URL)")
    return parser


async def run(args: argparse.Namespace, cfg: Config, rpc: SorobanRPC | None = None) -> int:
    owned = rpc is None
    if owned:
        rpc = SorobanRPC(args.rpc_url or cfg.soroban_rpc_url)
    try:
        return await _load_and_print(args, cfg, rpc)
    finally:
        if owned:
            rpc.close()


async def _load_and_print(args: argparse.Namespace, cfg: Config, rpc: SorobanRPC) -> int:
    result = load_contract_result(rpc, args.contract_id)
    if not result.ok:
        return 1
    summary = result.summary

    if args.json:
        console.print_json(json.dumps(summary.to_dict()))
    else:
        console.print(render_summary(summary))

    if args.decompile:
        console.print(f"[bold magenta]Decompiling via {cfg.decompile_api_url}…[/bold magenta]")
        text = await get_contract_decompiled(summary.wasm_code, cfg.decompile_api_url)
        console.print(text, markup=False, highlight=False)

    return 0


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    cfg = load_config()
    try:
        code = asyncio.run(run(args, cfg))
    except (BaseRequestError, httpx.HTTPError) as e:
        console.print(f"[red]Request failed: {escape(str(e))}[/red]")
        code = 1
    sys.exit(code)
