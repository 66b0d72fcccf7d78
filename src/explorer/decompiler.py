"""Client for the remote WASM decompilation service."""
from __future__ import annotations

import httpx
from rich.console import Console

console = Console()

DECOMPILE_API = "https://steexp-api.fly.dev"


def hex_string_to_bytes(hex_string: str) -> bytes:
    """Decode a hex string, with or without a 0x prefix. Raises ValueError on bad input."""
    hex_string = hex_string.strip()
    if hex_string[:2] in ("0x", "0X"):
        hex_string = hex_string[2:]
    return bytes.fromhex(hex_string)


async def get_contract_decompiled(
    wasm_hex: str,
    api_url: str = DECOMPILE_API,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Upload WASM bytecode for decompilation and return the response body.

    The body is returned as-is whatever the status code, so error pages come
    back as text too; a non-2xx status is only reported on the console.
    """
    wasm_bytes = hex_string_to_bytes(wasm_hex)
    files = {"contract": ("contract.wasm", wasm_bytes, "application/wasm")}

    async with httpx.AsyncClient(transport=transport) as client:
        r = await client.post(f"{api_url.rstrip('/')}/decompile", files=files)

    if not r.is_success:
        console.print(f"[yellow]Decompile service answered {r.status_code} for {len(wasm_bytes)} bytes[/yellow]")
    return r.text
