from __future__ import annotations

from dataclasses import dataclass

from dotenv import load_dotenv
import os


@dataclass(frozen=True)
class Config:
    soroban_rpc_url: str
    decompile_api_url: str


def load_config() -> Config:
    load_dotenv(override=False)

    return Config(
        soroban_rpc_url=os.environ.get("SOROBAN_RPC_URL", "https://soroban-testnet.stellar.org"),
        decompile_api_url=os.environ.get("DECOMPILE_API_URL", "https://steexp-api.fly.dev").rstrip("/"),
    )
