"""Contract loading pipeline: instance entry → code entry → summary."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rich.console import Console
from rich.markup import escape
from stellar_sdk import Address, StrKey

from .soroban_rpc import LedgerClient, get_contract_code, get_contract_info

console = Console()


@dataclass(frozen=True)
class ContractSummary:
    id: str
    wasm_id: str
    wasm_id_ledger: str
    wasm_code: str
    wasm_code_ledger: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "wasmId": self.wasm_id,
            "wasmIdLedger": self.wasm_id_ledger,
            "wasmCode": self.wasm_code,
            "wasmCodeLedger": self.wasm_code_ledger,
        }


class LoadFailure(str, Enum):
    INVALID_REFERENCE = "invalid-reference"
    INSTANCE_NOT_FOUND = "not-found-instance"
    MALFORMED_EXECUTABLE = "malformed-executable"
    CODE_NOT_FOUND = "not-found-code"


_FAILURE_MESSAGES = {
    LoadFailure.INVALID_REFERENCE: "CONTRACT NOT FOUND (invalid contract id)",
    LoadFailure.INSTANCE_NOT_FOUND: "Failed to get wasm id (no instance entry)",
    LoadFailure.MALFORMED_EXECUTABLE: "Failed to get wasm id (executable is not a wasm hash)",
    LoadFailure.CODE_NOT_FOUND: "Failed to get wasm code",
}


@dataclass(frozen=True)
class LoadResult:
    summary: ContractSummary | None = None
    failure: LoadFailure | None = None

    def __post_init__(self) -> None:
        if (self.summary is None) == (self.failure is None):
            raise ValueError("LoadResult needs exactly one of summary or failure")

    @property
    def ok(self) -> bool:
        return self.summary is not None


def normalize_contract_id(reference: str) -> str | None:
    """Canonical C... strkey for a contract reference, or None if it isn't one.

    Accepts a contract strkey or the 32-byte contract id as hex.
    """
    reference = reference.strip()
    if len(reference) == 64:
        try:
            return Address.from_raw_contract(bytes.fromhex(reference)).address
        except ValueError:
            return None

    if not StrKey.is_valid_contract(reference):
        return None
    return Address(reference).address


def _fail(reference: str, failure: LoadFailure) -> LoadResult:
    console.print(f"[red]{_FAILURE_MESSAGES[failure]}: {escape(reference)}[/red]")
    return LoadResult(failure=failure)


def load_contract_result(client: LedgerClient, contract_id: str) -> LoadResult:
    """Run the full lookup for one contract, stopping at the first missing piece.

    Absences (bad id, no instance, non-wasm executable, no code) are reported
    as a LoadFailure. RPC and XDR decoding errors propagate.
    """
    canonical_id = normalize_contract_id(contract_id)
    if canonical_id is None:
        return _fail(contract_id, LoadFailure.INVALID_REFERENCE)

    info = get_contract_info(client, canonical_id)
    if info is None:
        return _fail(canonical_id, LoadFailure.INSTANCE_NOT_FOUND)
    if not info.wasm_hash:
        return _fail(canonical_id, LoadFailure.MALFORMED_EXECUTABLE)

    # TODO: render info.storage once there is a display for instance storage

    code = get_contract_code(client, info.wasm_hash)
    if code is None:
        return _fail(canonical_id, LoadFailure.CODE_NOT_FOUND)

    return LoadResult(
        summary=ContractSummary(
            id=canonical_id,
            wasm_id=info.wasm_hash.hex(),
            wasm_id_ledger=str(info.last_modified_ledger),
            wasm_code=code.code.hex(),
            wasm_code_ledger=str(code.last_modified_ledger),
        )
    )


def load_contract(client: LedgerClient, contract_id: str) -> ContractSummary | None:
    """Summary of a deployed contract, or None if any step came up empty."""
    return load_contract_result(client, contract_id).summary
