"""Soroban RPC access: contract instance and contract code ledger entries."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from stellar_sdk import Address, SorobanServer, xdr
from stellar_sdk.client.requests_client import RequestsClient


class LedgerClient(Protocol):
    def get_ledger_entries(self, keys: Sequence[xdr.LedgerKey]) -> Any: ...


@dataclass(frozen=True)
class ContractInstanceRecord:
    wasm_hash: bytes | None  # None when the executable is not a WASM hash
    last_modified_ledger: int
    storage: xdr.SCMap | None  # captured as-is, not rendered yet


@dataclass(frozen=True)
class ContractCodeRecord:
    code: bytes
    last_modified_ledger: int


class SorobanRPC:
    def __init__(self, rpc_url: str):
        # one POST per lookup, no retries
        self.server = SorobanServer(rpc_url, client=RequestsClient(num_retries=0))

    def close(self) -> None:
        self.server.close()

    def get_ledger_entries(self, keys: Sequence[xdr.LedgerKey]) -> Any:
        return self.server.get_ledger_entries(list(keys))


def contract_instance_key(contract_id: str) -> xdr.LedgerKey:
    """Ledger key of the persistent instance entry of a contract.

    Raises ValueError for an address that is not a valid strkey.
    """
    return xdr.LedgerKey(
        type=xdr.LedgerEntryType.CONTRACT_DATA,
        contract_data=xdr.LedgerKeyContractData(
            contract=Address(contract_id).to_xdr_sc_address(),
            key=xdr.SCVal(xdr.SCValType.SCV_LEDGER_KEY_CONTRACT_INSTANCE),
            durability=xdr.ContractDataDurability.PERSISTENT,
        ),
    )


def contract_code_key(wasm_hash: bytes) -> xdr.LedgerKey:
    # Code entries are keyed by hash, not by contract
    return xdr.LedgerKey(
        type=xdr.LedgerEntryType.CONTRACT_CODE,
        contract_code=xdr.LedgerKeyContractCode(hash=xdr.Hash(wasm_hash)),
    )


def _single_entry(client: LedgerClient, key: xdr.LedgerKey) -> Any | None:
    response = client.get_ledger_entries([key])
    if response is None or not response.entries:
        return None
    return response.entries[0]


def get_contract_info(client: LedgerClient, contract_id: str) -> ContractInstanceRecord | None:
    """Fetch the instance entry of a contract. Returns None if it is not on the ledger."""
    entry = _single_entry(client, contract_instance_key(contract_id))
    if entry is None:
        return None

    data = xdr.LedgerEntryData.from_xdr(entry.xdr)
    instance = data.contract_data.val.instance

    executable = instance.executable
    wasm_hash = None
    if executable.type == xdr.ContractExecutableType.CONTRACT_EXECUTABLE_WASM and executable.wasm_hash:
        wasm_hash = executable.wasm_hash.hash

    return ContractInstanceRecord(
        wasm_hash=wasm_hash,
        last_modified_ledger=int(entry.last_modified_ledger),
        storage=instance.storage,
    )


def get_contract_code(client: LedgerClient, wasm_hash: bytes) -> ContractCodeRecord | None:
    """Fetch the WASM bytecode stored under a hash. Returns None if it is not on the ledger."""
    entry = _single_entry(client, contract_code_key(wasm_hash))
    if entry is None:
        return None

    data = xdr.LedgerEntryData.from_xdr(entry.xdr)
    return ContractCodeRecord(
        code=data.contract_code.code,
        last_modified_ledger=int(entry.last_modified_ledger),
    )
