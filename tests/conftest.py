from __future__ import annotations

from types import SimpleNamespace

import pytest
from stellar_sdk import Address, StrKey, xdr

from explorer.soroban_rpc import contract_code_key, contract_instance_key

CONTRACT_RAW_ID = bytes.fromhex("3f" * 32)
CONTRACT_ID = StrKey.encode_contract(CONTRACT_RAW_ID)

WASM_HASH = bytes.fromhex("a1" * 16 + "b2" * 16)
WASM_CODE = b"\x00asm\x01\x00\x00\x00" + bytes(range(40))


def instance_entry_xdr(contract_id: str, wasm_hash: bytes | None, storage: xdr.SCMap | None = None) -> str:
    """Base64 LedgerEntryData for a contract instance. wasm_hash=None builds a Stellar Asset executable."""
    if wasm_hash is None:
        executable = xdr.ContractExecutable(xdr.ContractExecutableType.CONTRACT_EXECUTABLE_STELLAR_ASSET)
    else:
        executable = xdr.ContractExecutable(
            xdr.ContractExecutableType.CONTRACT_EXECUTABLE_WASM, wasm_hash=xdr.Hash(wasm_hash)
        )
    data = xdr.LedgerEntryData(
        type=xdr.LedgerEntryType.CONTRACT_DATA,
        contract_data=xdr.ContractDataEntry(
            ext=xdr.ExtensionPoint(0),
            contract=Address(contract_id).to_xdr_sc_address(),
            key=xdr.SCVal(xdr.SCValType.SCV_LEDGER_KEY_CONTRACT_INSTANCE),
            durability=xdr.ContractDataDurability.PERSISTENT,
            val=xdr.SCVal(
                xdr.SCValType.SCV_CONTRACT_INSTANCE,
                instance=xdr.SCContractInstance(executable=executable, storage=storage),
            ),
        ),
    )
    return data.to_xdr()


def code_entry_xdr(wasm_hash: bytes, code: bytes) -> str:
    data = xdr.LedgerEntryData(
        type=xdr.LedgerEntryType.CONTRACT_CODE,
        contract_code=xdr.ContractCodeEntry(
            ext=xdr.ContractCodeEntryExt(0),
            hash=xdr.Hash(wasm_hash),
            code=code,
        ),
    )
    return data.to_xdr()


class FakeLedger:
    """In-memory stand-in for a Soroban RPC client, keyed by ledger key XDR."""

    def __init__(self):
        self.entries: dict[str, SimpleNamespace] = {}
        self.requests: list[list[xdr.LedgerKey]] = []
        self.closed = False

    def put(self, key: xdr.LedgerKey, entry_xdr: str, ledger: int) -> None:
        self.entries[key.to_xdr()] = SimpleNamespace(
            key=key.to_xdr(), xdr=entry_xdr, last_modified_ledger=ledger
        )

    def get_ledger_entries(self, keys):
        self.requests.append(list(keys))
        found = [self.entries[k.to_xdr()] for k in keys if k.to_xdr() in self.entries]
        return SimpleNamespace(entries=found or None, latest_ledger=1000)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def deployed(ledger: FakeLedger) -> FakeLedger:
    """Ledger holding CONTRACT_ID pointing at WASM_CODE."""
    ledger.put(contract_instance_key(CONTRACT_ID), instance_entry_xdr(CONTRACT_ID, WASM_HASH), 512)
    ledger.put(contract_code_key(WASM_HASH), code_entry_xdr(WASM_HASH, WASM_CODE), 480)
    return ledger
