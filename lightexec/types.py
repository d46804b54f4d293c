"""Data types used by the execution layer."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any

from . import rlp

ZERO_ADDRESS = bytes(20)
ZERO_HASH = bytes(32)


def _load(data) -> dict:
    if isinstance(data, (str, bytes, bytearray)):
        return json.loads(data)
    return data


def _hex_bytes(value) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    text = value[2:] if value.startswith(("0x", "0X")) else value
    return bytes.fromhex(text if len(text) % 2 == 0 else "0" + text)


def _fixed(size: int, what: str):
    def convert(value) -> bytes:
        raw = _hex_bytes(value)
        if len(raw) != size:
            raise ValueError(f"{what} must be {size} bytes, got {len(raw)}")
        return raw

    return convert


_address = _fixed(20, "address")
_hash = _fixed(32, "hash")


def _quantity(value) -> int:
    if isinstance(value, int):
        return value
    text = value.strip()
    return int(text, 16) if text.startswith(("0x", "0X")) else int(text)


def _each(convert):
    return lambda values: [convert(value) for value in values]


def _same(value):
    return value


def _build(cls, data, spec: dict, required=()):
    """Make ``cls`` from a JSON object; ``spec`` maps field -> (key, converter)."""
    obj = _load(data)
    kwargs = {}
    for name, (key, convert) in spec.items():
        value = obj[key] if key in required else obj.get(key)
        if value is not None and value != "":
            kwargs[name] = convert(value)
    return cls(**kwargs)


def _hex_out(value) -> str | None:
    return None if value is None else "0x" + bytes(value).hex()


def _qty_out(value) -> str | None:
    return None if value is None else hex(value)


class BlockTagKind(enum.Enum):
    LATEST = "latest"
    FINALIZED = "finalized"
    NUMBER = "number"


@dataclass(frozen=True)
class BlockTag:
    """A block selector: the latest block, the finalized block or a number."""

    kind: BlockTagKind
    number: int | None = None

    def __post_init__(self):
        if self.kind is BlockTagKind.NUMBER:
            if self.number is None or self.number < 0:
                raise ValueError("a numbered block tag needs a non-negative number")
        elif self.number is not None:
            raise ValueError(f"{self.kind.value} block tag takes no number")

    @staticmethod
    def parse(value) -> BlockTag:
        """Build a tag from 'latest', 'finalized', an integer or a number string."""
        if isinstance(value, BlockTag):
            return value
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise TypeError(f"cannot build a block tag from {type(value).__name__}")
        if isinstance(value, int):
            return BlockTag(BlockTagKind.NUMBER, value)
        lowered = value.strip().lower()
        if lowered in ("latest", "finalized"):
            return BlockTag(BlockTagKind(lowered))
        try:
            return BlockTag(BlockTagKind.NUMBER, _quantity(lowered))
        except ValueError:
            raise ValueError(f"invalid block tag: {value!r}") from None

    def __str__(self) -> str:
        return hex(self.number) if self.kind is BlockTagKind.NUMBER else self.kind.value


@dataclass
class Transaction:
    hash: bytes = ZERO_HASH
    nonce: int = 0
    block_hash: bytes | None = None
    block_number: int | None = None
    transaction_index: int | None = None
    from_: bytes = ZERO_ADDRESS
    to: bytes | None = None
    value: int = 0
    gas: int = 0
    gas_price: int | None = None
    input: bytes = b""
    transaction_type: int | None = None
    chain_id: int | None = None
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None

    @staticmethod
    def from_json(data) -> Transaction:
        """Parse a JSON-RPC transaction object."""
        return _build(Transaction, data, {
            "hash": ("hash", _hash),
            "nonce": ("nonce", _quantity),
            "block_hash": ("blockHash", _hash),
            "block_number": ("blockNumber", _quantity),
            "transaction_index": ("transactionIndex", _quantity),
            "from_": ("from", _address),
            "to": ("to", _address),
            "value": ("value", _quantity),
            "gas": ("gas", _quantity),
            "gas_price": ("gasPrice", _quantity),
            "input": ("input", _hex_bytes),
            "transaction_type": ("type", _quantity),
            "chain_id": ("chainId", _quantity),
            "max_fee_per_gas": ("maxFeePerGas", _quantity),
            "max_priority_fee_per_gas": ("maxPriorityFeePerGas", _quantity),
        }, required=("hash",))


@dataclass
class Transactions:
    """A block's transactions, either in full or as hashes only."""

    full: list[Transaction] | None = None
    tx_hashes: list[bytes] = field(default_factory=list)

    def hashes(self) -> list[bytes]:
        if self.full is not None:
            return [tx.hash for tx in self.full]
        return list(self.tx_hashes)

    def __len__(self) -> int:
        return len(self.full) if self.full is not None else len(self.tx_hashes)


@dataclass
class Block:
    number: int = 0
    base_fee_per_gas: int = 0
    difficulty: int = 0
    extra_data: bytes = b""
    gas_limit: int = 0
    gas_used: int = 0
    hash: bytes = ZERO_HASH
    logs_bloom: bytes = b""
    miner: bytes = ZERO_ADDRESS
    mix_hash: bytes = ZERO_HASH
    nonce: bytes = b""
    parent_hash: bytes = ZERO_HASH
    receipts_root: bytes = ZERO_HASH
    sha3_uncles: bytes = ZERO_HASH
    size: int = 0
    state_root: bytes = ZERO_HASH
    timestamp: int = 0
    total_difficulty: int = 0
    transactions: Transactions = field(default_factory=Transactions)
    transactions_root: bytes = ZERO_HASH
    uncles: list[bytes] = field(default_factory=list)


@dataclass
class Account:
    balance: int = 0
    nonce: int = 0
    code_hash: bytes = ZERO_HASH
    code: bytes = b""
    storage_hash: bytes = ZERO_HASH
    slots: dict[bytes, int] = field(default_factory=dict)


_CALL_FIELDS = {
    "from_": ("from", _address, _hex_out),
    "to": ("to", _address, _hex_out),
    "gas": ("gas", _quantity, _qty_out),
    "gas_price": ("gasPrice", _quantity, _qty_out),
    "value": ("value", _quantity, _qty_out),
    "data": ("data", _hex_bytes, _hex_out),
}


@dataclass
class CallOpts:
    from_: bytes | None = None
    to: bytes | None = None
    gas: int | None = None
    gas_price: int | None = None
    value: int | None = None
    data: bytes | None = None

    @staticmethod
    def from_json(data) -> CallOpts:
        """Parse call options with camelCase keys and hex values."""
        spec = {name: (key, parse) for name, (key, parse, _) in _CALL_FIELDS.items()}
        return _build(CallOpts, data, spec)

    def to_json(self) -> dict[str, Any]:
        return {key: out(getattr(self, name)) for name, (key, _, out) in _CALL_FIELDS.items()}

    def __repr__(self) -> str:
        return (
            f"CallOpts(from={_hex_out(self.from_)}, to={_hex_out(self.to)}, "
            f"value={self.value}, data={(self.data or b'').hex()})"
        )


@dataclass
class Log:
    address: bytes = ZERO_ADDRESS
    topics: list[bytes] = field(default_factory=list)
    data: bytes = b""
    block_hash: bytes | None = None
    block_number: int | None = None
    transaction_hash: bytes | None = None
    transaction_index: int | None = None
    log_index: int | None = None
    transaction_log_index: int | None = None
    log_type: str | None = None
    removed: bool | None = None

    def rlp_bytes(self) -> bytes:
        """The consensus encoding of the log: address, topics and data."""
        return rlp.encode([self.address, list(self.topics), self.data])

    @staticmethod
    def from_json(data) -> Log:
        return _build(Log, data, {
            "address": ("address", _address),
            "topics": ("topics", _each(_hash)),
            "data": ("data", _hex_bytes),
            "block_hash": ("blockHash", _hash),
            "block_number": ("blockNumber", _quantity),
            "transaction_hash": ("transactionHash", _hash),
            "transaction_index": ("transactionIndex", _quantity),
            "log_index": ("logIndex", _quantity),
            "transaction_log_index": ("transactionLogIndex", _quantity),
            "log_type": ("logType", _same),
            "removed": ("removed", _same),
        }, required=("address",))


@dataclass
class TransactionReceipt:
    transaction_hash: bytes = ZERO_HASH
    transaction_index: int = 0
    block_hash: bytes | None = None
    block_number: int | None = None
    from_: bytes = ZERO_ADDRESS
    to: bytes | None = None
    cumulative_gas_used: int = 0
    gas_used: int | None = None
    contract_address: bytes | None = None
    logs: list[Log] = field(default_factory=list)
    status: int | None = None
    root: bytes | None = None
    logs_bloom: bytes = bytes(256)
    transaction_type: int | None = None
    effective_gas_price: int | None = None

    @staticmethod
    def from_json(data) -> TransactionReceipt:
        return _build(TransactionReceipt, data, {
            "transaction_hash": ("transactionHash", _hash),
            "transaction_index": ("transactionIndex", _quantity),
            "block_hash": ("blockHash", _hash),
            "block_number": ("blockNumber", _quantity),
            "from_": ("from", _address),
            "to": ("to", _address),
            "cumulative_gas_used": ("cumulativeGasUsed", _quantity),
            "gas_used": ("gasUsed", _quantity),
            "contract_address": ("contractAddress", _address),
            "logs": ("logs", _each(Log.from_json)),
            "status": ("status", _quantity),
            "root": ("root", _hash),
            "logs_bloom": ("logsBloom", _hex_bytes),
            "transaction_type": ("type", _quantity),
            "effective_gas_price": ("effectiveGasPrice", _quantity),
        }, required=("transactionHash",))


@dataclass
class Filter:
    from_block: int | str | None = None
    to_block: int | str | None = None
    block_hash: bytes | None = None
    address: bytes | list[bytes] | None = None
    topics: list[bytes | list[bytes] | None] = field(default_factory=list)


@dataclass
class StorageProof:
    key: bytes = ZERO_HASH
    value: int = 0
    proof: list[bytes] = field(default_factory=list)


def _storage_proof(obj) -> StorageProof:
    return _build(StorageProof, obj, {
        "key": ("key", _hash),
        "value": ("value", _quantity),
        "proof": ("proof", _each(_hex_bytes)),
    }, required=("key", "value"))


@dataclass
class ProofResponse:
    address: bytes = ZERO_ADDRESS
    balance: int = 0
    code_hash: bytes = ZERO_HASH
    nonce: int = 0
    storage_hash: bytes = ZERO_HASH
    account_proof: list[bytes] = field(default_factory=list)
    storage_proof: list[StorageProof] = field(default_factory=list)

    @staticmethod
    def from_json(data) -> ProofResponse:
        """Parse an eth_getProof response object."""
        return _build(ProofResponse, data, {
            "address": ("address", _address),
            "balance": ("balance", _quantity),
            "code_hash": ("codeHash", _hash),
            "nonce": ("nonce", _quantity),
            "storage_hash": ("storageHash", _hash),
            "account_proof": ("accountProof", _each(_hex_bytes)),
            "storage_proof": ("storageProof", _each(_storage_proof)),
        }, required=("address", "balance", "codeHash", "nonce", "storageHash"))


@dataclass
class AccessListItem:
    address: bytes = ZERO_ADDRESS
    storage_keys: list[bytes] = field(default_factory=list)


@dataclass
class FeeHistory:
    oldest_block: int = 0
    base_fee_per_gas: list[int] = field(default_factory=list)
    gas_used_ratio: list[float] = field(default_factory=list)
    reward: list[list[int]] = field(default_factory=list)

    @staticmethod
    def from_json(data) -> FeeHistory:
        return _build(FeeHistory, data, {
            "oldest_block": ("oldestBlock", _quantity),
            "base_fee_per_gas": ("baseFeePerGas", _each(_quantity)),
            "gas_used_ratio": ("gasUsedRatio", _each(float)),
            "reward": ("reward", _each(_each(_quantity))),
        }, required=("oldestBlock",))