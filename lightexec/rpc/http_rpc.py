"""Execution RPC backend speaking JSON-RPC over HTTP."""

from __future__ import annotations

import asyncio
import itertools
from typing import Any

import httpx

from ..errors import RpcError
from ..types import (
    AccessListItem,
    BlockTag,
    CallOpts,
    FeeHistory,
    Filter,
    Log,
    ProofResponse,
    Transaction,
    TransactionReceipt,
)
from .base import ExecutionRpc

DEFAULT_ACCESS_LIST_GAS = 100_000_000
_RATE_LIMIT_CODES = {429, -32005}


def _hex(data) -> str:
    return "0x" + bytes(data).hex()


def _from_hex(text: str) -> bytes:
    if text.startswith(("0x", "0X")):
        text = text[2:]
    if len(text) % 2:
        text = "0" + text
    return bytes.fromhex(text)


def _to_int(value) -> int:
    if isinstance(value, int):
        return value
    return int(value, 16) if value.startswith(("0x", "0X")) else int(value)


def _block_param(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, int):
        return hex(value)
    return str(value)


def _filter_json(filter: Filter) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if filter.block_hash is not None:
        out["blockHash"] = _hex(filter.block_hash)
    else:
        if filter.from_block is not None:
            out["fromBlock"] = _block_param(filter.from_block)
        if filter.to_block is not None:
            out["toBlock"] = _block_param(filter.to_block)
    if filter.address is not None:
        if isinstance(filter.address, (bytes, bytearray)):
            out["address"] = _hex(filter.address)
        else:
            out["address"] = [_hex(a) for a in filter.address]
    if filter.topics:
        topics: list[Any] = []
        for topic in filter.topics:
            if topic is None:
                topics.append(None)
            elif isinstance(topic, (bytes, bytearray)):
                topics.append(_hex(topic))
            else:
                topics.append([_hex(t) for t in topic])
        out["topics"] = topics
    return out


def _call_json(opts: CallOpts) -> dict[str, Any]:
    tx: dict[str, Any] = {
        "type": "0x2",
        "to": _hex(opts.to if opts.to is not None else bytes(20)),
        "gas": hex(opts.gas if opts.gas is not None else DEFAULT_ACCESS_LIST_GAS),
        "maxFeePerGas": "0x0",
        "maxPriorityFeePerGas": "0x0",
    }
    if opts.from_ is not None:
        tx["from"] = _hex(opts.from_)
    if opts.value is not None:
        tx["value"] = hex(opts.value)
    if opts.data is not None:
        tx["data"] = _hex(opts.data)
    return tx


class HttpRpc(ExecutionRpc):
    """JSON-RPC client that retries when the endpoint reports rate limiting."""

    def __init__(
        self,
        rpc: str,
        *,
        max_retries: int = 100,
        initial_backoff: float = 0.05,
        client: httpx.AsyncClient | None = None,
    ):
        url = httpx.URL(rpc)
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"invalid rpc url: {rpc!r}")
        self.url = rpc
        self._max_retries = max_retries
        self._initial_backoff = initial_backoff
        self._client = client or httpx.AsyncClient()
        self._ids = itertools.count(1)

    async def __aenter__(self) -> HttpRpc:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _rate_limited(response: httpx.Response) -> bool:
        if response.status_code == 429:
            return True
        try:
            body = response.json()
        except ValueError:
            return False
        error = body.get("error") if isinstance(body, dict) else None
        if not isinstance(error, dict):
            return False
        message = str(error.get("message", "")).lower()
        return error.get("code") in _RATE_LIMIT_CODES or "rate limit" in message

    async def _request(self, method: str, params: list, label: str):
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        for attempt in itertools.count():
            try:
                response = await self._client.post(self.url, json=payload)
            except httpx.HTTPError as exc:
                raise RpcError(exc, label) from exc
            if attempt < self._max_retries and self._rate_limited(response):
                await asyncio.sleep(self._initial_backoff * (attempt + 1))
                continue
            if response.status_code >= 400:
                raise RpcError(f"HTTP status {response.status_code}", label)
            try:
                body = response.json()
            except ValueError as exc:
                raise RpcError(f"invalid response body: {exc}", label) from exc
            if not isinstance(body, dict):
                raise RpcError("invalid response body", label)
            if body.get("error") is not None:
                error = body["error"]
                message = error.get("message", error) if isinstance(error, dict) else error
                raise RpcError(message, label)
            return body.get("result")

    async def get_proof(self, address, slots, block) -> ProofResponse:
        result = await self._request(
            "eth_getProof", [_hex(address), [_hex(s) for s in slots], hex(block)], "get_proof"
        )
        return ProofResponse.from_json(result)

    async def create_access_list(self, opts: CallOpts, block) -> list[AccessListItem]:
        tag = str(BlockTag.parse(block))
        result = await self._request(
            "eth_createAccessList", [_call_json(opts), tag], "create_access_list"
        )
        return [
            AccessListItem(
                address=_from_hex(item["address"]),
                storage_keys=[_from_hex(key) for key in item.get("storageKeys", [])],
            )
            for item in result.get("accessList", [])
        ]

    async def get_code(self, address, block) -> bytes:
        result = await self._request("eth_getCode", [_hex(address), hex(block)], "get_code")
        return _from_hex(result)

    async def send_raw_transaction(self, data) -> bytes:
        result = await self._request(
            "eth_sendRawTransaction", [_hex(data)], "send_raw_transaction"
        )
        return _from_hex(result)

    async def get_transaction_receipt(self, tx_hash) -> TransactionReceipt | None:
        result = await self._request(
            "eth_getTransactionReceipt", [_hex(tx_hash)], "get_transaction_receipt"
        )
        return None if result is None else TransactionReceipt.from_json(result)

    async def get_transaction(self, tx_hash) -> Transaction | None:
        result = await self._request(
            "eth_getTransactionByHash", [_hex(tx_hash)], "get_transaction"
        )
        return None if result is None else Transaction.from_json(result)

    async def get_logs(self, filter: Filter) -> list[Log]:
        result = await self._request("eth_getLogs", [_filter_json(filter)], "get_logs")
        return [Log.from_json(entry) for entry in result]

    async def get_filter_changes(self, filter_id) -> list[Log]:
        result = await self._request(
            "eth_getFilterChanges", [hex(filter_id)], "get_filter_changes"
        )
        return [Log.from_json(entry) for entry in result]

    async def uninstall_filter(self, filter_id) -> bool:
        result = await self._request("eth_uninstallFilter", [hex(filter_id)], "uninstall_filter")
        return bool(result)

    async def get_new_filter(self, filter: Filter) -> int:
        result = await self._request("eth_newFilter", [_filter_json(filter)], "get_new_filter")
        return _to_int(result)

    async def get_new_block_filter(self) -> int:
        result = await self._request("eth_newBlockFilter", [], "get_new_block_filter")
        return _to_int(result)

    async def get_new_pending_transaction_filter(self) -> int:
        result = await self._request(
            "eth_newPendingTransactionFilter", [], "get_new_pending_transactions"
        )
        return _to_int(result)

    async def chain_id(self) -> int:
        return _to_int(await self._request("eth_chainId", [], "chain_id"))

    async def get_fee_history(self, block_count, last_block, reward_percentiles) -> FeeHistory:
        result = await self._request(
            "eth_feeHistory",
            [hex(block_count), hex(last_block), list(reward_percentiles)],
            "fee_history",
        )
        return FeeHistory.from_json(result)