"""In-memory store of recently seen blocks and their transactions."""

from __future__ import annotations

import asyncio
from typing import NamedTuple

from .types import Block, BlockTag, BlockTagKind, Transaction


class _TxLocation(NamedTuple):
    block: int
    index: int


class State:
    """Holds the last ``history_length`` blocks plus the finalized block."""

    def __init__(self, history_length: int = 64):
        self.history_length = history_length
        self._blocks: dict[int, Block] = {}
        self._finalized: Block | None = None
        self._hashes: dict[bytes, int] = {}
        self._txs: dict[bytes, _TxLocation] = {}

    async def run(self, block_queue: asyncio.Queue, finalized_queue: asyncio.Queue) -> None:
        """Consume new and finalized blocks from two queues until cancelled.

        ``None`` on either queue is ignored.
        """
        block_get = asyncio.ensure_future(block_queue.get())
        final_get = asyncio.ensure_future(finalized_queue.get())
        try:
            while True:
                done, _ = await asyncio.wait(
                    {block_get, final_get}, return_when=asyncio.FIRST_COMPLETED
                )
                if block_get in done:
                    block = block_get.result()
                    if block is not None:
                        self._push_block(block)
                    block_get = asyncio.ensure_future(block_queue.get())
                if final_get in done:
                    block = final_get.result()
                    if block is not None:
                        self._push_finalized_block(block)
                    final_get = asyncio.ensure_future(finalized_queue.get())
        finally:
            block_get.cancel()
            final_get.cancel()

    async def push_block(self, block: Block) -> None:
        self._push_block(block)

    async def push_finalized_block(self, block: Block) -> None:
        self._push_finalized_block(block)

    async def get_block(self, tag) -> Block | None:
        tag = BlockTag.parse(tag)
        if tag.kind is BlockTagKind.LATEST:
            return self._blocks[max(self._blocks)] if self._blocks else None
        if tag.kind is BlockTagKind.FINALIZED:
            return self._finalized
        return self._blocks.get(tag.number)

    async def get_block_by_hash(self, hash: bytes) -> Block | None:
        number = self._hashes.get(bytes(hash))
        return None if number is None else self._blocks.get(number)

    async def get_transaction(self, hash: bytes) -> Transaction | None:
        location = self._txs.get(bytes(hash))
        if location is None:
            return None
        block = self._blocks.get(location.block)
        return None if block is None else _full_tx_at(block, location.index)

    async def get_transaction_by_block_and_index(
        self, block_hash: bytes, index: int
    ) -> Transaction | None:
        block = await self.get_block_by_hash(block_hash)
        return None if block is None else _full_tx_at(block, index)

    async def get_state_root(self, tag) -> bytes | None:
        block = await self.get_block(tag)
        return None if block is None else block.state_root

    async def get_receipts_root(self, tag) -> bytes | None:
        block = await self.get_block(tag)
        return None if block is None else block.receipts_root

    async def get_base_fee(self, tag) -> int | None:
        block = await self.get_block(tag)
        return None if block is None else block.base_fee_per_gas

    async def get_coinbase(self, tag) -> bytes | None:
        block = await self.get_block(tag)
        return None if block is None else block.miner

    async def latest_block_number(self) -> int | None:
        return max(self._blocks) if self._blocks else None

    async def oldest_block_number(self) -> int | None:
        return min(self._blocks) if self._blocks else None

    def _push_block(self, block: Block) -> None:
        self._hashes[block.hash] = block.number
        for index, tx_hash in enumerate(block.transactions.hashes()):
            self._txs[tx_hash] = _TxLocation(block.number, index)
        self._blocks[block.number] = block
        while len(self._blocks) > self.history_length:
            self._remove_block(min(self._blocks))

    def _push_finalized_block(self, block: Block) -> None:
        self._finalized = block
        old = self._blocks.get(block.number)
        if old is None:
            self._push_block(block)
        elif old.hash != block.hash:
            self._remove_block(old.number)
            self._push_block(block)

    def _remove_block(self, number: int) -> None:
        block = self._blocks.pop(number, None)
        if block is None:
            return
        self._hashes.pop(block.hash, None)
        for tx_hash in block.transactions.hashes():
            self._txs.pop(tx_hash, None)


def _full_tx_at(block: Block, index: int) -> Transaction | None:
    full = block.transactions.full
    if full is None or not 0 <= index < len(full):
        return None
    return full[index]