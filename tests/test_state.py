import asyncio

import pytest

from lightexec.state import State
from lightexec.types import Block, BlockTag, BlockTagKind, Transaction, Transactions

LATEST = BlockTag(BlockTagKind.LATEST)
FINALIZED = BlockTag(BlockTagKind.FINALIZED)


def make_block(number, tag=0, tx_count=1):
    txs = [Transaction(hash=bytes([number, tag, i]) * 8 + bytes(8)) for i in range(tx_count)]
    return Block(
        number=number,
        hash=bytes([number, tag]) * 16,
        state_root=bytes([number]) * 32,
        receipts_root=bytes([number + 1]) * 32,
        base_fee_per_gas=number * 10,
        miner=bytes([number]) * 20,
        transactions=Transactions(full=txs),
    )


@pytest.mark.asyncio
async def test_empty_state_has_no_blocks():
    state = State(4)
    assert await state.get_block(LATEST) is None
    assert await state.latest_block_number() is None
    assert await state.oldest_block_number() is None


@pytest.mark.asyncio
async def test_latest_is_highest_number():
    state = State(8)
    for number in (5, 9, 7):
        await state.push_block(make_block(number))
    latest = await state.get_block(LATEST)
    assert latest.number == 9
    assert await state.latest_block_number() == 9
    assert await state.oldest_block_number() == 5


@pytest.mark.asyncio
async def test_get_block_by_number_and_string_tag():
    state = State(8)
    block = make_block(3)
    await state.push_block(block)
    assert await state.get_block(BlockTag(BlockTagKind.NUMBER, 3)) is block
    assert await state.get_block(3) is block
    assert await state.get_block(4) is None


@pytest.mark.asyncio
async def test_history_length_evicts_oldest():
    state = State(2)
    first = make_block(1)
    for block in (first, make_block(2), make_block(3)):
        await state.push_block(block)
    assert await state.oldest_block_number() == 2
    assert await state.get_block(1) is None
    assert await state.get_block_by_hash(first.hash) is None
    assert await state.get_transaction(first.transactions.hashes()[0]) is None


@pytest.mark.asyncio
async def test_get_block_by_hash():
    state = State(8)
    block = make_block(6)
    await state.push_block(block)
    assert await state.get_block_by_hash(block.hash) is block
    assert await state.get_block_by_hash(bytes(32)) is None


@pytest.mark.asyncio
async def test_transactions_lookup():
    state = State(8)
    block = make_block(4, tx_count=3)
    await state.push_block(block)
    second = block.transactions.full[1]
    assert await state.get_transaction(second.hash) is second
    assert await state.get_transaction_by_block_and_index(block.hash, 2) is block.transactions.full[2]
    assert await state.get_transaction_by_block_and_index(block.hash, 3) is None
    assert await state.get_transaction(bytes(32)) is None


@pytest.mark.asyncio
async def test_hash_only_block_has_no_full_transaction():
    state = State(8)
    block = Block(number=2, hash=b"\x02" * 32, transactions=Transactions(tx_hashes=[b"\x09" * 32]))
    await state.push_block(block)
    assert await state.get_transaction_by_block_and_index(block.hash, 0) is None


@pytest.mark.asyncio
async def test_field_getters_follow_block():
    state = State(8)
    block = make_block(5)
    await state.push_block(block)
    assert await state.get_state_root(LATEST) == block.state_root
    assert await state.get_receipts_root(LATEST) == block.receipts_root
    assert await state.get_base_fee(LATEST) == block.base_fee_per_gas
    assert await state.get_coinbase(LATEST) == block.miner
    assert await state.get_state_root(FINALIZED) is None


@pytest.mark.asyncio
async def test_finalized_block_is_stored():
    state = State(8)
    block = make_block(10)
    await state.push_finalized_block(block)
    assert await state.get_block(FINALIZED) is block
    assert await state.get_block(10) is block


@pytest.mark.asyncio
async def test_finalized_block_replaces_reorged_block():
    state = State(8)
    orphan = make_block(10, tag=1)
    canonical = make_block(10, tag=2)
    await state.push_block(orphan)
    await state.push_finalized_block(canonical)
    assert await state.get_block(10) is canonical
    assert await state.get_block_by_hash(orphan.hash) is None
    assert await state.get_transaction(orphan.transactions.hashes()[0]) is None


@pytest.mark.asyncio
async def test_finalized_same_hash_keeps_existing_block():
    state = State(8)
    existing = make_block(10)
    await state.push_block(existing)
    await state.push_finalized_block(make_block(10))
    assert await state.get_block(10) is existing


@pytest.mark.asyncio
async def test_run_consumes_queues():
    state = State(8)
    block_queue = asyncio.Queue()
    finalized_queue = asyncio.Queue()
    task = asyncio.create_task(state.run(block_queue, finalized_queue))
    await block_queue.put(make_block(7))
    await finalized_queue.put(None)
    await finalized_queue.put(make_block(3))
    for _ in range(200):
        if await state.latest_block_number() == 7 and await state.get_block(FINALIZED):
            break
        await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert await state.latest_block_number() == 7
    finalized = await state.get_block(FINALIZED)
    assert finalized.number == 3
    assert await state.oldest_block_number() == 3