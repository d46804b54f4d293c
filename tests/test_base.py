import pytest

from lightexec.rpc.base import ExecutionRpc
from lightexec.types import FeeHistory


class CompleteRpc(ExecutionRpc):
    async def get_proof(self, address, slots, block):
        return (address, tuple(slots), block)

    async def create_access_list(self, opts, block):
        return []

    async def get_code(self, address, block):
        return b"\x60\x00"

    async def send_raw_transaction(self, data):
        return bytes(data)

    async def get_transaction_receipt(self, tx_hash):
        return None

    async def get_transaction(self, tx_hash):
        return None

    async def get_logs(self, filter):
        return []

    async def get_filter_changes(self, filter_id):
        return []

    async def uninstall_filter(self, filter_id):
        return True

    async def get_new_filter(self, filter):
        return 1

    async def get_new_block_filter(self):
        return 2

    async def get_new_pending_transaction_filter(self):
        return 3

    async def chain_id(self):
        return 1

    async def get_fee_history(self, block_count, last_block, reward_percentiles):
        return FeeHistory(oldest_block=last_block - block_count + 1)


class PartialRpc(ExecutionRpc):
    async def chain_id(self):
        return 1


def test_interface_and_incomplete_backend_cannot_be_instantiated():
    with pytest.raises(TypeError):
        ExecutionRpc()
    with pytest.raises(TypeError, match="get_proof"):
        PartialRpc()


@pytest.mark.asyncio
async def test_complete_backend_is_usable():
    rpc = CompleteRpc()
    assert isinstance(rpc, ExecutionRpc)
    assert await rpc.chain_id() == 1
    assert await rpc.send_raw_transaction(b"\x01\x02") == b"\x01\x02"
    history = await rpc.get_fee_history(4, 10, [50.0])
    assert history == FeeHistory(oldest_block=7)
    assert history.oldest_block == 7