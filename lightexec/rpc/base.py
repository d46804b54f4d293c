"""Interface of an execution-layer JSON-RPC backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

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


class ExecutionRpc(ABC):
    """Untrusted source of execution-layer data; answers are verified by the caller."""

    @abstractmethod
    async def get_proof(self, address: bytes, slots: list[bytes], block: int) -> ProofResponse:
        """Account and storage proofs at a block number."""

    @abstractmethod
    async def create_access_list(self, opts: CallOpts, block: BlockTag) -> list[AccessListItem]:
        """Accounts and slots a call would touch."""

    @abstractmethod
    async def get_code(self, address: bytes, block: int) -> bytes:
        """Contract code at a block number."""

    @abstractmethod
    async def send_raw_transaction(self, data: bytes) -> bytes:
        """Submit a signed transaction; returns its hash."""

    @abstractmethod
    async def get_transaction_receipt(self, tx_hash: bytes) -> TransactionReceipt | None:
        """Receipt of a transaction, if it is known."""

    @abstractmethod
    async def get_transaction(self, tx_hash: bytes) -> Transaction | None:
        """A transaction by hash, if it is known."""

    @abstractmethod
    async def get_logs(self, filter: Filter) -> list[Log]:
        """Logs matching a filter."""

    @abstractmethod
    async def get_filter_changes(self, filter_id: int) -> list[Log]:
        """Logs added since the filter was last polled."""

    @abstractmethod
    async def uninstall_filter(self, filter_id: int) -> bool:
        """Remove a filter; returns whether it existed."""

    @abstractmethod
    async def get_new_filter(self, filter: Filter) -> int:
        """Install a log filter; returns its id."""

    @abstractmethod
    async def get_new_block_filter(self) -> int:
        """Install a new-block filter; returns its id."""

    @abstractmethod
    async def get_new_pending_transaction_filter(self) -> int:
        """Install a pending-transaction filter; returns its id."""

    @abstractmethod
    async def chain_id(self) -> int:
        """Chain id the backend serves."""

    @abstractmethod
    async def get_fee_history(
        self, block_count: int, last_block: int, reward_percentiles: list[float]
    ) -> FeeHistory:
        """Base fees and priority-fee percentiles for a range of blocks."""