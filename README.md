# lightexec

`lightexec` provides the pieces you need to check Ethereum execution-layer data that
comes from an untrusted JSON-RPC endpoint. The checks run against block headers that you
already trust. The package covers RLP encoding, Keccak-256, Merkle-Patricia proof
verification, trie root computation, a bounded in-memory history of trusted blocks, and
an asynchronous JSON-RPC client.

## Installation

```
pip install lightexec
```

To run the test suite:

```
pip install "lightexec[test]"
pytest
```

## Modules

- `lightexec.rlp`: `encode(item)` takes bytes, non-negative integers and nested
  lists or tuples of them. `decode(data)` decodes exactly one item and rejects
  non-canonical or trailing input with `ValueError`. `decode_list(data)` decodes a flat
  list of byte strings.
- `lightexec.proof`:
  - `keccak256(data)` hashes data with Keccak-256.
  - `verify_proof(proof, root, path, value)` returns `True` when the proof nodes show
    `value` at `path` under `root`. It also accepts an exclusion proof when `value` is
    an empty slot (`b"\x80"`) or an empty account. A malformed proof gives `False`.
  - `encode_account(proof)` returns the state-trie encoding of an account from a
    `ProofResponse`.
  - The nibble helpers `get_nibble`, `skip_length`, `paths_match`,
    `shared_prefix_length` and `is_empty_value` are public as well.
- `lightexec.trie`:
  - `trie_root(items)` returns the root hash of a trie built from a mapping or from
    key/value pairs. When a key repeats, the later pair wins. Empty values are left out.
    An empty trie gives `EMPTY_TRIE_ROOT`.
  - `ordered_trie_root(values)` keys each value by the RLP encoding of its position,
    which is how transaction and receipt tries are built.
- `lightexec.types` holds dataclasses for `Block`, `Transactions`, `Transaction`,
  `Account`, `CallOpts`, `Log`, `TransactionReceipt`, `Filter`, `StorageProof`,
  `ProofResponse`, `AccessListItem` and `FeeHistory`.
  - Several of them have a `from_json` that parses JSON-RPC objects.
  - `Log.rlp_bytes()` gives a log's consensus encoding.
  - `BlockTag.parse` accepts `"latest"`, `"finalized"`, an integer, or a decimal or hex
    number string such as `"0x72e9b5"`.
- `lightexec.state.State` keeps the last `history_length` blocks (64 by default) and the
  finalized block. It indexes them by number, by hash and by the hashes of their
  transactions.
  - Feed it with `push_block` and `push_finalized_block`, or with `run(block_queue,
    finalized_queue)`, which reads two `asyncio.Queue`s until cancelled and ignores
    `None`.
  - A finalized block whose hash differs from the stored block at the same height
    replaces that block.
- `lightexec.rpc.base.ExecutionRpc` is the abstract interface of a backend.
- `lightexec.rpc.http_rpc.HttpRpc` implements that interface over HTTP with `httpx`.
  - Responses that signal rate limiting are retried up to `max_retries` times (100 by
    default). Rate limiting means HTTP 429, error code 429 or -32005, or "rate limit" in
    the error message.
  - The wait between attempts grows linearly from `initial_backoff` seconds.
  - Transport failures, HTTP errors and JSON-RPC errors raise
    `lightexec.errors.RpcError`.
  - `HttpRpc` is an async context manager. `aclose()` closes its HTTP client.
- `lightexec.errors` defines:
  - `ExecutionError` and its subclasses, for example `InvalidAccountProof`,
    `InvalidStorageProof`, `CodeHashMismatch`, `ReceiptRootMismatch`,
    `TooManyLogsToProve` and `BlockNotFoundError`.
  - The EVM errors `Revert`, `GenericEvmError` and `RpcError`.
  - `decode_revert_reason(data)`, which reads an ABI-encoded revert string.

## Example: checking an account against a trusted block

```python
from lightexec.errors import InvalidAccountProof
from lightexec.proof import encode_account, keccak256, verify_proof
from lightexec.rpc.http_rpc import HttpRpc
from lightexec.state import State


async def balance(address: bytes, trusted_block) -> int:
    state = State(history_length=64)
    await state.push_block(trusted_block)
    block = await state.get_block("latest")

    async with HttpRpc("http://localhost:8545") as rpc:
        proof = await rpc.get_proof(address, [], block.number)

    if not verify_proof(
        proof.account_proof, block.state_root, keccak256(address), encode_account(proof)
    ):
        raise InvalidAccountProof(address)
    return proof.balance
```

`trusted_block` must come from a source you already trust, such as a consensus-layer
light client. `lightexec` only checks data against the blocks you give it.

## Example: proofs and trie roots

```python
from lightexec import rlp
from lightexec.proof import keccak256, verify_proof
from lightexec.trie import trie_root

leaf = rlp.encode([b"\x20\x12\x34", b"value"])  # leaf node for key 0x1234
root = trie_root({b"\x12\x34": b"value"})
assert root == keccak256(leaf)
assert verify_proof([leaf], root, b"\x12\x34", b"value")
```

## What the package does not do

`lightexec` has no ready-made client that ties `State` and an `ExecutionRpc` together.
Nothing in it fetches accounts, receipts or logs and checks them in one call. You make
each check yourself from the pieces above:

- account and storage proofs with `verify_proof` and `encode_account`;
- receipts against `Block.receipts_root` with `ordered_trie_root`;
- logs against their receipts with `Log.rlp_bytes`.

The package has no EVM for running calls locally. It has no file-backed backend for
tests and no command-line program.