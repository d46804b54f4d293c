"""RLP, Merkle-Patricia proofs, trie roots, block history and JSON-RPC access for Ethereum execution-layer data."""

__version__ = "0.1.0"