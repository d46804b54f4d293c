"""Merkle-Patricia trie proof verification."""

from __future__ import annotations

from Crypto.Hash import keccak

from . import rlp
from .types import ProofResponse

EMPTY_STORAGE_HASH = bytes.fromhex(
    "56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"
)
EMPTY_CODE_HASH = bytes.fromhex(
    "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
)
_EMPTY_ACCOUNT = rlp.encode([b"", b"", EMPTY_STORAGE_HASH, EMPTY_CODE_HASH])


def keccak256(data) -> bytes:
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def get_nibble(path, offset: int) -> int:
    byte = path[offset // 2]
    return byte >> 4 if offset % 2 == 0 else byte & 0x0F


def skip_length(node) -> int:
    """Number of nibbles taken by a hex-prefix header of an encoded path."""
    if not node:
        return 0
    return {0: 2, 1: 1, 2: 2, 3: 1}.get(get_nibble(node, 0), 0)


def paths_match(p1, s1: int, p2, s2: int) -> bool:
    length = len(p1) * 2 - s1
    if length != len(p2) * 2 - s2:
        return False
    return all(
        get_nibble(p1, s1 + offset) == get_nibble(p2, s2 + offset)
        for offset in range(length)
    )


def shared_prefix_length(path, path_offset: int, node_path) -> int:
    skip = skip_length(node_path)
    length = min(len(node_path) * 2 - skip, len(path) * 2 - path_offset)
    shared = 0
    for i in range(length):
        if get_nibble(path, i + path_offset) != get_nibble(node_path, i + skip):
            break
        shared += 1
    return shared


def is_empty_value(value) -> bool:
    """True for an empty storage slot or an empty account."""
    value = bytes(value)
    return value == b"\x80" or value == _EMPTY_ACCOUNT


def _walk(proof, root: bytes, path: bytes, value: bytes) -> bool:
    expected = root
    offset = 0
    last = len(proof) - 1
    for i, node in enumerate(proof):
        node = bytes(node)
        if expected != keccak256(node):
            return False
        items = rlp.decode_list(node)
        if len(items) == 17:
            nibble = get_nibble(path, offset)
            if i == last:
                # exclusion proof
                if not items[nibble] and is_empty_value(value):
                    return True
            else:
                expected = items[nibble]
                offset += 1
        elif len(items) == 2:
            node_path = items[0]
            skip = skip_length(node_path)
            if i == last:
                matches = paths_match(node_path, skip, path, offset)
                if not matches and is_empty_value(value):
                    return True
                if items[1] == value:
                    return matches
            else:
                prefix = shared_prefix_length(path, offset, node_path)
                if prefix < len(node_path) * 2 - skip:
                    # divergent path before the end of the proof
                    return False
                offset += prefix
                expected = items[1]
        else:
            return False
    return False


def verify_proof(proof, root, path, value) -> bool:
    """Check that ``value`` sits (or, if empty, is absent) at ``path`` under ``root``."""
    try:
        return _walk(proof, bytes(root), bytes(path), bytes(value))
    except (ValueError, IndexError):
        return False


def encode_account(proof: ProofResponse) -> bytes:
    """RLP encoding of an account as stored in the state trie."""
    return rlp.encode([proof.nonce, proof.balance, proof.storage_hash, proof.code_hash])