"""Root hashes of Merkle-Patricia tries built from key/value pairs."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping

from . import rlp
from .proof import EMPTY_STORAGE_HASH, keccak256

EMPTY_TRIE_ROOT = EMPTY_STORAGE_HASH

_Nibbles = tuple


def _nibbles(key: bytes) -> _Nibbles:
    return tuple(n for byte in key for n in (byte >> 4, byte & 0x0F))


def _hex_prefix(nibbles, leaf: bool) -> bytes:
    flag = 2 if leaf else 0
    if len(nibbles) % 2:
        padded = (flag + 1, *nibbles)
    else:
        padded = (flag, 0, *nibbles)
    pairs = iter(padded)
    return bytes((high << 4) | low for high, low in zip(pairs, pairs))


def _common_prefix(keys: list[_Nibbles]) -> _Nibbles:
    prefix: list[int] = []
    for column in zip(*keys):
        if any(nibble != column[0] for nibble in column):
            break
        prefix.append(column[0])
    return tuple(prefix)


def _ref(node):
    """Embed a node in its parent when short, otherwise refer to it by hash."""
    encoded = rlp.encode(node)
    return node if len(encoded) < 32 else keccak256(encoded)


def _build(pairs: list[tuple[_Nibbles, bytes]]):
    if len(pairs) == 1:
        key, value = pairs[0]
        return [_hex_prefix(key, True), value]

    prefix = _common_prefix([key for key, _ in pairs])
    if prefix:
        rest = [(key[len(prefix):], value) for key, value in pairs]
        return [_hex_prefix(prefix, False), _ref(_build(rest))]

    branch: list = [b""] * 17
    groups: dict[int, list[tuple[_Nibbles, bytes]]] = defaultdict(list)
    for key, value in pairs:
        if key:
            groups[key[0]].append((key[1:], value))
        else:
            branch[16] = value
    for nibble, group in groups.items():
        branch[nibble] = _ref(_build(group))
    return branch


def trie_root(items) -> bytes:
    """Root hash of the trie holding ``items`` (a mapping or iterable of pairs).

    Later pairs with the same key replace earlier ones; empty values are absent.
    """
    entries = dict(items.items() if isinstance(items, Mapping) else items)
    pairs = [
        (_nibbles(bytes(key)), bytes(value)) for key, value in entries.items() if value
    ]
    if not pairs:
        return EMPTY_TRIE_ROOT
    return keccak256(rlp.encode(_build(pairs)))


def ordered_trie_root(values: Iterable) -> bytes:
    """Root hash of a trie keyed by the RLP encoding of each value's position."""
    return trie_root((rlp.encode(index), value) for index, value in enumerate(values))