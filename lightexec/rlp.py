"""Recursive Length Prefix (RLP) encoding and decoding."""

from __future__ import annotations

from typing import Union

Item = Union[bytes, list]


def _int_to_bytes(value: int) -> bytes:
    if value == 0:
        return b""
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def _length_prefix(length: int, offset: int) -> bytes:
    if length < 56:
        return bytes([offset + length])
    length_bytes = _int_to_bytes(length)
    return bytes([offset + 55 + len(length_bytes)]) + length_bytes


def encode(item) -> bytes:
    """Encode bytes, non-negative integers and (nested) sequences of them."""
    if isinstance(item, (bytes, bytearray, memoryview)):
        data = bytes(item)
        if len(data) == 1 and data[0] < 0x80:
            return data
        return _length_prefix(len(data), 0x80) + data
    if isinstance(item, int):
        if item < 0:
            raise ValueError("cannot RLP-encode a negative integer")
        return encode(_int_to_bytes(item))
    if isinstance(item, (list, tuple)):
        payload = b"".join(encode(element) for element in item)
        return _length_prefix(len(payload), 0xC0) + payload
    raise TypeError(f"cannot RLP-encode value of type {type(item).__name__}")


def _header(data: bytes, pos: int, limit: int, base: int) -> tuple[int, int]:
    short = data[pos] - base
    if short <= 55:
        start, length = pos + 1, short
    else:
        length_size = short - 55
        start = pos + 1 + length_size
        if start > limit:
            raise ValueError("truncated RLP length")
        length_bytes = data[pos + 1 : start]
        if length_bytes[0] == 0:
            raise ValueError("RLP length has leading zeros")
        length = int.from_bytes(length_bytes, "big")
        if length < 56:
            raise ValueError("non-canonical RLP long length")
    if start + length > limit:
        raise ValueError("truncated RLP item")
    return start, length


def _decode_at(data: bytes, pos: int, limit: int) -> tuple[Item, int]:
    if pos >= limit:
        raise ValueError("unexpected end of RLP data")
    prefix = data[pos]
    if prefix < 0x80:
        return data[pos : pos + 1], pos + 1
    if prefix < 0xC0:
        start, length = _header(data, pos, limit, 0x80)
        if length == 1 and data[start] < 0x80:
            raise ValueError("non-canonical RLP single byte")
        return data[start : start + length], start + length
    start, length = _header(data, pos, limit, 0xC0)
    end = start + length
    items: list = []
    cursor = start
    while cursor < end:
        element, cursor = _decode_at(data, cursor, end)
        items.append(element)
    return items, end


def decode(data) -> Item:
    """Decode one RLP item; the input must hold exactly that item."""
    raw = bytes(data)
    item, end = _decode_at(raw, 0, len(raw))
    if end != len(raw):
        raise ValueError("trailing bytes after RLP item")
    return item


def decode_list(data) -> list[bytes]:
    """Decode an RLP list whose elements are all byte strings."""
    item = decode(data)
    if not isinstance(item, list):
        raise ValueError("RLP item is not a list")
    if any(isinstance(element, list) for element in item):
        raise ValueError("RLP list holds a nested list")
    return item