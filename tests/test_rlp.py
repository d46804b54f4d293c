import pytest

from lightexec import rlp


def test_pinned_wire_bytes():
    assert rlp.encode([b"cat", b"dog"]) == b"\xc8\x83cat\x83dog"
    assert rlp.encode(1024) == b"\x82\x04\x00"
    assert rlp.encode(b"a" * 56)[:2] == b"\xb8\x38"


def test_empty_string_and_zero_share_encoding():
    assert rlp.encode(b"") == rlp.encode(0)
    assert rlp.decode(rlp.encode(0)) == b""


def test_single_small_byte_is_its_own_encoding():
    assert rlp.encode(b"\x05") == b"\x05"


@pytest.mark.parametrize(
    "item",
    [
        b"",
        b"\x00",
        b"\x7f",
        b"\x80",
        b"dog",
        b"x" * 55,
        b"y" * 56,
        b"z" * 1000,
        [],
        [b"a", [b"b", []], b"c" * 70],
        [[b""] * 17],
        [b"q" * 30] * 5,
    ],
)
def test_round_trip(item):
    assert rlp.decode(rlp.encode(item)) == item


def test_tuple_encodes_like_list():
    assert rlp.encode((b"a", b"b")) == rlp.encode([b"a", b"b"])


def test_int_round_trip():
    for value in (1, 127, 128, 255, 256, 2**64, 2**255):
        decoded = rlp.decode(rlp.encode(value))
        assert int.from_bytes(decoded, "big") == value
        assert not decoded.startswith(b"\x00")


def test_negative_int_rejected():
    with pytest.raises(ValueError):
        rlp.encode(-1)


def test_unsupported_type_rejected():
    with pytest.raises(TypeError):
        rlp.encode(1.5)


def test_trailing_bytes_rejected():
    with pytest.raises(ValueError):
        rlp.decode(rlp.encode(b"dog") + b"\x00")


def test_truncated_rejected():
    with pytest.raises(ValueError):
        rlp.decode(rlp.encode(b"dogs")[:-1])


def test_non_canonical_single_byte_rejected():
    with pytest.raises(ValueError):
        rlp.decode(bytes([0x81, 0x05]))


def test_non_canonical_long_length_rejected():
    with pytest.raises(ValueError):
        rlp.decode(bytes([0xB8, 0x02]) + b"ab")


def test_empty_input_rejected():
    with pytest.raises(ValueError):
        rlp.decode(b"")


def test_decode_list_returns_elements():
    items = [b"one", b"", b"three" * 20]
    assert rlp.decode_list(rlp.encode(items)) == items


def test_decode_list_rejects_string():
    with pytest.raises(ValueError):
        rlp.decode_list(rlp.encode(b"not a list"))


def test_decode_list_rejects_nested():
    with pytest.raises(ValueError):
        rlp.decode_list(rlp.encode([b"a", [b"b"]]))