import pytest

from coldwallet.base58 import Base58Error, decode, decode_check, encode, encode_check

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


@pytest.mark.parametrize(
    "data",
    [b"", b"\x00", b"\x00\x00\x01", b"hello world", bytes(range(256)), b"\xff" * 40],
)
def test_round_trip(data):
    assert decode(encode(data)) == data


@pytest.mark.parametrize("data", [b"", b"\x00\x05", b"payload", bytes(range(21))])
def test_check_round_trip(data):
    assert decode_check(encode_check(data)) == data


def test_leading_zeros_become_ones():
    assert encode(bytes(3)) == "111"


def test_known_vector():
    assert encode(b"hello world") == "StV1DL6CwTryKyV"


def test_encoded_uses_only_alphabet():
    data = bytes(range(1, 200))
    text = encode(data)
    assert text
    assert set(text) <= set(ALPHABET)
    assert decode(text) == data


def test_check_adds_four_bytes():
    data = b"abcdef"
    assert decode(encode_check(data))[:-4] == data
    assert len(decode(encode_check(data))) == len(data) + 4


def test_bad_byte():
    with pytest.raises(Base58Error) as info:
        decode("12O")
    assert info.value.kind == "bad_byte"
    assert info.value.values == (ord("O"),)


def test_non_ascii_is_bad_byte():
    with pytest.raises(Base58Error) as info:
        decode("1é")
    assert info.value.kind == "bad_byte"
    assert info.value.values == ("é".encode()[0],)


def test_too_short():
    with pytest.raises(Base58Error) as info:
        decode_check(encode(b"\x01\x02"))
    assert info.value.kind == "too_short"
    assert info.value.values == (2,)


def test_bad_checksum():
    raw = bytearray(decode(encode_check(b"some data")))
    raw[-1] ^= 0x01
    with pytest.raises(Base58Error) as info:
        decode_check(encode(bytes(raw)))
    assert info.value.kind == "bad_checksum"
    expected, actual = info.value.values
    assert expected != actual
    assert actual == int.from_bytes(bytes(raw[-4:]), "little")


def test_error_message_for_invalid_length():
    err = Base58Error("invalid_length", 17)
    assert str(err) == "length 17 invalid for this base58 type"


def test_unknown_error_kind():
    with pytest.raises(ValueError):
        Base58Error("no_such_kind", 1)