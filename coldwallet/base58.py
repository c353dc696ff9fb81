"""Base58 and Base58Check encoding and decoding."""

from __future__ import annotations

import hashlib
from typing import Callable

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_DIGITS = {ord(char): value for value, char in enumerate(_ALPHABET)}


def _format_version(version: bytes) -> str:
    return "[" + ", ".join(f"{byte:#04x}" for byte in version) + "]"


_MESSAGES: dict[str, Callable[..., str]] = {
    "bad_byte": lambda byte: f"invalid base58 character {byte:#x}",
    "bad_checksum": lambda expected, actual: (
        f"base58ck checksum {actual:#x} does not match expected {expected:#x}"
    ),
    "invalid_length": lambda length: f"length {length} invalid for this base58 type",
    "invalid_extended_key_version": lambda version: (
        f"extended key version {_format_version(version)} is invalid for this base58 type"
    ),
    "invalid_address_version": lambda version: (
        f"address version {version} is invalid for this base58 type"
    ),
    "too_short": lambda length: "base58ck data not even long enough for a checksum",
}


class Base58Error(ValueError):
    """Failure to decode Base58 data.

    ``kind`` is one of ``bad_byte``, ``bad_checksum`` (values: expected, actual),
    ``invalid_length``, ``invalid_extended_key_version``,
    ``invalid_address_version`` and ``too_short``; ``values`` holds the details.
    """

    def __init__(self, kind: str, *values: object) -> None:
        try:
            template = _MESSAGES[kind]
        except KeyError:
            raise ValueError(f"unknown base58 error kind {kind!r}") from None
        super().__init__(template(*values))
        self.kind = kind
        self.values = values


def _sha256d(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def decode(data: str) -> bytes:
    """Decode a Base58 string into bytes."""
    raw = data.encode("utf-8")
    number = 0
    for byte in raw:
        digit = _DIGITS.get(byte)
        if digit is None:
            raise Base58Error("bad_byte", byte)
        number = number * 58 + digit
    leading = len(raw) - len(raw.lstrip(b"1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return bytes(leading) + body


def decode_check(data: str) -> bytes:
    """Decode a Base58Check string, verifying and stripping its checksum."""
    decoded = decode(data)
    if len(decoded) < 4:
        raise Base58Error("too_short", len(decoded))
    payload, checksum = decoded[:-4], decoded[-4:]
    expected = int.from_bytes(_sha256d(payload)[:4], "little")
    actual = int.from_bytes(checksum, "little")
    if expected != actual:
        raise Base58Error("bad_checksum", expected, actual)
    return payload


def encode(data: bytes) -> str:
    """Encode bytes as a Base58 string."""
    data = bytes(data)
    leading = len(data) - len(data.lstrip(b"\x00"))
    number = int.from_bytes(data, "big")
    chars: list[str] = []
    while number:
        number, remainder = divmod(number, 58)
        chars.append(_ALPHABET[remainder])
    return _ALPHABET[0] * leading + "".join(reversed(chars))


def encode_check(data: bytes) -> str:
    """Encode bytes as Base58 with the first four bytes of their double SHA-256 appended."""
    data = bytes(data)
    return encode(data + _sha256d(data)[:4])