"""Bitcoin addresses: payloads, scriptPubkey mapping and string forms."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional, Union

from coldwallet import base58
from coldwallet.base58 import Base58Error
from coldwallet.network import AddressNetwork, Network

PUBKEY_ADDRESS_PREFIX_MAIN = 0x00
"""Mainnet pubkey address prefix."""
SCRIPT_ADDRESS_PREFIX_MAIN = 0x05
"""Mainnet script address prefix."""
PUBKEY_ADDRESS_PREFIX_TEST = 0x6F
"""Test network (testnet, signet, regtest) pubkey address prefix."""
SCRIPT_ADDRESS_PREFIX_TEST = 0xC4
"""Test network (testnet, signet, regtest) script address prefix."""

_OP_0 = 0x00
_OP_1 = 0x51
_OP_DUP = 0x76
_OP_HASH160 = 0xA9
_OP_EQUAL = 0x87
_OP_EQUALVERIFY = 0x88
_OP_CHECKSIG = 0xAC

_SECP256K1_P = 0xFFFFFFFF_FFFFFFFF_FFFFFFFF_FFFFFFFF_FFFFFFFF_FFFFFFFF_FFFFFFFE_FFFFFC2F


def is_valid_xonly_key(data: bytes) -> bool:
    """Whether ``data`` is a valid BIP340 x-only public key on secp256k1."""
    data = bytes(data)
    if len(data) != 32:
        return False
    x = int.from_bytes(data, "big")
    if x >= _SECP256K1_P:
        return False
    y_squared = (pow(x, 3, _SECP256K1_P) + 7) % _SECP256K1_P
    y = pow(y_squared, (_SECP256K1_P + 1) // 4, _SECP256K1_P)
    return y * y % _SECP256K1_P == y_squared


# --- Bech32 / Bech32m -------------------------------------------------------

_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_CHARSET_MAP = {char: value for value, char in enumerate(_CHARSET)}
_BECH32M_CONST = 0x2BC830A3


class _Variant(enum.Enum):
    BECH32 = "Bech32"
    BECH32M = "Bech32m"


class _Bech32Error(ValueError):
    """Malformed Bech32 string."""


def _polymod(values: list[int]) -> int:
    generators = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ value
        for bit, generator in enumerate(generators):
            if (top >> bit) & 1:
                chk ^= generator
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _bech32_decode(s: str) -> tuple[str, list[int], _Variant]:
    pos = s.rfind("1")
    if pos < 0:
        raise _Bech32Error('missing human-readable separator, "1"')
    hrp, data = s[:pos], s[pos + 1:]
    if not hrp or len(data) < 6:
        raise _Bech32Error("invalid length")
    has_lower = has_upper = False
    for char in hrp:
        if not 33 <= ord(char) <= 126:
            raise _Bech32Error(f"invalid character (code={ord(char)})")
        has_lower |= char.islower()
        has_upper |= char.isupper()
    values = []
    for char in data:
        value = _CHARSET_MAP.get(char.lower()) if char.isascii() else None
        if value is None:
            raise _Bech32Error(f"invalid character (code={ord(char)})")
        has_lower |= char.islower()
        has_upper |= char.isupper()
        values.append(value)
    if has_lower and has_upper:
        raise _Bech32Error("mixed-case strings not allowed")
    hrp = hrp.lower()
    check = _polymod(_hrp_expand(hrp) + values)
    if check == 1:
        variant = _Variant.BECH32
    elif check == _BECH32M_CONST:
        variant = _Variant.BECH32M
    else:
        raise _Bech32Error("invalid checksum")
    return hrp, values[:-6], variant


def _bech32_encode(hrp: str, values: list[int], variant: _Variant) -> str:
    const = 1 if variant is _Variant.BECH32 else _BECH32M_CONST
    check = _polymod(_hrp_expand(hrp) + values + [0] * 6) ^ const
    checksum = [(check >> 5 * (5 - i)) & 31 for i in range(6)]
    return hrp + "1" + "".join(_CHARSET[v] for v in values + checksum)


def _to_base32(data: bytes) -> list[int]:
    acc = bits = 0
    out = []
    for byte in data:
        acc = (acc << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append((acc >> bits) & 31)
    if bits:
        out.append((acc << (5 - bits)) & 31)
    return out


def _from_base32(values: list[int]) -> bytes:
    acc = bits = 0
    out = bytearray()
    for value in values:
        acc = (acc << 5) | value
        bits += 5
        while bits >= 8:
            bits -= 8
            out.append((acc >> bits) & 0xFF)
    if bits >= 5 or (acc << (8 - bits)) & 0xFF:
        raise _Bech32Error("invalid padding")
    return bytes(out)


# --- errors ------------------------------------------------------------------

_ADDRESS_ERRORS = {
    "invalid_taproot_key": "scriptPubkey contains invalid BIP340 output pubkey.",
    "unsupported_script_pubkey": (
        "scriptPubkey can't be represented with any known address standard."
    ),
}


class AddressError(ValueError):
    """A scriptPubkey cannot be turned into an address.

    ``kind`` is ``invalid_taproot_key`` or ``unsupported_script_pubkey``.
    """

    def __init__(self, kind: str) -> None:
        try:
            message = _ADDRESS_ERRORS[kind]
        except KeyError:
            raise ValueError(f"unknown address error kind {kind!r}") from None
        super().__init__(message)
        self.kind = kind


_PARSE_MESSAGES: dict[str, Callable[..., str]] = {
    "base58": lambda err: f"wrong Base58 encoding of address data - {err}",
    "bech32": lambda err: f"wrong Bech32 encoding of address data - {err}",
    "invalid_address_version": lambda version: (
        f"proprietary address has an invalid version code {version:#02x}."
    ),
    "invalid_witness_version": lambda version: (
        f"segwit address has an invalid witness version {version:#02x}."
    ),
    "future_taproot_version": lambda length, text: (
        f"unsupported future taproot version in address `{text}` detected by a length "
        f"of {length}."
    ),
    "future_witness_version": lambda version: (
        f"address has an unsupported future witness version {version}."
    ),
    "invalid_bech32_variant": lambda variant: (
        f"address has an invalid Bech32 variant {variant}."
    ),
    "unrecognizable_format": lambda text: f"unrecognized address format in '{text}'.",
    "wrong_public_key_data": lambda: "wrong BIP340 public key",
    "unrecognized_address_type": lambda: (
        "unrecognized address format string; must be one of `P2PKH`, `P2SH`, "
        "`P2WPKH`, `P2WSH`, `P2TR`"
    ),
}


class AddressParseError(ValueError):
    """A string is not a valid address or address type.

    ``kind`` names the failure (``base58``, ``bech32``, ``invalid_address_version``,
    ``invalid_witness_version``, ``future_taproot_version``,
    ``future_witness_version``, ``invalid_bech32_variant``,
    ``unrecognizable_format``, ``wrong_public_key_data``,
    ``unrecognized_address_type``); ``values`` holds the details.
    """

    def __init__(self, kind: str, *values: object) -> None:
        try:
            template = _PARSE_MESSAGES[kind]
        except KeyError:
            raise ValueError(f"unknown address parse error kind {kind!r}") from None
        super().__init__(template(*values))
        self.kind = kind
        self.values = values


# --- address types and payloads ---------------------------------------------


class AddressType(enum.Enum):
    """Address standard."""

    P2PKH = "P2PKH"
    P2SH = "P2SH"
    P2WPKH = "P2WPKH"
    P2WSH = "P2WSH"
    P2TR = "P2TR"

    def witness_version(self) -> Optional[int]:
        """Witness version of the format, or None for pre-SegWit formats."""
        if self in (AddressType.P2WPKH, AddressType.P2WSH):
            return 0
        if self is AddressType.P2TR:
            return 1
        return None

    @classmethod
    def parse(cls, s: str) -> AddressType:
        """Address type from its name, in any case."""
        try:
            return cls(s.upper())
        except ValueError:
            raise AddressParseError("unrecognized_address_type") from None

    def __str__(self) -> str:
        return self.value


class PayloadKind(enum.IntEnum):
    """Kind of data an address carries."""

    PKH = 0
    SH = 1
    WPKH = 2
    WSH = 3
    TR = 4


_PAYLOAD_LENGTHS = {
    PayloadKind.PKH: 20,
    PayloadKind.SH: 20,
    PayloadKind.WPKH: 20,
    PayloadKind.WSH: 32,
    PayloadKind.TR: 32,
}


@dataclass(frozen=True, order=True)
class AddressPayload:
    """Address content: a hash or, for taproot, an output x-only key."""

    kind: PayloadKind
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", PayloadKind(self.kind))
        data = bytes(self.data)
        object.__setattr__(self, "data", data)
        expected = _PAYLOAD_LENGTHS[self.kind]
        if len(data) != expected:
            raise ValueError(
                f"{self.kind.name} payload must be {expected} bytes, not {len(data)}"
            )
        if self.kind is PayloadKind.TR and not is_valid_xonly_key(data):
            raise ValueError("taproot payload is not a valid BIP340 public key")

    @classmethod
    def from_script(cls, script: bytes) -> AddressPayload:
        """Payload of a standard scriptPubkey."""
        script = bytes(script)
        if (
            len(script) == 25
            and script[:3] == bytes([_OP_DUP, _OP_HASH160, 20])
            and script[23:] == bytes([_OP_EQUALVERIFY, _OP_CHECKSIG])
        ):
            return cls(PayloadKind.PKH, script[3:23])
        if (
            len(script) == 23
            and script[:2] == bytes([_OP_HASH160, 20])
            and script[22] == _OP_EQUAL
        ):
            return cls(PayloadKind.SH, script[2:22])
        if len(script) == 22 and script[:2] == bytes([_OP_0, 20]):
            return cls(PayloadKind.WPKH, script[2:])
        if len(script) == 34 and script[:2] == bytes([_OP_0, 32]):
            return cls(PayloadKind.WSH, script[2:])
        if len(script) == 34 and script[:2] == bytes([_OP_1, 32]):
            if not is_valid_xonly_key(script[2:]):
                raise AddressError("invalid_taproot_key")
            return cls(PayloadKind.TR, script[2:])
        raise AddressError("unsupported_script_pubkey")

    def script_pubkey(self) -> bytes:
        """scriptPubkey paying to this payload."""
        if self.kind is PayloadKind.PKH:
            return (
                bytes([_OP_DUP, _OP_HASH160, 20])
                + self.data
                + bytes([_OP_EQUALVERIFY, _OP_CHECKSIG])
            )
        if self.kind is PayloadKind.SH:
            return bytes([_OP_HASH160, 20]) + self.data + bytes([_OP_EQUAL])
        if self.kind is PayloadKind.TR:
            return bytes([_OP_1, 32]) + self.data
        return bytes([_OP_0, len(self.data)]) + self.data

    def into_address(self, network: AddressNetwork) -> Address:
        """Address with this payload on ``network``."""
        return Address(self, network)


def _as_address_network(network: Union[AddressNetwork, Network]) -> AddressNetwork:
    if isinstance(network, Network):
        return network.address_network()
    return AddressNetwork(network)


_HRP_NETWORKS = {
    "bc": AddressNetwork.MAINNET,
    "tb": AddressNetwork.TESTNET,
    "bcrt": AddressNetwork.REGTEST,
}


@dataclass(frozen=True, order=True)
class Address:
    """Address: a payload on a given network."""

    payload: AddressPayload
    network: AddressNetwork

    def __post_init__(self) -> None:
        object.__setattr__(self, "network", _as_address_network(self.network))

    @classmethod
    def with_script(
        cls, script: bytes, network: Union[AddressNetwork, Network]
    ) -> Address:
        """Address for a standard scriptPubkey."""
        return cls(AddressPayload.from_script(script), _as_address_network(network))

    def script_pubkey(self) -> bytes:
        """scriptPubkey corresponding to this address."""
        return self.payload.script_pubkey()

    def is_testnet(self) -> bool:
        """Whether the address is for testnet, signet or regtest."""
        return self.network is not AddressNetwork.MAINNET

    @classmethod
    def parse(cls, s: str) -> Address:
        """Parse a Base58 or Bech32(m) address string."""
        try:
            hrp, values, variant = _bech32_decode(s)
        except _Bech32Error:
            try:
                return cls._parse_base58(s)
            except AddressParseError:
                raise AddressParseError("unrecognizable_format", s) from None
        return cls._parse_bech32(s, hrp, values, variant)

    @classmethod
    def _parse_base58(cls, s: str) -> Address:
        length = len(s.encode("utf-8"))
        if length > 50:
            raise AddressParseError(
                "base58", Base58Error("invalid_length", length * 11 // 15)
            )
        try:
            data = base58.decode_check(s)
        except Base58Error as err:
            raise AddressParseError("base58", err) from None
        if len(data) != 21:
            raise AddressParseError("base58", Base58Error("invalid_length", len(data)))
        prefix, body = data[0], data[1:]
        if prefix == PUBKEY_ADDRESS_PREFIX_MAIN:
            return cls(AddressPayload(PayloadKind.PKH, body), AddressNetwork.MAINNET)
        if prefix == SCRIPT_ADDRESS_PREFIX_MAIN:
            return cls(AddressPayload(PayloadKind.SH, body), AddressNetwork.MAINNET)
        if prefix == PUBKEY_ADDRESS_PREFIX_TEST:
            return cls(AddressPayload(PayloadKind.PKH, body), AddressNetwork.TESTNET)
        if prefix == SCRIPT_ADDRESS_PREFIX_TEST:
            return cls(AddressPayload(PayloadKind.SH, body), AddressNetwork.TESTNET)
        raise AddressParseError("invalid_address_version", prefix)

    @classmethod
    def _parse_bech32(
        cls, s: str, hrp: str, values: list[int], variant: _Variant
    ) -> Address:
        network = _HRP_NETWORKS.get(hrp)
        if network is None:
            return cls._parse_base58(s)
        if not values:
            raise AddressParseError("bech32", _Bech32Error("invalid length"))
        version = values[0]
        if version > 16:
            raise AddressParseError("invalid_witness_version", version)
        try:
            program = _from_base32(values[1:])
        except _Bech32Error as err:
            raise AddressParseError("bech32", err) from None

        if version == 0 and variant is _Variant.BECH32 and len(program) == 20:
            payload = AddressPayload(PayloadKind.WPKH, program)
        elif version == 0 and variant is _Variant.BECH32 and len(program) == 32:
            payload = AddressPayload(PayloadKind.WSH, program)
        elif version == 1 and variant is _Variant.BECH32M and len(program) == 32:
            if not is_valid_xonly_key(program):
                raise AddressParseError("wrong_public_key_data")
            payload = AddressPayload(PayloadKind.TR, program)
        elif version == 1 and variant is _Variant.BECH32M:
            raise AddressParseError("future_taproot_version", len(program), s)
        elif version in (0, 1):
            raise AddressParseError("invalid_bech32_variant", variant.value)
        else:
            raise AddressParseError("future_witness_version", version)
        return cls(payload, network)

    def to_string(self, uppercase: bool = False) -> str:
        """String form; ``uppercase`` applies to Bech32 addresses only."""
        kind = self.payload.kind
        if kind in (PayloadKind.PKH, PayloadKind.SH):
            mainnet = self.network is AddressNetwork.MAINNET
            if kind is PayloadKind.PKH:
                prefix = PUBKEY_ADDRESS_PREFIX_MAIN if mainnet else PUBKEY_ADDRESS_PREFIX_TEST
            else:
                prefix = SCRIPT_ADDRESS_PREFIX_MAIN if mainnet else SCRIPT_ADDRESS_PREFIX_TEST
            return base58.encode_check(bytes([prefix]) + self.payload.data)
        if kind is PayloadKind.TR:
            version, variant = 1, _Variant.BECH32M
        else:
            version, variant = 0, _Variant.BECH32
        text = _bech32_encode(
            self.network.bech32_hrp(), [version] + _to_base32(self.payload.data), variant
        )
        return text.upper() if uppercase else text

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, spec: str) -> str:
        if spec.startswith("#"):
            return format(self.to_string(uppercase=True), spec[1:])
        return format(self.to_string(), spec)