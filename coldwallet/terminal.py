"""Keychains, terminal derivation components and derived addresses."""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from coldwallet.address import Address, AddressParseError
from coldwallet.index import DerivationIndex, IndexParseError, NormalIndex

_U8_MAX = 0xFF
_DIGITS = frozenset("0123456789")


def _parse_u8(s: str) -> int:
    """Parse an unsigned 8-bit decimal number as strictly as an integer parser does."""
    prefix = "invalid index string representation - "
    if not s:
        raise IndexParseError(prefix + "cannot parse integer from empty string", s)
    digits = s[1:] if s.startswith("+") else s
    if not digits or not set(digits) <= _DIGITS:
        raise IndexParseError(prefix + "invalid digit found in string", s)
    value = int(digits)
    if value > _U8_MAX:
        raise IndexParseError(prefix + "number too large to fit in target type", s)
    return value


@dataclass(frozen=True, order=True)
class Keychain:
    """Keychain number: the unhardened segment preceding the address index."""

    value: int = 0

    OUTER: ClassVar[Keychain]
    INNER: ClassVar[Keychain]

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError("keychain must be an integer")
        if not 0 <= self.value <= _U8_MAX:
            raise ValueError(f"keychain {self.value} does not fit into 8 bits")

    @classmethod
    def parse(cls, s: str) -> Keychain:
        """Parse a decimal keychain number."""
        return cls(_parse_u8(s))

    def is_hardened(self) -> bool:
        return False

    def child_number(self) -> int:
        return self.value

    def index(self) -> int:
        return self.value

    def normal_index(self) -> NormalIndex:
        """The keychain as an unhardened derivation index."""
        return NormalIndex(self.value)

    def derivation_index(self) -> DerivationIndex:
        """The keychain as a derivation index."""
        return DerivationIndex(self.normal_index())

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


Keychain.OUTER = Keychain(0)
Keychain.INNER = Keychain(1)


def _as_keychain(keychain: Union[Keychain, int]) -> Keychain:
    if isinstance(keychain, Keychain):
        return keychain
    return Keychain(keychain)


def _as_normal_index(index: Union[NormalIndex, int]) -> NormalIndex:
    if isinstance(index, NormalIndex):
        return index
    if isinstance(index, int) and not isinstance(index, bool):
        return NormalIndex(index)
    raise TypeError("index must be a NormalIndex or an integer")


_TERMINAL_MESSAGES = {
    "no_keychain": lambda: (
        "terminal derivation path must start with keychain index prefixed with '&'."
    ),
    "invalid_keychain": lambda err: (
        "keychain index in terminal derivation path is not a number."
    ),
    "index": lambda err: str(err),
    "invalid_components": lambda text: (
        f"derivation path '{text}' is not a terminal path - terminal path must contain "
        "exactly two components."
    ),
}


class TerminalParseError(ValueError):
    """A string is not a terminal derivation path.

    ``kind`` is ``no_keychain``, ``invalid_keychain``, ``index`` or
    ``invalid_components``; ``values`` holds the details.
    """

    def __init__(self, kind: str, *values: object) -> None:
        try:
            template = _TERMINAL_MESSAGES[kind]
        except KeyError:
            raise ValueError(f"unknown terminal parse error kind {kind!r}") from None
        super().__init__(template(*values))
        self.kind = kind
        self.values = values


@dataclass(frozen=True, order=True)
class Terminal:
    """Final two derivation components: keychain and address index."""

    keychain: Keychain
    index: NormalIndex

    def __post_init__(self) -> None:
        object.__setattr__(self, "keychain", _as_keychain(self.keychain))
        object.__setattr__(self, "index", _as_normal_index(self.index))

    @classmethod
    def change(cls, index: Union[NormalIndex, int]) -> Terminal:
        """Terminal on the change (inner) keychain."""
        return cls(Keychain.INNER, index)

    @classmethod
    def parse(cls, s: str) -> Terminal:
        """Parse ``&<keychain>/<index>``."""
        parts = s.split("/")
        if len(parts) != 2:
            raise TerminalParseError("invalid_components", s)
        keychain_str, index_str = parts
        if not keychain_str.startswith("&"):
            raise TerminalParseError("no_keychain")
        try:
            keychain = Keychain.parse(keychain_str.lstrip("&"))
        except IndexParseError as err:
            raise TerminalParseError("invalid_keychain", err) from err
        try:
            index = NormalIndex.parse(index_str)
        except IndexParseError as err:
            raise TerminalParseError("index", err) from err
        return cls(keychain, index)

    def __str__(self) -> str:
        return f"&{self.keychain}/{self.index}"


_DERIVED_ADDR_MESSAGES = {
    "no_separator": lambda: "address must be followed by a & and derivation information",
    "address": lambda err: str(err),
    "terminal": lambda err: str(err),
}


class DerivedAddrParseError(ValueError):
    """A string is not an address followed by its terminal derivation.

    ``kind`` is ``no_separator``, ``address`` or ``terminal``; ``values`` holds
    the underlying error where there is one.
    """

    def __init__(self, kind: str, *values: object) -> None:
        try:
            template = _DERIVED_ADDR_MESSAGES[kind]
        except KeyError:
            raise ValueError(f"unknown derived address parse error kind {kind!r}") from None
        super().__init__(template(*values))
        self.kind = kind
        self.values = values


@dataclass(frozen=True)
class DerivedAddr:
    """Address together with the terminal derivation it came from.

    Ordering considers the terminal alone.
    """

    addr: Address
    terminal: Terminal

    @classmethod
    def new(
        cls,
        addr: Address,
        keychain: Union[Keychain, int],
        index: Union[NormalIndex, int],
    ) -> DerivedAddr:
        return cls(addr, Terminal(keychain, index))

    @classmethod
    def parse(cls, s: str) -> DerivedAddr:
        """Parse ``<address>&<keychain>/<index>``."""
        pos = s.find("&")
        if pos < 0:
            raise DerivedAddrParseError("no_separator")
        addr_str, terminal_str = s[:pos], s[pos:]
        try:
            addr = Address.parse(addr_str)
        except AddressParseError as err:
            raise DerivedAddrParseError("address", err) from err
        try:
            terminal = Terminal.parse(terminal_str)
        except TerminalParseError as err:
            raise DerivedAddrParseError("terminal", err) from err
        return cls(addr, terminal)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DerivedAddr):
            return NotImplemented
        return self.terminal < other.terminal

    def __le__(self, other: object) -> bool:
        if not isinstance(other, DerivedAddr):
            return NotImplemented
        return self.terminal <= other.terminal

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, DerivedAddr):
            return NotImplemented
        return self.terminal > other.terminal

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, DerivedAddr):
            return NotImplemented
        return self.terminal >= other.terminal

    def __str__(self) -> str:
        return f"{self.addr}{self.terminal}"


class Derive(ABC):
    """Something that derives values for a keychain and an address index."""

    @abstractmethod
    def default_keychain(self) -> Keychain:
        """Keychain used when none is given."""

    @abstractmethod
    def keychains(self) -> set[Keychain]:
        """All keychains supported."""

    @abstractmethod
    def derive(self, keychain: Keychain, index: NormalIndex) -> Any:
        """Value derived at ``keychain``/``index``."""

    def derive_batch(
        self,
        keychain: Union[Keychain, int],
        start: Union[NormalIndex, int],
        max_count: int,
    ) -> list[Any]:
        """Values derived at consecutive indexes from ``start``.

        At least one value is derived; derivation stops after ``max_count``
        values or at the last unhardened index.
        """
        if not isinstance(max_count, int) or not 0 <= max_count <= _U8_MAX:
            raise ValueError(f"batch size {max_count!r} does not fit into 8 bits")
        keychain = _as_keychain(keychain)
        index = _as_normal_index(start)
        batch = []
        while True:
            batch.append(self.derive(keychain, index))
            following = index.checked_inc()
            if following is None or len(batch) >= max_count:
                return batch
            index = following


functools.update_wrapper  # keep functools import used for consistency with other modules