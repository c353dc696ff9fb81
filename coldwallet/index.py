"""BIP32 child indexes: normal, hardened and mixed."""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Union

HARDENED_INDEX_BOUNDARY = 1 << 31
"""Boundary after which a 32-bit derivation value is treated as hardened."""

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFF_FFFF
_DIGITS = frozenset("0123456789")


class IndexRangeError(ValueError):
    """A child number or derivation value lies outside its allowed range."""

    def __init__(self, what: str, invalid: int, start: int, end: int) -> None:
        super().__init__(
            f"provided {what} {invalid} is invalid: it lies outside allowed range "
            f"{start}..={end}"
        )
        self.what = what
        self.invalid = invalid
        self.start = start
        self.end = end


class IndexParseError(ValueError):
    """A string does not hold a valid index."""

    def __init__(self, message: str, text: str) -> None:
        super().__init__(message)
        self.text = text


def _require_u32(value: int, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, not {type(value).__name__}")
    if not 0 <= value <= _U32_MAX:
        raise ValueError(f"{name} {value} does not fit into 32 bits")
    return value


def _parse_u32(s: str) -> int:
    """Parse an unsigned 32-bit decimal number with the strictness of a u32 parser."""
    if not s:
        raise IndexParseError(
            "invalid index string representation - cannot parse integer from empty string", s
        )
    digits = s[1:] if s.startswith("+") else s
    if not digits or not set(digits) <= _DIGITS:
        raise IndexParseError(
            "invalid index string representation - invalid digit found in string", s
        )
    value = int(digits)
    if value > _U32_MAX:
        raise IndexParseError(
            "invalid index string representation - number too large to fit in target type", s
        )
    return value


def _check_u16_child(no: int) -> int:
    if not isinstance(no, int) or isinstance(no, bool) or not 0 <= no <= _U16_MAX:
        raise IndexRangeError("child number", no, 0, _U16_MAX)
    return no


def _check_child(index: int) -> int:
    if not isinstance(index, int) or not 0 <= index < HARDENED_INDEX_BOUNDARY:
        raise IndexRangeError("child number", index, 0, HARDENED_INDEX_BOUNDARY)
    return index


class Idx(ABC):
    """Common behaviour of derivation path indexes."""

    __slots__ = ()

    MIN: ClassVar[Idx]
    ZERO: ClassVar[Idx]
    ONE: ClassVar[Idx]
    MAX: ClassVar[Idx]

    @abstractmethod
    def is_hardened(self) -> bool:
        """Whether the index is a hardened one."""

    @abstractmethod
    def child_number(self) -> int:
        """Zero-based child number, always below the hardened boundary."""

    @abstractmethod
    def index(self) -> int:
        """Value used in derivation, offset by the boundary for hardened indexes."""

    @abstractmethod
    def _shifted(self, delta: int) -> Optional[Idx]:
        """Index moved by ``delta`` child numbers, or None when out of range."""

    def to_be_bytes(self) -> bytes:
        """Big-endian four-byte form of the derivation value."""
        return self.index().to_bytes(4, "big")

    def checked_add(self, add: int) -> Optional[Idx]:
        """Index increased by ``add``, or None on overflow."""
        return self._shifted(_require_u32(add, "addend"))

    def checked_sub(self, sub: int) -> Optional[Idx]:
        """Index decreased by ``sub``, or None on underflow."""
        return self._shifted(-_require_u32(sub, "subtrahend"))

    def saturating_add(self, add: int) -> Idx:
        """Index increased by ``add``, clamped at ``MAX``."""
        result = self.checked_add(add)
        return type(self).MAX if result is None else result

    def saturating_sub(self, sub: int) -> Idx:
        """Index decreased by ``sub``, clamped at ``MIN``."""
        result = self.checked_sub(sub)
        return type(self).MIN if result is None else result

    def checked_inc(self) -> Optional[Idx]:
        return self.checked_add(1)

    def checked_dec(self) -> Optional[Idx]:
        return self.checked_sub(1)

    def saturating_inc(self) -> Idx:
        return self.saturating_add(1)

    def saturating_dec(self) -> Idx:
        return self.saturating_sub(1)

    def wrapping_inc(self) -> Idx:
        """Next index, wrapping round to ``MIN`` after ``MAX``."""
        result = self.checked_add(1)
        return type(self).MIN if result is None else result

    def wrapping_dec(self) -> Idx:
        """Previous index, wrapping round to ``MAX`` before ``MIN``."""
        result = self.checked_sub(1)
        return type(self).MAX if result is None else result


@functools.total_ordering
class _ChildIndex(Idx):
    """Index holding a single child number below the hardened boundary."""

    __slots__ = ("_value",)

    def __init__(self, child_number: int = 0) -> None:
        if not isinstance(child_number, int) or isinstance(child_number, bool):
            raise TypeError("child number must be an integer")
        if not 0 <= child_number < HARDENED_INDEX_BOUNDARY:
            raise IndexRangeError("child number", child_number, 0, HARDENED_INDEX_BOUNDARY)
        self._value = child_number

    def child_number(self) -> int:
        return self._value

    def _shifted(self, delta: int) -> Optional[_ChildIndex]:
        value = self._value + delta
        if value < 0 or value >= HARDENED_INDEX_BOUNDARY:
            return None
        return type(self)(value)

    def _key(self, other: object) -> Optional[int]:
        if type(other) is type(self):
            return other._value  # type: ignore[attr-defined]
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        return None

    def __eq__(self, other: object) -> bool:
        key = self._key(other)
        if key is None:
            return NotImplemented
        return self._value == key

    def __lt__(self, other: object) -> bool:
        key = self._key(other)
        if key is None:
            return NotImplemented
        return self._value < key

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"


class NormalIndex(_ChildIndex):
    """Unhardened index; its value is always below 2^31."""

    __slots__ = ()

    def is_hardened(self) -> bool:
        return False

    def index(self) -> int:
        return self._value

    @classmethod
    def from_child_number(cls, no: int) -> NormalIndex:
        """Index from a child number that fits into 16 bits."""
        return cls(_check_u16_child(no))

    @classmethod
    def try_from_child_number(cls, index: int) -> NormalIndex:
        """Index from any child number below the hardened boundary."""
        return cls(_check_child(index))

    @classmethod
    def try_from_index(cls, value: int) -> NormalIndex:
        """Index from a derivation value, which must be below the boundary."""
        try:
            return cls.try_from_child_number(value)
        except IndexRangeError as err:
            raise IndexRangeError("index", err.invalid, err.start, err.end) from None

    @classmethod
    def parse(cls, s: str) -> NormalIndex:
        """Parse a decimal child number."""
        value = _parse_u32(s)
        try:
            return cls.try_from_child_number(value)
        except IndexRangeError as err:
            raise IndexParseError(str(err), s) from err

    def __str__(self) -> str:
        return str(self._value)

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


class HardenedIndex(_ChildIndex):
    """Hardened index; holds the zero-based child number."""

    __slots__ = ()

    def is_hardened(self) -> bool:
        return True

    def index(self) -> int:
        return self._value + HARDENED_INDEX_BOUNDARY

    @classmethod
    def from_child_number(cls, no: int) -> HardenedIndex:
        """Index from a child number that fits into 16 bits."""
        return cls(_check_u16_child(no))

    @classmethod
    def try_from_child_number(cls, index: int) -> HardenedIndex:
        """Index from any child number below the hardened boundary."""
        return cls(_check_child(index))

    @classmethod
    def try_from_index(cls, value: int) -> HardenedIndex:
        """Index from a derivation value; values below the boundary count as child numbers."""
        if not isinstance(value, int) or not 0 <= value <= _U32_MAX:
            raise IndexRangeError("index", value, HARDENED_INDEX_BOUNDARY, _U32_MAX)
        if value < HARDENED_INDEX_BOUNDARY:
            return cls(value)
        return cls(value - HARDENED_INDEX_BOUNDARY)

    @classmethod
    def parse(cls, s: str) -> HardenedIndex:
        """Parse a child number followed by ``h``, ``H`` or ``'``."""
        if not s or s[-1] not in "hH'":
            raise IndexParseError(
                f"expected hardened index value instead of the provided unhardened {s}", s
            )
        value = _parse_u32(s[:-1])
        try:
            return cls.try_from_child_number(value)
        except IndexRangeError as err:
            raise IndexParseError(str(err), s) from err

    def __str__(self) -> str:
        return f"{self._value}h"

    def __format__(self, spec: str) -> str:
        if spec.startswith("#"):
            return format(f"{self._value}'", spec[1:])
        return format(str(self), spec)


@functools.total_ordering
class DerivationIndex(Idx):
    """Index that is either normal or hardened."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Union[NormalIndex, HardenedIndex]) -> None:
        if not isinstance(inner, (NormalIndex, HardenedIndex)):
            raise TypeError("derivation index wraps a NormalIndex or a HardenedIndex")
        self._inner = inner

    @property
    def inner(self) -> Union[NormalIndex, HardenedIndex]:
        return self._inner

    @classmethod
    def normal(cls, child_number: int) -> DerivationIndex:
        return cls(NormalIndex.from_child_number(child_number))

    @classmethod
    def hardened(cls, child_number: int) -> DerivationIndex:
        return cls(HardenedIndex.from_child_number(child_number))

    @classmethod
    def from_index(cls, value: int) -> DerivationIndex:
        """Index from a 32-bit derivation value."""
        _require_u32(value, "index")
        if value < HARDENED_INDEX_BOUNDARY:
            return cls(NormalIndex(value))
        return cls(HardenedIndex(value - HARDENED_INDEX_BOUNDARY))

    @classmethod
    def try_from_index(cls, value: int) -> DerivationIndex:
        return cls.from_index(value)

    @classmethod
    def parse(cls, s: str) -> DerivationIndex:
        """Parse a normal index, or a hardened one ending with ``h``, ``H`` or ``*``."""
        if s and s[-1] in "hH*":
            return cls(HardenedIndex.parse(s))
        return cls(NormalIndex.parse(s))

    def is_hardened(self) -> bool:
        return self._inner.is_hardened()

    def child_number(self) -> int:
        return self._inner.child_number()

    def index(self) -> int:
        return self._inner.index()

    def _shifted(self, delta: int) -> Optional[DerivationIndex]:
        moved = self._inner._shifted(delta)
        return None if moved is None else DerivationIndex(moved)

    def _order(self) -> tuple[bool, int]:
        return self._inner.is_hardened(), self._inner.child_number()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DerivationIndex):
            return NotImplemented
        return self._order() == other._order()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DerivationIndex):
            return NotImplemented
        return self._order() < other._order()

    def __hash__(self) -> int:
        return hash(self._order())

    def __repr__(self) -> str:
        return f"DerivationIndex({self._inner!r})"

    def __str__(self) -> str:
        return str(self._inner)

    def __format__(self, spec: str) -> str:
        return format(self._inner, spec)


NormalIndex.ZERO = NormalIndex.MIN = NormalIndex(0)
NormalIndex.ONE = NormalIndex(1)
NormalIndex.MAX = NormalIndex(HARDENED_INDEX_BOUNDARY - 1)

HardenedIndex.ZERO = HardenedIndex.MIN = HardenedIndex(0)
HardenedIndex.ONE = HardenedIndex(1)
HardenedIndex.MAX = HardenedIndex(HARDENED_INDEX_BOUNDARY - 1)

DerivationIndex.ZERO = DerivationIndex.MIN = DerivationIndex(NormalIndex.ZERO)
DerivationIndex.ONE = DerivationIndex(NormalIndex.ONE)
DerivationIndex.MAX = DerivationIndex(NormalIndex.MAX)