"""Derivation paths and multi-variant derivation segments."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional

from coldwallet.index import DerivationIndex, IndexParseError, NormalIndex
from coldwallet.terminal import Keychain, Terminal

_MIN_VARIANTS = 1
_MAX_VARIANTS = 8


class DerivationParseError(ValueError):
    """A string is not a derivation path.

    ``kind`` is ``invalid_index`` (with ``cause`` set) or ``invalid_format``;
    ``path`` holds the text that was parsed.
    """

    def __init__(self, kind: str, path: str, cause: Optional[IndexParseError] = None) -> None:
        if kind == "invalid_index":
            message = f"unable to parse derivation path '{path}' - {cause}"
        elif kind == "invalid_format":
            message = f"invalid derivation path format '{path}'"
        else:
            raise ValueError(f"unknown derivation parse error kind {kind!r}")
        super().__init__(message)
        self.kind = kind
        self.path = path
        self.cause = cause


class SegParseError(ValueError):
    """A derivation segment is malformed.

    ``kind`` is ``invalid_format`` (an index failed to parse; ``cause`` set) or
    ``confinement`` (the number of variants is outside 1..=8; ``count`` set).
    """

    def __init__(
        self,
        kind: str,
        cause: Optional[IndexParseError] = None,
        count: Optional[int] = None,
    ) -> None:
        if kind == "invalid_format":
            message = f"derivation contains invalid index - {cause}."
        elif kind == "confinement":
            message = "derivation segment contains too many variants."
        else:
            raise ValueError(f"unknown segment parse error kind {kind!r}")
        super().__init__(message)
        self.kind = kind
        self.cause = cause
        self.count = count


class DerivationSeg:
    """Ordered set of one to eight alternative indexes for a path segment."""

    __slots__ = ("_items",)

    def __init__(self, index: Any) -> None:
        self._items: tuple = (index,)

    @classmethod
    def with_items(cls, items: Iterable[Any]) -> DerivationSeg:
        """Segment holding the distinct ``items``."""
        unique = sorted(set(items))
        if not _MIN_VARIANTS <= len(unique) <= _MAX_VARIANTS:
            raise SegParseError("confinement", count=len(unique))
        seg = cls.__new__(cls)
        seg._items = tuple(unique)
        return seg

    @classmethod
    def standard(cls) -> DerivationSeg:
        """The ``<0;1>`` segment of receive and change keychains."""
        return cls.with_items([NormalIndex.ZERO, NormalIndex.ONE])

    def count(self) -> int:
        return len(self._items)

    def is_distinct(self, other: DerivationSeg) -> bool:
        """Whether the two segments share no index."""
        return set(self._items).isdisjoint(other._items)

    def at(self, position: int) -> Optional[Any]:
        """Index at ``position`` in ascending order, or None past the end."""
        if 0 <= position < len(self._items):
            return self._items[position]
        return None

    def first(self) -> Any:
        return self._items[0]

    def to_set(self) -> set:
        return set(self._items)

    @classmethod
    def parse(cls, s: str, index_type: Any = NormalIndex) -> DerivationSeg:
        """Parse a single index or ``<a;b;...>`` with indexes of ``index_type``."""
        trimmed = s.lstrip("<").rstrip(">")
        try:
            if len(trimmed) == len(s) - 2:
                items = {index_type.parse(part) for part in trimmed.split(";")}
                return cls.with_items(items)
            return cls(index_type.parse(s))
        except IndexParseError as err:
            raise SegParseError("invalid_format", cause=err) from err

    def __getitem__(self, position: int) -> Any:
        if not 0 <= position < len(self._items):
            raise IndexError("requested position in derivation segment exceeds its length")
        return self._items[position]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DerivationSeg):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"DerivationSeg.with_items({list(self._items)!r})"

    def __str__(self) -> str:
        if len(self._items) == 1:
            return str(self._items[0])
        return "<" + ";".join(str(item) for item in self._items) + ">"


class DerivationPath(list):
    """Sequence of derivation indexes."""

    @classmethod
    def parse(cls, s: str, index_type: Any = DerivationIndex) -> DerivationPath:
        """Parse ``a/b/c`` (with an optional leading ``/``) into indexes of ``index_type``."""
        if s.startswith("/"):
            s = s[1:]
        try:
            inner = [index_type.parse(part) for part in s.split("/")]
        except IndexParseError as err:
            raise DerivationParseError("invalid_index", s, err) from err
        if not inner:
            raise DerivationParseError("invalid_format", s)
        return cls(inner)

    def terminal(self) -> Optional[Terminal]:
        """Terminal formed by the last two unhardened indexes, if there is one."""
        if not self:
            return None
        last = self[-1]
        if last.is_hardened():
            return None
        index = NormalIndex(last.child_number() & 0xFFFF)
        if len(self) < 2:
            return None
        keychain = self[-2]
        if keychain.is_hardened():
            return None
        number = keychain.child_number()
        if number > 0xFF:
            return None
        return Terminal(Keychain(number), index)

    def __str__(self) -> str:
        return "".join(f"/{segment}" for segment in self)

    def __repr__(self) -> str:
        return f"DerivationPath({list(self)!r})"