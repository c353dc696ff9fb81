"""Taproot script trees: leaves, tree builder and Merkle root."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, Iterator, Optional, Sequence, Union, overload

TAPSCRIPT_LEAF_VERSION = 0xC0
"""Leaf version of BIP342 tapscript."""

_MAX_DEPTH = 127
_ANNEX_TAG = 0x50


def _tagged_hash(tag: str, data: bytes) -> bytes:
    tag_hash = hashlib.sha256(tag.encode("ascii")).digest()
    return hashlib.sha256(tag_hash + tag_hash + data).digest()


def _compact_size(n: int) -> bytes:
    if n < 0xFD:
        return bytes([n])
    if n <= 0xFFFF:
        return b"\xfd" + n.to_bytes(2, "little")
    if n <= 0xFFFF_FFFF:
        return b"\xfe" + n.to_bytes(4, "little")
    return b"\xff" + n.to_bytes(8, "little")


def _check_leaf_version(version: int) -> int:
    if not isinstance(version, int) or isinstance(version, bool):
        raise TypeError("leaf version must be an integer")
    if not 0 <= version <= 0xFF or version & 1 or version == _ANNEX_TAG:
        raise ValueError(f"invalid taproot leaf version {version:#04x}")
    return version


def tap_leaf_hash(version: int, script: bytes) -> bytes:
    """BIP341 ``TapLeaf`` tagged hash of a leaf script."""
    version = _check_leaf_version(version)
    script = bytes(script)
    return _tagged_hash("TapLeaf", bytes([version]) + _compact_size(len(script)) + script)


def _tap_branch_hash(left: bytes, right: bytes) -> bytes:
    first, second = sorted((left, right))
    return _tagged_hash("TapBranch", first + second)


class FinalizedTree(ValueError):
    """A leaf was pushed to a tree builder that is already complete."""

    def __init__(self) -> None:
        super().__init__("can't add more leafs to an already finalized tap tree")


class UnfinalizedTree(ValueError):
    """Leaves pushed so far do not commit into a single Merkle root."""

    def __init__(self, level: int) -> None:
        super().__init__(
            f"unfinalized tap tree containing leafs at level {level} which can't commit "
            "into a single Merkle root"
        )
        self.level = level


class InvalidTree(ValueError):
    """A sequence of leaves does not form a single tap tree.

    ``kind`` is ``unfinalized`` (with ``level`` set) or ``mountain_range``.
    """

    def __init__(self, kind: str, level: Optional[int] = None) -> None:
        if kind == "unfinalized":
            message = str(UnfinalizedTree(level if level is not None else 0))
        elif kind == "mountain_range":
            message = (
                "tap tree contains too many script leafs which doesn't fit a single "
                "Merkle tree"
            )
        else:
            raise ValueError(f"unknown invalid tree kind {kind!r}")
        super().__init__(message)
        self.kind = kind
        self.level = level


@dataclass(frozen=True)
class LeafInfo:
    """Leaf script together with its depth in the tree."""

    depth: int
    script: bytes
    version: int = TAPSCRIPT_LEAF_VERSION

    def __post_init__(self) -> None:
        if not isinstance(self.depth, int) or isinstance(self.depth, bool):
            raise TypeError("leaf depth must be an integer")
        if not 0 <= self.depth <= _MAX_DEPTH:
            raise ValueError(f"leaf depth {self.depth} exceeds {_MAX_DEPTH}")
        object.__setattr__(self, "script", bytes(self.script))
        _check_leaf_version(self.version)

    @classmethod
    def tap_script(cls, depth: int, script: bytes) -> LeafInfo:
        """Tapscript leaf at ``depth``."""
        return cls(depth, script, TAPSCRIPT_LEAF_VERSION)

    def leaf_hash(self) -> bytes:
        return tap_leaf_hash(self.version, self.script)


class TapTreeBuilder:
    """Collects leaves in depth-first order until they form a complete tree."""

    def __init__(self) -> None:
        self._leafs: list[LeafInfo] = []
        self._filled = Fraction(0)
        self._finalized = False

    def _level(self) -> int:
        if self._filled in (0, 1):
            return 0
        return self._filled.denominator.bit_length() - 1

    def is_finalized(self) -> bool:
        return self._finalized

    def push_leaf(self, leaf: LeafInfo) -> bool:
        """Add a leaf; returns whether the tree is now complete."""
        if self._finalized:
            raise FinalizedTree()
        self._leafs.append(leaf)
        if leaf.depth > 0:
            unit = Fraction(1, 2 ** leaf.depth)
            if self._filled % unit == 0 and self._filled + unit <= 1:
                self._filled += unit
        if self._level() == 0:
            self._finalized = True
        return self._finalized

    def finish(self) -> TapTree:
        """The complete tree."""
        if not self._finalized:
            raise UnfinalizedTree(self._level())
        return TapTree(self._leafs)


class TapTree(Sequence[LeafInfo]):
    """Taproot script tree as leaves in depth-first order."""

    __slots__ = ("_leafs",)

    def __init__(self, leafs: Iterable[LeafInfo] = ()) -> None:
        self._leafs = tuple(leafs)

    @classmethod
    def with_single_leaf(cls, script: Union[bytes, LeafInfo]) -> TapTree:
        """Tree consisting of a single leaf at the root.

        ``script`` is either tapscript bytes or a leaf whose script and version are taken.
        """
        if isinstance(script, LeafInfo):
            return cls([LeafInfo(0, script.script, script.version)])
        return cls([LeafInfo(0, script, TAPSCRIPT_LEAF_VERSION)])

    @classmethod
    def from_leafs(cls, leafs: Iterable[LeafInfo]) -> TapTree:
        """Tree from leaves in depth-first order."""
        builder = TapTreeBuilder()
        for leaf in leafs:
            try:
                builder.push_leaf(leaf)
            except FinalizedTree as err:
                raise InvalidTree("mountain_range") from err
        try:
            return builder.finish()
        except UnfinalizedTree as err:
            raise InvalidTree("unfinalized", err.level) from err

    @classmethod
    def from_builder(cls, builder: TapTreeBuilder) -> TapTree:
        return builder.finish()

    def merkle_root(self) -> bytes:
        """BIP341 Merkle root of the tree."""
        if not self._leafs:
            raise ValueError("empty tap tree has no Merkle root")
        stack: list[tuple[int, bytes]] = []
        for leaf in self._leafs:
            depth, node = leaf.depth, leaf.leaf_hash()
            while stack and depth > 0 and stack[-1][0] == depth:
                _, left = stack.pop()
                depth, node = depth - 1, _tap_branch_hash(left, node)
            stack.append((depth, node))
        if len(stack) != 1 or stack[0][0] != 0:
            raise ValueError("tap tree leaves do not commit into a single Merkle root")
        return stack[0][1]

    def into_vec(self) -> list[LeafInfo]:
        return list(self._leafs)

    @overload
    def __getitem__(self, position: int) -> LeafInfo: ...

    @overload
    def __getitem__(self, position: slice) -> tuple[LeafInfo, ...]: ...

    def __getitem__(self, position: Union[int, slice]):
        return self._leafs[position]

    def __len__(self) -> int:
        return len(self._leafs)

    def __iter__(self) -> Iterator[LeafInfo]:
        return iter(self._leafs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TapTree):
            return NotImplemented
        return self._leafs == other._leafs

    def __hash__(self) -> int:
        return hash(self._leafs)

    def __repr__(self) -> str:
        return f"TapTree({list(self._leafs)!r})"