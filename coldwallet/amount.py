"""Bitcoin amounts counted in satoshis."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Optional

_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
_SATS_PER_BTC = 100_000_000

_SPEC = re.compile(
    r"(?:(?P<fill>.)?(?P<align>[<>^]))?(?P<zero>0)?(?P<width>\d+)?"
    r"(?:\.(?P<precision>\d+))?\Z",
    re.DOTALL,
)

_SATS_GROUPS = {"<": (2, 3, 3), ">": (3, 3, 2), "^": (4, 4)}


def _thousands(digits: str, sep: Optional[str]) -> str:
    if sep is None:
        return digits
    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    groups.extend(digits[pos:pos + 3] for pos in range(head, len(digits), 3))
    return sep.join(groups)


def _split(digits: str, sizes: tuple[int, ...]) -> list[str]:
    parts = []
    pos = 0
    for size in sizes:
        parts.append(digits[pos:pos + size])
        pos += size
    return parts


@dataclass(frozen=True, order=True)
class Sats:
    """An amount of satoshis.

    Formatting: by default the decimal number of sats; with a precision, ``BTC.sats``
    (precision 0 rounds to whole BTC); an alignment groups digits using the fill
    character (left ``100'000.00'000'000``, right ``100'000.000'000'00``, centre
    ``100'000.0000'0000``); the zero flag pads the leading number to eight digits.
    """

    value: int = 0

    BTC: ClassVar[Sats]
    ZERO: ClassVar[Sats]

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError("satoshi amount must be an integer")
        if not 0 <= self.value <= _U64_MAX:
            raise ValueError(f"satoshi amount {self.value} does not fit into 64 bits")

    @classmethod
    def from_btc(cls, btc: int) -> Sats:
        """Amount of ``btc`` whole bitcoins."""
        return cls(btc * _SATS_PER_BTC)

    def btc_floor(self) -> int:
        """Whole bitcoins, rounded down."""
        return self.value // _SATS_PER_BTC

    def btc_round(self) -> int:
        """Whole bitcoins, rounded half up."""
        if self.value == 0:
            return 0
        return self.btc_floor() + 2 * self.sats_rem() // _SATS_PER_BTC

    def sats_rem(self) -> int:
        """Satoshis left over after whole bitcoins."""
        return self.value % _SATS_PER_BTC

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __format__(self, spec: str) -> str:
        match = _SPEC.match(spec)
        if match is None:
            raise ValueError(f"invalid format specifier {spec!r} for Sats")
        align = match["align"]
        sep = (match["fill"] or " ") if align else None
        zero = match["zero"] is not None

        if match["precision"] is None:
            digits = f"{self.value:08d}" if zero else str(self.value)
            return _thousands(digits, sep)

        precision = int(match["precision"])
        btc = self.btc_round() if precision == 0 else self.btc_floor()
        text = _thousands(f"{btc:08d}" if zero else str(btc), sep)
        if precision == 0:
            return text
        rem = f"{self.sats_rem():08d}"
        if sep is not None:
            rem = sep.join(_split(rem, _SATS_GROUPS[align]))
        return f"{text}.{rem}"


Sats.BTC = Sats(_SATS_PER_BTC)
Sats.ZERO = Sats(0)