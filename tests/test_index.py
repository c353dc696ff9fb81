import pytest

from coldwallet.index import (
    HARDENED_INDEX_BOUNDARY,
    DerivationIndex,
    HardenedIndex,
    IndexParseError,
    IndexRangeError,
    NormalIndex,
)


def test_normal_parse_round_trip():
    index = NormalIndex.parse("42")
    assert str(index) == "42"
    assert index.child_number() == 42
    assert index.index() == 42
    assert not index.is_hardened()


def test_normal_parse_accepts_plus_sign():
    assert NormalIndex.parse("+7") == NormalIndex(7)


@pytest.mark.parametrize("text", ["", "abc", "-1", "+", " 1", "1_0", "4294967296"])
def test_normal_parse_rejects_bad_strings(text):
    with pytest.raises(IndexParseError) as info:
        NormalIndex.parse(text)
    assert str(info.value).startswith("invalid index string representation - ")


def test_normal_parse_out_of_range():
    with pytest.raises(IndexParseError) as info:
        NormalIndex.parse(str(HARDENED_INDEX_BOUNDARY))
    assert str(info.value).startswith(
        f"provided child number {HARDENED_INDEX_BOUNDARY} is invalid"
    )


def test_normal_try_from_index_reports_index():
    with pytest.raises(IndexRangeError) as info:
        NormalIndex.try_from_index(HARDENED_INDEX_BOUNDARY)
    assert info.value.what == "index"
    assert info.value.invalid == HARDENED_INDEX_BOUNDARY


def test_try_from_child_number_reports_child_number():
    with pytest.raises(IndexRangeError) as info:
        HardenedIndex.try_from_child_number(HARDENED_INDEX_BOUNDARY)
    assert info.value.what == "child number"
    assert info.value.end == HARDENED_INDEX_BOUNDARY


def test_from_child_number_limits_to_16_bits():
    assert NormalIndex.from_child_number(0xFFFF).child_number() == 0xFFFF
    with pytest.raises(IndexRangeError):
        NormalIndex.from_child_number(0x10000)


@pytest.mark.parametrize("text", ["86h", "86H", "86'"])
def test_hardened_parse_suffixes(text):
    index = HardenedIndex.parse(text)
    assert index == HardenedIndex(86)
    assert str(index) == "86h"
    assert format(index, "#") == "86'"


def test_hardened_parse_requires_suffix():
    with pytest.raises(IndexParseError) as info:
        HardenedIndex.parse("86")
    assert str(info.value) == "expected hardened index value instead of the provided unhardened 86"


def test_hardened_index_offsets_by_boundary():
    index = HardenedIndex(5)
    assert index.is_hardened()
    assert index.child_number() == 5
    assert index.index() == HARDENED_INDEX_BOUNDARY + 5
    assert HardenedIndex(0).to_be_bytes() == b"\x80\x00\x00\x00"


def test_hardened_try_from_index_round_trip():
    index = HardenedIndex(1234)
    assert HardenedIndex.try_from_index(index.index()) == index
    assert HardenedIndex.try_from_index(1234) == index


@pytest.mark.parametrize("cls", [NormalIndex, HardenedIndex, DerivationIndex])
def test_checked_bounds(cls):
    assert cls.MAX.checked_inc() is None
    assert cls.ZERO.checked_dec() is None
    assert cls.MAX.saturating_inc() == cls.MAX
    assert cls.ZERO.saturating_dec() == cls.ZERO
    assert cls.MAX.wrapping_inc() == cls.MIN
    assert cls.ZERO.wrapping_dec() == cls.MAX


@pytest.mark.parametrize("cls", [NormalIndex, HardenedIndex])
def test_inc_dec_round_trip(cls):
    index = cls(100)
    assert index.checked_inc().checked_dec() == index
    assert index.checked_add(25).checked_sub(25) == index
    assert index.checked_add(25).child_number() == 125


def test_checked_add_overflow_beyond_32_bits():
    assert NormalIndex(1).checked_add(0xFFFF_FFFF) is None
    assert NormalIndex.ONE.saturating_add(0xFFFF_FFFF) == NormalIndex.MAX


def test_negative_addend_rejected():
    with pytest.raises(ValueError):
        NormalIndex(3).checked_add(-1)


def test_comparison_with_int():
    assert NormalIndex(3) == 3
    assert NormalIndex(3) < 4
    assert HardenedIndex(3) == 3
    assert len({NormalIndex(3), NormalIndex(3), NormalIndex(4)}) == 2


@pytest.mark.parametrize(
    "value",
    [0, 1, HARDENED_INDEX_BOUNDARY - 1, HARDENED_INDEX_BOUNDARY, 0xFFFF_FFFF],
)
def test_derivation_from_index_round_trip(value):
    index = DerivationIndex.from_index(value)
    assert index.index() == value
    assert index.is_hardened() == (value >= HARDENED_INDEX_BOUNDARY)
    assert DerivationIndex.try_from_index(value) == index


def test_derivation_from_index_hardened_child():
    index = DerivationIndex.from_index(HARDENED_INDEX_BOUNDARY + 5)
    assert index == DerivationIndex.hardened(5)
    assert index.child_number() == 5
    assert index.to_be_bytes() == (HARDENED_INDEX_BOUNDARY + 5).to_bytes(4, "big")


def test_derivation_parse():
    assert DerivationIndex.parse("5h") == DerivationIndex.hardened(5)
    assert DerivationIndex.parse("5H") == DerivationIndex.hardened(5)
    assert DerivationIndex.parse("5") == DerivationIndex.normal(5)
    assert str(DerivationIndex.parse("5h")) == "5h"


def test_derivation_parse_star_requires_hardened_suffix():
    with pytest.raises(IndexParseError) as info:
        DerivationIndex.parse("5*")
    assert "expected hardened index value" in str(info.value)


def test_derivation_parse_apostrophe_is_not_a_number():
    with pytest.raises(IndexParseError):
        DerivationIndex.parse("5'")


def test_derivation_ordering_puts_normal_first():
    items = [DerivationIndex.hardened(0), DerivationIndex.normal(9), DerivationIndex.normal(1)]
    assert sorted(items) == [
        DerivationIndex.normal(1),
        DerivationIndex.normal(9),
        DerivationIndex.hardened(0),
    ]


def test_derivation_hardened_saturates_to_normal_max():
    hardened_max = DerivationIndex(HardenedIndex.MAX)
    assert hardened_max.saturating_inc() == DerivationIndex.MAX
    assert not hardened_max.saturating_inc().is_hardened()


def test_derivation_add_keeps_variant():
    moved = DerivationIndex.hardened(10).checked_add(5)
    assert moved == DerivationIndex.hardened(15)
    assert moved.is_hardened()


def test_derivation_from_index_rejects_oversized():
    with pytest.raises(ValueError):
        DerivationIndex.from_index(0x1_0000_0000)