import pytest

from coldwallet.index import DerivationIndex, HardenedIndex, NormalIndex
from coldwallet.path import (
    DerivationParseError,
    DerivationPath,
    DerivationSeg,
    SegParseError,
)
from coldwallet.terminal import Keychain, Terminal


def test_altstr():
    path1 = DerivationPath.parse("86h/1h/0h", HardenedIndex)
    path2 = DerivationPath.parse("86'/1'/0'", HardenedIndex)
    path3 = DerivationPath.parse("86'/1h/0h", HardenedIndex)
    assert path1 == path2
    assert path1 == path3


def test_path_display_round_trip():
    path = DerivationPath.parse("/86h/1h/0h", HardenedIndex)
    assert str(path) == "/86h/1h/0h"
    assert DerivationPath.parse(str(path), HardenedIndex) == path


def test_path_mixed_indexes():
    path = DerivationPath.parse("86h/1/0")
    assert path == [
        DerivationIndex.hardened(86),
        DerivationIndex.normal(1),
        DerivationIndex.normal(0),
    ]
    assert str(path) == "/86h/1/0"


def test_leading_slash_is_optional():
    assert DerivationPath.parse("/1/2") == DerivationPath.parse("1/2")


def test_empty_path_display():
    assert str(DerivationPath()) == ""


@pytest.mark.parametrize("text", ["", "1//2", "1/x", "5*", "1/2/"])
def test_path_parse_errors(text):
    with pytest.raises(DerivationParseError) as info:
        DerivationPath.parse(text)
    assert info.value.kind == "invalid_index"
    assert info.value.path == text.lstrip("/")[: len(text)] or info.value.path == text


def test_path_error_strips_one_slash():
    with pytest.raises(DerivationParseError) as info:
        DerivationPath.parse("/1/x")
    assert info.value.path == "1/x"


def test_normal_path_rejects_hardened():
    with pytest.raises(DerivationParseError):
        DerivationPath.parse("1h", NormalIndex)


def test_path_is_mutable_sequence():
    path = DerivationPath.parse("0")
    path.append(DerivationIndex.normal(3))
    assert list(path) == [DerivationIndex.normal(0), DerivationIndex.normal(3)]


def test_terminal_of_standard_path():
    path = DerivationPath.parse("84h/0h/0h/1/7")
    assert path.terminal() == Terminal(Keychain(1), NormalIndex(7))


@pytest.mark.parametrize("text", ["0/1h", "1h/0", "300/0", "5"])
def test_no_terminal(text):
    assert DerivationPath.parse(text).terminal() is None


def test_no_terminal_for_empty_path():
    assert DerivationPath().terminal() is None


def test_seg_parse_standard():
    seg = DerivationSeg.parse("<0;1>")
    assert seg == DerivationSeg.standard()
    assert str(seg) == "<0;1>"
    assert DerivationSeg.parse("<1;0>") == seg


def test_seg_single():
    seg = DerivationSeg.parse("5")
    assert seg == DerivationSeg(NormalIndex(5))
    assert seg.count() == 1
    assert str(seg) == "5"


def test_seg_deduplicates():
    seg = DerivationSeg.parse("<1;1>")
    assert seg.count() == 1
    assert str(seg) == "1"


def test_seg_accessors():
    seg = DerivationSeg.parse("<3;1;2>")
    assert seg.count() == 3
    assert seg.first() == NormalIndex(1)
    assert seg.at(2) == NormalIndex(3)
    assert seg.at(3) is None
    assert seg[1] == NormalIndex(2)
    assert seg.to_set() == {NormalIndex(1), NormalIndex(2), NormalIndex(3)}
    with pytest.raises(IndexError):
        seg[3]


def test_seg_distinct():
    seg = DerivationSeg.standard()
    assert seg.is_distinct(DerivationSeg.parse("<2;3>"))
    assert not seg.is_distinct(DerivationSeg.parse("<1;2>"))


def test_seg_hardened():
    seg = DerivationSeg.parse("<0h;1h>", HardenedIndex)
    assert seg.to_set() == {HardenedIndex(0), HardenedIndex(1)}
    assert str(seg) == "<0h;1h>"


def test_seg_too_many_variants():
    with pytest.raises(SegParseError) as info:
        DerivationSeg.parse("<0;1;2;3;4;5;6;7;8>")
    assert info.value.kind == "confinement"
    assert str(info.value) == "derivation segment contains too many variants."


def test_seg_empty_items():
    with pytest.raises(SegParseError) as info:
        DerivationSeg.with_items([])
    assert info.value.kind == "confinement"


@pytest.mark.parametrize("text", ["<x>", "<0;1", "<0;>", "h"])
def test_seg_invalid_index(text):
    with pytest.raises(SegParseError) as info:
        DerivationSeg.parse(text)
    assert info.value.kind == "invalid_format"


def test_seg_keychain_type():
    seg = DerivationSeg.parse("<0;1>", Keychain)
    assert seg.to_set() == {Keychain.OUTER, Keychain.INNER}