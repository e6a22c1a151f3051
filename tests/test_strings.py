import time

import pytest

from ptlib.strings import (
    LARGE_MAX,
    LARGE_MIN,
    ULARGE_MAX,
    ConversionError,
    contains,
    delete,
    fill,
    insert,
    itostring,
    lowercase,
    nowstring,
    pad,
    pos,
    rpos,
    stringtoi,
    stringtoie,
    stringtoue,
    substr,
)


def test_string_manipulation_sequence():
    s1 = "string"
    s1 = s1 + s1
    s1 = delete(s1, 6, 6)
    assert s1 == "string"
    s4 = "STRING"
    assert s4[3] == "I"
    s1 = substr(s1, 0, 3)
    assert s1 == "str"
    s1 = s1 + substr(s4, 3, 3)
    assert s1 == "strING"
    s1 = delete(s1, 3, 3)
    assert s1 == "str"
    s1 = insert("ing", s1, 0)
    assert s1 == "ingstr"
    assert "str" + s1 + "ing" == "stringstring"
    assert delete("strung", 4) == "stru"


def test_pos_and_contains():
    s2 = "stringstring"
    assert pos("t", s2) == 1
    assert pos("ri", s2) == 2
    assert pos("ingstr", s2) == 3
    assert pos("xyz", s2) == -1
    assert contains("tr", s2, 1) is True
    assert contains("tr", s2, 2) is False
    assert contains("tr", s2, -1) is False
    assert contains("", s2, 12) is True
    assert contains("g", s2, 12) is False


def test_rpos():
    assert rpos("t", "stringstring") == 7
    assert rpos("z", "stringstring") == -1


@pytest.mark.parametrize(
    "args, kwargs, expected",
    [
        ((123456789,), {}, "123456789"),
        ((123,), {}, "123"),
        ((-123, 10, 7, "0"), {}, "-000123"),
        ((0xABCDE, 16, 6), {}, "0ABCDE"),
        ((LARGE_MIN,), {}, "-9223372036854775808"),
        ((ULARGE_MAX,), {"unsigned": True}, "18446744073709551615"),
        ((255, 16, 2), {}, "FF"),
        ((-1, 16), {}, "FFFFFFFFFFFFFFFF"),
        ((5, 10, 4), {}, "   5"),
        ((0, 64, 3), {}, "..."),
    ],
)
def test_itostring(args, kwargs, expected):
    assert itostring(*args, **kwargs) == expected


def test_itostring_bad_base():
    assert itostring(10, 1) == ""
    assert itostring(10, 65) == ""


def test_stringtoi():
    assert stringtoi("1234") == 1234
    assert stringtoi("") == -1
    assert stringtoi(None) == -1
    assert stringtoi("12a") == -1
    assert stringtoi("-5") == -1
    assert stringtoi("9223372036854775808") == -1


def test_stringtoue():
    assert stringtoue("15AF", 16) == 0x15AF
    assert stringtoue("15af", 16) == 0x15AF
    assert stringtoue("5zzzzzzzzzz", 64) == LARGE_MAX
    assert stringtoue("18446744073709551615", 10) == ULARGE_MAX


def test_stringtoue_overflow():
    with pytest.raises(ConversionError) as info:
        stringtoue("18446744073709551616", 10)
    assert info.value.message == "Out of range: '18446744073709551616'"


@pytest.mark.parametrize("text, base", [("", 10), ("12", 1), ("12", 65), ("1G", 16), ("1-", 10)])
def test_stringtoue_invalid(text, base):
    with pytest.raises(ConversionError) as info:
        stringtoue(text, base)
    assert info.value.message == f"Invalid number: '{text}'"


def test_stringtoie():
    assert stringtoie("123") == 123
    assert stringtoie("-123") == -123
    assert stringtoie("-9223372036854775808") == LARGE_MIN
    assert stringtoie("9223372036854775807") == LARGE_MAX


def test_stringtoie_overflow():
    with pytest.raises(ConversionError) as info:
        stringtoie("9223372036854775808")
    assert info.value.message == "Out of range: '9223372036854775808'"


def test_lowercase():
    assert lowercase("aBCAbc") == "abcabc"
    assert lowercase("abcabc") == "abcabc"
    assert lowercase("ÀB") == "Àb"
    assert lowercase(None) == ""


def test_fill_and_pad():
    assert fill(3, "x") == "xxx"
    assert fill(0, "x") == ""
    assert pad("ab", 5, ".", True) == "ab..."
    assert pad("ab", 5, ".", False) == "...ab"
    assert pad("abcdef", 3, ".", True) == "abcdef"


def test_substr_edges():
    assert substr("hello", 1) == "ello"
    assert substr("hello", 5, 2) == ""
    assert substr("hello", -1, 2) == ""
    assert substr("hello", 3, 10) == "lo"


def test_insert_and_delete_edges():
    assert insert("x", "abc", 3) == "abcx"
    assert insert("x", "abc", 4) == "abc"
    assert insert("x", "abc", -1) == "abc"
    assert delete("abc", 1, 10) == "a"
    assert delete("abc", 3, 1) == "abc"
    assert delete("abc", 0, 0) == "abc"
    assert delete("abc", -1) == "abc"


def test_nowstring_year():
    before = time.gmtime().tm_year
    year = int(nowstring("%Y", True))
    after = time.gmtime().tm_year
    assert year in (before, after)


def test_nowstring_too_long_is_empty():
    assert nowstring("%Y" * 100, True) == ""