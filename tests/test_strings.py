import pytest

from avocadoos.strings import (
    digit_to_char,
    is_digit,
    itoa,
    memcmp,
    numeric_char_to_digit,
    strcasecmp,
    strcmp,
    strncasecmp,
    strncmp,
    strnlen,
    to_lower,
    to_upper,
)


def test_strnlen_caps_and_stops_at_nul():
    assert strnlen("hello", 3) == 3
    assert strnlen("hello", 100) == len("hello")
    assert strnlen("ab\0cd", 10) == len("ab")


def test_strcmp_equal_and_ordering():
    assert strcmp("FAT16", "FAT16") == 0
    assert strcmp("abc", "abd") < 0
    assert strcmp("abd", "abc") > 0
    assert strcmp("ab", "abc") < 0


def test_strcmp_is_antisymmetric():
    pairs = [("a", "b"), ("hello", "help"), ("", "x")]
    for a, b in pairs:
        assert strcmp(a, b) == -strcmp(b, a)


def test_strncmp_limits_comparison():
    assert strncmp("abcx", "abcy", 3) == 0
    assert strncmp("abcx", "abcy", 4) < 0
    assert strncmp("ab", "abc", 5) < 0


def test_strncmp_zero_compares_whole_text():
    assert strncmp("abcx", "abcy", 0) == strcmp("abcx", "abcy")


def test_strcasecmp_ignores_case():
    assert strcasecmp("Hello", "hELLO") == 0
    assert strcasecmp("abc", "abd") < 0


def test_strcasecmp_prefix_compares_equal():
    assert strcasecmp("abc", "ABCD") == 0


def test_strncasecmp_returns_raw_difference():
    assert strncasecmp("a", "A", 1) == strcmp("a", "A")
    assert strncasecmp("same", "same", 4) == 0


def test_memcmp():
    assert memcmp(b"abc", b"abd", 2) == 0
    assert memcmp(b"abc", b"abd", 3) == 1
    assert memcmp(":/x", ":/", 2) == 0


def test_memcmp_rejects_short_data():
    with pytest.raises(ValueError):
        memcmp(b"a", b"abc", 3)


def test_digits():
    assert is_digit("7")
    assert not is_digit("x")
    for d in range(10):
        assert numeric_char_to_digit(digit_to_char(d)) == d


def test_digit_to_char_out_of_range():
    assert digit_to_char(10) == "E"
    assert digit_to_char(-1) == "E"


@pytest.mark.parametrize("value", [0, 7, -42, 123456, -2147483647])
def test_itoa_round_trip(value):
    assert int(itoa(value)) == value


def test_itoa_wraps_to_32_bits():
    assert itoa(2**32 + 5) == itoa(5)
    assert int(itoa(0xC0000000)) < 0


def test_case_conversion():
    assert to_upper("a") == "A"
    assert to_lower("A") == "a"
    assert to_upper("1") == "1"
    for c in "hello":
        assert to_lower(to_upper(c)) == c