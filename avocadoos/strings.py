"""C-style string helpers with the kernel's comparison semantics.

Strings are treated as NUL-terminated: a ``"\\0"`` character or the end of
the Python string both end the text.
"""

from __future__ import annotations


def _code(text: str, index: int) -> int:
    return ord(text[index]) if index < len(text) else 0


def _upper_code(code: int) -> int:
    return code - 32 if ord("a") <= code <= ord("z") else code


def strnlen(text: str, max_len: int) -> int:
    """Length of the text up to its terminator, capped at ``max_len``."""
    end = text.find("\0")
    length = len(text) if end < 0 else end
    return min(length, max_len)


def strcmp(s1: str, s2: str) -> int:
    """Difference of the first mismatching characters, or 0."""
    i = 0
    while True:
        a, b = _code(s1, i), _code(s2, i)
        if not a or not b or a != b:
            return a - b
        i += 1


def strncmp(s1: str, s2: str, n: int) -> int:
    """Compare at most ``n`` characters; ``n == 0`` compares the whole text."""
    i = 0
    while True:
        a, b = _code(s1, i), _code(s2, i)
        if not a or not b or a != b:
            return a - b
        if i + 1 == n:
            return 0
        i += 1


def strcasecmp(s1: str, s2: str) -> int:
    """Case-insensitive compare.

    Only mismatching characters count: when one text is a prefix of the
    other the result is 0.
    """
    last_a = last_b = 0
    i = 0
    while True:
        a, b = _code(s1, i), _code(s2, i)
        if not a or not b:
            return last_a - last_b
        last_a, last_b = _upper_code(a), _upper_code(b)
        if last_a != last_b:
            return last_a - last_b
        i += 1


def strncasecmp(s1: str, s2: str, n: int) -> int:
    """Case-insensitive scan of at most ``n`` characters.

    The result is the raw difference of the characters where the scan
    stopped, not of their upper-case forms.
    """
    i = 0
    while True:
        a, b = _code(s1, i), _code(s2, i)
        if not a or not b or _upper_code(a) != _upper_code(b) or i + 1 == n:
            return a - b
        i += 1


def memcmp(a: bytes | str, b: bytes | str, n: int) -> int:
    """Return 1 if the first ``n`` items differ, else 0."""
    if len(a) < n or len(b) < n:
        raise ValueError("memcmp length exceeds the data")
    return int(any(x != y for x, y in zip(a[:n], b[:n])))


def is_digit(c: str) -> bool:
    return len(c) == 1 and "0" <= c <= "9"


def numeric_char_to_digit(c: str) -> int:
    return ord(c) - ord("0")


def digit_to_char(d: int) -> str:
    """The character for a single decimal digit, or ``"E"`` if out of range."""
    if d < 0 or d > 9:
        return "E"
    return chr(ord("0") + d)


def itoa(value: int) -> str:
    """Decimal text of ``value`` after wrapping it to a signed 32-bit int."""
    wrapped = ((value + 2**31) % 2**32) - 2**31
    return str(wrapped)


def to_upper(c: str) -> str:
    return chr(ord(c) - 32) if "a" <= c <= "z" else c


def to_lower(c: str) -> str:
    return chr(ord(c) + 32) if "A" <= c <= "Z" else c