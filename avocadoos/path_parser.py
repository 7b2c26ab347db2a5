"""Parsing of kernel paths of the form ``<drive digit>:/part/part``."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidArgument

MAX_PATH_LEN = 250
_PREFIX_LEN = 3


def _bounded(path: str) -> str:
    """The path up to its terminator, capped at ``MAX_PATH_LEN`` characters."""
    return path.split("\0", 1)[0][:MAX_PATH_LEN]


@dataclass(frozen=True)
class ParsedPath:
    """A drive number and the path components that follow it."""

    drive_number: int
    parts: tuple[str, ...] = ()

    @property
    def first(self) -> str | None:
        return self.parts[0] if self.parts else None


def is_valid_path(path: str) -> bool:
    """True for paths that start with a drive digit followed by ``:/``."""
    text = _bounded(path)
    return len(text) >= _PREFIX_LEN and "0" <= text[0] <= "9" and text[1:3] == ":/"


def parse_path(path: str) -> ParsedPath:
    """Split a path into its drive and components.

    Parsing stops at the first empty component, so ``0:/a//b`` yields only
    ``a`` and a trailing slash is ignored.
    """
    if not is_valid_path(path):
        raise InvalidArgument(f"invalid path: {path!r}")
    text = _bounded(path)
    parts: list[str] = []
    for part in text[_PREFIX_LEN:].split("/"):
        if not part:
            break
        parts.append(part)
    return ParsedPath(drive_number=ord(text[0]) - ord("0"), parts=tuple(parts))