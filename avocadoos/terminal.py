"""VGA text-mode terminal emulated over an in-memory cell buffer."""

from __future__ import annotations

from enum import IntEnum

from .errors import KernelError

VGA_WIDTH = 80
VGA_HEIGHT = 25


class Colour(IntEnum):
    BLACK = 0
    BLUE = 1
    GREEN = 2
    CYAN = 3
    RED = 4
    MAGENTA = 5
    BROWN = 6
    LIGHT_GRAY = 7
    DARK_GRAY = 8
    LIGHT_BLUE = 9
    LIGHT_GREEN = 10
    LIGHT_CYAN = 11
    LIGHT_RED = 12
    LIGHT_MAGENTA = 13
    YELLOW = 14
    WHITE = 15


class KernelPanic(KernelError):
    """Raised where the kernel would stop for good."""

    default_message = "kernel panic"


def make_cell(char: str, colour: int) -> int:
    """16-bit VGA cell: colour in the high byte, character in the low byte."""
    return ((int(colour) << 8) | (ord(char) & 0xFF)) & 0xFFFF


class Terminal:
    """Text screen with a cursor that wraps at the right edge and the bottom."""

    def __init__(self, width: int = VGA_WIDTH, height: int = VGA_HEIGHT) -> None:
        if width < 1 or height < 1:
            raise ValueError("terminal dimensions must be positive")
        self.width = width
        self.height = height
        self._cells = [0] * (width * height)
        self.row = 0
        self.column = 0
        self.clear()

    def clear(self) -> None:
        """Blank the screen and put the cursor at the top left."""
        self.row = 0
        self.column = 0
        blank = make_cell(" ", Colour.BLACK)
        self._cells = [blank] * (self.width * self.height)

    def _put_cell(self, cell: int, x: int, y: int) -> None:
        self._cells[(y * self.width + x) % len(self._cells)] = cell

    def put_char(self, char: str, colour: int) -> None:
        if char == "\n":
            self.row = (self.row + 1) % self.height
            self.column = 0
            return
        self._put_cell(make_cell(char, colour), self.column, self.row)
        self.column += 1
        if self.column == self.width:
            self.column = 0
            self.row = (self.row + 1) % self.height

    def put_str(self, text: str, colour: int) -> None:
        for char in text:
            self.put_char(char, colour)

    def print(self, text: str) -> None:
        """Write text in white at the cursor."""
        self.put_str(text, Colour.WHITE)

    def print_at(self, text: str, colour: int, x: int, y: int) -> None:
        """Write text starting at (x, y) without moving the cursor."""
        index = y * self.width + x
        for char in text:
            self._cells[index % len(self._cells)] = make_cell(char, colour)
            index = (index + 1) % len(self._cells)

    def cell(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) outside the screen")
        return self._cells[y * self.width + x]

    def row_text(self, y: int) -> str:
        if not 0 <= y < self.height:
            raise IndexError(f"row {y} outside the screen")
        start = y * self.width
        return "".join(chr(c & 0xFF) for c in self._cells[start : start + self.width])

    def panic(self, message: str) -> None:
        """Show a panic banner and stop by raising :class:`KernelPanic`."""
        self.put_str("[PANIC] ", Colour.LIGHT_RED)
        self.put_str(message, Colour.WHITE)
        raise KernelPanic(message)


_SPLASH = (
    "                  _                                _    ___  __\n",
    "                 /_\\ __   __ ___    ___  __ _   __| |  /___\\/ _\\\n",
    "                //_\\\\\\ \\ / // _ \\  / __|/ _` | / _` | //  //\\ \\\n",
    "               /  _  \\\\ V /| (_) || (__| (_| || (_| |/ \\_// _\\ \\\n",
    "               \\_/ \\_/ \\_/  \\___/  \\___|\\__,_| \\__,_|\\___/  \\__/\n",
)


def splash(terminal: Terminal) -> None:
    """Draw the boot banner in green below five blank lines."""
    terminal.print("\n" * 5)
    for line in _SPLASH:
        terminal.put_str(line, Colour.GREEN)