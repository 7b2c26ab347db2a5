"""Register and interrupt frame layouts shared with the assembly stubs."""

from __future__ import annotations

import struct
from dataclasses import astuple, dataclass, field
from typing import ClassVar

_U32 = 4
_GDT_NATIVE_SIZE = 8
_GDT_SELECTORS = (
    ("GDT_KERNEL_CODE_SEGMENT", 1),
    ("GDT_KERNEL_DATA_SEGMENT", 2),
    ("GDT_USER_CODE_SEGMENT", 3),
    ("GDT_USER_DATA_SEGMENT", 4),
    ("GDT_TSS_SEGMENT", 5),
)


@dataclass
class GeneralPurposeRegisters:
    """The eight registers in the order ``pushad`` stores them."""

    edi: int = 0
    esi: int = 0
    ebp: int = 0
    esp: int = 0
    ebx: int = 0
    edx: int = 0
    ecx: int = 0
    eax: int = 0

    _FORMAT: ClassVar[str] = "<8I"
    _LAYOUT: ClassVar[tuple[tuple[str, int], ...]] = tuple(
        (name, _U32) for name in ("edi", "esi", "ebp", "esp", "ebx", "edx", "ecx", "eax")
    )

    def pack(self) -> bytes:
        return struct.pack(self._FORMAT, *astuple(self))

    @classmethod
    def unpack(cls, data: bytes) -> GeneralPurposeRegisters:
        if len(data) != struct.calcsize(cls._FORMAT):
            raise ValueError("wrong register block length")
        return cls(*struct.unpack(cls._FORMAT, data))


_GPR_SIZE = struct.calcsize(GeneralPurposeRegisters._FORMAT)


@dataclass
class InterruptFrame:
    """Stack frame built on interrupt entry.

    ``esp`` and ``ss`` are only present when the interrupt came from user mode.
    """

    gs: int = 0
    fs: int = 0
    es: int = 0
    ds: int = 0
    general_regs: GeneralPurposeRegisters = field(default_factory=GeneralPurposeRegisters)
    int_no: int = 0
    error_code: int = 0
    eip: int = 0
    cs: int = 0
    eflags: int = 0
    esp: int = 0
    ss: int = 0

    _LAYOUT: ClassVar[tuple[tuple[str, int], ...]] = (
        ("gs", _U32),
        ("fs", _U32),
        ("es", _U32),
        ("ds", _U32),
        ("general_regs", _GPR_SIZE),
        ("int_no", _U32),
        ("error_code", _U32),
        ("eip", _U32),
        ("cs", _U32),
        ("eflags", _U32),
        ("esp", _U32),
        ("ss", _U32),
    )
    _USER_ONLY: ClassVar[int] = 2 * _U32

    def pack(self, user_mode: bool = True) -> bytes:
        data = struct.pack("<4I", self.gs, self.fs, self.es, self.ds)
        data += self.general_regs.pack()
        data += struct.pack("<5I", self.int_no, self.error_code, self.eip, self.cs, self.eflags)
        if user_mode:
            data += struct.pack("<2I", self.esp, self.ss)
        return data

    @classmethod
    def unpack(cls, data: bytes, user_mode: bool = True) -> InterruptFrame:
        if len(data) != cls.size(user_mode):
            raise ValueError("wrong interrupt frame length")
        gs, fs, es, ds = struct.unpack_from("<4I", data, 0)
        regs = GeneralPurposeRegisters.unpack(data[4 * _U32 : 4 * _U32 + _GPR_SIZE])
        tail = 4 * _U32 + _GPR_SIZE
        int_no, error_code, eip, cs, eflags = struct.unpack_from("<5I", data, tail)
        esp = ss = 0
        if user_mode:
            esp, ss = struct.unpack_from("<2I", data, tail + 5 * _U32)
        return cls(gs, fs, es, ds, regs, int_no, error_code, eip, cs, eflags, esp, ss)

    @classmethod
    def size(cls, user_mode: bool = True) -> int:
        total = sum(size for _, size in cls._LAYOUT)
        return total if user_mode else total - cls._USER_ONLY


def field_offsets(structure: type) -> dict[str, int]:
    """Byte offset of every field of a packed frame structure."""
    layout = getattr(structure, "_LAYOUT", None)
    if layout is None:
        raise TypeError(f"{structure!r} has no known layout")
    offsets: dict[str, int] = {}
    position = 0
    for name, size in layout:
        offsets[name] = position
        position += size
    return offsets


def asm_constants() -> str:
    """Text of the ``%define`` include used by the interrupt stubs."""
    lines: list[str] = []
    frame = field_offsets(InterruptFrame)
    for name in (
        "general_regs", "int_no", "error_code", "eip", "cs", "eflags",
        "esp", "ss", "gs", "fs", "es", "ds",
    ):
        lines.append(f"%define interrupt_frame_{name} {frame[name]}")
    regs = field_offsets(GeneralPurposeRegisters)
    for name in ("edi", "esi", "ebp", "esp", "ebx", "edx", "ecx", "eax"):
        lines.append(f"%define general_purpose_registers_{name} {regs[name]}")
    for name, index in _GDT_SELECTORS:
        lines.append(f"%define {name}_SELECTOR {index * _GDT_NATIVE_SIZE}")
    return "\n".join(lines) + "\n"