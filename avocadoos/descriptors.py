"""GDT, TSS and IDT encodings and the interrupt dispatcher."""

from __future__ import annotations

import struct
from dataclasses import astuple, dataclass
from enum import IntEnum
from typing import Callable, Optional

from .errors import InvalidArgument
from .frames import InterruptFrame
from .strings import itoa
from .terminal import KernelPanic, Terminal

GDT_NATIVE_SIZE = 8
KERNEL_TOTAL_INTERRUPTS = 256

GDT_FLAG_DATASEG = 0x02
GDT_FLAG_CODESEG = 0x0A
GDT_FLAG_TSS = 0x09
GDT_FLAG_TSS_BUSY = 0x02
GDT_FLAG_SEGMENT = 0x10
GDT_FLAG_RING0 = 0x00
GDT_FLAG_RING1 = 0x20
GDT_FLAG_RING2 = 0x40
GDT_FLAG_RING3 = 0x60
GDT_FLAG_PRESENT = 0x80
GDT_FLAG_ACCESSED = 0x01

INTGATE = 0x8E
TRAPGATE = 0xEF

PIC1_CMD_PORT = 0x20
PIC1_DATA_PORT = 0x21
PIC2_CMD_PORT = 0xA0
PIC2_DATA_PORT = 0xA1
PIC_ICW1_INIT = 0x10
PIC_ICW1_ICW4 = 0x01
PIC_ICW4_8086_MODE = 0x01
PIC_ICW3_SLAVE_AT_IRQ2 = 0x04
PIC_ICW3_SLAVE_ID = 0x02

_PIC_EOI = 0x20
_BYTE_GRANULARITY_LIMIT = 65536


class SegmentIndex(IntEnum):
    NULL = 0
    KERNEL_CODE = 1
    KERNEL_DATA = 2
    USER_CODE = 3
    USER_DATA = 4
    TSS = 5


def selector(index: int) -> int:
    """Segment selector (byte offset into the GDT) of a segment index."""
    return int(index) * GDT_NATIVE_SIZE


@dataclass(frozen=True)
class GdtSegment:
    base: int
    limit: int
    type: int


def encode_segment(segment: GdtSegment) -> bytes:
    """Native 8-byte descriptor; large limits switch to page granularity."""
    limit = segment.limit
    if limit > _BYTE_GRANULARITY_LIMIT and (limit & 0xFFF) != 0xFFF:
        raise InvalidArgument("invalid GDT limit")
    target = bytearray(8)
    target[6] = 0x40
    if limit > _BYTE_GRANULARITY_LIMIT:
        limit >>= 12
        target[6] = 0xC0
    base = segment.base
    target[0] = limit & 0xFF
    target[1] = (limit >> 8) & 0xFF
    target[6] |= (limit >> 16) & 0xF
    target[2] = base & 0xFF
    target[3] = (base >> 8) & 0xFF
    target[4] = (base >> 16) & 0xFF
    target[7] = (base >> 24) & 0xFF
    target[5] = segment.type & 0xFF
    return bytes(target)


def encode_segments(segments: list[GdtSegment]) -> bytes:
    return b"".join(encode_segment(segment) for segment in segments)


@dataclass
class Tss:
    """32-bit task state segment."""

    link: int = 0
    esp0: int = 0
    ss0: int = 0
    esp1: int = 0
    esp2: int = 0
    ss2: int = 0
    sr3: int = 0
    eip: int = 0
    eflags: int = 0
    eax: int = 0
    ecx: int = 0
    edx: int = 0
    ebx: int = 0
    esp: int = 0
    ebp: int = 0
    esi: int = 0
    edi: int = 0
    es: int = 0
    cs: int = 0
    ss: int = 0
    ds: int = 0
    fs: int = 0
    gs: int = 0
    ldtr: int = 0
    iopb: int = 0

    def pack(self) -> bytes:
        return struct.pack("<25I", *astuple(self))


TSS_SIZE = struct.calcsize("<25I")


def default_segments(tss_base: int) -> list[GdtSegment]:
    """The six flat segments the kernel loads, in GDT order."""
    flat = 0xFFFFFFFF
    code = GDT_FLAG_SEGMENT | GDT_FLAG_CODESEG | GDT_FLAG_PRESENT
    data = GDT_FLAG_SEGMENT | GDT_FLAG_DATASEG | GDT_FLAG_PRESENT
    return [
        GdtSegment(0, 0, 0),
        GdtSegment(0, flat, GDT_FLAG_RING0 | code),
        GdtSegment(0, flat, GDT_FLAG_RING0 | data),
        GdtSegment(0, flat, GDT_FLAG_RING3 | code),
        GdtSegment(0, flat, GDT_FLAG_RING3 | data),
        GdtSegment(tss_base, TSS_SIZE - 1, GDT_FLAG_PRESENT | GDT_FLAG_TSS | GDT_FLAG_RING0),
    ]


def kernel_tss(stack_bottom: int) -> Tss:
    """TSS pointing ring-0 entries at the given kernel stack."""
    return Tss(
        esp0=stack_bottom,
        ss0=selector(SegmentIndex.KERNEL_DATA),
        cs=0x0B,
        ss=0x13,
        ds=0x13,
        es=0x13,
        fs=0x13,
        gs=0x13,
    )


def encode_idt_gate(address: int, gate_type: int) -> bytes:
    """Native 8-byte IDT entry for a handler in the kernel code segment."""
    return struct.pack(
        "<HHBBH",
        address & 0xFFFF,
        selector(SegmentIndex.KERNEL_CODE),
        0,
        (gate_type | 0x60) & 0xFF,
        (address >> 16) & 0xFFFF,
    )


def default_gate_types() -> dict[int, int]:
    """Gate type of each installed vector: traps for 3 and 4, interrupts otherwise."""
    return {vector: TRAPGATE if vector in (3, 4) else INTGATE for vector in range(48)}


def irq_mask_port_bit(line: int) -> tuple[int, int]:
    """PIC data port and bit that mask the given IRQ line."""
    if not 0 <= line < 16:
        raise InvalidArgument(f"IRQ line {line} out of range")
    if line < 8:
        return PIC1_DATA_PORT, line
    return PIC2_DATA_PORT, line - 8


Handler = Callable[[InterruptFrame], InterruptFrame]


class InterruptDispatcher:
    """Routes interrupt frames to handlers, acknowledging hardware IRQs."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal
        self.port_writes: list[tuple[int, int]] = []
        self._handlers: list[Optional[Handler]] = [self._no_handler] * KERNEL_TOTAL_INTERRUPTS
        self._handlers[0x0] = self._divide_error
        self._handlers[0x1] = self._debug
        self._handlers[0x6] = self._invalid_opcode
        self._handlers[0xD] = self._general_protection
        self._handlers[0xE] = self._page_fault
        self._handlers[0x20] = self._timer
        self._handlers[0x21] = self._keyboard

    def register(self, vector: int, handler: Optional[Handler]) -> None:
        if not 0 <= vector < KERNEL_TOTAL_INTERRUPTS:
            raise InvalidArgument(f"interrupt vector {vector} out of range")
        self._handlers[vector] = handler

    def _pic_ack(self, irq: int) -> None:
        if irq >= 40:
            self.port_writes.append((PIC2_CMD_PORT, _PIC_EOI))
        self.port_writes.append((PIC1_CMD_PORT, _PIC_EOI))

    def dispatch(self, frame: InterruptFrame) -> InterruptFrame:
        if not 0 <= frame.int_no < KERNEL_TOTAL_INTERRUPTS:
            raise InvalidArgument(f"interrupt vector {frame.int_no} out of range")
        if frame.int_no > 31:
            self._pic_ack(frame.int_no - 32)
        handler = self._handlers[frame.int_no]
        if handler is None:
            self.terminal.print("Unhandled Interrupt!\n")
            return frame
        return handler(frame)

    def _divide_error(self, frame: InterruptFrame) -> InterruptFrame:
        self.terminal.print("DIV0\n")
        return frame

    def _debug(self, frame: InterruptFrame) -> InterruptFrame:
        self.terminal.print("ISR1\n")
        return frame

    def _invalid_opcode(self, frame: InterruptFrame) -> InterruptFrame:
        self.terminal.print(f"ISR 6 -> {itoa(frame.eip)}\n")
        raise KernelPanic("invalid opcode")

    def _page_fault(self, frame: InterruptFrame) -> InterruptFrame:
        self.terminal.print(itoa(frame.error_code))
        self.terminal.panic("Int 0xE - Page Fault\n")
        return frame

    def _general_protection(self, frame: InterruptFrame) -> InterruptFrame:
        self.terminal.panic("GPF")
        return frame

    def _keyboard(self, frame: InterruptFrame) -> InterruptFrame:
        self.terminal.print("Int 0x21 - Keyboard\n")
        return frame

    def _timer(self, frame: InterruptFrame) -> InterruptFrame:
        # with no tasks to switch to, the interrupted context resumes unchanged
        return frame

    def _no_handler(self, frame: InterruptFrame) -> InterruptFrame:
        self.port_writes.append((PIC1_CMD_PORT, 0x0B))
        self.terminal.print(f"No Int handler -> {itoa(frame.int_no)} \n")
        return frame