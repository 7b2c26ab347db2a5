"""Kernel building blocks: read-only FAT16 access, block heap, page tables, descriptors and a VGA terminal."""

__version__ = "0.1.0"

__all__ = [
    "circular_list",
    "descriptors",
    "disk",
    "errors",
    "fat16",
    "file_table",
    "frames",
    "fstypes",
    "heap",
    "paging",
    "path_parser",
    "ringbuffer",
    "strings",
    "terminal",
    "vfs",
]