"""Kernel error hierarchy keyed by the classic errno numbers."""

from __future__ import annotations


class KernelError(Exception):
    """Base class for every error the kernel reports."""

    errno: int = 0
    default_message = "kernel error"

    def __init__(self, message: str | None = None, *, errno: int | None = None) -> None:
        if errno is not None:
            self.errno = errno
        super().__init__(message or self.default_message)


class IOFailure(KernelError):
    errno = 5
    default_message = "I/O error"


class ExecFormatError(KernelError):
    errno = 8
    default_message = "exec format error"


class BadFileDescriptor(KernelError):
    errno = 9
    default_message = "bad file number"


class OutOfMemory(KernelError):
    errno = 12
    default_message = "out of memory"


class InvalidArgument(KernelError):
    errno = 22
    default_message = "invalid argument"


class FileTableOverflow(KernelError):
    errno = 23
    default_message = "file table overflow"


class TooManyOpenFiles(KernelError):
    errno = 24
    default_message = "too many open files"


class NoSpaceLeft(KernelError):
    errno = 28
    default_message = "no space left on device"


class NoMedium(KernelError):
    errno = 123
    default_message = "no medium found"


class WrongMediumType(KernelError):
    errno = 124
    default_message = "wrong medium type"


_BY_ERRNO: dict[int, type[KernelError]] = {
    cls.errno: cls
    for cls in (
        IOFailure,
        ExecFormatError,
        BadFileDescriptor,
        OutOfMemory,
        InvalidArgument,
        FileTableOverflow,
        TooManyOpenFiles,
        NoSpaceLeft,
        NoMedium,
        WrongMediumType,
    )
}


def error_for_errno(errno: int) -> KernelError:
    """Build the exception matching an errno; negative codes are accepted too."""
    code = abs(errno)
    if code == 0:
        raise ValueError("errno 0 is not an error")
    cls = _BY_ERRNO.get(code)
    if cls is not None:
        return cls()
    return KernelError(f"error {code}", errno=code)