import os

import pytest

from avocadoos.fstypes import OpenMode, Stat, Whence, mode_from_string


@pytest.mark.parametrize(
    "text, expected",
    [
        ("r", OpenMode.READ),
        ("w", OpenMode.WRITE),
        ("a", OpenMode.APPEND),
        ("rw", OpenMode.READ),
        ("wb", OpenMode.WRITE),
        ("", OpenMode.INVALID),
        ("x", OpenMode.INVALID),
        ("R", OpenMode.INVALID),
    ],
)
def test_mode_from_string(text, expected):
    assert mode_from_string(text) is expected


def test_invalid_mode_is_falsy():
    assert not mode_from_string("q")
    assert mode_from_string("r")


def test_whence_matches_os_seek_constants():
    assert Whence(os.SEEK_SET) is Whence.SET
    assert Whence(os.SEEK_CUR) is Whence.CUR
    assert Whence(os.SEEK_END) is Whence.END


def test_stat_is_immutable_value():
    info = Stat(st_dev=0, st_size=31)
    assert info == Stat(0, 31)
    with pytest.raises(AttributeError):
        info.st_size = 5