import pytest

from avocadoos.errors import InvalidArgument
from avocadoos.path_parser import MAX_PATH_LEN, ParsedPath, is_valid_path, parse_path


def test_parse_nested_path():
    parsed = parse_path("0:/FOLDER1/ASD3")
    assert parsed == ParsedPath(0, ("FOLDER1", "ASD3"))
    assert parsed.first == "FOLDER1"


def test_parse_single_file():
    parsed = parse_path("0:/MOTD.TXT")
    assert parsed.drive_number == 0
    assert parsed.parts == ("MOTD.TXT",)


def test_drive_number_is_digit():
    assert parse_path("7:/x").drive_number == 7


def test_root_has_no_parts():
    parsed = parse_path("0:/")
    assert parsed.parts == ()
    assert parsed.first is None


def test_stops_at_empty_component():
    assert parse_path("0:/a//b").parts == ("a",)


def test_trailing_slash_ignored():
    assert parse_path("0:/a/b/").parts == ("a", "b")


def test_terminator_ends_path():
    assert parse_path("0:/abc\0/def").parts == ("abc",)


def test_long_path_is_truncated():
    parsed = parse_path("0:/" + "a" * (MAX_PATH_LEN * 2))
    assert parsed.parts == ("a" * (MAX_PATH_LEN - 3),)


@pytest.mark.parametrize("path", ["", "0:", "0:x", "a:/b", ":/b", "00/b"])
def test_invalid_paths(path):
    assert is_valid_path(path) is False
    with pytest.raises(InvalidArgument):
        parse_path(path)


@pytest.mark.parametrize("path", ["0:/", "3:/A/B", "9:/file"])
def test_valid_paths(path):
    assert is_valid_path(path) is True