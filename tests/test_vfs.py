import pytest

from avocadoos.disk import Disk, DiskRegistry
from avocadoos.errors import BadFileDescriptor, InvalidArgument, IOFailure, TooManyOpenFiles
from avocadoos.fat16 import DirectoryEntry, Fat16Volume, FatHeader
from avocadoos.file_table import FileTable
from avocadoos.fstypes import Whence
from avocadoos.vfs import FileSystem

SECTOR = 512
MOTD = b"Would you fancy some avocados?\n"
BIG = bytes(i % 251 for i in range(700))


def _entry(name, ext, attributes, cluster, size):
    return DirectoryEntry(
        filename=name.ljust(8),
        extension=ext.ljust(3),
        attributes=attributes,
        low16_bits_first_cluster=cluster,
        size_bytes=size,
    ).pack()


def build_image():
    header = FatHeader(
        bytes_per_sector=SECTOR,
        sectors_per_cluster=1,
        reserved_sectors=1,
        fat_copies=1,
        root_dir_entries=16,
        total_sectors=8,
        sectors_per_fat=1,
    )
    image = bytearray(8 * SECTOR)
    image[: FatHeader.SIZE] = header.pack()

    fat = [0xFFF8, 0xFFFF, 0xFFFF, 0xFFFF, 5, 0xFFFF]
    for index, value in enumerate(fat):
        image[SECTOR + index * 2 : SECTOR + index * 2 + 2] = value.to_bytes(2, "little")

    root = 2 * SECTOR
    entries = [
        _entry("MOTD", "TXT", 0x20, 2, len(MOTD)),
        _entry("FOLDER1", "", 0x10, 3, 0),
        _entry("BIG", "TXT", 0x20, 4, len(BIG)),
    ]
    for index, raw in enumerate(entries):
        image[root + index * 32 : root + index * 32 + 32] = raw

    image[3 * SECTOR : 3 * SECTOR + len(MOTD)] = MOTD
    image[4 * SECTOR : 4 * SECTOR + 32] = _entry("ASD1", "", 0x20, 0, 0)
    image[5 * SECTOR : 5 * SECTOR + SECTOR] = BIG[:SECTOR]
    image[6 * SECTOR : 6 * SECTOR + len(BIG) - SECTOR] = BIG[SECTOR:]
    return bytes(image)


def make_fs(capacity=100, image=None):
    disk = Disk(image if image is not None else build_image())
    fs = FileSystem(DiskRegistry([disk]), FileTable(capacity))
    fs.register(Fat16Volume)
    fs.probe(disk)
    return fs


def test_read_whole_file():
    fs = make_fs()
    handle = fs.fopen("0:/MOTD.TXT", "r")
    assert fs.fread(handle, 1, 100) == MOTD
    assert fs.fread(handle, 1, 100) == b""


def test_fread_uses_size_times_nmemb():
    fs = make_fs()
    handle = fs.fopen("0:/MOTD.TXT", "r")
    assert fs.fread(handle, 5, 2) == MOTD[:10]
    assert fs.fread(handle, 100, 1) == MOTD[10:]


def test_fstat_reports_size_and_device():
    fs = make_fs()
    handle = fs.fopen("0:/MOTD.TXT", "r")
    info = fs.fstat(handle.fileno)
    assert info.st_size == len(MOTD)
    assert info.st_dev == 0


def test_seek_and_reread():
    fs = make_fs()
    handle = fs.fopen("0:/MOTD.TXT", "r")
    first = fs.fread(handle, 1, len(MOTD))
    fs.fseek(handle, 0, Whence.SET)
    assert fs.fread(handle, 1, len(MOTD)) == first
    fs.fseek(handle, 0, Whence.END)
    assert fs.fread(handle, 1, 10) == b""
    fs.fseek(handle, 6, Whence.SET)
    fs.fseek(handle, 4, Whence.CUR)
    assert fs.fread(handle, 1, 3) == MOTD[10:13]


def test_read_across_clusters():
    fs = make_fs()
    handle = fs.fopen("0:/BIG.TXT", "r")
    assert fs.fread(handle, 1, 10_000) == BIG


def test_nested_file_opens():
    fs = make_fs()
    handle = fs.fopen("0:/FOLDER1/ASD1", "r")
    assert handle.path.parts == ("FOLDER1", "ASD1")
    assert fs.fstat(handle.fileno).st_size == 0
    assert fs.fread(handle, 1, 10) == b""


def test_mode_only_first_character_counts():
    fs = make_fs()
    handle = fs.fopen("0:/MOTD.TXT", "rw")
    assert fs.fread(handle, 1, 4) == MOTD[:4]


@pytest.mark.parametrize("mode", ["x", "", "+"])
def test_invalid_mode(mode):
    fs = make_fs()
    with pytest.raises(InvalidArgument):
        fs.fopen("0:/MOTD.TXT", mode)


@pytest.mark.parametrize("path", ["0:/", "MOTD.TXT", "0:MOTD.TXT"])
def test_invalid_path(path):
    fs = make_fs()
    with pytest.raises(InvalidArgument):
        fs.fopen(path, "r")


def test_missing_file_and_drive():
    fs = make_fs()
    with pytest.raises(IOFailure):
        fs.fopen("0:/NOPE.TXT", "r")
    with pytest.raises(IOFailure):
        fs.fopen("1:/MOTD.TXT", "r")
    assert len(fs.table) == 0


def test_unformatted_disk_has_no_filesystem():
    fs = make_fs(image=bytes(4 * SECTOR))
    assert fs.probe(fs.disks.get(0)) is None
    with pytest.raises(IOFailure):
        fs.fopen("0:/MOTD.TXT", "r")


def test_probe_attaches_volume():
    disk = Disk(build_image())
    fs = FileSystem(DiskRegistry([disk]))
    fs.register(Fat16Volume)
    volume = fs.probe(disk)
    assert disk.fs_operations is volume
    assert volume.disk is disk


def test_close_then_use():
    fs = make_fs()
    handle = fs.fopen("0:/MOTD.TXT", "r")
    fd = handle.fileno
    fs.fclose(handle)
    assert handle.fileno == -1
    assert fs.fread(handle, 1, 10) == b""
    with pytest.raises(BadFileDescriptor):
        fs.fclose(handle)
    with pytest.raises(BadFileDescriptor):
        fs.fseek(handle, 0)
    with pytest.raises(BadFileDescriptor):
        fs.fstat(fd)


def test_file_numbers_reused_after_close():
    fs = make_fs()
    first = fs.fopen("0:/MOTD.TXT", "r")
    second = fs.fopen("0:/BIG.TXT", "r")
    old = first.fileno
    fs.fclose(first)
    third = fs.fopen("0:/FOLDER1/ASD1", "r")
    assert third.fileno == old
    assert second.fileno != third.fileno
    assert fs.fread(second, 1, 10) == BIG[:10]


def test_two_handles_have_independent_cursors():
    fs = make_fs()
    a = fs.fopen("0:/MOTD.TXT", "r")
    b = fs.fopen("0:/MOTD.TXT", "r")
    assert fs.fread(a, 1, 5) == MOTD[:5]
    assert fs.fread(b, 1, 5) == MOTD[:5]


def test_full_table():
    fs = make_fs(capacity=1)
    handle = fs.fopen("0:/MOTD.TXT", "r")
    with pytest.raises(TooManyOpenFiles):
        fs.fopen("0:/BIG.TXT", "r")
    assert fs.fread(handle, 1, 100) == MOTD


def test_register_limit():
    fs = FileSystem(DiskRegistry([]))
    for _ in range(5):
        fs.register(Fat16Volume)
    with pytest.raises(IOFailure):
        fs.register(Fat16Volume)