import os
import stat
from datetime import datetime, timezone

import pytest

from pyessence.vfs import (
    DuplicateNameError,
    FileKind,
    InvalidWhenceError,
    OffsetOutOfRangeError,
    VFile,
)

T0 = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def hello() -> VFile:
    return VFile.file("hello.txt", b"hello essence\n", mod_time=T0)


def test_file_stat():
    info = hello().stat()
    assert info.name == "hello.txt"
    assert info.size == 14
    assert info.mod_time == T0
    assert not info.is_dir
    assert info.kind is FileKind.REGULAR
    assert stat.S_ISREG(info.mode)
    assert info.permissions == 0o644


def test_directory_stat():
    info = VFile.directory("assets", mode=0o700).stat()
    assert info.is_dir
    assert info.size == 0
    assert stat.S_ISDIR(info.mode)
    assert info.permissions == 0o700


def test_directory_rejects_data():
    with pytest.raises(ValueError):
        VFile("dir", FileKind.DIRECTORY, data=b"x")


def test_children_keep_insertion_order():
    root = VFile.directory("/", children=[VFile.file("b"), VFile.file("a")])
    root.append(VFile.directory("c"))
    assert [c.name for c in root.children] == ["b", "a", "c"]
    assert [i.name for i in root.readdir()] == ["b", "a", "c"]
    assert [i.name for i in root.readdir(1)] == ["b", "a", "c"]


def test_duplicate_child_rejected():
    root = VFile.directory("/", children=[VFile.file("a")])
    with pytest.raises(DuplicateNameError):
        root.append(VFile.file("a"))


def test_append_to_file_is_noop():
    node = hello()
    node.append(VFile.file("other"))
    assert node.children == []
    assert node.readdir() == []


def test_read_in_chunks():
    with hello().open() as f:
        assert f.read(5) == b"hello"
        assert f.read(1) == b" "
        assert f.read() == b"essence\n"
        assert f.read() == b""
        assert f.read(10) == b""


def test_readinto():
    f = hello().open()
    buf = bytearray(8)
    assert f.readinto(buf) == 8
    assert bytes(buf) == b"hello es"
    assert f.readinto(buf) == 6
    assert bytes(buf[:6]) == b"sence\n"
    assert f.readinto(buf) == 0


def test_seek_set_and_cur():
    f = hello().open()
    assert f.seek(6) == 6
    assert f.read() == b"essence\n"
    f.seek(0)
    f.seek(5)
    assert f.seek(2, os.SEEK_CUR) == 7
    assert f.tell() == 7


def test_seek_end_counts_back_from_last_byte():
    f = hello().open()
    assert f.seek(0, os.SEEK_END) == 13
    assert f.read() == b"\n"
    assert f.seek(8, os.SEEK_END) == 5
    assert f.seek(13, os.SEEK_END) == 0


@pytest.mark.parametrize(
    "offset, whence",
    [
        (14, os.SEEK_SET),
        (-1, os.SEEK_SET),
        (-1, os.SEEK_END),
        (14, os.SEEK_END),
        (100, os.SEEK_CUR),
    ],
)
def test_seek_out_of_range(offset, whence):
    f = hello().open()
    f.read(3)
    with pytest.raises(OffsetOutOfRangeError):
        f.seek(offset, whence)
    # A failed seek leaves the cursor alone
    assert f.tell() == 3


def test_seek_bad_whence():
    with pytest.raises(InvalidWhenceError):
        hello().open().seek(0, 7)


def test_seek_empty_file_only_admits_zero():
    f = VFile.file("empty").open()
    assert f.seek(0) == 0
    assert f.seek(0, os.SEEK_END) == 0
    with pytest.raises(OffsetOutOfRangeError):
        f.seek(1)
    assert f.read() == b""


def test_close_rewinds_and_handle_stays_usable():
    f = hello().open()
    f.read(6)
    f.close()
    f.close()
    assert f.tell() == 0
    assert f.read(5) == b"hello"


def test_handles_have_independent_cursors():
    node = hello()
    a = node.open()
    b = node.open()
    assert a.read(6) == b"hello "
    assert b.read() == b"hello essence\n"
    assert a.read() == b"essence\n"


def test_handle_stat_and_readdir():
    d = VFile.directory("d", children=[VFile.file("x", b"1")])
    f = d.open()
    assert f.stat().is_dir
    assert [i.name for i in f.readdir()] == ["x"]
    assert f.read() == b""
