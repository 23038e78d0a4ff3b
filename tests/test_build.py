import os
from datetime import datetime, timezone

import pytest

from pyessence.ingest import build_tree, compact_json, should_exclude
from pyessence.vfs import BuildError, CompactError

from .conftest import FIXTURE_FILES


def test_builds_fixture_tree(built_fs, static_dir):
    files = [path for path, node in built_fs.walk() if not node.is_dir]
    assert files == FIXTURE_FILES
    assert built_fs.stats()["files"] == 8
    assert built_fs.stats()["directories"] == 2
    assert built_fs.lookup("/hello.txt").data == (static_dir / "hello.txt").read_bytes()
    assert built_fs.lookup("/subdir/nested").is_dir


def test_captures_mode_and_mod_time(tmp_path):
    path = tmp_path / "secret.txt"
    path.write_bytes(b"shh")
    os.chmod(path, 0o600)
    os.utime(path, (1_600_000_000.75, 1_600_000_000.75))

    node = build_tree(tmp_path).lookup("/secret.txt")
    assert node.mode == 0o600
    assert node.mod_time == datetime.fromtimestamp(1_600_000_000, tz=timezone.utc)


def test_entries_sorted_by_name(tmp_path):
    for name in ["c.txt", "a.txt", "b.txt"]:
        (tmp_path / name).write_text(name)
    fs = build_tree(tmp_path)
    assert [c.name for c in fs.root.children] == ["a.txt", "b.txt", "c.txt"]


def test_empty_directory(tmp_path):
    (tmp_path / "empty").mkdir()
    fs = build_tree(tmp_path)
    assert fs.lookup("/empty").children == []


def test_exclude(static_dir):
    fs = build_tree(static_dir, exclude=["*.txt", "nested"])
    files = [path for path, node in fs.walk() if not node.is_dir]
    assert files == ["/data.json", "/functions.tmpl", "/subdir/subtmpl.tmpl", "/tmpl.tmpl"]


def test_should_exclude():
    assert should_exclude(".DS_Store", [".DS_Store"])
    assert should_exclude("app.js.map", ["*.map"])
    assert not should_exclude("app.js", ["*.map"])
    assert not should_exclude("app.js", [])


def test_json_left_alone_without_compaction(static_dir):
    fs = build_tree(static_dir, compact_json=False)
    assert fs.lookup("/data.json").data == (static_dir / "data.json").read_bytes()


def test_malformed_json(tmp_path):
    (tmp_path / "bad.json").write_text("{not json")
    with pytest.raises(BuildError) as exc:
        build_tree(tmp_path)
    assert "reencode json" in str(exc.value)
    assert build_tree(tmp_path, compact_json=False).lookup("/bad.json").data == b"{not json"


def test_missing_source_dir(tmp_path):
    with pytest.raises(BuildError) as exc:
        build_tree(tmp_path / "nope")
    assert "not a directory" in str(exc.value)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs named pipes")
def test_unsupported_file_type(tmp_path):
    os.mkfifo(tmp_path / "pipe")
    with pytest.raises(BuildError) as exc:
        build_tree(tmp_path)
    assert "unsupported file type" in str(exc.value)


def test_verbose_lists_embedded_files(static_dir, capsys):
    build_tree(static_dir, verbose=True)
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 8
    assert out[0] == f"ESSENCE: embedded file: {static_dir / 'data.json'}"


def test_compact_json():
    assert compact_json(b'{ "a" : [1, 2],\n "b": "x y" }') == b'{"a":[1,2],"b":"x y"}'
    assert compact_json('{"k": "é"}'.encode()) == '{"k":"é"}'.encode()
    with pytest.raises(CompactError):
        compact_json(b"[1,")


@pytest.mark.parametrize("text", ['{"x": NaN}', "[Infinity]", "[-Infinity]"])
def test_non_standard_json_constants_fail_the_build(tmp_path, text):
    (tmp_path / "bad.json").write_text(text)
    with pytest.raises(BuildError) as exc:
        build_tree(tmp_path)
    assert "invalid token" in str(exc.value)


def test_overflowing_number_is_not_reencoded_as_infinity():
    with pytest.raises(CompactError):
        compact_json(b"[1e400]")
    assert compact_json(b"[1e300, -0.5]") == b"[1e+300,-0.5]"
