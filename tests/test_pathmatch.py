import pytest

from pyessence.vfs import BadPatternError
from pyessence.vfs.pathmatch import match


@pytest.mark.parametrize(
    "pattern, path",
    [
        ("/subdir/*.tmpl", "/subdir/subtmpl.tmpl"),
        ("/*.tmpl", "/tmpl.tmpl"),
        ("/*", "/hello.txt"),
        ("/hello.tx?", "/hello.txt"),
        ("/[a-h]ello.txt", "/hello.txt"),
        ("/[^a-g]ello.txt", "/hello.txt"),
        ("/[!]", "/!"),
        ("/[!a-g]ello.txt", "/gello.txt"),
        ("/a\\*b", "/a*b"),
        ("/[\\]]", "/]"),
        ("/**/x", "/dir/x"),
    ],
)
def test_matches(pattern, path):
    assert match(pattern, path)


@pytest.mark.parametrize(
    "pattern, path",
    [
        ("/subdir/*.tmpl", "/subdir/nested/deep.tmpl"),
        ("/*.tmpl", "/subdir/subtmpl.tmpl"),
        ("/*", "/subdir/other.txt"),
        ("/a?b", "/a/b"),
        ("/a[^x]b", "/a/b"),
        ("/hello", "/hello.txt"),
        ("/a\\*b", "/axb"),
        ("/[!a-g]ello.txt", "/hello.txt"),
    ],
)
def test_does_not_match(pattern, path):
    assert not match(pattern, path)


@pytest.mark.parametrize(
    "pattern",
    ["/[", "/[]", "/[a", "/[a-]", "/[z-a]", "/abc\\", "/[\\"],
)
def test_malformed_patterns(pattern):
    with pytest.raises(BadPatternError) as exc:
        match(pattern, "/anything")
    assert exc.value.pattern == pattern
