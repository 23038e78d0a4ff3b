import pytest

from pyessence.gen import FormatError, format_source


def test_reindents_brackets():
    source = "x = dict(\na=[\n1,\n\n2,\n],\n)\n"
    assert format_source(source) == "x = dict(\n    a=[\n        1,\n        2,\n    ],\n)\n"


def test_collapses_blank_lines_and_trailing_whitespace():
    source = "a = 1   \n\n\n\n\nb = 2\n\n\n"
    assert format_source(source) == "a = 1\n\n\nb = 2\n"


def test_leaves_multiline_strings_alone():
    source = 'x = (\n"""\n  keep   \n\n\n\n"""\n)\n'
    assert format_source(source) == 'x = (\n    """\n  keep   \n\n\n\n"""\n)\n'


def test_rejects_invalid_python():
    with pytest.raises(FormatError):
        format_source("x = (\n")
    with pytest.raises(FormatError):
        format_source("def :\n")
