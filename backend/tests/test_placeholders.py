import pytest

from mocat.utils.placeholders import extract_positional, has_numeral, substitute_numeral


@pytest.mark.parametrize(
    "template, n, expected",
    [
        ("{0} files", 5, "5 files"),
        ("Delete {0} files? {0} is a lot.", 12, "Delete 12 files? 12 is a lot."),
        ("no placeholder", 3, "no placeholder"),
        ("{1} is not the numeral", 3, "{1} is not the numeral"),
        ("{name} stays", 3, "{name} stays"),
        ("{{0}} is escaped", 3, "{0} is escaped"),
        ("{{{0}}} wrapped", 7, "{7} wrapped"),
        ("closing }} only", 2, "closing } only"),
        ("unbalanced { brace {0}", 4, "unbalanced { brace 4"),
        ("{0}", -2, "-2"),
        ("", 1, ""),
    ],
)
def test_substitute_numeral(template, n, expected):
    assert substitute_numeral(template, n) == expected


def test_extract_positional():
    assert extract_positional("{0} of {1} and {name}") == ["0", "1"]
    assert has_numeral("{0} files")
    assert not has_numeral("{1} files")
    assert not has_numeral("{{0}} files")
