import pytest

from schemactl.shell.ShellTokenizer import tokenize


@pytest.mark.parametrize("line, expected", [
    ("schemas list", ["schemas", "list"]),
    ("  schemas   list  ", ["schemas", "list"]),
    ('doc-types create Inv "Invoice Document"', ["doc-types", "create", "Inv", "Invoice Document"]),
    ("doc-types create Inv 'Invoice Document'", ["doc-types", "create", "Inv", "Invoice Document"]),
    ("""-d 'say "hi"'""", ["-d", 'say "hi"']),
    ('''-d "it's fine"''', ["-d", "it's fine"]),
    ('--name="My Schema"', ["--name=My Schema"]),
    ('a"b c"d', ["ab cd"]),
    ('-d ""', ["-d", ""]),
    ('schemas get "unterminated id', ["schemas", "get", "unterminated id"]),
    ("", []),
    ("   ", []),
])
def test_tokenize(line, expected):
    assert tokenize(line) == expected


def test_tabs_are_part_of_tokens():
    assert tokenize("a\tb c") == ["a\tb", "c"]
