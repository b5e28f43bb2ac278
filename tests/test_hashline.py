import pytest

from hashfile.core.errors import InvalidOperation
from hashfile.core.hashline import (
    HASHLINE_VERSION,
    LineAnchor,
    build_snapshot,
    detect_eol,
    file_hash,
    fnv1a_64,
    line_hash,
    parse_anchor,
    parse_tagged,
    render_tagged,
    split_lines,
    split_terminated,
)


def test_fnv1a_64_known_values():
    assert fnv1a_64(b"") == 0xCBF29CE484222325
    assert fnv1a_64(b"a") & 0xFF == 0x8C


def test_line_hash_is_two_hex_chars():
    assert line_hash("a") == "8c"
    assert line_hash("b") == "a5"
    assert line_hash("c") == "f2"
    assert line_hash("hello") == "0b"
    assert line_hash("") == "25"


def test_line_hash_ignores_trailing_whitespace_only():
    assert line_hash("hello  ") == line_hash("hello")
    assert line_hash("hello\t") == line_hash("hello")
    # Indentation is significant
    assert line_hash("  indented") == "12"
    assert line_hash("  indented  ") == "12"
    assert line_hash("    return x") != line_hash("return x")


def test_file_hash_is_six_hex_chars():
    assert file_hash(b"") == "222325"
    assert file_hash(b"a\nb\nc\n") == "04c167"
    assert file_hash("a\nb\nc\n") == "04c167"


def test_file_hash_sees_whitespace_the_line_hash_ignores():
    assert file_hash(b"hello\n") == "1f28b3"
    assert file_hash(b"hello  \n") == "e6750b"


@pytest.mark.parametrize(
    "content, expected",
    [
        ("", []),
        ("\n", [""]),
        ("a", ["a"]),
        ("a\n", ["a"]),
        ("a\nb", ["a", "b"]),
        ("a\n\nb\n", ["a", "", "b"]),
        ("a\r\nb\r\n", ["a", "b"]),
        ("a\n\n", ["a", ""]),
    ],
)
def test_split_lines(content, expected):
    assert split_lines(content) == expected


def test_split_terminated_keeps_each_terminator():
    assert split_terminated("a\r\nb\nc") == [("a", "\r\n"), ("b", "\n"), ("c", "")]
    assert split_terminated("") == []


def test_detect_eol():
    assert detect_eol("a\nb\n") == "\n"
    assert detect_eol("a\r\nb\r\n") == "\r\n"
    assert detect_eol("a\nb\r\n") == "\r\n"
    assert detect_eol("") == "\n"


def test_build_snapshot_positions_and_hashes():
    snap = build_snapshot(b"a\nb\nc\n")

    assert len(snap) == 3
    assert [r.position for r in snap] == [1, 2, 3]
    assert [r.hash for r in snap] == ["8c", "a5", "f2"]
    assert snap.contents() == ["a", "b", "c"]
    assert snap.file_hash == "04c167"
    assert snap.eol == "\n"
    assert snap.trailing_newline is True


def test_build_snapshot_of_empty_file():
    snap = build_snapshot(b"")

    assert len(snap) == 0
    assert snap.file_hash == "222325"
    assert snap.line_at(1) is None


def test_build_snapshot_crlf():
    snap = build_snapshot(b"a\r\nb\r\n")

    assert snap.contents() == ["a", "b"]
    assert snap.eol == "\r\n"
    # CR is part of the bytes, not of the line
    assert snap.line_at(1).hash == "8c"


def test_build_snapshot_mixed_line_endings():
    snap = build_snapshot(b"a\r\nb\nc")

    assert [r.eol for r in snap] == ["\r\n", "\n", ""]
    assert snap.contents() == ["a", "b", "c"]


def test_build_snapshot_without_trailing_newline():
    snap = build_snapshot(b"a\nb")

    assert snap.trailing_newline is False
    assert snap.contents() == ["a", "b"]


def test_build_snapshot_rejects_invalid_utf8():
    with pytest.raises(UnicodeDecodeError):
        build_snapshot(b"\xff\xfe\x00bad")


def test_line_at_bounds(abc):
    assert abc.line_at(0) is None
    assert abc.line_at(1).content == "a"
    assert abc.line_at(3).content == "c"
    assert abc.line_at(4) is None


def test_positions_with_hash(snapshot_of):
    snap = snapshot_of("x\ny\nx\n")
    assert snap.positions_with_hash(line_hash("x")) == [1, 3]
    assert snap.positions_with_hash("00") == []


def test_render_tagged(abc):
    assert render_tagged(abc) == (
        "1:8c|a\n"
        "2:a5|b\n"
        "3:f2|c\n"
        "---\n"
        f"hashline_version: {HASHLINE_VERSION}\n"
        "total_lines: 3\n"
        "file_hash: 04c167\n"
    )
    assert abc.render() == render_tagged(abc)


def test_parse_tagged_recovers_lines(snapshot_of):
    content = "def f():\n    return 1\n\n|pipes|are:fine\n---\n"
    snap = snapshot_of(content)

    assert parse_tagged(render_tagged(snap)) == snap.contents()


def test_parse_tagged_rejects_untagged_line():
    with pytest.raises(ValueError):
        parse_tagged("1:8c|a\nnot tagged\n")


def test_parse_anchor():
    assert parse_anchor("12:a3") == LineAnchor(12, "a3")
    assert parse_anchor(" 2:a5 ") == LineAnchor(2, "a5")
    assert str(LineAnchor(2, "a5")) == "2:a5"


def test_parse_anchor_lowercases_hash():
    assert parse_anchor("2:A5") == LineAnchor(2, "a5")


@pytest.mark.parametrize("bad", ["", "12", "a3:12", "12:", ":a3", "12:XY", "-1:a3", "1:a3|x"])
def test_parse_anchor_rejects_malformed(bad):
    with pytest.raises(InvalidOperation):
        parse_anchor(bad)


def test_parse_anchor_rejects_non_string():
    with pytest.raises(InvalidOperation):
        parse_anchor(12)


def test_line_hash_changes_with_content():
    assert line_hash("hello") == line_hash("hello")
    assert line_hash("hello") != line_hash("hellox")
    assert line_hash("a") != line_hash("ax")
