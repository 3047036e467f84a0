"""
Tests for the two on-disk formats — properties and JSON.
"""

import json
from pathlib import Path

import pytest

from buildprops.core.errors import CannotReadFileError
from buildprops.core.formats import (
    JsonPropertiesFormat,
    TextPropertiesFormat,
    get_format,
)
from buildprops.core.formats.properties_format import (
    HEADER_COMMENT,
    escape,
    parse_properties,
    unescape,
)
from buildprops.core.models.properties import SerializationFormat


def _serialize(fmt, properties: dict, encoding: str = "utf-8") -> bytes:
    return fmt.serialize(properties, encoding)


class TestGetFormat:
    def test_by_enum(self):
        assert isinstance(get_format(SerializationFormat.JSON), JsonPropertiesFormat)
        assert isinstance(get_format(SerializationFormat.PROPERTIES), TextPropertiesFormat)

    def test_by_name_case_insensitive(self):
        assert get_format("Json").name == "json"
        assert get_format("PROPERTIES").name == "properties"

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown format"):
            get_format("xml")

    def test_labels(self):
        assert get_format("json").label == "json file"
        assert get_format("properties").label == "properties file"


class TestEscape:
    def test_plain_ascii_unchanged(self):
        assert escape("git.commit.id", is_key=True) == "git.commit.id"
        assert escape("abc123", is_key=False) == "abc123"

    def test_spaces_in_keys(self):
        assert escape("a b", is_key=True) == "a\\ b"

    def test_spaces_in_values(self):
        assert escape(" lead and inner", is_key=False) == "\\ lead and inner"

    def test_specials(self):
        assert escape("a=b:c#d!e", is_key=False) == "a\\=b\\:c\\#d\\!e"
        assert escape("C:\\dir", is_key=False) == "C\\:\\\\dir"

    def test_control_characters(self):
        assert escape("l1\nl2\tx\r\f", is_key=False) == "l1\\nl2\\tx\\r\\f"
        assert escape("\x01", is_key=False) == "\\u0001"

    def test_non_ascii(self):
        assert escape("zażółć", is_key=False) == "za\\u017C\\u00F3\\u0142\\u0107"

    def test_astral_uses_surrogate_pair(self):
        assert escape("😀", is_key=False) == "\\uD83D\\uDE00"


class TestParseProperties:
    def test_comments_and_blank_lines(self):
        text = "# comment\n! also comment\n\n   \nkey=value\n"
        assert parse_properties(text) == {"key": "value"}

    def test_separators(self):
        text = "a=1\nb:2\nc 3\nd = 4\ne\t:\t5\nf\n"
        assert parse_properties(text) == {
            "a": "1", "b": "2", "c": "3", "d": "4", "e": "5", "f": "",
        }

    def test_second_separator_belongs_to_value(self):
        assert parse_properties("a==b\n") == {"a": "=b"}

    def test_leading_whitespace_ignored(self):
        assert parse_properties("    key = value\n") == {"key": "value"}

    def test_trailing_whitespace_kept(self):
        assert parse_properties("key=value  \n") == {"key": "value  "}

    def test_line_continuation(self):
        text = "key = first \\\n      second\nnext=1\n"
        assert parse_properties(text) == {"key": "first second", "next": "1"}

    def test_escaped_backslash_does_not_continue(self):
        text = "path=C\\:\\\\\nnext=1\n"
        assert parse_properties(text) == {"path": "C:\\", "next": "1"}

    def test_crlf_and_cr_line_endings(self):
        assert parse_properties("a=1\r\nb=2\rc=3") == {"a": "1", "b": "2", "c": "3"}

    def test_escaped_key_characters(self):
        assert parse_properties("a\\ b\\=c=d\n") == {"a b=c": "d"}

    def test_last_duplicate_wins(self):
        assert parse_properties("a=1\na=2\n") == {"a": "2"}


class TestUnescape:
    def test_short_escapes(self):
        assert unescape("a\\tb\\nc\\rd\\fe") == "a\tb\nc\rd\fe"

    def test_unicode(self):
        assert unescape("za\\u017c\\u00F3") == "zażó"

    def test_surrogate_pair_combined(self):
        assert unescape("\\uD83D\\uDE00") == "😀"

    def test_unknown_escape_is_literal(self):
        assert unescape("\\q\\:") == "q:"

    def test_malformed_unicode(self):
        with pytest.raises(CannotReadFileError, match="Malformed"):
            unescape("\\u12")
        with pytest.raises(CannotReadFileError):
            unescape("\\uZZZZ")


class TestTextPropertiesFormat:
    def test_header_then_entries(self):
        out = _serialize(TextPropertiesFormat(), {"a": "1", "b": "2"}).decode("ascii")
        assert out.splitlines() == [f"#{HEADER_COMMENT}", "a=1", "b=2"]
        assert out.endswith("\n")

    def test_preserves_given_order(self):
        out = _serialize(TextPropertiesFormat(), {"b": "2", "a": "1"}).decode("ascii")
        assert out.splitlines()[1:] == ["b=2", "a=1"]

    def test_bytes_independent_of_encoding(self):
        props = {"git.commit.user.name": "Zoë Łukasz", "git.emoji": "🚀"}
        utf8 = _serialize(TextPropertiesFormat(), props, "utf-8")
        latin = _serialize(TextPropertiesFormat(), props, "iso-8859-1")
        utf16 = _serialize(TextPropertiesFormat(), props, "utf-16")
        assert utf8 == latin == utf16
        utf8.decode("ascii")  # pure ASCII

    def test_round_trip_tricky_values(self, tmp_path: Path):
        props = {
            "git.commit.message.full": "Fix: a=b\n\n  details\t#1 !",
            "git.commit.user.name": " Zoë ",
            "key with spaces": "C:\\Users\\me",
            "git.emoji": "🚀",
            "empty": "",
        }
        fmt = TextPropertiesFormat()
        path = tmp_path / "git.properties"
        path.write_bytes(_serialize(fmt, props))
        assert fmt.deserialize(path, "utf-8") == props

    def test_reads_literal_utf8(self, tmp_path: Path):
        path = tmp_path / "git.properties"
        path.write_text("name=Zoë\n", encoding="utf-8")
        assert TextPropertiesFormat().deserialize(path, "utf-8") == {"name": "Zoë"}

    def test_reads_with_given_encoding(self, tmp_path: Path):
        path = tmp_path / "git.properties"
        path.write_bytes("name=Zoë\n".encode("iso-8859-1"))
        assert TextPropertiesFormat().deserialize(path, "iso-8859-1") == {"name": "Zoë"}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(CannotReadFileError):
            TextPropertiesFormat().deserialize(tmp_path / "nope.properties", "utf-8")


class TestJsonPropertiesFormat:
    def test_pretty_printed(self):
        out = _serialize(JsonPropertiesFormat(), {"a": "1", "b": "2"}).decode("utf-8")
        assert out == '{\n  "a": "1",\n  "b": "2"\n}\n'

    def test_non_ascii_kept_literal(self):
        out = _serialize(JsonPropertiesFormat(), {"name": "Zoë"}, "utf-8")
        assert "Zoë".encode("utf-8") in out

    def test_written_with_given_encoding(self):
        out = _serialize(JsonPropertiesFormat(), {"name": "Zoë"}, "utf-16")
        assert json.loads(out.decode("utf-16")) == {"name": "Zoë"}

    def test_round_trip_as_strings(self, tmp_path: Path):
        path = tmp_path / "git.json"
        path.write_text(
            json.dumps({"count": 3, "dirty": True, "id": "abc", "none": None}),
            encoding="utf-8",
        )
        assert JsonPropertiesFormat().deserialize(path, "utf-8") == {
            "count": "3",
            "dirty": "true",
            "id": "abc",
            "none": "null",
        }

    def test_serialize_then_deserialize(self, tmp_path: Path):
        props = {"git.commit.id": "abc", "git.total.commit.count": "12"}
        path = tmp_path / "git.json"
        path.write_bytes(_serialize(JsonPropertiesFormat(), props))
        assert JsonPropertiesFormat().deserialize(path, "utf-8") == props

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "git.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CannotReadFileError):
            JsonPropertiesFormat().deserialize(path, "utf-8")

    def test_top_level_must_be_object(self, tmp_path: Path):
        path = tmp_path / "git.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(CannotReadFileError, match="Expected a JSON object"):
            JsonPropertiesFormat().deserialize(path, "utf-8")

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "git.json"
        path.write_text("", encoding="utf-8")
        with pytest.raises(CannotReadFileError):
            JsonPropertiesFormat().deserialize(path, "utf-8")

    def test_oversized_integer(self, tmp_path: Path):
        path = tmp_path / "git.json"
        path.write_text('{"a": ' + "1" * 5000 + "}", encoding="utf-8")
        with pytest.raises(CannotReadFileError):
            JsonPropertiesFormat().deserialize(path, "utf-8")

    def test_deep_nesting(self, tmp_path: Path):
        path = tmp_path / "git.json"
        path.write_text("[" * 100000, encoding="utf-8")
        with pytest.raises(CannotReadFileError):
            JsonPropertiesFormat().deserialize(path, "utf-8")

    def test_unencodable_value(self):
        with pytest.raises(UnicodeEncodeError):
            JsonPropertiesFormat().serialize({"name": "zażółć"}, "ascii")
