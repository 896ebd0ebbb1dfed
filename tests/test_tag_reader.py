"""Tests for the pull-based XML event cursor."""

import io

import pytest

from taskrestore.backup.errors import StreamError
from taskrestore.backup.tag_reader import EventKind, TagEvent, TagReader


def _reader(text: str) -> TagReader:
    return TagReader(io.BytesIO(text.encode("utf-8")))


class TestTagReader:
    """Test TagReader event stream and attribute access."""

    def test_event_order(self):
        reader = _reader('<astrid><task name="a"><tag name="x"/></task></astrid>')
        events = list(reader)
        assert events == [
            TagEvent("astrid", EventKind.START),
            TagEvent("task", EventKind.START),
            TagEvent("tag", EventKind.START),
            TagEvent("tag", EventKind.END),
            TagEvent("task", EventKind.END),
            TagEvent("astrid", EventKind.END),
        ]

    def test_advance_returns_none_at_end(self):
        reader = _reader("<astrid/>")
        assert reader.advance().kind is EventKind.START
        assert reader.advance().kind is EventKind.END
        assert reader.advance() is None
        assert reader.advance() is None

    def test_attributes_in_document_order(self):
        reader = _reader('<task name="Buy milk" importance="LEVEL_2" flags="0"/>')
        reader.next_start()
        assert reader.attribute_count() == 3
        assert reader.attribute_at(0) == ("name", "Buy milk")
        assert reader.attribute_at(2) == ("flags", "0")
        assert reader.attribute("importance") == "LEVEL_2"
        assert reader.attribute("missing") is None

    def test_attributes_view_is_read_only(self):
        reader = _reader('<task name="a"/>')
        reader.next_start()
        attrs = reader.attributes()
        assert attrs["name"] == "a"
        with pytest.raises(TypeError):
            attrs["name"] = "b"

    def test_attributes_follow_latest_start(self):
        reader = _reader('<task name="outer"><tag name="inner"/></task>')
        reader.next_start()
        assert reader.attribute("name") == "outer"
        reader.next_start()
        assert reader.attribute("name") == "inner"

    def test_next_start_skips_end_events(self):
        reader = _reader("<a><b/><c/></a>")
        assert reader.next_start().tag == "a"
        assert reader.next_start().tag == "b"
        assert reader.next_start().tag == "c"
        assert reader.next_start() is None

    def test_namespace_is_stripped(self):
        reader = _reader('<astrid xmlns="urn:example"><task/></astrid>')
        assert [e.tag for e in reader if e.kind is EventKind.START] == ["astrid", "task"]

    def test_malformed_xml_raises_stream_error(self):
        reader = _reader('<astrid><task name="a"></astrid>')
        with pytest.raises(StreamError):
            list(reader)

    def test_missing_file_raises_stream_error(self, tmp_path):
        with pytest.raises(StreamError):
            with TagReader(tmp_path / "nope.xml"):
                pass

    def test_path_source_is_closed(self, tmp_path):
        path = tmp_path / "b.xml"
        path.write_text("<astrid/>", encoding="utf-8")
        with TagReader(str(path)) as reader:
            assert reader.next_start().tag == "astrid"
        assert reader._file is None
