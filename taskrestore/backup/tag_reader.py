"""Forward-only, pull-based XML event cursor over a backup file."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import BinaryIO, Iterator, List, Mapping, Optional, Tuple, Union

from taskrestore.backup.errors import StreamError

Source = Union[str, "os.PathLike[str]", BinaryIO]


class EventKind(str, Enum):
    START = "start"
    END = "end"


@dataclass(frozen=True)
class TagEvent:
    tag: str
    kind: EventKind


def _local_name(tag: str) -> str:
    # "{namespace}task" -> "task"
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag


class TagReader:
    """Pull parser yielding one START/END event at a time.

    Finished elements are detached from their parent on END, so memory use
    stays flat no matter how many tasks the document holds. Attribute
    accessors refer to the element most recently entered (the last START).
    """

    def __init__(self, source: Source):
        self._source = source
        self._file: Optional[BinaryIO] = None
        self._owns_file = False
        self._events: Optional[Iterator[Tuple[str, ET.Element]]] = None
        self._stack: List[ET.Element] = []
        self._attributes: List[Tuple[str, str]] = []
        self._finished = False

    def __enter__(self) -> "TagReader":
        self._ensure_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._events is not None:
            return
        if isinstance(self._source, (str, os.PathLike)):
            try:
                self._file = open(self._source, "rb")
            except OSError as e:
                raise StreamError(f"Cannot open backup file {os.fspath(self._source)!r}: {e}") from e
            self._owns_file = True
        else:
            self._file = self._source
        self._events = ET.iterparse(self._file, events=("start", "end"))

    def close(self) -> None:
        if self._owns_file and self._file is not None:
            self._file.close()
        self._file = None
        self._owns_file = False

    def advance(self) -> Optional[TagEvent]:
        """Return the next event, or None at end of document.

        Raises:
            StreamError: the document is not well-formed
        """
        if self._finished:
            return None
        self._ensure_open()
        try:
            event, elem = next(self._events)
        except StopIteration:
            self._finished = True
            return None
        except ET.ParseError as e:
            self._finished = True
            raise StreamError(f"Malformed backup XML: {e}") from e

        if event == "start":
            self._stack.append(elem)
            self._attributes = list(elem.attrib.items())
            return TagEvent(_local_name(elem.tag), EventKind.START)

        self._stack.pop()
        if self._stack:
            self._stack[-1].remove(elem)
        elem.clear()
        return TagEvent(_local_name(elem.tag), EventKind.END)

    def next_start(self) -> Optional[TagEvent]:
        """Advance past END events to the next START, or None at end of document."""
        while True:
            tag_event = self.advance()
            if tag_event is None or tag_event.kind is EventKind.START:
                return tag_event

    def attribute(self, name: str) -> Optional[str]:
        for key, value in self._attributes:
            if key == name:
                return value
        return None

    def attribute_count(self) -> int:
        return len(self._attributes)

    def attribute_at(self, index: int) -> Tuple[str, str]:
        return self._attributes[index]

    def attributes(self) -> Mapping[str, str]:
        """Read-only view of the current element's attributes."""
        return MappingProxyType(dict(self._attributes))

    def __iter__(self) -> Iterator[TagEvent]:
        while True:
            tag_event = self.advance()
            if tag_event is None:
                return
            yield tag_event
