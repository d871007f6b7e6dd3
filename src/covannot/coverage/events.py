"""Cobertura XML as a stream of attribute events.

Only three elements matter for checking annotations:

<coverage ...>
  <sources>
    <source>/abs/or/relative/root</source>
  </sources>
  <packages>
    <package name="...">
      <classes>
        <class name="..." filename="relative/path.rs">
          <lines>
            <line number="1" hits="1"/>
            <line number="2" hits="0"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>

Lines nested under <methods> repeat the class-level lines, so line events
are emitted for them as well; the builder's join makes the duplicates
harmless.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from covannot.core.errors import CoverageError


@dataclass(frozen=True, slots=True)
class SourceEvent:
    """A ``<source>`` root declaration."""

    path: str


@dataclass(frozen=True, slots=True)
class ClassEvent:
    """A ``<class filename=...>`` element; following line events belong to it."""

    filename: str


@dataclass(frozen=True, slots=True)
class LineEvent:
    """A ``<line number=... hits=...>`` element."""

    number: int
    hits: int


CoverageEvent = SourceEvent | ClassEvent | LineEvent


def _local_name(tag: str) -> str:
    # Strip namespace if present
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _int_attribute(elem: ET.Element, name: str, report: Path) -> int:
    raw = elem.get(name)
    if raw is None:
        return 0
    try:
        return int(raw)
    except ValueError as e:
        raise CoverageError.parse_error(
            str(report), f"<line> attribute {name}={raw!r} is not an integer"
        ) from e


def iter_cobertura_events(report: Path) -> Iterator[CoverageEvent]:
    """Stream the events of one Cobertura report, in document order.

    Raises:
        CoverageError: If the report can't be read or isn't well-formed XML.
    """
    try:
        for event, elem in ET.iterparse(report, events=("start", "end")):
            name = _local_name(elem.tag)
            if event == "start":
                if name == "class":
                    filename = elem.get("filename")
                    if filename:
                        yield ClassEvent(filename)
                elif name == "line":
                    yield LineEvent(
                        number=_int_attribute(elem, "number", report),
                        hits=_int_attribute(elem, "hits", report),
                    )
            elif name == "source":
                text = (elem.text or "").strip()
                if text:
                    yield SourceEvent(text)
            elif name in ("class", "package"):
                elem.clear()
    except ET.ParseError as e:
        raise CoverageError.parse_error(str(report), f"invalid XML: {e}") from e
    except OSError as e:
        raise CoverageError.parse_error(str(report), str(e)) from e
