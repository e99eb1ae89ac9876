"""In-memory model of a PO catalog."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

import polib


class Flags(enum.Flag):
    """Format and state flags of an entry."""
    NONE = 0
    C_FORMAT = enum.auto()
    FUZZY = enum.auto()
    CPP_FORMAT = enum.auto()
    QT_FORMAT = enum.auto()


# Order in which flags are written on a "#," line
FLAG_NAMES = [
    (Flags.C_FORMAT, "c-format"),
    (Flags.CPP_FORMAT, "c++-format"),
    (Flags.QT_FORMAT, "qt-format"),
    (Flags.FUZZY, "fuzzy"),
]


@dataclass(frozen=True)
class Reference:
    """A source location, ``path`` or ``path:line``."""
    source_file_path: str
    line_number: Optional[int] = None

    def __str__(self) -> str:
        if self.line_number is None:
            return self.source_file_path
        return f"{self.source_file_path}:{self.line_number}"


@dataclass
class Entry:
    """A single translation unit."""
    id: str
    string: str = ""
    context: Optional[str] = None
    translator_comments: list[str] = field(default_factory=list)
    extracted_comments: list[str] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)
    flags: Flags = Flags.NONE

    @property
    def key(self) -> tuple[str, Optional[str]]:
        return (self.id, self.context)

    @classmethod
    def from_polib(cls, entry: polib.POEntry) -> "Entry":
        flags = Flags.NONE
        for flag, name in FLAG_NAMES:
            if name in entry.flags:
                flags |= flag
        references = []
        for path, line in entry.occurrences:
            references.append(Reference(path, int(line) if line else None))
        return cls(
            id=entry.msgid,
            string=entry.msgstr,
            context=entry.msgctxt,
            translator_comments=entry.tcomment.split("\n") if entry.tcomment else [],
            extracted_comments=entry.comment.split("\n") if entry.comment else [],
            references=references,
            flags=flags,
        )

    def to_polib(self) -> polib.POEntry:
        return polib.POEntry(
            msgid=self.id,
            msgstr=self.string,
            msgctxt=self.context,
            tcomment="\n".join(self.translator_comments),
            comment="\n".join(self.extracted_comments),
            occurrences=[
                (ref.source_file_path, "" if ref.line_number is None else str(ref.line_number))
                for ref in self.references
            ],
            flags=[name for flag, name in FLAG_NAMES if self.flags & flag],
        )


@dataclass
class Catalog:
    """A parsed PO file: file comment, header entry and sorted body."""
    header: Entry
    entries: list[Entry] = field(default_factory=list)
    comment: Optional[str] = None

    @property
    def is_template(self) -> bool:
        return all(not e.string for e in self.entries)

    def find(self, msgid: str, context: Optional[str]) -> Optional[Entry]:
        for entry in self.entries:
            if entry.id == msgid and entry.context == context:
                return entry
        return None

    def string_for(self, msgid: str) -> Optional[str]:
        """Translation of the first entry with this id, if any."""
        for entry in self.entries:
            if entry.id == msgid:
                return entry.string
        return None

    def to_polib(self) -> polib.POFile:
        po = polib.POFile(wrapwidth=0)
        po.header = self.comment or ""
        po.metadata = _parse_metadata(self.header.string)
        for entry in self.entries:
            po.append(entry.to_polib())
        return po


def _parse_metadata(header: str) -> dict[str, str]:
    metadata = {}
    for line in header.split("\n"):
        key, sep, value = line.partition(":")
        if sep:
            metadata[key.strip()] = value.strip()
    return metadata
