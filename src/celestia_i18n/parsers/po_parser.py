"""PO/POT file parser.

The grammar is line based. A file starts with an optional file comment,
followed by the header entry (``msgid ""``) and the body entries. Each entry
is a run of comment lines, then content lines (``msgctxt``, ``msgid``,
``msgstr``) with optional string continuation lines. A comment line that
follows content starts the next entry.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from celestia_i18n.errors import (
    BadContentError,
    BadReferenceError,
    ContentTypeMissingError,
    ContentTypeRedefinedError,
    EmptyFlagError,
    FileEncodingError,
    MissingHeaderError,
    NonEmptyStringInTemplateError,
    UnknownContentTypeError,
    UnknownFlagError,
    UnknownLineError,
)
from celestia_i18n.parsers.catalog import Catalog, Entry, Flags, Reference
from celestia_i18n.parsers.escaping import unescape
from celestia_i18n.services.collation import sort_entries
from celestia_i18n.services.storage import FileSystem, default_fs

log = logging.getLogger(__name__)

_NEWLINE_RE = re.compile(r"\r\n|\n|\r")
_COMMENT_RE = re.compile(r"#([ .:,])\s*(.+)", re.DOTALL)
_CONTENT_RE = re.compile(r"(msg[a-z]*)\s*\"(.*)\"", re.DOTALL)
_CONTINUATION_RE = re.compile(r"\s*\"(.*)\"", re.DOTALL)
_FLAG_SEPARATOR_RE = re.compile(r",\s*")
_REFERENCE_RE = re.compile(r"(.+):([0-9]+)", re.DOTALL)

_FLAGS = {
    "c-format": Flags.C_FORMAT,
    "fuzzy": Flags.FUZZY,
}


class ContentType(enum.Enum):
    MSGID = "msgid"
    MSGCTXT = "msgctxt"
    MSGSTR = "msgstr"


class CommentType(enum.Enum):
    TRANSLATOR = " "
    EXTRACTED = "."
    REFERENCES = ":"
    FLAGS = ","


@dataclass
class Comment:
    type: CommentType
    text: str = ""
    flags: Flags = Flags.NONE
    references: tuple[Reference, ...] = ()


# ── Line classification ───────────────────────────────────────────────

def parse_comment(line: str) -> Optional[Comment]:
    """Classify an entry comment line, or return None if it is not one."""
    match = _COMMENT_RE.fullmatch(line)
    if not match:
        return None
    comment_type = CommentType(match.group(1))
    content = match.group(2)

    if comment_type is CommentType.FLAGS:
        tokens = [t for t in _FLAG_SEPARATOR_RE.split(content) if t]
        if not tokens:
            raise EmptyFlagError(line)
        flags = Flags.NONE
        for token in tokens:
            if token not in _FLAGS:
                raise UnknownFlagError(token)
            flags |= _FLAGS[token]
        return Comment(comment_type, flags=flags)

    if comment_type is CommentType.REFERENCES:
        references = []
        for token in content.split():
            ref_match = _REFERENCE_RE.fullmatch(token)
            if ref_match is None:
                references.append(Reference(token))
                continue
            try:
                line_number = int(ref_match.group(2))
            except ValueError:
                raise BadReferenceError(token) from None
            references.append(Reference(ref_match.group(1), line_number))
        return Comment(comment_type, references=tuple(references))

    return Comment(comment_type, text=content)


def _unescape_or_raise(value: str) -> str:
    unescaped = unescape(value)
    if unescaped is None:
        raise BadContentError(value)
    return unescaped


def parse_content(line: str) -> Optional[tuple[ContentType, str]]:
    """Parse a ``msgid "..."`` style line into (type, unescaped value)."""
    match = _CONTENT_RE.fullmatch(line)
    if not match:
        return None
    try:
        content_type = ContentType(match.group(1))
    except ValueError:
        raise UnknownContentTypeError(line) from None
    return content_type, _unescape_or_raise(match.group(2))


def parse_continuation(line: str) -> Optional[str]:
    """Parse a bare quoted continuation line."""
    match = _CONTINUATION_RE.fullmatch(line)
    if not match:
        return None
    return _unescape_or_raise(match.group(1))


# ── Parser ────────────────────────────────────────────────────────────

class _LineCursor:
    """Trimmed lines with one-line lookahead."""

    def __init__(self, text: str):
        self._lines = [line.strip() for line in _NEWLINE_RE.split(text)]
        self._pos = 0

    def peek(self) -> Optional[str]:
        if self._pos < len(self._lines):
            return self._lines[self._pos]
        return None

    def advance(self):
        self._pos += 1

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._lines)


def _parse_file_comment(cursor: _LineCursor) -> Optional[str]:
    lines = []
    while (line := cursor.peek()) is not None:
        if not line:
            cursor.advance()
            continue
        if not line.startswith("#"):
            break
        rest = line.lstrip("#")
        if not rest:
            lines.append("")
        elif rest[0] == " ":
            lines.append(rest.strip())
        else:
            break
        cursor.advance()
    return "\n".join(lines) if lines else None


def _parse_entry(cursor: _LineCursor) -> Entry:
    translator_comments: list[str] = []
    extracted_comments: list[str] = []
    references: list[Reference] = []
    flags = Flags.NONE
    values: dict[ContentType, str] = {}
    previous: Optional[ContentType] = None

    while (line := cursor.peek()) is not None:
        if not line:
            cursor.advance()
            continue

        comment = parse_comment(line)
        if comment is not None:
            # A comment after content belongs to the next entry
            if previous is not None:
                break
            if comment.type is CommentType.TRANSLATOR:
                translator_comments.append(comment.text)
            elif comment.type is CommentType.EXTRACTED:
                extracted_comments.append(comment.text)
            elif comment.type is CommentType.FLAGS:
                flags |= comment.flags
            else:
                references.extend(comment.references)
            cursor.advance()
            continue

        content = parse_content(line)
        if content is not None:
            content_type, value = content
            if content_type in values:
                raise ContentTypeRedefinedError(content_type.value)
            values[content_type] = value
            previous = content_type
            cursor.advance()
            continue

        continuation = parse_continuation(line)
        if continuation is not None:
            if previous is None:
                raise UnknownLineError(line)
            values[previous] += continuation
            cursor.advance()
            continue

        raise UnknownLineError(line)

    for required in (ContentType.MSGID, ContentType.MSGSTR):
        if required not in values:
            raise ContentTypeMissingError(required.value)

    return Entry(
        id=values[ContentType.MSGID],
        string=values[ContentType.MSGSTR],
        context=values.get(ContentType.MSGCTXT),
        translator_comments=translator_comments,
        extracted_comments=extracted_comments,
        references=references,
        flags=flags,
    )


def parse_po_text(text: str, template: bool = False) -> Catalog:
    """Parse PO source text into a catalog with sorted entries."""
    cursor = _LineCursor(text)
    comment = _parse_file_comment(cursor)

    header = _parse_entry(cursor)
    if header.id != "":
        raise MissingHeaderError()

    entries = []
    while not cursor.exhausted:
        # Trailing blank lines do not start a new entry
        if not cursor.peek():
            cursor.advance()
            continue
        entry = _parse_entry(cursor)
        if template and entry.string:
            raise NonEmptyStringInTemplateError(entry.id)
        entries.append(entry)

    return Catalog(header=header, entries=sort_entries(entries), comment=comment)


def parse_po_bytes(data: bytes, template: bool = False) -> Catalog:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FileEncodingError(f"Catalog is not valid UTF-8: {e}") from e
    return parse_po_text(text, template=template)


def parse_po(path: Union[str, Path], fs: Optional[FileSystem] = None) -> Catalog:
    """Parse a PO file."""
    fs = fs or default_fs()
    catalog = parse_po_bytes(fs.read_bytes(path))
    log.debug("Parsed %s: %d entries", path, len(catalog.entries))
    return catalog


def parse_po_template(path: Union[str, Path], fs: Optional[FileSystem] = None) -> Catalog:
    """Parse a POT file. Entries with a translation are rejected."""
    fs = fs or default_fs()
    catalog = parse_po_bytes(fs.read_bytes(path), template=True)
    log.debug("Parsed template %s: %d entries", path, len(catalog.entries))
    return catalog
