"""PO/POT file writer.

Output is deterministic so regenerated catalogs diff cleanly: entries keep
their order, long bodies are wrapped at spaces and multi-line values start
with an empty ``""`` line the way gettext tools write them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional, Union

from celestia_i18n.parsers.catalog import FLAG_NAMES, Catalog, Entry, Flags
from celestia_i18n.parsers.escaping import escape
from celestia_i18n.services.storage import FileSystem, default_fs

log = logging.getLogger(__name__)

DEFAULT_LINE_WIDTH = 50

# (msgid, current msgstr) -> msgstr to write
StringTransformer = Callable[[str, str], str]


@dataclass(frozen=True)
class WriteOptions:
    without_overwriting: bool = False
    line_width: int = DEFAULT_LINE_WIDTH


# ── Formatting ────────────────────────────────────────────────────────

def _wrap_line(line: str, width: int) -> list[str]:
    """Break *line* after the last space within each *width* prefix."""
    fragments = []
    while len(line) > width:
        cut = line.rfind(" ", 0, width)
        if cut < 0:
            break
        fragments.append(line[:cut + 1])
        line = line[cut + 1:]
    fragments.append(line)
    return fragments


def format_content(content: str, max_line_width: Optional[int]) -> str:
    """Format a value as one or more quoted lines."""
    lines = content.split("\n")
    original_count = len(lines)
    parts: list[str] = []
    if original_count > 1 or (max_line_width is not None and len(lines[0]) > max_line_width):
        parts.append("")
    if original_count > 1 and not lines[-1]:
        lines.pop()

    for index, line in enumerate(lines):
        last = index == original_count - 1
        if max_line_width is not None and len(line) > max_line_width:
            fragments = _wrap_line(line, max_line_width)
        else:
            fragments = [line]
        if not last:
            fragments[-1] += "\n"
        parts.extend(fragments)

    return "\n".join(f'"{escape(part)}"' for part in parts)


def format_entry(entry: Entry, max_line_width: Optional[int],
                 override_string: Optional[str] = None) -> str:
    """Format one entry: comments, references, flags, then content."""
    parts = []
    for comment in entry.translator_comments:
        parts.append(f"#  {comment}")
    for comment in entry.extracted_comments:
        parts.append(f"#. {comment}")
    for reference in entry.references:
        parts.append(f"#: {reference}")
    if entry.flags != Flags.NONE:
        names = [name for flag, name in FLAG_NAMES if entry.flags & flag]
        parts.append(f"#, {', '.join(names)}")

    if entry.context is not None:
        parts.append(f"msgctxt {format_content(entry.context, max_line_width)}")
    parts.append(f"msgid {format_content(entry.id, max_line_width)}")
    string = entry.string if override_string is None else override_string
    parts.append(f"msgstr {format_content(string, max_line_width)}")
    return "\n".join(parts)


def _provided_string(provider: Catalog, entry: Entry) -> Optional[str]:
    # Prefer the same context, then any entry with the same id
    match = provider.find(entry.id, entry.context)
    if match is not None:
        return match.string
    return provider.string_for(entry.id)


def format_po(po: Catalog, string_provider: Optional[Catalog] = None,
              line_width: int = DEFAULT_LINE_WIDTH) -> str:
    """Render a catalog to text.

    When *string_provider* is given, the header msgstr and every body msgstr
    whose id it translates are taken from it instead of *po*, preferring
    an entry with the same context.
    """
    parts = []
    if po.comment is not None:
        parts.append("\n".join(f"# {line}".strip() for line in po.comment.split("\n")))

    header_override = string_provider.header.string if string_provider else None
    parts.append(format_entry(po.header, None, header_override))

    for entry in po.entries:
        override = _provided_string(string_provider, entry) if string_provider else None
        parts.append(format_entry(entry, line_width, override))

    return "\n\n".join(parts)


# ── Writing ───────────────────────────────────────────────────────────

def _write(text: str, destination: Union[str, Path], options: WriteOptions,
           fs: Optional[FileSystem]):
    fs = fs or default_fs()
    fs.write_bytes(destination, text.encode("utf-8"), fail_if_exists=options.without_overwriting)
    log.info("Wrote %s", destination)


def write_po_template(template: Catalog, destination: Union[str, Path],
                      options: WriteOptions = WriteOptions(),
                      fs: Optional[FileSystem] = None):
    """Write a template as-is."""
    _write(format_po(template, line_width=options.line_width), destination, options, fs)


def update_po_template(template: Catalog, entries: list[Entry],
                       destination: Union[str, Path],
                       options: WriteOptions = WriteOptions(),
                       fs: Optional[FileSystem] = None):
    """Replace the template's entries, keeping its comment and header."""
    new_template = replace(template, entries=list(entries))
    log.debug("Updating template with %d entries (was %d)",
              len(new_template.entries), len(template.entries))
    write_po_template(new_template, destination, options, fs)


def update_po(po: Catalog, template: Catalog, destination: Union[str, Path],
              options: WriteOptions = WriteOptions(),
              fs: Optional[FileSystem] = None):
    """Write *template* with translations carried over from *po*."""
    text = format_po(template, string_provider=po, line_width=options.line_width)
    _write(text, destination, options, fs)


def transform_po(po: Catalog, transformer: StringTransformer,
                 destination: Union[str, Path],
                 options: WriteOptions = WriteOptions(),
                 fs: Optional[FileSystem] = None):
    """Write *po* with each body msgstr passed through *transformer*."""
    entries = [replace(e, string=transformer(e.id, e.string)) for e in po.entries]
    text = format_po(replace(po, entries=entries), line_width=options.line_width)
    _write(text, destination, options, fs)
