"""Extract localizable strings from platform source trees.

Each platform wraps user-visible strings in a helper call:

* C++ (Windows):  ``LocalizationHelper::Localize(L"id", L"comment")``
* C# (Windows):   ``LocalizationHelper.Localize("id", "comment")``
* Swift (Apple):  ``CelestiaString("id", comment: "comment")``
* Kotlin (Android): ``CelestiaString("id", "comment")``

plus a three-argument form that adds a context before the comment.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Union

from celestia_i18n.errors import BadContentError, FileEncodingError
from celestia_i18n.parsers.catalog import Entry, Flags
from celestia_i18n.parsers.escaping import unescape
from celestia_i18n.services.storage import FileSystem, default_fs

log = logging.getLogger(__name__)

# A double-quoted literal body with backslash escapes
_LITERAL = r'"([^"\\]*(?:\\.[^"\\]*)*)"'
_WIDE_LITERAL = "L" + _LITERAL


def _call(prefix: str, *arguments: str) -> re.Pattern:
    args = r"\s*,\s*".join(arguments)
    return re.compile(prefix + r"\s*\(\s*" + args + r"\s*\)")


_CPP_HELPER = r"LocalizationHelper\s*::\s*Localize"
_CS_HELPER = r"LocalizationHelper\s*\.\s*Localize"
_CELESTIA_STRING = r"CelestiaString"

# extension -> (id + comment, id + context + comment)
CALL_PATTERNS: dict[str, tuple[re.Pattern, re.Pattern]] = {
    "cpp": (
        _call(_CPP_HELPER, _WIDE_LITERAL, _WIDE_LITERAL),
        _call(_CPP_HELPER, _WIDE_LITERAL, _WIDE_LITERAL, _WIDE_LITERAL),
    ),
    "cs": (
        _call(_CS_HELPER, _LITERAL, _LITERAL),
        _call(_CS_HELPER, _LITERAL, _LITERAL, _LITERAL),
    ),
    "swift": (
        _call(_CELESTIA_STRING, _LITERAL, r"comment\s*:\s*" + _LITERAL),
        _call(_CELESTIA_STRING, _LITERAL, r"context\s*:\s*" + _LITERAL, r"comment\s*:\s*" + _LITERAL),
    ),
    "kt": (
        _call(_CELESTIA_STRING, _LITERAL, _LITERAL),
        _call(_CELESTIA_STRING, _LITERAL, _LITERAL, _LITERAL),
    ),
}

# printf-style specifier, including Objective-C %@
FORMAT_SPECIFIER_RE = re.compile(r"%[0 #+-]?[0-9*]*\.?\d*[hl]{0,2}[jztL]?[diuoxXeEfgGaAcpsSn%@]")


def _unescape_or_raise(value: str) -> str:
    unescaped = unescape(value)
    if unescaped is None:
        raise BadContentError(value)
    return unescaped


def create_entry(msgid: str, context: Optional[str], comment: str) -> Entry:
    """Build an untranslated entry from raw (still escaped) call arguments."""
    unescaped_id = _unescape_or_raise(msgid)
    unescaped_comment = _unescape_or_raise(comment).strip()
    unescaped_context = _unescape_or_raise(context) if context is not None else None

    flags = Flags.NONE
    if FORMAT_SPECIFIER_RE.search(unescaped_id):
        flags |= Flags.C_FORMAT

    return Entry(
        id=unescaped_id,
        string="",
        context=unescaped_context,
        translator_comments=[unescaped_comment] if unescaped_comment else [],
        flags=flags,
    )


def extract_strings_from_text(content: str, extension: str) -> list[Entry]:
    """Extract entries from source text of the given kind ("cpp", "kt", ...)."""
    patterns = CALL_PATTERNS.get(extension)
    if patterns is None:
        return []
    two_argument, three_argument = patterns
    entries = []
    for match in two_argument.finditer(content):
        entries.append(create_entry(match.group(1), None, match.group(2)))
    for match in three_argument.finditer(content):
        entries.append(create_entry(match.group(1), match.group(2), match.group(3)))
    return entries


def extract_strings_from_file(path: Union[str, Path], fs: Optional[FileSystem] = None) -> list[Entry]:
    """Extract entries from one source file. Unknown file kinds yield nothing."""
    path = Path(path)
    extension = path.suffix[1:]
    if extension not in CALL_PATTERNS:
        return []
    fs = fs or default_fs()
    data = fs.read_bytes(path)
    try:
        content = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FileEncodingError(f"{path} is not valid UTF-8: {e}") from e
    entries = extract_strings_from_text(content, extension)
    if entries:
        log.debug("%s: %d strings", path, len(entries))
    return entries


def extract_strings_at(root: Union[str, Path], fs: Optional[FileSystem] = None) -> list[Entry]:
    """Recursively extract entries from every source file under *root*."""
    fs = fs or default_fs()
    entries = []
    for child in fs.list_dir(root):
        if child.is_directory:
            entries.extend(extract_strings_at(child.path, fs))
        else:
            entries.extend(extract_strings_from_file(child.path, fs))
    return entries
