"""Locale-aware ordering shared by the parser and the merge engine.

Strings compare the way a file browser sorts names: width and case are
ignored, accents only matter when everything else is equal, and runs of
digits compare by numeric value ("Item 9" < "Item 10"). Two different
strings never compare equal; the raw code points break the last tie.
"""

from __future__ import annotations

import functools
import re
import unicodedata
from typing import Iterable, TYPE_CHECKING

from celestia_i18n.errors import DuplicateEntryError

if TYPE_CHECKING:
    from celestia_i18n.parsers.catalog import Entry, Reference

_TOKEN_RE = re.compile(r"(\d+)|(\D)")

# Token classes: separators sort before digits, digits before letters
_SEPARATOR, _NUMBER, _LETTER = 0, 1, 2


def _tokens(text: str) -> tuple:
    tokens = []
    for digits, token in _TOKEN_RE.findall(text):
        if digits:
            tokens.append((_NUMBER, int(digits), ""))
        elif unicodedata.category(token)[0] in "ZPSC":
            tokens.append((_SEPARATOR, 0, token))
        else:
            tokens.append((_LETTER, 0, token))
    return tuple(tokens)


@functools.lru_cache(maxsize=4096)
def collation_key(text: str) -> tuple:
    folded = unicodedata.normalize("NFKC", text).casefold()
    base = "".join(
        ch for ch in unicodedata.normalize("NFKD", folded)
        if not unicodedata.combining(ch)
    )
    return (_tokens(base), _tokens(folded), text)


def compare_strings(a: str, b: str) -> int:
    """Return -1, 0 or 1. Only identical strings compare equal."""
    ka, kb = collation_key(a), collation_key(b)
    return (ka > kb) - (ka < kb)


def compare_entries(e1: Entry, e2: Entry, allow_duplicates: bool = False) -> int:
    """Order entries by id, then context. Entries without context come first.

    A tie on both fields raises DuplicateEntryError unless *allow_duplicates*.
    """
    result = compare_strings(e1.id, e2.id)
    if result:
        return result
    if e1.context is not None and e2.context is not None:
        result = compare_strings(e1.context, e2.context)
        if result:
            return result
    elif e1.context is not None:
        return 1
    elif e2.context is not None:
        return -1
    if allow_duplicates:
        return 0
    raise DuplicateEntryError(e1.id, e1.context)


def sort_entries(entries: Iterable[Entry], allow_duplicates: bool = False) -> list[Entry]:
    cmp = functools.partial(compare_entries, allow_duplicates=allow_duplicates)
    return sorted(entries, key=functools.cmp_to_key(cmp))


def compare_references(r1: Reference, r2: Reference) -> int:
    """Order by path, then line number; a reference with a line comes first."""
    result = compare_strings(r1.source_file_path, r2.source_file_path)
    if result:
        return result
    if r1.line_number is not None and r2.line_number is not None:
        return (r1.line_number > r2.line_number) - (r1.line_number < r2.line_number)
    if r1.line_number is not None:
        return -1
    if r2.line_number is not None:
        return 1
    return 0


def sort_references(references: Iterable[Reference]) -> list[Reference]:
    return sorted(references, key=functools.cmp_to_key(compare_references))


def sort_strings(strings: Iterable[str]) -> list[str]:
    return sorted(strings, key=collation_key)
