"""Merge strings extracted from the Apple, Android and Windows sources."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from celestia_i18n.parsers.catalog import Entry
from celestia_i18n.services.collation import sort_entries, sort_references, sort_strings
from celestia_i18n.services.extractor import extract_strings_at
from celestia_i18n.services.storage import FileSystem, default_fs

log = logging.getLogger(__name__)


class Platform(enum.Flag):
    NONE = 0
    APPLE = enum.auto()
    ANDROID = enum.auto()
    WINDOWS = enum.auto()


PLATFORM_NAMES = [
    (Platform.APPLE, "Apple"),
    (Platform.ANDROID, "Android"),
    (Platform.WINDOWS, "Windows"),
]


@dataclass
class EntryInformation:
    entry: Entry
    platforms: Platform


def merge_entries(first: Entry, second: Entry) -> Entry:
    """Union comments, references and flags; id, string and context come from *first*."""
    return Entry(
        id=first.id,
        string=first.string,
        context=first.context,
        translator_comments=sort_strings(set(first.translator_comments + second.translator_comments)),
        extracted_comments=sort_strings(set(first.extracted_comments + second.extracted_comments)),
        references=sort_references(set(first.references + second.references)),
        flags=first.flags | second.flags,
    )


def platforms_comment(platforms: Platform) -> str:
    names = [name for platform, name in PLATFORM_NAMES if platforms & platform]
    return f"Platforms: {', '.join(names)}"


def merge_platform_entries(apple: Iterable[Entry], android: Iterable[Entry],
                           windows: Iterable[Entry]) -> list[Entry]:
    """Fold the three platform lists into one sorted, deduplicated list.

    Every resulting entry starts with a "Platforms: ..." translator comment
    naming the platforms that use it.
    """
    results: dict[tuple[str, Optional[str]], EntryInformation] = {}

    def add_entry(entry: Entry, platform: Platform):
        existing = results.get(entry.key)
        if existing is None:
            results[entry.key] = EntryInformation(entry, platform)
        else:
            results[entry.key] = EntryInformation(
                merge_entries(existing.entry, entry),
                existing.platforms | platform,
            )

    for platform, entries in ((Platform.APPLE, apple),
                              (Platform.ANDROID, android),
                              (Platform.WINDOWS, windows)):
        for entry in entries:
            add_entry(entry, platform)

    merged = []
    for info in results.values():
        entry = info.entry
        merged.append(Entry(
            id=entry.id,
            string=entry.string,
            context=entry.context,
            translator_comments=[platforms_comment(info.platforms)] + entry.translator_comments,
            extracted_comments=entry.extracted_comments,
            references=entry.references,
            flags=entry.flags,
        ))
    return sort_entries(merged, allow_duplicates=True)


def extract_strings(apple_root: Union[str, Path], android_root: Union[str, Path],
                    windows_root: Union[str, Path],
                    fs: Optional[FileSystem] = None) -> list[Entry]:
    """Extract and merge the strings of all three platforms."""
    fs = fs or default_fs()
    apple = extract_strings_at(apple_root, fs)
    android = extract_strings_at(android_root, fs)
    windows = extract_strings_at(windows_root, fs)
    log.info("Extracted %d Apple, %d Android, %d Windows strings",
             len(apple), len(android), len(windows))
    entries = merge_platform_entries(apple, android, windows)
    log.info("Merged into %d entries", len(entries))
    return entries
