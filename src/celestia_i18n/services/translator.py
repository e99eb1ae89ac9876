"""Backfill untranslated strings from a sibling locale.

Used to seed Traditional Chinese (zh_TW) from Simplified Chinese (zh_CN):
an empty translation is filled with the converted zh_CN translation of the
same id. Existing translations are never touched.
"""

from __future__ import annotations

import logging
from typing import Callable

from opencc import OpenCC

from celestia_i18n.parsers.catalog import Catalog
from celestia_i18n.parsers.po_writer import StringTransformer

log = logging.getLogger(__name__)

Converter = Callable[[str], str]


def opencc_converter(config: str = "s2twp") -> Converter:
    """Converter backed by OpenCC. ``s2twp``: Simplified to Taiwan standard with idioms."""
    return OpenCC(config).convert


def backfill_translations(source: Catalog, convert: Converter) -> StringTransformer:
    """Transformer filling empty strings with converted *source* translations."""
    def transform(msgid: str, string: str) -> str:
        if string:
            return string
        match = source.string_for(msgid)
        if not match:
            return string
        log.debug("Backfilling %r", msgid)
        return convert(match)

    return transform
