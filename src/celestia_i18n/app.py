"""Command-line entry point for the catalog tools."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from celestia_i18n import __version__
from celestia_i18n.errors import FileWriteError, I18nError
from celestia_i18n.parsers.po_parser import parse_po, parse_po_template
from celestia_i18n.parsers.po_writer import (
    WriteOptions,
    transform_po,
    update_po,
    update_po_template,
    write_po_template,
)
from celestia_i18n.services.merge import extract_strings
from celestia_i18n.services.settings import Settings
from celestia_i18n.services.translator import backfill_translations, opencc_converter

log = logging.getLogger("celestia_i18n")


# ── Commands ──────────────────────────────────────────────────────────

def cmd_format(args, options: WriteOptions):
    """Rewrite a template in canonical form."""
    template = parse_po_template(args.pot)
    write_po_template(template, args.pot, options)


def cmd_update(args, options: WriteOptions):
    """Carry a catalog's translations over to the current template."""
    template = parse_po_template(args.pot)
    po = parse_po(args.po)
    update_po(po, template, args.po, options)


def cmd_extract(args, options: WriteOptions):
    """Extract strings from the three platform trees into the template."""
    template = parse_po_template(args.pot)
    entries = extract_strings(args.apple_root, args.android_root, args.windows_root)
    update_po_template(template, entries, args.pot, options)


def cmd_translate(args, options: WriteOptions):
    """Fill empty translations of TARGET from SOURCE through OpenCC."""
    convert = opencc_converter(args.config or Settings.get()["opencc_config"])
    source = parse_po(args.source)
    target = parse_po(args.target)
    transform_po(target, backfill_translations(source, convert), args.target, options)


def cmd_compile(args, options: WriteOptions):
    """Compile a catalog to a binary .mo file."""
    po = parse_po(args.po)
    if options.without_overwriting and Path(args.mo).exists():
        raise FileWriteError(f"{args.mo} already exists")
    try:
        po.to_polib().save_as_mofile(args.mo)
    except OSError as e:
        raise FileWriteError(f"Cannot write {args.mo}: {e}") from e
    log.info("Wrote %s", args.mo)


# ── Argument parsing ──────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="celestia-i18n",
        description="Maintain the gettext catalogs of the Celestia apps.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    parser.add_argument("--no-overwrite", action="store_true",
                        help="Fail instead of replacing an existing output file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("format", help=cmd_format.__doc__)
    p.add_argument("pot", help="Template (.pot) to rewrite")
    p.set_defaults(func=cmd_format)

    p = sub.add_parser("update", help=cmd_update.__doc__)
    p.add_argument("po", help="Catalog (.po) to update")
    p.add_argument("pot", help="Template (.pot)")
    p.set_defaults(func=cmd_update)

    p = sub.add_parser("extract", help=cmd_extract.__doc__)
    p.add_argument("apple_root", help="Apple source tree")
    p.add_argument("android_root", help="Android source tree")
    p.add_argument("windows_root", help="Windows source tree")
    p.add_argument("pot", help="Template (.pot) to update")
    p.set_defaults(func=cmd_extract)

    p = sub.add_parser("translate", help=cmd_translate.__doc__)
    p.add_argument("source", help="Catalog to convert from (e.g. zh_CN.po)")
    p.add_argument("target", help="Catalog to fill (e.g. zh_TW.po)")
    p.add_argument("--config", help="OpenCC configuration (default from settings: s2twp)")
    p.set_defaults(func=cmd_translate)

    p = sub.add_parser("compile", help=cmd_compile.__doc__)
    p.add_argument("po", help="Catalog (.po)")
    p.add_argument("mo", help="Output (.mo)")
    p.set_defaults(func=cmd_compile)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    settings = Settings.get()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(name)s: %(message)s",
    )
    options = WriteOptions(without_overwriting=args.no_overwrite,
                           line_width=settings.line_width)
    try:
        args.func(args, options)
    except I18nError as e:
        log.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
