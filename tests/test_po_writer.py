"""Tests for the deterministic PO writer."""
from pathlib import Path

import polib
import pytest

FIXTURES = Path(__file__).parent / "fixtures"


def _entry(msgid, string="", **kw):
    from celestia_i18n.parsers.catalog import Entry
    return Entry(id=msgid, string=string, **kw)


def _catalog(entries, header_string="Content-Type: text/plain; charset=UTF-8\n", comment=None):
    from celestia_i18n.parsers.catalog import Catalog
    return Catalog(header=_entry("", header_string), entries=entries, comment=comment)


class TestFormatContent:
    def _format(self, content, width=50):
        from celestia_i18n.parsers.po_writer import format_content
        return format_content(content, width)

    def test_short(self):
        assert self._format("Hello") == '"Hello"'

    def test_empty(self):
        assert self._format("") == '""'

    def test_escaped(self):
        assert self._format('Say "hi"\t') == '"Say \\"hi\\"\\t"'

    def test_multiline(self):
        assert self._format("One\nTwo") == '""\n"One\\n"\n"Two"'

    def test_trailing_newline(self):
        assert self._format("One\nTwo\n") == '""\n"One\\n"\n"Two\\n"'

    def test_wrap(self):
        text = "Celestia is a free 3D astronomy program that lets you explore the universe in three dimensions."
        lines = self._format(text).split("\n")
        assert lines[0] == '""'
        assert len(lines) >= 3
        fragments = [line[1:-1] for line in lines[1:]]
        assert "".join(fragments) == text
        for fragment in fragments:
            assert len(fragment) <= 50
        for fragment in fragments[:-1]:
            assert fragment.endswith(" ")

    def test_wrap_multiline_keeps_newline_on_last_fragment(self):
        text = "word " * 15 + "\nnext"
        lines = self._format(text, width=20).split("\n")
        assert lines[0] == '""'
        assert lines[-2].endswith('\\n"')
        assert lines[-1] == '"next"'

    def test_no_space_no_wrap(self):
        text = "x" * 60
        assert self._format(text) == '""\n"' + text + '"'

    def test_unbounded(self):
        text = "word " * 30
        assert self._format(text, width=None) == f'"{text}"'


class TestFormatEntry:
    def test_field_order(self):
        from celestia_i18n.parsers.catalog import Flags, Reference
        from celestia_i18n.parsers.po_writer import format_entry
        entry = _entry(
            "%d files", "%d fichiers", context="count",
            translator_comments=["Note"], extracted_comments=["Auto"],
            references=[Reference("a.cpp", 3), Reference("b.cpp")],
            flags=Flags.FUZZY | Flags.QT_FORMAT | Flags.C_FORMAT | Flags.CPP_FORMAT,
        )
        assert format_entry(entry, 50) == "\n".join([
            "#  Note",
            "#. Auto",
            "#: a.cpp:3",
            "#: b.cpp",
            "#, c-format, c++-format, qt-format, fuzzy",
            'msgctxt "count"',
            'msgid "%d files"',
            'msgstr "%d fichiers"',
        ])

    def test_override(self):
        from celestia_i18n.parsers.po_writer import format_entry
        assert format_entry(_entry("Hi"), 50, "Bonjour") == 'msgid "Hi"\nmsgstr "Bonjour"'


class TestFormatPO:
    def test_template_byte_identical(self):
        from celestia_i18n.parsers.po_parser import parse_po_template
        from celestia_i18n.parsers.po_writer import format_po
        text = (FIXTURES / "template.pot").read_text("utf-8")
        pot = parse_po_template(FIXTURES / "template.pot")
        assert format_po(pot) == text

    def test_comment_block(self):
        from celestia_i18n.parsers.po_writer import format_po
        text = format_po(_catalog([], comment="Title\n\nBody"))
        assert text.startswith("# Title\n#\n# Body\n\nmsgid \"\"\n")

    def test_header_not_wrapped(self):
        from celestia_i18n.parsers.po_writer import format_po
        long_header = "X-Long: " + "value " * 20
        text = format_po(_catalog([], header_string=long_header))
        assert f'msgstr "{long_header}"' in text

    def test_round_trip(self):
        from celestia_i18n.parsers.catalog import Flags, Reference
        from celestia_i18n.parsers.po_parser import parse_po_text
        from celestia_i18n.parsers.po_writer import format_po
        catalog = parse_po_text(format_po(_catalog([
            _entry("Close", "Fermer", translator_comments=["Button"]),
            _entry("Open", "Ouvrir", references=[Reference("main.cpp", 4)]),
            _entry("Open", "Ouvrir…", context="menu", flags=Flags.FUZZY),
            _entry('Quote "me"', "Citez-moi", extracted_comments=["quoted"]),
        ], comment="Title")))
        again = parse_po_text(format_po(catalog))
        assert again == catalog
        assert catalog.comment == "Title"
        assert [e.id for e in catalog.entries] == ["Close", "Open", "Open", 'Quote "me"']

    def test_readable_by_polib(self):
        from celestia_i18n.parsers.po_parser import parse_po_template
        from celestia_i18n.parsers.po_writer import format_po
        pot = parse_po_template(FIXTURES / "template.pot")
        po = polib.pofile(format_po(pot))
        ids = {(e.msgctxt, e.msgid) for e in po}
        assert (None, "Drag to rotate.\nScroll to zoom.") in ids
        assert ("menu", "Open") in ids
        assert po.metadata["Project-Id-Version"] == "celestia"

    def test_polib_entries_convert_back(self):
        from celestia_i18n.parsers.catalog import Entry, Flags, Reference
        from celestia_i18n.parsers.po_parser import parse_po_template
        from celestia_i18n.parsers.po_writer import format_po
        pot = parse_po_template(FIXTURES / "template.pot")
        converted = {}
        for pe in polib.pofile(format_po(pot)):
            entry = Entry.from_polib(pe)
            converted[entry.key] = entry
        assert set(converted) == {e.key for e in pot.entries}
        about = next(e for key, e in converted.items() if key[0].startswith("Celestia is"))
        assert about.references == [Reference("app/src/main/AboutFragment.kt", 42)]
        assert about.extracted_comments == ["Shown in the about dialog"]
        assert converted[("%d objects", None)].flags == Flags.C_FORMAT


class TestWriteModes:
    def test_write_template(self, memory_fs):
        from celestia_i18n.parsers.po_writer import write_po_template
        write_po_template(_catalog([_entry("Open")]), "out.pot", fs=memory_fs)
        assert memory_fs.text("out.pot").endswith('msgid "Open"\nmsgstr ""')

    def test_update_template_replaces_entries(self, memory_fs):
        from celestia_i18n.parsers.po_writer import update_po_template
        template = _catalog([_entry("Old")], comment="Keep me")
        update_po_template(template, [_entry("New")], "out.pot", fs=memory_fs)
        text = memory_fs.text("out.pot")
        assert text.startswith("# Keep me\n")
        assert '"New"' in text
        assert '"Old"' not in text
        assert template.entries[0].id == "Old"

    def test_update_po_syncs_translations(self, memory_fs):
        from celestia_i18n.parsers.po_writer import update_po
        template = _catalog([_entry("Bye"), _entry("Hi"), _entry("New")],
                            header_string="Template header\n")
        po = _catalog([_entry("Hi", "Bonjour"), _entry("Bye", "Au revoir"),
                       _entry("Gone", "Parti")],
                      header_string="Language: fr\n")
        update_po(po, template, "fr.po", fs=memory_fs)
        text = memory_fs.text("fr.po")
        assert 'msgid "Hi"\nmsgstr "Bonjour"' in text
        assert 'msgid "Bye"\nmsgstr "Au revoir"' in text
        assert 'msgid "New"\nmsgstr ""' in text
        assert "Gone" not in text
        assert '"Language: fr\\n"' in text

    def test_update_po_prefers_same_context(self, memory_fs):
        from celestia_i18n.parsers.po_writer import update_po
        template = _catalog([_entry("Open"), _entry("Open", context="menu"),
                             _entry("Open", context="toolbar")])
        po = _catalog([_entry("Open", "Ouvrir"), _entry("Open", "Ouvrir…", context="menu")])
        update_po(po, template, "fr.po", fs=memory_fs)
        text = memory_fs.text("fr.po")
        assert 'msgctxt "menu"\nmsgid "Open"\nmsgstr "Ouvrir…"' in text
        assert 'msgctxt "toolbar"\nmsgid "Open"\nmsgstr "Ouvrir"' in text

    def test_transform_po(self, memory_fs):
        from celestia_i18n.parsers.po_writer import transform_po
        po = _catalog([_entry("a", "x"), _entry("b")])
        transform_po(po, lambda msgid, s: s or msgid.upper(), "out.po", fs=memory_fs)
        text = memory_fs.text("out.po")
        assert 'msgid "a"\nmsgstr "x"' in text
        assert 'msgid "b"\nmsgstr "B"' in text

    def test_without_overwriting(self, tmp_path):
        from celestia_i18n.errors import FileWriteError
        from celestia_i18n.parsers.po_writer import WriteOptions, write_po_template
        out = tmp_path / "out.pot"
        out.write_text("original", "utf-8")
        with pytest.raises(FileWriteError):
            write_po_template(_catalog([_entry("Open")]), out,
                              WriteOptions(without_overwriting=True))
        assert out.read_text("utf-8") == "original"

    def test_overwrite_by_default(self, tmp_path):
        from celestia_i18n.parsers.po_writer import write_po_template
        out = tmp_path / "out.pot"
        out.write_text("original", "utf-8")
        write_po_template(_catalog([_entry("Open")]), out)
        assert out.read_text("utf-8").startswith('msgid ""')

    def test_write_failure(self, tmp_path):
        from celestia_i18n.errors import FileWriteError
        from celestia_i18n.parsers.po_writer import write_po_template
        with pytest.raises(FileWriteError):
            write_po_template(_catalog([]), tmp_path / "missing" / "out.pot")
