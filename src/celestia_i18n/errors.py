"""Error types raised by the catalog tools.

Every failure is fatal for the running operation. Callers distinguish the
kind of failure by exception class; all of them derive from ``I18nError``.
"""

from __future__ import annotations

from typing import Optional


class I18nError(Exception):
    pass


# ── File system ───────────────────────────────────────────────────────

class FileSystemError(I18nError):
    pass


class EnumerationError(FileSystemError):
    """A directory could not be listed."""


class FileReadError(FileSystemError):
    pass


class FileWriteError(FileSystemError):
    pass


class FileEncodingError(FileSystemError):
    """File content is not valid UTF-8."""


# ── Grammar ───────────────────────────────────────────────────────────

class ParseError(I18nError):
    pass


class UnknownLineError(ParseError):
    def __init__(self, line: str):
        super().__init__(f"Unknown line: {line!r}")
        self.line = line


class UnknownContentTypeError(ParseError):
    def __init__(self, line: str):
        super().__init__(f"Unknown content type: {line!r}")
        self.line = line


class ContentTypeRedefinedError(ParseError):
    def __init__(self, content_type: str):
        super().__init__(f"{content_type} is defined more than once in one entry")
        self.content_type = content_type


class ContentTypeMissingError(ParseError):
    def __init__(self, content_type: str):
        super().__init__(f"Entry has no {content_type}")
        self.content_type = content_type


class UnknownFlagError(ParseError):
    def __init__(self, flag: str):
        super().__init__(f"Unknown flag: {flag!r}")
        self.flag = flag


class EmptyFlagError(ParseError):
    def __init__(self, line: str):
        super().__init__(f"Flag comment without flags: {line!r}")
        self.line = line


class BadReferenceError(ParseError):
    def __init__(self, reference: str):
        super().__init__(f"Malformed reference: {reference!r}")
        self.reference = reference


class MissingHeaderError(ParseError):
    def __init__(self):
        super().__init__("First entry is not a header (msgid \"\")")


class NonEmptyStringInTemplateError(ParseError):
    def __init__(self, msgid: str):
        super().__init__(f"Template entry {msgid!r} has a translation")
        self.msgid = msgid


class DuplicateEntryError(ParseError):
    def __init__(self, msgid: str, context: Optional[str]):
        if context is None:
            message = f"Duplicate entry: {msgid!r}"
        else:
            message = f"Duplicate entry: {msgid!r} (context {context!r})"
        super().__init__(message)
        self.msgid = msgid
        self.context = context


# ── Content ───────────────────────────────────────────────────────────

class BadContentError(I18nError):
    """A quoted literal holds an escape sequence that cannot be decoded."""

    def __init__(self, content: str):
        super().__init__(f"Cannot unescape: {content!r}")
        self.content = content
