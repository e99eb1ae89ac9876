"""celestia-i18n: gettext catalog tooling for the Apple, Android and Windows apps."""

__version__ = "1.0.0"
