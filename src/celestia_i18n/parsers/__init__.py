"""Reading and writing of gettext PO/POT catalogs."""
