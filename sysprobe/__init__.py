"""Host and process information for Linux, with parsers for macOS system data."""

__version__ = "0.1.0"