"""Timed karaoke lyrics: parsing, validation, highlighting, editing, time adjustment, encodings and version checks."""

__version__ = "0.1.0"