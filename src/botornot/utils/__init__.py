"""Utility functions for botornot."""

from .binary import ByteReader, decode_text, printable_strings, split_nul
from .url_parser import ParsedLocation, is_remote_url, parse_location

__all__ = [
    # Binary reading
    "ByteReader",
    "decode_text",
    "printable_strings",
    "split_nul",
    # Locations
    "ParsedLocation",
    "is_remote_url",
    "parse_location",
]
