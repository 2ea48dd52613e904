"""Tests for container type detection."""

import pytest

from botornot.config import ParserConfig
from botornot.models import ContainerType
from botornot.parsers import detect_container_type, parse_container

MINIMAL_HEADERS = [
    (b"\xff\xd8\xff", ContainerType.JPEG),
    (b"\x89PNG\r\n\x1a\n", ContainerType.PNG),
    (b"GIF89a", ContainerType.GIF),
    (b"GIF87a", ContainerType.GIF),
    (b"RIFF\x00\x00\x00\x00WEBP", ContainerType.WEBP),
    (b"\x00\x00\x00\x1cftypavif", ContainerType.AVIF),
    (b"\x00\x00\x00\x1cftypavis", ContainerType.AVIF),
    (b"II*\x00", ContainerType.TIFF),
    (b"MM\x00*", ContainerType.TIFF),
    (b"\x00\x00\x00\x14ftypqt  ", ContainerType.MOV),
    (b"\x00\x00\x00\x18ftypisom", ContainerType.MP4),
    (b"\x00\x00\x00\x18ftypmp42", ContainerType.MP4),
    (b"\x1a\x45\xdf\xa3", ContainerType.WEBM),
    (b"RIFF\x00\x00\x00\x00AVI ", ContainerType.AVI),
]


@pytest.mark.parametrize("header,expected", MINIMAL_HEADERS)
def test_detect_minimal_header(header, expected):
    """Test a bare magic-byte header is enough to detect the container."""
    assert detect_container_type(header) == expected


@pytest.mark.parametrize("header,expected", MINIMAL_HEADERS)
def test_parse_minimal_header_does_not_raise(header, expected):
    """Test parsing a header with zero payload bytes degrades gracefully."""
    result = parse_container(header)
    assert result.container_type == expected
    assert isinstance(result.warnings, list)


@pytest.mark.parametrize("data", [b"", b"\xff", b"RIFF", b"hello world", b"\x00" * 32])
def test_detect_unknown(data):
    """Test short or unrecognised input is Unknown, never an exception."""
    assert detect_container_type(data) == ContainerType.UNKNOWN


def test_avif_before_generic_ftyp():
    """Test the AVIF brand wins over the generic MP4 rule."""
    assert detect_container_type(b"\x00\x00\x00\x20ftypavif\x00\x00\x00\x00") == ContainerType.AVIF


def test_riff_form_type_decides():
    """Test RIFF files are told apart by their form type."""
    assert detect_container_type(b"RIFF\x10\x00\x00\x00WAVEfmt ") == ContainerType.UNKNOWN


def test_unknown_container_scans_header_text():
    """Test unknown bytes fall back to one header-scan field and a warning."""
    result = parse_container(b"some text made with Midjourney v6")

    assert result.container_type == ContainerType.UNKNOWN
    assert len(result.fields) == 1
    assert result.fields[0].kind.value == "header_scan"
    assert "Midjourney" in result.fields[0].text
    assert any("unsupported" in w for w in result.warnings)


def test_header_scan_limit():
    """Test the fallback reads at most header_scan_bytes."""
    data = b"a" * 100 + b"midjourney"
    result = parse_container(data, ParserConfig(header_scan_bytes=50))
    assert result.fields[0].text == "a" * 50
