"""Tests for the WebP, GIF, AVI, ISO-BMFF and WebM parsers."""

import struct

from botornot.models import ContainerType, FieldKind
from botornot.parsers import parse_container
from botornot.parsers.isobmff import XMP_UUID
from botornot.parsers.webm import UNKNOWN_SIZE, read_vint
from media_builders import (
    box,
    ebml,
    ftyp,
    full_box,
    gif,
    ilst_item,
    mp4_with_ilst,
    riff,
    riff_chunk,
    riff_list,
    tiff,
    webm,
)


def field_map(result):
    return {f.source: f.text for f in result.fields}


class TestWebp:
    """Test the WebP RIFF walk."""

    def test_exif_and_xmp(self):
        """Test EXIF (with Exif prefix) and XMP chunks, after an odd-sized chunk."""
        data = riff(
            b"WEBP",
            riff_chunk(b"VP8X", b"\x00" * 10),
            riff_chunk(b"ICCP", b"abc"),
            riff_chunk(b"EXIF", b"Exif\x00\x00" + tiff({0x0131: "Leonardo.Ai"})),
            riff_chunk(b"XMP ", b"<x:xmpmeta>Firefly</x:xmpmeta>"),
        )
        result = parse_container(data)

        assert result.container_type == ContainerType.WEBP
        fields = field_map(result)
        assert fields["WebP EXIF Software"] == "Leonardo.Ai"
        assert fields["WebP XMP"] == "<x:xmpmeta>Firefly</x:xmpmeta>"
        assert result.warnings == []

    def test_chunk_overrun(self):
        """Test a chunk size past the end stops with a warning."""
        data = riff(b"WEBP", riff_chunk(b"XMP ", b"kept")) + b"EXIF" + struct.pack("<I", 999)
        result = parse_container(data)

        assert field_map(result)["WebP XMP"] == "kept"
        assert len(result.warnings) == 1


class TestGif:
    """Test GIF comment extensions."""

    def test_comment(self):
        """Test a comment extension is recovered."""
        result = parse_container(gif(b"made with craiyon"))

        assert result.container_type == ContainerType.GIF
        assert field_map(result) == {"GIF Comment": "made with craiyon"}

    def test_long_comment_sub_blocks(self):
        """Test sub-blocks are concatenated up to the terminator."""
        comment = b"x" * 300 + b" nightcafe"
        result = parse_container(gif(comment))
        assert result.fields[0].text == comment.decode()

    def test_several_comments(self):
        """Test every comment extension is recorded in order."""
        result = parse_container(gif(b"first", b"second"))
        assert [f.text for f in result.fields] == ["first", "second"]

    def test_unterminated_comment(self):
        """Test a sub-block past the end of data stops with a warning."""
        data = b"GIF89a" + b"\x01\x00\x01\x00\x00\x00\x00" + b"\x21\xfe\x05ab"
        result = parse_container(data)
        assert len(result.warnings) == 1


class TestAvi:
    """Test the AVI RIFF walk."""

    def test_info_list(self):
        """Test INFO entries are read and the movi list is skipped."""
        data = riff(
            b"AVI ",
            riff_list(b"hdrl", riff_chunk(b"avih", b"\x00" * 8)),
            riff_list(
                b"INFO",
                riff_chunk(b"ISFT", b"Runway Gen-3\x00"),
                riff_chunk(b"ICMT", b"hello\x00"),
                riff_chunk(b"INAM", b"clip\x00"),
            ),
            riff_list(b"movi", riff_chunk(b"ISFT", b"inside movi\x00")),
        )
        result = parse_container(data)

        assert result.container_type == ContainerType.AVI
        assert field_map(result) == {
            "AVI ISFT (Software)": "Runway Gen-3",
            "AVI ICMT (Comment)": "hello",
            "AVI INAM (Title)": "clip",
        }


class TestIsoBmff:
    """Test the MP4/MOV/AVIF box walk."""

    def test_ilst_items(self):
        """Test iTunes-style metadata items under moov/udta/meta/ilst."""
        data = mp4_with_ilst(
            ilst_item(b"\xa9too", "Lavf60.3.100"),
            ilst_item(b"\xa9cmt", "Generated by Sora"),
        )
        result = parse_container(data)

        assert result.container_type == ContainerType.MP4
        assert field_map(result) == {
            "MP4 ilst Encoder": "Lavf60.3.100",
            "MP4 ilst Comment": "Generated by Sora",
        }
        assert result.warnings == []

    def test_mov_label(self):
        """Test QuickTime files are labelled MOV."""
        data = mp4_with_ilst(ilst_item(b"\xa9swr", "Runway"), brand=b"qt  ")
        result = parse_container(data)

        assert result.container_type == ContainerType.MOV
        assert field_map(result) == {"MOV ilst Software": "Runway"}

    def test_quicktime_user_data_string(self):
        """Test QuickTime (c)xxx strings directly under udta."""
        text = b"Kling AI"
        item = box(b"\xa9cmt", struct.pack(">HH", len(text), 0) + text)
        data = ftyp(b"qt  ") + box(b"moov", box(b"udta", item))

        assert field_map(parse_container(data)) == {"MOV udta \xa9cmt": "Kling AI"}

    def test_uuid_xmp(self):
        """Test the XMP uuid box."""
        packet = b"<x:xmpmeta>trainedAlgorithmicMedia</x:xmpmeta>"
        data = ftyp(b"isom") + box(b"uuid", XMP_UUID + packet)

        assert field_map(parse_container(data)) == {"MP4 uuid XMP": packet.decode()}

    def test_uuid_c2pa(self):
        """Test a uuid box carrying a C2PA manifest."""
        payload = b"\x11" * 16 + b'c2pa {"claim_generator": "OpenAI Sora"}'
        data = ftyp(b"isom") + box(b"uuid", payload)
        result = parse_container(data)

        kinds = [f.kind for f in result.fields]
        assert kinds == [FieldKind.C2PA_MANIFEST, FieldKind.C2PA_CLAIM_GENERATOR]

    def test_xml_box(self):
        """Test xml boxes are captured."""
        data = ftyp(b"isom") + full_box(b"xml ", b"<meta>ComfyUI</meta>")
        assert field_map(parse_container(data)) == {"MP4 xml": "<meta>ComfyUI</meta>"}

    def test_extended_size(self):
        """Test 64-bit box sizes."""
        payload = b"\x00" * 4
        large = struct.pack(">I", 1) + b"free" + struct.pack(">Q", 16 + len(payload)) + payload
        data = ftyp(b"isom") + large + full_box(b"xml ", b"after")
        assert field_map(parse_container(data)) == {"MP4 xml": "after"}

    def test_size_zero_runs_to_end(self):
        """Test a size of zero extends the box to the end of its parent."""
        data = ftyp(b"isom") + struct.pack(">I", 0) + b"xml " + b"\x00" * 4 + b"last box"
        assert field_map(parse_container(data)) == {"MP4 xml": "last box"}

    def test_box_too_small(self):
        """Test a box smaller than its header is malformed."""
        data = ftyp(b"isom") + struct.pack(">I", 4) + b"free" + b"\x00" * 8
        result = parse_container(data)

        assert len(result.warnings) == 1
        assert result.fields[0].kind == FieldKind.HEADER_SCAN

    def test_avif_meta_strings(self):
        """Test AVIF meta boxes are scanned for printable text."""
        hdlr = full_box(b"hdlr", b"\x00" * 4 + b"pict" + b"\x00" * 13)
        iinf = box(b"iinf", b"\x00\x00generator: Ideogram v2\x00")
        data = ftyp(b"avif") + full_box(b"meta", hdlr + iinf)
        result = parse_container(data)

        assert result.container_type == ContainerType.AVIF
        assert "Ideogram v2" in field_map(result)["AVIF meta strings"]


class TestWebm:
    """Test the EBML walk."""

    def test_info_and_tags(self):
        """Test Info strings and SimpleTag pairs."""
        info = ebml(0x1549A966, ebml(0x4D80, b"Lavf60") + ebml(0x5741, b"Runway exporter"))
        simple = ebml(0x67C8, ebml(0x45A3, b"ENCODER") + ebml(0x4487, b"sora-v2"))
        tags = ebml(0x1254C367, ebml(0x7373, simple))
        result = parse_container(webm(info, tags))

        assert result.container_type == ContainerType.WEBM
        assert field_map(result) == {
            "WebM MuxingApp": "Lavf60",
            "WebM WritingApp": "Runway exporter",
            "WebM Tag ENCODER": "ENCODER=sora-v2",
        }

    def test_cluster_ends_walk(self):
        """Test nothing after the first Cluster is examined."""
        info = ebml(0x1549A966, ebml(0x7BA9, b"title"))
        cluster = ebml(0x1F43B675, b"\x00" * 4)
        tags = ebml(0x1254C367, ebml(0x7373, ebml(0x67C8, ebml(0x45A3, b"X") + ebml(0x4487, b"y"))))
        result = parse_container(webm(info, cluster, tags))

        assert field_map(result) == {"WebM Title": "title"}

    def test_read_vint(self):
        """Test EBML variable-length integers."""
        assert read_vint(b"\x81", 0, keep_marker=False) == (1, 1)
        assert read_vint(b"\x40\x02", 0, keep_marker=False) == (2, 2)
        assert read_vint(b"\x1a\x45\xdf\xa3", 0, keep_marker=True) == (0x1A45DFA3, 4)
        assert read_vint(b"\xff", 0, keep_marker=False) == (UNKNOWN_SIZE, 1)
