"""
Pure unit tests for content_scanner/detection/locator.py.

Buffers are hand-built so every offset is known.
"""

import time

from content_scanner.detection.locator import (
    decode_prefix,
    extract_printable_runs,
    locate_first_metadata_segment,
    locate_provenance_box,
    locate_xml_metadata_packet,
)

from tests.conftest import make_app1_jpeg


# ---------------------------------------------------------------------------
# decode_prefix
# ---------------------------------------------------------------------------


def test_decode_prefix_maps_each_byte_to_one_char():
    text = decode_prefix(b"ab\xff\x00cd", 4)
    assert text == "ab\xff\x00"


def test_decode_prefix_shorter_buffer_than_limit():
    assert decode_prefix(b"abc", 1000) == "abc"


# ---------------------------------------------------------------------------
# locate_provenance_box
# ---------------------------------------------------------------------------


def test_provenance_box_found():
    data = b"\xff\xd8\x00\x00\x00\x40jumb" + b"\x00" * 16
    assert locate_provenance_box(data) is True


def test_provenance_box_in_last_bytes_ignored():
    # A box type with no room for a payload after it is not a box.
    data = b"\x00\x00\x00\x00jumb\x00"
    assert locate_provenance_box(data) is False


def test_provenance_box_absent_or_tiny_buffer():
    assert locate_provenance_box(b"\xff\xd8" + b"\x00" * 64) is False
    assert locate_provenance_box(b"jumb") is False
    assert locate_provenance_box(b"") is False


# ---------------------------------------------------------------------------
# locate_first_metadata_segment
# ---------------------------------------------------------------------------


def test_segment_bounds_for_well_formed_app1():
    data = make_app1_jpeg(b"Canon EOS R5")
    start, end = locate_first_metadata_segment(data)
    assert start == 6
    assert b"Canon EOS R5" in data[start:end]


def test_segment_marker_must_start_in_first_100_bytes():
    at_99 = b"\x00" * 99 + b"\xff\xe1\x00\x08" + b"abcdefgh"
    at_101 = b"\x00" * 101 + b"\xff\xe1\x00\x08" + b"abcdefgh"
    assert locate_first_metadata_segment(at_99) == (103, 111)
    assert locate_first_metadata_segment(at_101) is None


def test_segment_length_field_truncated_returns_none():
    assert locate_first_metadata_segment(b"\xff\xd8\xff\xe1\x00") is None


def test_segment_length_past_end_is_clamped():
    data = b"\xff\xe1\xff\xff" + b"abc"
    assert locate_first_metadata_segment(data) == (4, 7)


def test_only_first_segment_is_reported():
    first = b"\xff\xe1\x00\x04ab"
    second = b"\xff\xe1\x00\x04cd"
    assert locate_first_metadata_segment(first + second) == (4, 8)


def test_no_segment_marker():
    assert locate_first_metadata_segment(b"\xff\xd8\xff\xe0\x00\x10JFIF") is None


# ---------------------------------------------------------------------------
# locate_xml_metadata_packet
# ---------------------------------------------------------------------------


def test_xmp_packet_found():
    text = 'junk<x:xmpmeta xmlns:x="adobe:ns:meta/"><rdf:RDF/></x:xmpmeta>junk'
    packet = locate_xml_metadata_packet(text)
    assert packet.startswith("<x:xmpmeta")
    assert packet.endswith("</x:xmpmeta>")


def test_xmp_packet_missing_close_tag():
    assert locate_xml_metadata_packet("<x:xmpmeta><rdf:RDF/>") is None


def test_xmp_packet_body_too_long_is_ignored():
    text = "<x:xmpmeta>" + "a" * 50_001 + "</x:xmpmeta>"
    assert locate_xml_metadata_packet(text) is None


def test_xmp_packet_body_at_limit_is_found():
    text = "<x:xmpmeta" + "a" * 50_000 + "</x:xmpmeta>"
    assert locate_xml_metadata_packet(text) == text


def test_xmp_packet_extends_to_last_close_tag():
    text = "<x:xmpmeta>one</x:xmpmeta><x:xmpmeta>two</x:xmpmeta>tail"
    assert locate_xml_metadata_packet(text) == text[:-len("tail")]


def test_xmp_packet_skips_unclosed_open_tag_too_far_away():
    second = "<x:xmpmeta>b</x:xmpmeta>"
    text = "<x:xmpmeta>" + "a" * 60_000 + second
    assert locate_xml_metadata_packet(text) == second


def test_xmp_packet_tags_match_case_insensitively():
    text = "<X:XMPMETA>body</X:xmpMeta>"
    assert locate_xml_metadata_packet(text) == text


def test_xmp_many_unclosed_open_tags_scan_quickly():
    text = "<x:xmpmeta " * 27_000 + "</x:xmpmeta>"
    start = time.perf_counter()
    packet = locate_xml_metadata_packet(text)
    elapsed = time.perf_counter() - start

    # Only the open tags in the final 50,000 chars reach the close tag.
    assert packet is not None and packet.endswith("</x:xmpmeta>")
    assert elapsed < 1.0


def test_xmp_many_unclosed_open_tags_without_close_scan_quickly():
    start = time.perf_counter()
    assert locate_xml_metadata_packet("<x:xmpmeta " * 27_000) is None
    assert time.perf_counter() - start < 1.0


# ---------------------------------------------------------------------------
# extract_printable_runs
# ---------------------------------------------------------------------------


def test_printable_runs_min_length_four():
    data = b"ab\x00abcd\x01hello world\x7fxyz"
    assert extract_printable_runs(data) == ["abcd", "hello world"]


def test_printable_runs_empty_input():
    assert extract_printable_runs(b"") == []
