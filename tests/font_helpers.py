# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Builders for raw cmap subtables and small test fonts."""

import struct
from io import BytesIO

from fontTools.fontBuilder import FontBuilder
from fontTools.ttLib.tables._g_l_y_f import Glyph


def _u24(value: int) -> bytes:
    return value.to_bytes(3, "big")


def build_cmap(subtables: list[tuple[int, int, bytes]]) -> bytes:
    """Wraps subtables in a cmap header.

    Args:
        subtables: ``(platform_id, encoding_id, subtable_bytes)`` in
            record order. Subtables are laid out after the records in the
            same order.

    Returns:
        The complete cmap table.
    """
    header = struct.pack(">HH", 0, len(subtables))
    offset = 4 + 8 * len(subtables)
    records = b""
    body = b""
    for platform_id, encoding_id, data in subtables:
        records += struct.pack(">HHI", platform_id, encoding_id, offset + len(body))
        body += data
    return header + records + body


def build_format4(
    segments: list[tuple[int, int, int, int]], glyph_ids: list[int] | None = None
) -> bytes:
    """Builds a format 4 subtable.

    Args:
        segments: ``(start, end, id_delta, id_range_offset)`` per segment.
        glyph_ids: Contents of the glyphIdArray.

    Returns:
        The subtable bytes.
    """
    glyph_ids = glyph_ids or []
    seg_count = len(segments)
    starts = [s[0] for s in segments]
    ends = [s[1] for s in segments]
    deltas = [s[2] & 0xFFFF for s in segments]
    range_offsets = [s[3] for s in segments]
    body = (
        struct.pack(f">{seg_count}H", *ends)
        + b"\x00\x00"
        + struct.pack(f">{seg_count}H", *starts)
        + struct.pack(f">{seg_count}H", *deltas)
        + struct.pack(f">{seg_count}H", *range_offsets)
        + struct.pack(f">{len(glyph_ids)}H", *glyph_ids)
    )
    length = 14 + len(body)
    return struct.pack(">7H", 4, length, 0, seg_count * 2, 0, 0, 0) + body


def build_format12(groups: list[tuple[int, int, int]], language: int = 0) -> bytes:
    """Builds a format 12 subtable from ``(start, end, start_glyph)`` groups."""
    body = b"".join(struct.pack(">3I", *group) for group in groups)
    length = 16 + len(body)
    return struct.pack(">HHIII", 12, 0, length, language, len(groups)) + body


def build_format14(
    records: list[
        tuple[int, list[tuple[int, int]] | None, list[tuple[int, int]] | None]
    ],
) -> bytes:
    """Builds a format 14 subtable.

    Args:
        records: ``(selector, default_ranges, non_default_mappings)`` in
            ascending selector order. ``default_ranges`` holds
            ``(start, additional_count)`` pairs and
            ``non_default_mappings`` holds ``(code_point, glyph_id)``
            pairs; None omits the table.

    Returns:
        The subtable bytes.
    """
    base = 10 + 11 * len(records)
    record_bytes = b""
    tables = b""
    for selector, default, non_default in records:
        default_offset = 0
        non_default_offset = 0
        if default is not None:
            default_offset = base + len(tables)
            tables += struct.pack(">I", len(default))
            tables += b"".join(_u24(start) + bytes([count]) for start, count in default)
        if non_default is not None:
            non_default_offset = base + len(tables)
            tables += struct.pack(">I", len(non_default))
            tables += b"".join(
                _u24(cp) + struct.pack(">H", glyph) for cp, glyph in non_default
            )
        record_bytes += _u24(selector) + struct.pack(
            ">II", default_offset, non_default_offset
        )
    length = base + len(tables)
    return struct.pack(">HII", 14, length, len(records)) + record_bytes + tables


def make_font_data(
    cmap: dict[int, str],
    *,
    uvs: list[tuple[int, int, str | None]] | None = None,
    weight_class: int = 400,
    italic: bool = False,
) -> bytes:
    """Creates a minimal TrueType font with the given character map.

    Args:
        cmap: Code point to glyph name mapping.
        uvs: ``(code_point, selector, glyph_name)`` variation sequences;
            a None glyph name marks a default sequence.
        weight_class: OS/2 usWeightClass.
        italic: Whether to set the OS/2 italic bit.

    Returns:
        The font file as bytes.
    """
    names = set(cmap.values())
    names.update(glyph for _, _, glyph in uvs or [] if glyph)
    glyph_order = [".notdef"] + sorted(names)

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(cmap, uvs=uvs)
    fb.setupGlyf({name: Glyph() for name in glyph_order})
    fb.setupHorizontalMetrics({name: (500, 0) for name in glyph_order})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Test", "styleName": "Regular"})
    fb.setupOS2(usWeightClass=weight_class, fsSelection=0x01 if italic else 0x40)
    fb.setupPost()

    buf = BytesIO()
    fb.font.save(buf)
    return buf.getvalue()


def rename_table(font_data: bytes, tag: bytes, new_tag: bytes) -> bytes:
    """Renames a table in the SFNT directory, hiding it from readers."""
    num_tables = struct.unpack_from(">H", font_data, 4)[0]
    for i in range(num_tables):
        record = 12 + 16 * i
        if font_data[record : record + 4] == tag:
            return font_data[:record] + new_tag + font_data[record + 4 :]
    raise KeyError(tag)
