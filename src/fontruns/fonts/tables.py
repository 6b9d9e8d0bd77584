# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Readers for the SFNT tables that describe a typeface's style.

Like the ``cmap`` reader, these work on raw table bytes and check every
offset against the buffer size; short or malformed tables produce no
information rather than an error.
"""

import logging

from ..coverage.cmap import read_u16, read_u32

logger = logging.getLogger(__name__)

# OS/2 field offsets
_OS2_WEIGHT_CLASS_OFFSET = 4
_OS2_FS_SELECTION_OFFSET = 62
_FS_SELECTION_ITALIC = 1 << 0

_META_DESIGN_LANGUAGES = "dlng"
_META_SUPPORTED_LANGUAGES = "slng"


def _tag_to_str(tag: int) -> str:
    return tag.to_bytes(4, "big").decode("latin-1")


def analyze_style(os2_data: bytes) -> tuple[int, bool] | None:
    """Reads the weight class and italic flag from an ``OS/2`` table.

    Args:
        os2_data: Raw ``OS/2`` table bytes.

    Returns:
        ``(weight, italic)`` where weight is usWeightClass in hundreds
        (4 for Regular, 7 for Bold), or None if the table is too short.
    """
    if len(os2_data) < _OS2_FS_SELECTION_OFFSET + 2:
        return None
    weight_class = read_u16(os2_data, _OS2_WEIGHT_CLASS_OFFSET)
    fs_selection = read_u16(os2_data, _OS2_FS_SELECTION_OFFSET)
    return weight_class // 100, bool(fs_selection & _FS_SELECTION_ITALIC)


def analyze_axes(fvar_data: bytes) -> frozenset[str]:
    """Collects the variation axis tags declared in an ``fvar`` table.

    Only version 1.0 tables with the standard axis array layout are read.

    Args:
        fvar_data: Raw ``fvar`` table bytes.

    Returns:
        Axis tags such as ``{"wght", "wdth"}``; empty if unsupported.
    """
    axis_size_offset = 10
    if len(fvar_data) < axis_size_offset + 2:
        return frozenset()
    major_version = read_u16(fvar_data, 0)
    minor_version = read_u16(fvar_data, 2)
    axis_offset = read_u16(fvar_data, 4)
    axis_count = read_u16(fvar_data, 8)
    axis_size = read_u16(fvar_data, axis_size_offset)

    if (major_version, minor_version) != (1, 0) or (axis_offset, axis_size) != (16, 20):
        logger.debug(
            "Unsupported fvar layout: version %d.%d, axes at %d, axis size %d",
            major_version,
            minor_version,
            axis_offset,
            axis_size,
        )
        return frozenset()
    if len(fvar_data) < axis_offset + axis_size * axis_count:
        return frozenset()

    return frozenset(
        _tag_to_str(read_u32(fvar_data, axis_offset + i * axis_size))
        for i in range(axis_count)
    )


def analyze_languages(meta_data: bytes) -> tuple[str, str]:
    """Reads the design and supported language lists from a ``meta`` table.

    Args:
        meta_data: Raw ``meta`` table bytes.

    Returns:
        ``(design_languages, supported_languages)`` as the comma separated
        ScriptLangTag strings stored in the ``dlng`` and ``slng`` maps.
        Missing maps yield empty strings.
    """
    header_size = 16
    map_record_size = 12
    size = len(meta_data)

    design = ""
    supported = ""
    if size < header_size:
        return design, supported
    num_maps = read_u32(meta_data, 12)
    if header_size + num_maps * map_record_size > size:
        logger.debug("meta: %d data maps overrun %d bytes", num_maps, size)
        return design, supported

    for i in range(num_maps):
        record = header_size + i * map_record_size
        tag = _tag_to_str(read_u32(meta_data, record))
        offset = read_u32(meta_data, record + 4)
        length = read_u32(meta_data, record + 8)
        if offset > size or length > size - offset:
            continue
        value = bytes(meta_data[offset : offset + length]).decode("ascii", "replace")
        if tag == _META_DESIGN_LANGUAGES:
            logger.debug("Designed for languages: %s", value)
            design = value
        elif tag == _META_SUPPORTED_LANGUAGES:
            logger.debug("Supports languages: %s", value)
            supported = value
    return design, supported
