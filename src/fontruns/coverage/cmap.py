# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Coverage extraction from raw ``cmap`` table bytes.

The ``cmap`` table of a TrueType/OpenType font lists one or more
subtables, each keyed by a (platformID, encodingID) pair. This module
picks the best Unicode subtable (format 4 or 12) for the base coverage
and, when present, the (0, 5) format 14 subtable for Unicode variation
sequences.

Font data comes from untrusted sources. Every count and offset read from
the buffer is checked against the remaining size before it is used, and
malformed subtables contribute no coverage instead of raising.

See https://learn.microsoft.com/en-us/typography/opentype/spec/cmap
"""

import logging
import struct
from dataclasses import dataclass, field

from ..unicode import INVALID_VS_INDEX, get_vs_index
from .bitset import CoverageBitset
from .ranges import MAX_CODE_POINT, RangeSet, merge_ranges

logger = logging.getLogger(__name__)

# Lower value has higher priority; kept in sync with HarfBuzz's order.
LOWEST_PRIORITY = 255
TABLE_PRIORITIES: dict[tuple[int, int], int] = {
    (3, 10): 0,  # Windows, Unicode full repertoire
    (0, 6): 1,  # Unicode full repertoire
    (0, 4): 2,  # Unicode 2.0+ full repertoire
    (3, 1): 3,  # Windows, Unicode BMP
    (0, 3): 4,  # Unicode 2.0+ BMP
    (0, 2): 5,  # ISO/IEC 10646
    (0, 1): 6,  # Unicode 1.1
    (0, 0): 7,  # Unicode 1.0
}

_NO_TABLE = -1


def read_u16(data: memoryview | bytes, offset: int) -> int:
    return struct.unpack_from(">H", data, offset)[0]


def read_u24(data: memoryview | bytes, offset: int) -> int:
    hi, lo = struct.unpack_from(">BH", data, offset)
    return (hi << 16) | lo


def read_u32(data: memoryview | bytes, offset: int) -> int:
    return struct.unpack_from(">I", data, offset)[0]


@dataclass(frozen=True)
class CmapCoverage:
    """Coverage parsed from a ``cmap`` table.

    Attributes:
        base: Code points mapped without a variation selector.
        variations: Per-variation-selector coverage indexed by
            variation index. Slots for selectors the font does not
            define are None; the list ends at the highest defined index.
    """

    base: CoverageBitset = field(default_factory=CoverageBitset)
    variations: tuple[CoverageBitset | None, ...] = ()


def table_priority(platform_id: int, encoding_id: int) -> int:
    """Returns the selection priority of a subtable (0 is best)."""
    return TABLE_PRIORITIES.get((platform_id, encoding_id), LOWEST_PRIORITY)


def _coverage_format4(coverage: RangeSet, data: memoryview) -> bool:
    """Adds the code points of a format 4 subtable to ``coverage``.

    Returns:
        False if the subtable is malformed and must be discarded.
    """
    seg_count_offset = 6
    end_count_offset = 14
    header_size = 16
    segment_size = 8  # one u16 in each of the four parallel arrays
    size = len(data)

    if end_count_offset > size:
        return False
    seg_count = read_u16(data, seg_count_offset) >> 1
    if header_size + seg_count * segment_size > size:
        logger.debug("Format 4: %d segments overrun %d bytes", seg_count, size)
        return False

    previous_end = 0
    for i in range(seg_count):
        end = read_u16(data, end_count_offset + 2 * i)
        start = read_u16(data, header_size + 2 * (seg_count + i))
        if end < start:
            logger.debug("Format 4: segment %d ends before it starts", i)
            return False
        # Segments must be sorted; this also bounds the total scan to 64K values
        if start < previous_end:
            logger.debug("Format 4: segment %d overlaps the previous segment", i)
            return False
        previous_end = end
        range_offset = read_u16(data, header_size + 2 * (3 * seg_count + i))
        if range_offset == 0:
            delta = read_u16(data, header_size + 2 * (2 * seg_count + i))
            if ((end + delta) & 0xFFFF) > end - start:
                # The mapping never wraps onto glyph 0 within this segment
                if not coverage.add_range(start, end + 1):
                    return False
            else:
                for j in range(start, end + 1):
                    if (j + delta) & 0xFFFF != 0:
                        if not coverage.add_range(j, j + 1):
                            return False
        else:
            for j in range(start, end + 1):
                glyph_offset = (
                    header_size + 6 * seg_count + range_offset + (i + j - start) * 2
                )
                if glyph_offset + 2 > size:
                    # Later lookups are further out; the table stays valid
                    break
                if read_u16(data, glyph_offset) != 0:
                    if not coverage.add_range(j, j + 1):
                        return False
    return True


def _coverage_format12(coverage: RangeSet, data: memoryview) -> bool:
    """Adds the code points of a format 12 subtable to ``coverage``.

    Returns:
        False if the subtable is malformed and must be discarded.
    """
    n_groups_offset = 12
    first_group_offset = 16
    group_size = 12
    max_groups = 0xFFFFFFF0 // group_size
    size = len(data)

    if first_group_offset > size:
        return False
    n_groups = read_u32(data, n_groups_offset)
    if n_groups >= max_groups or first_group_offset + n_groups * group_size > size:
        logger.debug("Format 12: %d groups overrun %d bytes", n_groups, size)
        return False

    for i in range(n_groups):
        group_offset = first_group_offset + i * group_size
        start = read_u32(data, group_offset)
        end = read_u32(data, group_offset + 4)
        if end < start:
            logger.debug("Format 12: group %d ends before it starts", i)
            return False
        # Groups are sorted, so nothing past this point is a code point
        if start > MAX_CODE_POINT:
            return True
        if end > MAX_CODE_POINT:
            return coverage.add_range(start, MAX_CODE_POINT + 1)
        # Groups are inclusive, ranges are exclusive
        if not coverage.add_range(start, end + 1):
            return False
    return True


def _variation_ranges(
    data: memoryview,
    default_offset: int,
    non_default_offset: int,
    base: CoverageBitset,
) -> RangeSet | None:
    """Builds the coverage of one variation selector record.

    Code points listed in the default UVS table render with their base
    glyph, so they only count when the base coverage has them. Code
    points in the non-default UVS table map to their own glyph.

    Args:
        data: The format 14 subtable, trimmed to its declared length.
        default_offset: Offset of the default UVS table, or 0.
        non_default_offset: Offset of the non-default UVS table, or 0.
        base: Base coverage of the font.

    Returns:
        The merged ranges, or None if either UVS table is malformed.
    """
    size = len(data)
    header_size = 4

    non_default = RangeSet()
    if non_default_offset != 0:
        mapping_size = 5
        remaining = size - non_default_offset
        if remaining < header_size:
            return None
        num_mappings = read_u32(data, non_default_offset)
        if num_mappings * mapping_size + header_size > remaining:
            return None
        for i in range(num_mappings):
            record = non_default_offset + header_size + mapping_size * i
            code_point = read_u24(data, record)
            if not non_default.add_range(code_point, code_point + 1):
                return None

    default = RangeSet()
    if default_offset != 0:
        range_size = 4
        remaining = size - default_offset
        if remaining < header_size:
            return None
        num_ranges = read_u32(data, default_offset)
        if num_ranges * range_size + header_size > remaining:
            return None
        for i in range(num_ranges):
            record = default_offset + header_size + range_size * i
            start = read_u24(data, record)
            additional_count = data[record + 3]
            for code_point in range(start, start + additional_count + 1):
                if base.contains(code_point):
                    if not default.add_range(code_point, code_point + 1):
                        return None

    return merge_ranges(default, non_default)


def _coverage_format14(
    data: memoryview, base: CoverageBitset
) -> tuple[CoverageBitset | None, ...]:
    """Parses a format 14 subtable into per-selector coverage."""
    header_size = 10
    record_size = 11
    length_offset = 2
    num_records_offset = 6

    size = len(data)
    if size < header_size:
        return ()
    length = read_u32(data, length_offset)
    if size < length:
        logger.debug("Format 14: declared length %d exceeds %d bytes", length, size)
        return ()
    num_records = read_u32(data, num_records_offset)
    if num_records == 0 or header_size + record_size * num_records > length:
        return ()

    table = data[:length]
    out: list[CoverageBitset | None] = []
    # Highest selector first, so the list is sized once by the largest index
    for i in range(num_records - 1, -1, -1):
        record = header_size + record_size * i
        vs_code_point = read_u24(table, record)
        default_offset = read_u32(table, record + 3)
        non_default_offset = read_u32(table, record + 7)
        if default_offset > length or non_default_offset > length:
            continue

        vs_index = get_vs_index(vs_code_point)
        if vs_index == INVALID_VS_INDEX:
            continue
        ranges = _variation_ranges(table, default_offset, non_default_offset, base)
        if ranges is None:
            logger.debug("Format 14: skipping malformed record for %#x", vs_code_point)
            continue
        if len(out) < vs_index + 1:
            out.extend([None] * (vs_index + 1 - len(out)))
        out[vs_index] = CoverageBitset(ranges)
    return tuple(out)


def get_coverage(cmap_data: bytes | bytearray | memoryview) -> CmapCoverage:
    """Computes the coverage described by a raw ``cmap`` table.

    Args:
        cmap_data: The complete ``cmap`` table.

    Returns:
        The base coverage from the highest-priority format 4 or 12
        subtable, plus the variation sequence coverage from the first
        (0, 5) format 14 subtable. Unusable data yields empty coverage.
    """
    header_size = 4
    num_tables_offset = 2
    record_size = 8

    data = memoryview(cmap_data)
    size = len(data)
    if header_size > size:
        return CmapCoverage()
    num_tables = read_u16(data, num_tables_offset)
    if header_size + num_tables * record_size > size:
        logger.debug("cmap: %d table records overrun %d bytes", num_tables, size)
        return CmapCoverage()

    best_offset = _NO_TABLE
    best_format = 0
    best_priority = LOWEST_PRIORITY
    vs_offset = _NO_TABLE
    for i in range(num_tables):
        record = header_size + i * record_size
        platform_id = read_u16(data, record)
        encoding_id = read_u16(data, record + 2)
        offset = read_u32(data, record + 4)

        if offset > size - 2:
            continue
        subtable_format = read_u16(data, offset)

        if platform_id == 0 and encoding_id == 5:
            # Only the first format 14 variation sequences table is used
            if vs_offset == _NO_TABLE and subtable_format == 14:
                vs_offset = offset
        else:
            if subtable_format == 4:
                if offset > size - 6:
                    continue
                length = read_u16(data, offset + 2)
                language = read_u16(data, offset + 4)
            elif subtable_format == 12:
                if offset > size - 12:
                    continue
                length = read_u32(data, offset + 4)
                language = read_u32(data, offset + 8)
            else:
                continue

            if length > size - offset:
                continue
            if language != 0:
                # Macintosh subtable, or a non-Macintosh one with a bogus language
                continue
            priority = table_priority(platform_id, encoding_id)
            if priority < best_priority:
                best_offset = offset
                best_priority = priority
                best_format = subtable_format

        if vs_offset != _NO_TABLE and best_priority == 0:
            break

    ranges = RangeSet()
    base = CoverageBitset()
    if best_offset != _NO_TABLE:
        table = data[best_offset:]
        if best_format == 4:
            success = _coverage_format4(ranges, table)
        else:
            success = _coverage_format12(ranges, table)
        if success:
            base = CoverageBitset(ranges)
        else:
            logger.debug("cmap: format %d subtable rejected", best_format)

    variations: tuple[CoverageBitset | None, ...] = ()
    if vs_offset != _NO_TABLE:
        variations = _coverage_format14(data[vs_offset:], base)
    return CmapCoverage(base=base, variations=variations)
