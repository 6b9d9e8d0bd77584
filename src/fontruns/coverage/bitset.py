# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Immutable sparse bitset of covered code points.

Code points are split into pages of 256 values. Each page number maps
to an index into a list of page bitmaps (one Python int per page, bit
``k`` set when ``page_base + k`` is covered). All fully empty pages
below the highest covered value share a single zero bitmap, so a font
covering a handful of scripts only pays for the pages it touches.
"""

import logging
from collections.abc import Iterator

from .ranges import MAX_CODE_POINT, RangeSet

logger = logging.getLogger(__name__)

_LOG_VALUES_PER_PAGE = 8
_VALUES_PER_PAGE = 1 << _LOG_VALUES_PER_PAGE
_PAGE_MASK = _VALUES_PER_PAGE - 1

# Bitsets refuse ranges extending to or past this value
_MAXIMUM_CAPACITY = 0xFFFFFF


def format_ranges_compact(ranges: RangeSet) -> str:
    """Renders ranges as offsets from the end of the previous range.

    Each entry is the distance from the last code point of the previous
    range (or from 0 for the first range) to the start of the current
    one, followed by ``+n`` when the range holds more than one value.
    Inclusive ranges ``[1,3], [8,9], [13,13], [17,20]`` render as
    ``"1+2,5+1,4,4+3"``.

    Args:
        ranges: Ranges to render.

    Returns:
        Comma-separated compact representation (empty for no ranges).
    """
    parts: list[str] = []
    previous_last = 0
    for r in ranges:
        last = r.end - 1
        entry = str(r.start - previous_last)
        if last > r.start:
            entry += f"+{last - r.start}"
        parts.append(entry)
        previous_last = last
    return ",".join(parts)


class CoverageBitset:
    """Set of code points a typeface can render.

    Built once from a frozen RangeSet. An empty bitset answers every
    query with False.
    """

    __slots__ = ("_bounds", "_max_value", "_indices", "_pages", "_zero_page", "_count")

    def __init__(self, ranges: RangeSet | None = None) -> None:
        self._bounds: tuple[int, ...] = ()
        self._max_value = 0
        self._indices: tuple[int, ...] = ()
        self._pages: tuple[int, ...] = ()
        self._zero_page: int | None = None
        self._count = 0

        if not ranges:
            return
        max_value = ranges.bounds[-1]
        if max_value >= _MAXIMUM_CAPACITY:
            logger.debug("Coverage ends at %#x, beyond bitset capacity", max_value)
            return

        indices = [0] * ((max_value + _PAGE_MASK) >> _LOG_VALUES_PER_PAGE)
        pages: list[int] = []
        zero_page: int | None = None
        nonzero_page_end = 0

        for start, end in ranges:
            start_page = start >> _LOG_VALUES_PER_PAGE
            end_page = (end - 1) >> _LOG_VALUES_PER_PAGE
            if start_page >= nonzero_page_end:
                if start_page > nonzero_page_end:
                    if zero_page is None:
                        zero_page = len(pages)
                        pages.append(0)
                    for page in range(nonzero_page_end, start_page):
                        indices[page] = zero_page
                indices[start_page] = len(pages)
                pages.append(0)
            for page in range(start_page + 1, end_page + 1):
                indices[page] = len(pages)
                pages.append(0)

            for page in range(start_page, end_page + 1):
                base = page << _LOG_VALUES_PER_PAGE
                lo = max(start, base) - base
                hi = min(end, base + _VALUES_PER_PAGE) - base
                pages[indices[page]] |= ((1 << (hi - lo)) - 1) << lo
            nonzero_page_end = end_page + 1

        # Frozen copy; the caller keeps ownership of its RangeSet
        self._bounds = ranges.bounds
        self._max_value = max_value
        self._indices = tuple(indices)
        self._pages = tuple(pages)
        self._zero_page = zero_page
        self._count = ranges.code_point_count()

    def contains(self, code_point: int) -> bool:
        """Returns True if ``code_point`` is covered.

        Out-of-range values (negative, or past ``MAX_CODE_POINT``) are
        never covered.
        """
        if code_point < 0 or code_point > MAX_CODE_POINT:
            return False
        if code_point >= self._max_value:
            return False
        bitmap = self._pages[self._indices[code_point >> _LOG_VALUES_PER_PAGE]]
        return (bitmap >> (code_point & _PAGE_MASK)) & 1 == 1

    def next_set_bit(self, from_index: int) -> int | None:
        """Returns the smallest covered code point ``>= from_index``.

        Returns:
            The code point, or None if nothing at or after it is covered.
        """
        from_index = max(from_index, 0)
        if from_index >= self._max_value:
            return None
        page = from_index >> _LOG_VALUES_PER_PAGE
        bits = self._pages[self._indices[page]] >> (from_index & _PAGE_MASK)
        if bits:
            return from_index + ((bits & -bits).bit_length() - 1)
        for page in range(page + 1, len(self._indices)):
            index = self._indices[page]
            if index == self._zero_page:
                continue
            bits = self._pages[index]
            if bits:
                lowest = (bits & -bits).bit_length() - 1
                return (page << _LOG_VALUES_PER_PAGE) + lowest
        return None

    def ranges(self) -> RangeSet:
        """Returns a copy of the ranges this bitset was built from."""
        b = self._bounds
        return RangeSet(zip(b[0::2], b[1::2]))

    @property
    def max_code_point(self) -> int | None:
        """Highest covered code point, or None for an empty bitset."""
        return self._max_value - 1 if self._max_value else None

    def __contains__(self, code_point: object) -> bool:
        if not isinstance(code_point, int) or code_point > MAX_CODE_POINT:
            return False
        return self.contains(code_point)

    def __iter__(self) -> Iterator[int]:
        b = self._bounds
        for i in range(0, len(b), 2):
            yield from range(b[i], b[i + 1])

    def __len__(self) -> int:
        return self._count

    def __bool__(self) -> bool:
        return self._max_value > 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CoverageBitset):
            return NotImplemented
        return self._bounds == other._bounds

    def __hash__(self) -> int:
        return hash(self._bounds)

    def __repr__(self) -> str:
        ranges = len(self._bounds) // 2
        return f"CoverageBitset({len(self)} code points in {ranges} ranges)"
