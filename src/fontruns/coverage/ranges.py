# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Half-open code point ranges and their ordered accumulation.

A ``RangeSet`` stores ranges as a flat list of bounds where each pair
``(bounds[2i], bounds[2i + 1])`` is one ``[start, end)`` interval.
Pairs are kept ascending, non-overlapping and non-adjacent: a range
that touches the previous one is coalesced into it on insertion.
"""

import logging
from bisect import bisect_right
from collections.abc import Iterable, Iterator
from typing import NamedTuple

logger = logging.getLogger(__name__)

U32_MAX = 0xFFFFFFFF

# Highest Unicode scalar value
MAX_CODE_POINT = 0x10FFFF


class Range(NamedTuple):
    """A ``[start, end)`` code point interval."""

    start: int
    end: int

    def is_valid(self) -> bool:
        return self.start != U32_MAX and self.end != U32_MAX

    def intersects(self, other: "Range") -> bool:
        """Returns True if both ranges are valid and share a code point."""
        return (
            self.is_valid()
            and other.is_valid()
            and self.start < other.end
            and other.start < self.end
        )

    def union(self, other: "Range") -> "Range":
        """Returns the smallest range spanning both intersecting ranges."""
        return Range(min(self.start, other.start), max(self.end, other.end))


INVALID_RANGE = Range(U32_MAX, U32_MAX)


class RangeSet:
    """Append-only builder of sorted, coalesced code point ranges."""

    __slots__ = ("_bounds",)

    def __init__(self, ranges: Iterable[tuple[int, int]] = ()) -> None:
        """Initializes the set from ascending ``(start, end)`` pairs.

        Args:
            ranges: Ranges in ascending order.

        Raises:
            ValueError: If the ranges are not ascending or a range is empty.
        """
        self._bounds: list[int] = []
        for start, end in ranges:
            if start >= end or not self.add_range(start, end):
                raise ValueError(f"Range [{start}, {end}) is out of order or empty")

    def add_range(self, start: int, end: int) -> bool:
        """Appends ``[start, end)``, coalescing with the last range if adjacent.

        ``start`` must not precede the end of the last stored range.
        Ranges arrive in ascending order from well-formed cmap data, so
        an out-of-order range means the source table is corrupt.

        Args:
            start: Inclusive start of the range.
            end: Exclusive end of the range.

        Returns:
            True if the range was stored, False if it is out of order.
            On False the set is left unchanged.
        """
        bounds = self._bounds
        if not bounds or bounds[-1] < start:
            bounds.append(start)
            bounds.append(end)
            return True
        if bounds[-1] == start:
            bounds[-1] = end
            return True
        logger.debug(
            "Rejecting out-of-order range [%#x, %#x) after %#x",
            start,
            end,
            bounds[-1],
        )
        return False

    def range_at(self, index: int) -> Range:
        """Returns the range whose start sits at bound ``index``.

        Returns ``INVALID_RANGE`` once ``index`` runs past the last pair.
        """
        if index + 1 < len(self._bounds):
            return Range(self._bounds[index], self._bounds[index + 1])
        return INVALID_RANGE

    @property
    def bounds(self) -> tuple[int, ...]:
        """The flat ``(start, end, start, end, ...)`` sequence."""
        return tuple(self._bounds)

    def code_point_count(self) -> int:
        b = self._bounds
        return sum(b[i + 1] - b[i] for i in range(0, len(b), 2))

    def __contains__(self, code_point: object) -> bool:
        if not isinstance(code_point, int):
            return False
        # An odd insertion point lands inside a [start, end) pair
        return bisect_right(self._bounds, code_point) % 2 == 1

    def __iter__(self) -> Iterator[Range]:
        b = self._bounds
        for i in range(0, len(b), 2):
            yield Range(b[i], b[i + 1])

    def __len__(self) -> int:
        return len(self._bounds) // 2

    def __bool__(self) -> bool:
        return bool(self._bounds)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self._bounds == other._bounds

    def __hash__(self) -> int:
        return hash(tuple(self._bounds))

    def __repr__(self) -> str:
        body = ", ".join(f"[{r.start:#x}, {r.end:#x})" for r in self)
        return f"RangeSet({body})"


def _append(out: RangeSet, r: Range) -> None:
    # Both inputs are sorted and the merge emits in order, so this cannot fail
    added = out.add_range(r.start, r.end)
    assert added, f"merge emitted out-of-order range {r}"


def merge_ranges(left: RangeSet, right: RangeSet) -> RangeSet:
    """Merges two sorted range sets into their sorted, coalesced union.

    Args:
        left: A sorted, coalesced range set.
        right: A sorted, coalesced range set.

    Returns:
        A new RangeSet covering every code point of either input.
    """
    out = RangeSet()
    l_size = len(left.bounds)
    r_size = len(right.bounds)
    li = 0
    ri = 0
    while li < l_size or ri < r_size:
        lr = left.range_at(li)
        rr = right.range_at(ri)

        if not rr.is_valid():
            while li < l_size:
                _append(out, left.range_at(li))
                li += 2
            break
        if not lr.is_valid():
            while ri < r_size:
                _append(out, right.range_at(ri))
                ri += 2
            break

        if not lr.intersects(rr):
            if lr.start < rr.start:
                _append(out, lr)
                li += 2
            else:
                _append(out, rr)
                ri += 2
            continue

        merged = lr.union(rr)
        li += 2
        ri += 2
        lr = left.range_at(li)
        rr = right.range_at(ri)
        # One side may chain-overlap several ranges of the other
        while merged.intersects(lr) or merged.intersects(rr):
            if merged.intersects(lr):
                merged = merged.union(lr)
                li += 2
                lr = left.range_at(li)
            else:
                merged = merged.union(rr)
                ri += 2
                rr = right.range_at(ri)
        _append(out, merged)

    return out
