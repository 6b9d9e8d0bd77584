# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Code point coverage parsed from font cmap tables."""

from .bitset import CoverageBitset, format_ranges_compact
from .cmap import CmapCoverage, get_coverage, table_priority
from .ranges import INVALID_RANGE, MAX_CODE_POINT, Range, RangeSet, merge_ranges

__all__ = [
    # Ranges
    "INVALID_RANGE",
    "MAX_CODE_POINT",
    "Range",
    "RangeSet",
    "merge_ranges",
    # Bitsets
    "CoverageBitset",
    "format_ranges_compact",
    # cmap parsing
    "CmapCoverage",
    "get_coverage",
    "table_priority",
]
