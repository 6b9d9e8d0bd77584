# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""fontruns - Font coverage parsing and fallback run segmentation."""

from importlib.metadata import PackageNotFoundError, version

from .coverage import CmapCoverage, CoverageBitset, RangeSet, get_coverage, merge_ranges
from .exceptions import (
    FontLoadError,
    FontRunsError,
    GlyphLoadError,
    TypefaceCollectionError,
)
from .fonts import (
    FontRun,
    FontStyle,
    Typeface,
    TypefaceCache,
    TypefaceCollection,
    TypefaceKey,
    load_named_typeface,
    load_typeface,
)

try:
    __version__ = version("fontruns")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    "get_coverage",
    "merge_ranges",
    "load_typeface",
    "load_named_typeface",
    "CmapCoverage",
    "CoverageBitset",
    "RangeSet",
    "FontRun",
    "FontStyle",
    "Typeface",
    "TypefaceCache",
    "TypefaceCollection",
    "TypefaceKey",
    "FontRunsError",
    "FontLoadError",
    "GlyphLoadError",
    "TypefaceCollectionError",
]
