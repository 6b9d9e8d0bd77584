# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Typefaces and their coverage queries."""

import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any, NamedTuple

from ..coverage.bitset import CoverageBitset
from ..coverage.cmap import CmapCoverage
from ..exceptions import GlyphLoadError
from ..unicode import INVALID_VS_INDEX, get_vs_index

logger = logging.getLogger(__name__)

# Host-supplied loader: (typeface, code_point, variation_selector) -> glyph
GlyphLoader = Callable[["Typeface", int, int], Any]


class FontStyle(Enum):
    NORMAL = "normal"
    ITALIC = "italic"


class TypefaceKey(NamedTuple):
    """Identity of a loaded typeface, used to share parsed coverage."""

    name: str
    size: int
    style: FontStyle = FontStyle.NORMAL
    weight: int = 400


class Typeface:
    """A named, sized font resource with immutable coverage.

    Coverage is computed once when the font is loaded. Glyph loading is
    delegated to an optional host-supplied loader; loaded glyphs are
    memoized per ``(code_point, variation_selector)``.
    """

    def __init__(
        self,
        name: str,
        size: int,
        coverage: CoverageBitset | CmapCoverage | None = None,
        variation_coverage: Sequence[CoverageBitset | None] = (),
        *,
        style: FontStyle = FontStyle.NORMAL,
        weight: int = 400,
        axes: frozenset[str] = frozenset(),
        languages: tuple[str, str] = ("", ""),
        glyph_loader: GlyphLoader | None = None,
    ) -> None:
        """Initializes the Typeface.

        Args:
            name: Typeface name.
            size: Size in pixels.
            coverage: Base coverage, or a parsed ``CmapCoverage`` which
                supplies both base and variation coverage.
            variation_coverage: Per-variation-index coverage, ignored
                when ``coverage`` is a ``CmapCoverage``.
            style: Font style.
            weight: Weight class (100-900).
            axes: Variation axis tags from ``fvar``.
            languages: ``(design, supported)`` language lists from ``meta``.
            glyph_loader: Callable producing glyphs for this typeface.
        """
        if isinstance(coverage, CmapCoverage):
            variation_coverage = coverage.variations
            coverage = coverage.base
        self._name = name
        self._size = size
        self._style = style
        self._weight = weight
        self._coverage = coverage if coverage is not None else CoverageBitset()
        self._variation_coverage = tuple(variation_coverage)
        self._axes = axes
        self._languages = languages
        self._glyph_loader = glyph_loader
        self._glyph_cache: dict[tuple[int, int], Any] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def size(self) -> int:
        return self._size

    @property
    def style(self) -> FontStyle:
        return self._style

    @property
    def weight(self) -> int:
        return self._weight

    @property
    def key(self) -> TypefaceKey:
        return TypefaceKey(self._name, self._size, self._style, self._weight)

    @property
    def coverage(self) -> CoverageBitset:
        return self._coverage

    @property
    def variation_coverage(self) -> tuple[CoverageBitset | None, ...]:
        return self._variation_coverage

    @property
    def axes(self) -> frozenset[str]:
        return self._axes

    @property
    def design_languages(self) -> str:
        return self._languages[0]

    @property
    def supported_languages(self) -> str:
        return self._languages[1]

    def variation_selectors(self) -> list[int]:
        """Returns the variation selectors this typeface defines coverage for."""
        selectors = []
        for index, bitset in enumerate(self._variation_coverage):
            if bitset is None:
                continue
            selectors.append(0xFE00 + index if index < 16 else 0xE0100 + index - 16)
        return selectors

    def has_character(self, code_point: int, variation_selector: int = 0) -> bool:
        """Checks whether this typeface renders a code point.

        Args:
            code_point: The base code point.
            variation_selector: A variation selector following the code
                point, or 0 for none.

        Returns:
            True if the (code point, selector) sequence is covered.
        """
        if variation_selector == 0:
            return self._coverage.contains(code_point)

        # Fonts without a format 14 table have no variation coverage
        if not self._variation_coverage:
            return False
        vs_index = get_vs_index(variation_selector)
        if vs_index == INVALID_VS_INDEX or vs_index >= len(self._variation_coverage):
            return False
        bitset = self._variation_coverage[vs_index]
        if bitset is None:
            return False
        return bitset.contains(code_point)

    def get_glyph(self, code_point: int, variation_selector: int = 0) -> Any:
        """Returns the glyph for a code point from the glyph loader.

        Raises:
            GlyphLoadError: If the typeface has no glyph loader.
        """
        if self._glyph_loader is None:
            raise GlyphLoadError(f"Typeface '{self._name}' has no glyph loader")
        key = (code_point, variation_selector)
        if key not in self._glyph_cache:
            self._glyph_cache[key] = self._glyph_loader(
                self, code_point, variation_selector
            )
        return self._glyph_cache[key]

    def __repr__(self) -> str:
        return (
            f"Typeface({self._name!r}, size={self._size}, "
            f"style={self._style.value}, weight={self._weight})"
        )
