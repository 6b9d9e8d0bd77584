# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Fallback chains of typefaces and text run segmentation."""

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from ..exceptions import TypefaceCollectionError
from ..unicode import (
    char_does_not_need_font_support,
    char_is_sticky_whitelisted,
    is_variation_selector,
    to_code_units,
)
from .typeface import Typeface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FontRun:
    """A span of text rendered with a single typeface.

    Attributes:
        start: Index of the first code unit in the run.
        end: Index one past the last code unit in the run.
        typeface: Typeface assigned to the run.
    """

    start: int
    end: int
    typeface: Typeface

    def __len__(self) -> int:
        return self.end - self.start


def compute_coverage_score(
    typeface: Typeface, code_point: int, variation_selector: int = 0
) -> int:
    """Scores how well a typeface renders a code point.

    Returns:
        2 if it covers the exact variation sequence, 1 if it covers the
        base code point only, 0 if it does not cover the code point.
        Without a variation selector the score is 1 or 0.
    """
    if variation_selector != 0:
        if typeface.has_character(code_point, variation_selector):
            return 2
        if typeface.has_character(code_point, 0):
            return 1
        return 0
    return 1 if typeface.has_character(code_point, 0) else 0


class TypefaceCollection:
    """An ordered fallback chain of typefaces.

    The first typeface is the most preferred; later typefaces are only
    used for text the earlier ones cannot render.
    """

    def __init__(self, typefaces: Typeface | Iterable[Typeface]) -> None:
        """Initializes the collection.

        Args:
            typefaces: One typeface, or typefaces in priority order.

        Raises:
            TypefaceCollectionError: If no typeface is given.
        """
        if isinstance(typefaces, Typeface):
            typefaces = (typefaces,)
        self._typefaces: tuple[Typeface, ...] = tuple(typefaces)
        if not self._typefaces:
            raise TypefaceCollectionError(
                "A typeface collection needs at least one typeface"
            )

    @property
    def typefaces(self) -> tuple[Typeface, ...]:
        return self._typefaces

    def __len__(self) -> int:
        return len(self._typefaces)

    def __iter__(self) -> Iterator[Typeface]:
        return iter(self._typefaces)

    def _best_typeface(self, code_point: int, next_code_point: int) -> Typeface:
        variation_selector = (
            next_code_point if is_variation_selector(next_code_point) else 0
        )
        # Nothing covering the code point still leaves the first typeface
        best = self._typefaces[0]
        best_score = 0
        for typeface in self._typefaces:
            score = compute_coverage_score(typeface, code_point, variation_selector)
            if score > best_score:
                best = typeface
                best_score = score
        return best

    def compute_runs(self, text: str | Sequence[int]) -> list[FontRun]:
        """Splits text into runs, each assigned to the best typeface.

        Each code unit goes to the first typeface with the highest
        coverage score for it (looking ahead for a variation selector).
        Format characters that need no glyph never start a new run, and
        whitelisted punctuation stays on the current typeface when that
        typeface covers it.

        Strings are scanned as UTF-16 code units. Surrogate pairs are
        not combined, so a character outside the BMP is scored as two
        separate units and run indices count code units.

        Args:
            text: Text as a string, or as a sequence of code units.

        Returns:
            Runs covering ``[0, len(units))`` in order without gaps or
            overlaps.
        """
        units = to_code_units(text)
        length = len(units)

        if len(self._typefaces) == 1:
            return [FontRun(0, length, self._typefaces[0])]

        runs: list[FontRun] = []
        last_typeface: Typeface | None = None
        start = 0

        for position, code_point in enumerate(units):
            next_code_point = units[position + 1] if position + 1 < length else 0

            should_continue_run = False
            if char_does_not_need_font_support(code_point):
                should_continue_run = True
            elif last_typeface is not None and char_is_sticky_whitelisted(code_point):
                should_continue_run = last_typeface.has_character(code_point, 0)

            if should_continue_run:
                continue

            best = self._best_typeface(code_point, next_code_point)
            if position == 0 or best is not last_typeface:
                if last_typeface is not None:
                    runs.append(FontRun(start, position, last_typeface))
                    start = position
                else:
                    # First assignment: any earlier units needed no font
                    # support and join this run
                    start = 0
                last_typeface = best

        if last_typeface is None:
            # Nothing needed font support, so any typeface will do
            runs.append(FontRun(0, length, self._typefaces[0]))
        else:
            runs.append(FontRun(start, length, last_typeface))

        logger.debug("Split %d code units into %d run(s)", length, len(runs))
        return runs
