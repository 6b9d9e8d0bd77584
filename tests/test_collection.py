# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Unit tests for fonts/collection.py."""

import pytest
from conftest import make_typeface

from fontruns.coverage import CoverageBitset, RangeSet
from fontruns.exceptions import TypefaceCollectionError
from fontruns.fonts.collection import (
    FontRun,
    TypefaceCollection,
    compute_coverage_score,
)
from fontruns.fonts.typeface import Typeface


@pytest.fixture
def latin() -> Typeface:
    """Typeface covering printable ASCII."""
    return make_typeface("Latin", (0x20, 0x7F))


@pytest.fixture
def greek() -> Typeface:
    """Typeface covering Greek letters and ``!``."""
    return make_typeface("Greek", (0x21, 0x22), (0x391, 0x3CA))


@pytest.fixture
def emoji() -> Typeface:
    """Typeface with a VS16 sequence for U+2603."""
    variations = [None] * 16
    variations[15] = CoverageBitset(RangeSet([(0x2603, 0x2604)]))
    base = CoverageBitset(RangeSet([(0x2603, 0x2604)]))
    return Typeface("Emoji", 32, base, variations)


def _spans(runs: list[FontRun]) -> list[tuple[int, int, str]]:
    return [(run.start, run.end, run.typeface.name) for run in runs]


def _assert_partition(runs: list[FontRun], length: int) -> None:
    assert runs
    assert runs[0].start == 0
    assert runs[-1].end == length
    for previous, current in zip(runs, runs[1:]):
        assert previous.end == current.start


class TestTypefaceCollection:
    """Tests for TypefaceCollection construction."""

    def test_empty_rejected(self) -> None:
        """An empty collection raises TypefaceCollectionError."""
        with pytest.raises(TypefaceCollectionError):
            TypefaceCollection([])

    def test_single_typeface(self, latin: Typeface) -> None:
        """A single typeface is accepted without a list."""
        collection = TypefaceCollection(latin)
        assert collection.typefaces == (latin,)
        assert len(collection) == 1

    def test_order_preserved(self, latin: Typeface, greek: Typeface) -> None:
        """Typefaces keep their priority order."""
        assert list(TypefaceCollection([greek, latin])) == [greek, latin]


class TestComputeCoverageScore:
    """Tests for compute_coverage_score."""

    def test_without_selector(self, latin: Typeface) -> None:
        """Scores 1 for covered and 0 for uncovered code points."""
        assert compute_coverage_score(latin, 0x41) == 1
        assert compute_coverage_score(latin, 0x391) == 0

    def test_with_selector(self, latin: Typeface, emoji: Typeface) -> None:
        """Exact sequences score 2, base-only coverage scores 1."""
        assert compute_coverage_score(emoji, 0x2603, 0xFE0F) == 2
        assert compute_coverage_score(emoji, 0x2603, 0xFE0E) == 1
        assert compute_coverage_score(latin, 0x2603, 0xFE0F) == 0


class TestComputeRuns:
    """Tests for TypefaceCollection.compute_runs."""

    def test_single_typeface_one_run(self, greek: Typeface) -> None:
        """One typeface always yields one run, even without coverage."""
        runs = TypefaceCollection(greek).compute_runs("Hello")
        assert _spans(runs) == [(0, 5, "Greek")]

    def test_empty_text(self, latin: Typeface, greek: Typeface) -> None:
        """Empty text yields one empty run with the first typeface."""
        runs = TypefaceCollection([latin, greek]).compute_runs("")
        assert _spans(runs) == [(0, 0, "Latin")]

    def test_mixed_scripts(self, latin: Typeface, greek: Typeface) -> None:
        """Each script goes to the typeface covering it."""
        runs = TypefaceCollection([latin, greek]).compute_runs("Hello Γειά")
        assert _spans(runs) == [(0, 6, "Latin"), (6, 10, "Greek")]

    def test_earlier_typeface_wins_tie(self, latin: Typeface, greek: Typeface) -> None:
        """When both cover a character the earlier typeface is used."""
        runs = TypefaceCollection([greek, latin]).compute_runs("!")
        assert _spans(runs) == [(0, 1, "Greek")]

    def test_sticky_punctuation_stays(self, latin: Typeface, greek: Typeface) -> None:
        """Sticky punctuation covered by the current typeface continues the run."""
        runs = TypefaceCollection([latin, greek]).compute_runs("Hello! World")
        assert _spans(runs) == [(0, 12, "Latin")]

        runs = TypefaceCollection([latin, greek]).compute_runs("αβ!")
        assert _spans(runs) == [(0, 3, "Greek")]

    def test_hello_world_sticky_whitelist(self) -> None:
        """'!' stays with the letter's typeface only if that typeface has it."""
        letters = ((0x41, 0x5B), (0x61, 0x7B))
        only_letters = make_typeface("B", *letters)
        letters_and_bang = make_typeface("A", (0x21, 0x22), *letters)

        runs = TypefaceCollection([only_letters, letters_and_bang]).compute_runs(
            "Hello! World"
        )
        assert _spans(runs) == [(0, 5, "B"), (5, 6, "A"), (6, 12, "B")]

        runs = TypefaceCollection([letters_and_bang, only_letters]).compute_runs(
            "Hello! World"
        )
        assert _spans(runs) == [(0, 12, "A")]

    def test_sticky_punctuation_not_covered(
        self, latin: Typeface, greek: Typeface
    ) -> None:
        """Sticky punctuation the current typeface lacks switches typeface."""
        runs = TypefaceCollection([latin, greek]).compute_runs("αβ, γ")
        assert _spans(runs) == [(0, 2, "Greek"), (2, 4, "Latin"), (4, 5, "Greek")]

    def test_format_characters_absorbed(
        self, latin: Typeface, greek: Typeface
    ) -> None:
        """Format characters never start a run."""
        runs = TypefaceCollection([latin, greek]).compute_runs("ab\u200dαβ")
        assert _spans(runs) == [(0, 3, "Latin"), (3, 5, "Greek")]

    def test_leading_format_characters(self, latin: Typeface, greek: Typeface) -> None:
        """Leading format characters join the first run."""
        runs = TypefaceCollection([latin, greek]).compute_runs("\u200dαβ")
        assert _spans(runs) == [(0, 3, "Greek")]

    def test_only_format_characters(self, latin: Typeface, greek: Typeface) -> None:
        """Text of only format characters is one run with the first typeface."""
        runs = TypefaceCollection([greek, latin]).compute_runs("\u200d\u200c\ufeff")
        assert _spans(runs) == [(0, 3, "Greek")]

    def test_variation_sequence_lookahead(
        self, latin: Typeface, emoji: Typeface
    ) -> None:
        """A following selector prefers the typeface with the exact sequence."""
        collection = TypefaceCollection([latin, emoji])
        runs = collection.compute_runs([0x41, 0x2603, 0xFE0F])
        assert _spans(runs) == [(0, 1, "Latin"), (1, 3, "Emoji")]

    def test_base_coverage_beats_nothing(
        self, greek: Typeface, emoji: Typeface
    ) -> None:
        """Base coverage wins when no typeface has the sequence."""
        runs = TypefaceCollection([greek, emoji]).compute_runs([0x2603, 0xFE0E])
        assert _spans(runs) == [(0, 2, "Emoji")]

    def test_uncovered_character_uses_first_typeface(
        self, latin: Typeface, greek: Typeface
    ) -> None:
        """Characters nobody covers fall back to the first typeface."""
        runs = TypefaceCollection([greek, latin]).compute_runs("a一")
        assert _spans(runs) == [(0, 1, "Latin"), (1, 2, "Greek")]

    def test_surrogate_units(self, latin: Typeface, greek: Typeface) -> None:
        """Run indices count UTF-16 code units."""
        runs = TypefaceCollection([greek, latin]).compute_runs("a\U0001F600")
        assert _spans(runs) == [(0, 1, "Latin"), (1, 3, "Greek")]

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Hello",
            "Γειά σου, Hello!",
            "\u200d",
            "a\u200db\u200cγ\ufeff!",
            "!!αa,β.",
            "一丁 x",
            "a\U0001F600b",
        ],
    )
    def test_runs_partition_text(
        self, latin: Typeface, greek: Typeface, text: str
    ) -> None:
        """Runs cover the text in order without gaps or overlaps."""
        for order in ([latin, greek], [greek, latin]):
            runs = TypefaceCollection(order).compute_runs(text)
            _assert_partition(runs, len(text.encode("utf-16-le")) // 2)
            for previous, current in zip(runs, runs[1:]):
                assert previous.typeface is not current.typeface

    def test_run_length(self, latin: Typeface) -> None:
        """len of a run is its code unit count."""
        assert len(FontRun(2, 7, latin)) == 5
