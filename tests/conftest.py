# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pytest fixtures for the fontruns test suite."""

from pathlib import Path

import pytest
from font_helpers import make_font_data

from fontruns.coverage import CoverageBitset, RangeSet
from fontruns.fonts import Typeface

LATIN_CMAP = {cp: f"uni{cp:04X}" for cp in range(0x20, 0x7F)}
GREEK_CMAP = {cp: f"uni{cp:04X}" for cp in range(0x391, 0x3CA)}


def make_typeface(name: str, *ranges: tuple[int, int], **kwargs) -> Typeface:
    """Creates a typeface covering the given ``[start, end)`` ranges."""
    return Typeface(name, 32, CoverageBitset(RangeSet(ranges)), **kwargs)


# -- Fixtures --


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Temporary directory for tests.

    Args:
        tmp_path: Pytest-provided temporary directory.

    Returns:
        Path to the temporary directory.
    """
    return tmp_path


@pytest.fixture
def latin_font_data() -> bytes:
    """Font covering printable ASCII.

    Returns:
        Font data as bytes.
    """
    return make_font_data(LATIN_CMAP)


@pytest.fixture
def greek_font_data() -> bytes:
    """Bold font covering Greek letters and ``!``.

    Returns:
        Font data as bytes.
    """
    cmap = dict(GREEK_CMAP)
    cmap[ord("!")] = "exclam"
    return make_font_data(cmap, weight_class=700)


@pytest.fixture
def latin_font(tmp_dir: Path, latin_font_data: bytes) -> Path:
    """ASCII font on disk.

    Returns:
        Path to the font file.
    """
    path = tmp_dir / "Latin.ttf"
    path.write_bytes(latin_font_data)
    return path


@pytest.fixture
def greek_font(tmp_dir: Path, greek_font_data: bytes) -> Path:
    """Greek font on disk.

    Returns:
        Path to the font file.
    """
    path = tmp_dir / "Greek.ttf"
    path.write_bytes(greek_font_data)
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keeps configuration variables of the host out of tests."""
    monkeypatch.delenv("FONTRUNS_FONT_PATH", raising=False)
    monkeypatch.delenv("FONTRUNS_DEFAULT_SIZE", raising=False)
