# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Typeface loading from font files and raw font data."""

import logging
import struct
from io import BytesIO
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from ..coverage.cmap import CmapCoverage, get_coverage
from ..exceptions import FontLoadError
from ..utils import get_default_size, get_font_dirs
from .cache import TypefaceCache, default_cache
from .tables import analyze_axes, analyze_languages, analyze_style
from .typeface import FontStyle, GlyphLoader, Typeface, TypefaceKey

logger = logging.getLogger(__name__)

FONT_SUFFIXES = (".ttf", ".otf", ".ttc", ".otc", ".woff", ".woff2")


def resolve_font_path(name: str, search_dirs: list[str] | None = None) -> Path:
    """Finds the font file for a typeface name.

    Directories are searched in order for ``<name><suffix>`` with any of
    ``FONT_SUFFIXES``, ignoring case.

    Args:
        name: Typeface name, e.g. ``"NotoSans-Regular"``.
        search_dirs: Directories to search. Defaults to the directories
            listed in the FONTRUNS_FONT_PATH environment variable.

    Returns:
        Path to the font file.

    Raises:
        FontLoadError: If no matching file exists.
    """
    dirs = search_dirs if search_dirs is not None else get_font_dirs()
    wanted = {f"{name}{suffix}".lower() for suffix in FONT_SUFFIXES}
    for directory in dirs:
        dir_path = Path(directory)
        if not dir_path.is_dir():
            logger.debug("Skipping missing font directory: %s", dir_path)
            continue
        for candidate in sorted(dir_path.iterdir()):
            if candidate.name.lower() in wanted and candidate.is_file():
                return candidate
    raise FontLoadError(
        f"No font file found for '{name}' in: {', '.join(dirs) or '(no directories)'}"
    )


def _open_font(source: Path | bytes, font_number: int) -> TTFont:
    try:
        if isinstance(source, (bytes, bytearray)):
            return TTFont(BytesIO(source), lazy=True, fontNumber=font_number)
        return TTFont(str(source), lazy=True, fontNumber=font_number)
    except FileNotFoundError:
        raise
    except (TTLibError, OSError, ValueError, IndexError, struct.error) as e:
        raise FontLoadError(f"Could not read font data: {e}") from e


def _table_data(tt_font: TTFont, tag: str) -> bytes | None:
    if tag not in tt_font:
        return None
    try:
        return tt_font.getTableData(tag)
    except (TTLibError, KeyError, OSError, struct.error) as e:
        logger.debug("Could not read '%s' table: %s", tag, e)
        return None


def load_typeface(
    source: Path | str | bytes,
    *,
    name: str | None = None,
    size: int | None = None,
    style: FontStyle | None = None,
    weight: int | None = None,
    font_number: int = 0,
    glyph_loader: GlyphLoader | None = None,
) -> Typeface:
    """Loads a typeface and computes its coverage.

    The raw ``cmap`` table is read through fontTools and parsed by
    ``get_coverage``. A font without a usable ``cmap`` loads with empty
    coverage. Style and weight default to the values in ``OS/2``.

    Args:
        source: Path to a font file, or raw font bytes.
        name: Typeface name. Defaults to the file stem, or "Unnamed".
        size: Size in pixels. Defaults to FONTRUNS_DEFAULT_SIZE.
        style: Font style override.
        weight: Weight override (100-900).
        font_number: Index of the font inside a collection (TTC/OTC).
        glyph_loader: Optional host glyph loader for the typeface.

    Returns:
        The loaded Typeface.

    Raises:
        FileNotFoundError: If the font file does not exist.
        FontLoadError: If the data is not a readable font.
    """
    if isinstance(source, str):
        source = Path(source)
    if name is None:
        name = source.stem if isinstance(source, Path) else "Unnamed"
    if size is None:
        size = get_default_size()

    tt_font = _open_font(source, font_number)
    try:
        cmap_data = _table_data(tt_font, "cmap")
        os2_data = _table_data(tt_font, "OS/2")
        fvar_data = _table_data(tt_font, "fvar")
        meta_data = _table_data(tt_font, "meta")
    finally:
        tt_font.close()

    if cmap_data is None:
        logger.info("Cmap table does not exist in '%s', no coverage computed", name)
        coverage = CmapCoverage()
    else:
        coverage = get_coverage(cmap_data)

    style_info = analyze_style(os2_data) if os2_data is not None else None
    if style is None:
        italic = style_info[1] if style_info else False
        style = FontStyle.ITALIC if italic else FontStyle.NORMAL
    if weight is None:
        weight = style_info[0] * 100 if style_info and style_info[0] > 0 else 400

    typeface = Typeface(
        name,
        size,
        coverage,
        style=style,
        weight=weight,
        axes=analyze_axes(fvar_data) if fvar_data is not None else frozenset(),
        languages=analyze_languages(meta_data) if meta_data is not None else ("", ""),
        glyph_loader=glyph_loader,
    )
    logger.debug(
        "Loaded %r: %d code points, %d variation selector(s)",
        typeface,
        len(typeface.coverage),
        len(typeface.variation_selectors()),
    )
    return typeface


def load_named_typeface(
    name: str,
    *,
    size: int | None = None,
    style: FontStyle = FontStyle.NORMAL,
    weight: int = 400,
    cache: TypefaceCache | None = None,
) -> Typeface:
    """Loads a typeface by name through the typeface cache.

    The font file is located with ``resolve_font_path``. Repeated calls
    with the same name, size, style and weight return the same Typeface.

    Args:
        name: Typeface name, matched against font file names.
        size: Size in pixels. Defaults to FONTRUNS_DEFAULT_SIZE.
        style: Font style of the requested identity.
        weight: Weight of the requested identity.
        cache: Cache to use. Defaults to the process-wide cache.

    Returns:
        The cached or newly loaded Typeface.

    Raises:
        FontLoadError: If the font cannot be found or read.
    """
    if size is None:
        size = get_default_size()
    if cache is None:
        cache = default_cache
    key = TypefaceKey(name, size, style, weight)
    return cache.get(
        key,
        lambda: load_typeface(
            resolve_font_path(name), name=name, size=size, style=style, weight=weight
        ),
    )
