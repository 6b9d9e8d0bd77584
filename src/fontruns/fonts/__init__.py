# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Typefaces, fallback collections and typeface loading."""

from ..exceptions import FontLoadError, GlyphLoadError, TypefaceCollectionError
from .cache import TypefaceCache, default_cache
from .collection import FontRun, TypefaceCollection, compute_coverage_score
from .loader import load_named_typeface, load_typeface, resolve_font_path
from .tables import analyze_axes, analyze_languages, analyze_style
from .typeface import FontStyle, GlyphLoader, Typeface, TypefaceKey

__all__ = [
    # Exceptions
    "FontLoadError",
    "GlyphLoadError",
    "TypefaceCollectionError",
    # Typefaces
    "FontStyle",
    "GlyphLoader",
    "Typeface",
    "TypefaceKey",
    # Collections
    "FontRun",
    "TypefaceCollection",
    "compute_coverage_score",
    # Loading
    "TypefaceCache",
    "default_cache",
    "load_named_typeface",
    "load_typeface",
    "resolve_font_path",
    # SFNT tables
    "analyze_axes",
    "analyze_languages",
    "analyze_style",
]
