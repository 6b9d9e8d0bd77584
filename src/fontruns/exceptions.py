# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Custom exceptions for fontruns."""


class FontRunsError(Exception):
    """Base exception for all fontruns errors."""


class FontLoadError(FontRunsError):
    """Font file could not be read or located."""


class TypefaceCollectionError(FontRunsError):
    """Typeface collection could not be constructed."""


class GlyphLoadError(FontRunsError):
    """Glyph could not be loaded for a typeface."""
