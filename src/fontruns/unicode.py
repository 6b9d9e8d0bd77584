# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Unicode character classes used by coverage queries and run splitting."""

import struct
from collections.abc import Sequence

# Variation selectors
VS1 = 0xFE00
VS16 = 0xFE0F
VS17 = 0xE0100
VS256 = 0xE01EF

# Returned by get_vs_index() for code points that are not selectors
INVALID_VS_INDEX = 0xFFFF

# Punctuation and symbols that stay on the current typeface instead of
# triggering a new fallback search, as long as that typeface covers them
STICKY_WHITELIST = frozenset(
    {
        ord("!"),
        ord(","),
        ord("-"),
        ord("."),
        ord(":"),
        ord(";"),
        ord("?"),
        0x00A0,  # NO-BREAK SPACE
        0x2010,  # HYPHEN
        0x2011,  # NON-BREAKING HYPHEN
        0x202F,  # NARROW NO-BREAK SPACE
        0x2640,  # FEMALE SIGN
        0x2642,  # MALE SIGN
        0x2695,  # STAFF OF AESCULAPIUS
    }
)


def is_bmp_variation_selector(code_point: int) -> bool:
    return VS1 <= code_point <= VS16


def is_variation_selector_supplement(code_point: int) -> bool:
    return VS17 <= code_point <= VS256


def is_variation_selector(code_point: int) -> bool:
    """Returns True for VS1..VS16 and VS17..VS256."""
    return is_bmp_variation_selector(code_point) or is_variation_selector_supplement(
        code_point
    )


def get_vs_index(code_point: int) -> int:
    """Maps a variation selector to its slot in ``[0, 256)``.

    VS1..VS16 (U+FE00..U+FE0F) map to 0..15 and VS17..VS256
    (U+E0100..U+E01EF) to 16..255.

    Args:
        code_point: Candidate variation selector.

    Returns:
        The variation index, or ``INVALID_VS_INDEX`` for any other
        code point.
    """
    if is_bmp_variation_selector(code_point):
        return code_point - VS1
    if is_variation_selector_supplement(code_point):
        return code_point - VS17 + 16
    return INVALID_VS_INDEX


def char_does_not_need_font_support(code_point: int) -> bool:
    """Returns True for format characters no font has to render."""
    return (
        code_point == 0x00AD  # SOFT HYPHEN
        or code_point == 0x034F  # COMBINING GRAPHEME JOINER
        or code_point == 0x061C  # ARABIC LETTER MARK
        or 0x200C <= code_point <= 0x200F  # ZWNJ..RIGHT-TO-LEFT MARK
        or 0x202A <= code_point <= 0x202E  # LRE..RIGHT-TO-LEFT OVERRIDE
        or 0x2066 <= code_point <= 0x2069  # LRI..POP DIRECTIONAL ISOLATE
        or code_point == 0xFEFF  # BYTE ORDER MARK
        or is_variation_selector(code_point)
    )


def char_is_sticky_whitelisted(code_point: int) -> bool:
    return code_point in STICKY_WHITELIST


def to_code_units(text: str | Sequence[int]) -> Sequence[int]:
    """Converts text to the 16-bit units scanned by run segmentation.

    A ``str`` is encoded as UTF-16, so characters outside the BMP come
    back as two surrogate units that are scored separately. Lone
    surrogates in the string are passed through unchanged. Integer
    sequences are returned as-is.

    Args:
        text: A string, or a sequence of code units.

    Returns:
        Sequence of code units.
    """
    if not isinstance(text, str):
        return text
    data = text.encode("utf-16-le", "surrogatepass")
    return struct.unpack(f"<{len(data) // 2}H", data)
