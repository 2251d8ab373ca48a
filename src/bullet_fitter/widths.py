"""
Character widths for Times New Roman 12pt as rendered by AF Form 1206.

Widths are advance widths in screen pixels and were calibrated against the
pdf-bullets project (https://github.com/AF-VCD/pdf-bullets, MIT license).
Measurements are kerning-free, so the width of a string is the plain sum of
its characters.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# Form field geometry. The PDF field is 202.321mm wide; at 96 DPI that is
# 764.68px nominally, but the form renderer wraps at the slightly wider
# width calibrated by pdf-bullets.
AF1206_FIELD_WIDTH_MM = 202.321
SCREEN_DPI = 96
MM_PER_INCH = 25.4
AF1206_NOMINAL_WIDTH_PX = AF1206_FIELD_WIDTH_MM * SCREEN_DPI / MM_PER_INCH
AF1206_LINE_WIDTH_PX = 765.95

DEFAULT_CHAR_WIDTH = 8.0

NORMAL_SPACE = " "
THIN_SPACE = "\u2006"  # six-per-em space, narrower than a normal space
MEDIUM_SPACE = "\u2004"  # three-per-em space, wider than a normal space
HAIR_SPACE = "\u2009"
REGULAR_HYPHEN = "-"
NON_BREAKING_HYPHEN = "\u2011"

SPECIAL_SPACES = (THIN_SPACE, MEDIUM_SPACE, HAIR_SPACE)

_WIDTHS: dict[int, float] = {
    # space and punctuation
    32: 4,
    33: 5.328125,  # !
    34: 6.53125,  # "
    35: 8,  # #
    36: 8,  # $
    37: 13.328125,  # %
    38: 12.4453125,  # &
    39: 2.8828125,  # '
    40: 5.328125,  # (
    41: 5.328125,  # )
    42: 8,  # *
    43: 9.0234375,  # +
    44: 4,  # ,
    45: 5.328125,  # -
    46: 4,  # .
    47: 4.4453125,  # /
    # digits
    **{code: 8 for code in range(48, 58)},
    58: 4.4453125,  # :
    59: 4.4453125,  # ;
    60: 9.0234375,  # <
    61: 9.0234375,  # =
    62: 9.0234375,  # >
    63: 7.1015625,  # ?
    64: 14.734375,  # @
    # uppercase
    65: 11.5546875,  # A
    66: 10.671875,  # B
    67: 10.671875,  # C
    68: 11.5546875,  # D
    69: 9.7734375,  # E
    70: 8.8984375,  # F
    71: 11.5546875,  # G
    72: 11.5546875,  # H
    73: 5.328125,  # I
    74: 6.2265625,  # J
    75: 11.5546875,  # K
    76: 9.7734375,  # L
    77: 14.2265625,  # M
    78: 11.5546875,  # N
    79: 11.5546875,  # O
    80: 8.8984375,  # P
    81: 11.5546875,  # Q
    82: 10.671875,  # R
    83: 8.8984375,  # S
    84: 9.7734375,  # T
    85: 11.5546875,  # U
    86: 11.5546875,  # V
    87: 15.1015625,  # W
    88: 11.5546875,  # X
    89: 11.5546875,  # Y
    90: 9.7734375,  # Z
    91: 5.328125,  # [
    92: 4.4453125,  # backslash
    93: 5.328125,  # ]
    94: 7.5078125,  # ^
    95: 8,  # _
    96: 5.328125,  # `
    # lowercase
    97: 7.1015625,  # a
    98: 8,  # b
    99: 7.1015625,  # c
    100: 8,  # d
    101: 7.1015625,  # e
    102: 5.328125,  # f
    103: 8,  # g
    104: 8,  # h
    105: 4.4453125,  # i
    106: 4.4453125,  # j
    107: 8,  # k
    108: 4.4453125,  # l
    109: 12.4453125,  # m
    110: 8,  # n
    111: 8,  # o
    112: 8,  # p
    113: 8,  # q
    114: 5.328125,  # r
    115: 6.2265625,  # s
    116: 4.4453125,  # t
    117: 8,  # u
    118: 8,  # v
    119: 11.5546875,  # w
    120: 8,  # x
    121: 8,  # y
    122: 7.1015625,  # z
    123: 7.6796875,  # {
    124: 3.203125,  # |
    125: 7.6796875,  # }
    126: 8.65625,  # ~
    # optimization spaces
    ord(MEDIUM_SPACE): 5.33,
    ord(HAIR_SPACE): 2.67,
    ord(THIN_SPACE): 2.67,
    # must match the regular hyphen
    ord(NON_BREAKING_HYPHEN): 5.328125,
}

TIMES_NEW_ROMAN_12PT_WIDTHS: Mapping[int, float] = MappingProxyType(
    {code: float(width) for code, width in _WIDTHS.items()}
)


def get_char_width(char: str) -> float:
    """Return the pixel width of a single character (first code point)."""
    if not char:
        return 0.0
    return TIMES_NEW_ROMAN_12PT_WIDTHS.get(ord(char[0]), DEFAULT_CHAR_WIDTH)


def get_text_width_px(text: str) -> float:
    """Return the rendered width of ``text`` as the sum of its characters."""
    widths = TIMES_NEW_ROMAN_12PT_WIDTHS
    return sum(widths.get(ord(char), DEFAULT_CHAR_WIDTH) for char in text)
