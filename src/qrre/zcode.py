"""
Z-Code codec: socioeconomic classifications <-> 6-bit integer.

    L      Large Business                                 32
    S      Small Business                                 16
    SDB    Small Disadvantaged Business                    8
    WOSB   Woman-Owned Small Business                      4
    VOSB   Veteran-Owned Small Business                    2
    SDVOSB Service-Disabled Veteran-Owned Small Business   1

Example: S + WOSB + VOSB = 0b010110 = 22
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple


@dataclass(frozen=True)
class ZCodeOption:
    code: str
    label: str
    weight: int
    q_weight: int


ZCODE_OPTIONS: Tuple[ZCodeOption, ...] = (
    ZCodeOption("L", "Large Business", 32, 0),
    ZCodeOption("S", "Small Business", 16, 1),
    ZCodeOption("SDB", "Small Disadvantaged Business", 8, 2),
    ZCodeOption("WOSB", "Woman-Owned Small Business", 4, 3),
    ZCodeOption("VOSB", "Veteran-Owned Small Business", 2, 4),
    ZCodeOption("SDVOSB", "Service-Disabled Veteran-Owned Small Business", 1, 5),
)

ZCODE_BITS = len(ZCODE_OPTIONS)
ZCODE_MAX = (1 << ZCODE_BITS) - 1

_BY_CODE = {opt.code: opt for opt in ZCODE_OPTIONS}


def encode_zcode(selected_codes: Iterable[str]) -> int:
    """
    Encode classification codes into a Z-Code integer.

    Unrecognized codes are ignored rather than failing the encode.

    >>> encode_zcode(["S", "WOSB", "VOSB"])
    22
    """
    zcode = 0
    for code in selected_codes:
        option = _BY_CODE.get(code)
        if option is not None:
            zcode |= option.weight
    return zcode


def decode_zcode(zcode: Any) -> List[str]:
    """
    Decode a Z-Code integer into classification codes.

    Codes come back in table order, not selection order. Non-integer
    input decodes to an empty list.
    """
    if not isinstance(zcode, int) or isinstance(zcode, bool):
        return []
    return [opt.code for opt in ZCODE_OPTIONS if zcode & opt.weight]


def zcode_labels(zcode: Any) -> List[str]:
    """Human-readable labels for a Z-Code."""
    return [_BY_CODE[code].label for code in decode_zcode(zcode)]


def is_valid_zcode(zcode: Any) -> bool:
    """A Z-Code is an integer in [0, 63]."""
    return isinstance(zcode, int) and not isinstance(zcode, bool) and 0 <= zcode <= ZCODE_MAX


def format_zcode_binary(zcode: Any) -> str:
    """Zero-padded 6-digit binary form, e.g. 22 -> "010110"; "" when not a Z-Code."""
    if not is_valid_zcode(zcode):
        return ""
    return format(zcode, f"0{ZCODE_BITS}b")
