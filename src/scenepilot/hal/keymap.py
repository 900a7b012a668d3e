"""Character to USB HID usage mapping (US layout).

Both actuation backends speak HID usage codes plus a modifier mask: the
wire backend sends them verbatim and the injection backend translates them
back to OS keys.
"""

from ..hardware_exceptions import KeyMappingError

MOD_LEFT_CTRL = 0x01
MOD_LEFT_SHIFT = 0x02
MOD_LEFT_ALT = 0x04
MOD_RIGHT_SHIFT = 0x20

SHIFT_MASK = MOD_LEFT_SHIFT | MOD_RIGHT_SHIFT

HID_ENTER = 0x28
HID_ESCAPE = 0x29
HID_BACKSPACE = 0x2A
HID_TAB = 0x2B
HID_SPACE = 0x2C

HID_LEFT_CTRL = 0xE0
HID_LEFT_SHIFT = 0xE1
HID_LEFT_ALT = 0xE2

# Unshifted punctuation and the symbol produced by the same key with Shift
_PUNCTUATION: dict[int, tuple[str, str]] = {
    0x2D: ("-", "_"),
    0x2E: ("=", "+"),
    0x2F: ("[", "{"),
    0x30: ("]", "}"),
    0x31: ("\\", "|"),
    0x33: (";", ":"),
    0x34: ("'", '"'),
    0x35: ("`", "~"),
    0x36: (",", "<"),
    0x37: (".", ">"),
    0x38: ("/", "?"),
}

_DIGIT_SHIFTED = "!@#$%^&*()"


def _build_char_map() -> dict[str, tuple[int, int]]:
    mapping: dict[str, tuple[int, int]] = {}

    for offset in range(26):
        lower = chr(ord("a") + offset)
        mapping[lower] = (0x04 + offset, 0)
        mapping[lower.upper()] = (0x04 + offset, MOD_LEFT_SHIFT)

    # HID orders digits 1..9 then 0
    for offset, digit in enumerate("1234567890"):
        mapping[digit] = (0x1E + offset, 0)
        mapping[_DIGIT_SHIFTED[offset]] = (0x1E + offset, MOD_LEFT_SHIFT)

    for code, (plain, shifted) in _PUNCTUATION.items():
        mapping[plain] = (code, 0)
        mapping[shifted] = (code, MOD_LEFT_SHIFT)

    mapping["\n"] = (HID_ENTER, 0)
    mapping["\r"] = (HID_ENTER, 0)
    mapping["\x1b"] = (HID_ESCAPE, 0)
    mapping["\b"] = (HID_BACKSPACE, 0)
    mapping["\t"] = (HID_TAB, 0)
    mapping[" "] = (HID_SPACE, 0)
    return mapping


CHAR_TO_HID: dict[str, tuple[int, int]] = _build_char_map()


def char_to_hid(char: str) -> tuple[int, int]:
    """Resolve a character to a (keycode, modifier mask) pair.

    Args:
        char: Single character

    Returns:
        HID usage code and modifier mask

    Raises:
        KeyMappingError: If the character has no mapping
    """
    try:
        return CHAR_TO_HID[char]
    except KeyError:
        raise KeyMappingError(char) from None


def hid_to_char(keycode: int) -> str | None:
    """Unshifted character produced by a HID usage code, if it is printable.

    Args:
        keycode: HID usage code

    Returns:
        Character or None for non-printing keys
    """
    if 0x04 <= keycode <= 0x1D:
        return chr(ord("a") + keycode - 0x04)
    if 0x1E <= keycode <= 0x27:
        return "1234567890"[keycode - 0x1E]
    if keycode in _PUNCTUATION:
        return _PUNCTUATION[keycode][0]
    return None
