# rng/bigint.py
from rng.errors import ConversionError

DIGITS = "0123456789ABCDEF"
_VALUES = {c: i for i, c in enumerate(DIGITS)}
_VALUES.update({c.lower(): i for c, i in _VALUES.items() if c.isalpha()})
_CHUNK = 1000


def _check_base(base: int):
    if not isinstance(base, int) or not 2 <= base <= 16:
        raise ConversionError(f"base must be in 2..16, got {base!r}")


def to_base(value: int, base: int = 10) -> str:
    """Non-negative int -> digits in `base` (upper-case, no sign, no grouping)."""
    _check_base(base)
    if value < 0:
        raise ConversionError("negative values have no unsigned representation")
    if base == 10:
        return str(value)
    if base == 16:
        return format(value, "X")
    if base == 2:
        return format(value, "b")
    if base == 8:
        return format(value, "o")
    if value == 0:
        return "0"
    out = []
    while value:
        value, d = divmod(value, base)
        out.append(DIGITS[d])
    return "".join(reversed(out))


def from_base(text: str, base: int = 10) -> int:
    """
    Digits in `base` -> int. Case-insensitive. Unlike int(text, base) no sign,
    whitespace, underscore or prefix is tolerated.
    """
    _check_base(base)
    if not text:
        raise ConversionError("empty number")
    for ch in text:
        d = _VALUES.get(ch)
        if d is None or d >= base:
            raise ConversionError(f"invalid digit {ch!r} for base {base} in {text!r}")
    # chunked so int() never trips the interpreter's str->int digit limit
    value = 0
    for i in range(0, len(text), _CHUNK):
        part = text[i:i + _CHUNK]
        value = value * base ** len(part) + int(part, base)
    return value


def parse_literal(text: str) -> int:
    """Decimal, or hexadecimal with a 0x/0X prefix."""
    text = text.strip()
    if text[:2] in ("0x", "0X"):
        return from_base(text[2:], 16)
    return from_base(text, 10)


def hex_digit_count(value: int) -> int:
    return len(format(value, "x"))


def display_int(value: int) -> str:
    """Decimal for messages and logs; 0x-hex once decimal would pass the str() digit limit."""
    if value.bit_length() <= 12000:
        return str(value)
    sign = "-" if value < 0 else ""
    return f"{sign}0x{to_base(abs(value), 16)}"
