"""Conversion of configuration directive arguments into typed values."""

from __future__ import annotations

import ipaddress

from webserv.errors import DirectiveError, ValueConversionError

_SSIZE_MAX = 2**63 - 1
_RETURN_CODES = frozenset({301, 302, 303, 307, 308})

# (unit, largest value allowed before scaling, factor to the next smaller unit)
_TIME_STEPS = (
    ("h", 2562047788, 60),
    ("m", 153722867280, 60),
    ("s", 9223372036854, 1000),
)
_TIME_UNITS = ("h", "m", "s", "ms")

_BYTE_STEPS = (
    ("g", 8589934591, 1024),
    ("m", 8796093022207, 1024),
    ("k", 9007199254740991, 1024),
)


def check_path(path: str) -> str:
    """Return the path unchanged, rejecting paths that contain variables."""
    if "$" in path:
        raise ValueConversionError(f"variables are not supported in path: {path!r}")
    return path


def parse_size_t(text: str) -> int:
    """Parse a non-negative decimal integer that fits in a signed 64-bit value."""
    if not text or not text.isascii() or not text.isdigit():
        raise ValueConversionError(f"not a non-negative integer: {text!r}")
    value = int(text)
    if value > _SSIZE_MAX:
        raise ValueConversionError(f"integer too large: {text!r}")
    return value


def parse_status_code(text: str) -> int:
    """Parse a status code usable in error_page (300 to 599)."""
    value = parse_size_t(text)
    if not 300 <= value < 600:
        raise ValueConversionError(f"status code out of range: {text!r}")
    return value


def parse_return_code(text: str) -> int:
    """Parse the status code of a return directive."""
    value = parse_size_t(text)
    if value not in _RETURN_CODES:
        raise DirectiveError("return", "invalid status code | 301, 302, 303, 307, 308")
    return value


def int_to_ipv4(value: int) -> str:
    """Render an integer as a dotted IPv4 address, most significant byte first."""
    return str(ipaddress.IPv4Address(value & 0xFFFFFFFF))


def _parse_c_number(part: str) -> int | None:
    if part[:2] in ("0x", "0X"):
        digits, base = part[2:], 16
    elif len(part) > 1 and part[0] == "0":
        digits, base = part[1:], 8
    else:
        digits, base = part, 10
    if not digits:
        return None
    try:
        return int(digits, base) if digits.isascii() and digits.isalnum() else None
    except ValueError:
        return None


def _inet_aton(text: str) -> int | None:
    parts = text.split(".")
    if len(parts) > 4 or any(not part for part in parts):
        return None
    numbers = [_parse_c_number(part) for part in parts]
    if any(number is None for number in numbers):
        return None
    *leading, last = numbers
    if any(number > 255 for number in leading):
        return None
    if last >= 1 << (8 * (5 - len(parts))):
        return None
    value = 0
    for shift, number in zip((24, 16, 8), leading):
        value |= number << shift
    return value | last


def parse_ip(text: str) -> str:
    """Parse the address part of a listen directive."""
    if "." in text:
        value = _inet_aton(text)
        if value is None or value == 0xFFFFFFFF:
            raise ValueConversionError(f"invalid IP address: {text!r}")
        return "0." * (3 - text.count(".")) + text
    return int_to_ipv4(parse_size_t(text))


def parse_port(text: str) -> int:
    """Parse a TCP port number."""
    value = parse_size_t(text)
    if not 0 <= value <= 65535:
        raise ValueConversionError(f"port out of range: {text!r}")
    return value


def split_number_unit(text: str) -> tuple[int, str]:
    """Split a leading decimal number from the unit that follows it."""
    end = len(text)
    for position, char in enumerate(text):
        if char not in "0123456789":
            end = position
            break
    number, unit = text[:end], text[end:]
    if not number:
        raise ValueConversionError(f"missing number: {text!r}")
    value = int(number)
    if value > _SSIZE_MAX:
        raise ValueConversionError(f"number too large: {text!r}")
    return value, unit


def parse_time(text: str) -> int:
    """Parse a duration with unit h, m, s or ms (default) into milliseconds."""
    value, unit = split_number_unit(text)
    unit = unit or "ms"
    if unit not in _TIME_UNITS:
        raise ValueConversionError(f"unknown time unit: {text!r}")
    start = _TIME_UNITS.index(unit)
    for _, limit, factor in _TIME_STEPS[start:]:
        if value > limit:
            raise ValueConversionError(f"duration too large: {text!r}")
        value *= factor
    return value


def parse_bytes(text: str) -> int:
    """Parse a size with an optional k, m or g suffix into bytes."""
    value, unit = split_number_unit(text)
    if len(unit) > 1 or (unit and unit not in "gmkGMK"):
        raise ValueConversionError(f"unknown size unit: {text!r}")
    if not unit:
        return value
    units = [step[0] for step in _BYTE_STEPS]
    start = units.index(unit.lower())
    for _, limit, factor in _BYTE_STEPS[start:]:
        if value > limit:
            raise ValueConversionError(f"size too large: {text!r}")
        value *= factor
    return value


def parse_switch(text: str) -> bool:
    """Parse an on/off flag, case-insensitively."""
    lowered = text.lower()
    if lowered == "on":
        return True
    if lowered == "off":
        return False
    raise ValueConversionError(f"expected on or off: {text!r}")