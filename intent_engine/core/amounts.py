"""Fixed-precision amount parsing and string/hex conversions."""

from __future__ import annotations

from eth_utils import to_checksum_address

from .errors import InvalidCharacter, InvalidSyntax

ADDRESS_LENGTH = 20

_HEX_DIGITS = "0123456789abcdef"


def parse_amount(text: str, decimals: int) -> int:
    """Scale a decimal numeral to an integer with ``decimals`` places.

    Fractional digits past ``decimals`` are truncated, never rounded::

        parse_amount("20.23345", 4) == parse_amount("20.2334", 4) == 202334
        parse_amount("20.2", 18) == 20200000000000000000
    """

    result = 0
    has_point = False
    places = 0
    for char in text:
        if "0" <= char <= "9":
            if has_point:
                if places >= decimals:
                    break
                places += 1
            result = result * 10 + (ord(char) - 48)
        elif char == ".":
            if has_point:
                raise InvalidCharacter(f"Second decimal point in amount {text!r}")
            has_point = True
        else:
            raise InvalidCharacter(f"Invalid character {char!r} in amount {text!r}")

    if places < decimals:
        result *= 10 ** (decimals - places)
    return result


def to_decimal_string(value: int) -> str:
    """Render an unsigned integer in base 10 without leading zeros."""

    if value < 0:
        raise ValueError("Value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 10)
        digits.append(chr(48 + remainder))
    return "".join(reversed(digits))


def format_units(value: int, decimals: int) -> str:
    """Render a scaled integer as an exact decimal, trailing zeros trimmed."""

    whole, fraction = divmod(value, 10 ** decimals)
    if not fraction:
        return to_decimal_string(whole)
    fraction_text = to_decimal_string(fraction).rjust(decimals, "0").rstrip("0")
    return f"{to_decimal_string(whole)}.{fraction_text}"


def hex_to_bytes(text: str) -> bytes:
    """Convert hex text (optionally ``0x``-prefixed) to bytes."""

    hex_text = text[2:] if text[:2] in ("0x", "0X") else text
    hex_text = hex_text.lower()
    if len(hex_text) % 2 != 0:
        raise InvalidSyntax(f"Odd-length hex string: {text!r}")
    out = bytearray()
    for index in range(0, len(hex_text), 2):
        high = _HEX_DIGITS.find(hex_text[index])
        low = _HEX_DIGITS.find(hex_text[index + 1])
        if high < 0 or low < 0:
            raise InvalidSyntax(f"Invalid hex string: {text!r}")
        out.append(high * 16 + low)
    return bytes(out)


def bytes_to_address(data: bytes) -> str:
    """Read an account identifier from the first 20 bytes of ``data``."""

    if len(data) < ADDRESS_LENGTH:
        raise InvalidSyntax(f"Account needs {ADDRESS_LENGTH} bytes, got {len(data)}")
    return to_checksum_address(bytes(data[:ADDRESS_LENGTH]))


def address_to_hex(address: str) -> str:
    """Canonical lowercase ``0x`` text form of an account identifier."""

    raw = hex_to_bytes(address)
    return "0x" + "".join(_HEX_DIGITS[b >> 4] + _HEX_DIGITS[b & 0x0F] for b in raw[:ADDRESS_LENGTH])


def parse_address(text: str) -> str:
    """Parse ``0x`` account text into a checksummed address."""

    if not text.lower().startswith("0x"):
        raise InvalidSyntax(f"Not an account: {text!r}")
    raw = hex_to_bytes(text)
    if len(raw) != ADDRESS_LENGTH:
        raise InvalidSyntax(f"Account needs {ADDRESS_LENGTH} bytes, got {len(raw)}: {text!r}")
    return bytes_to_address(raw)


def address_to_int(address: str) -> int:
    return int(address, 16)


__all__ = [
    "ADDRESS_LENGTH",
    "parse_amount",
    "to_decimal_string",
    "format_units",
    "hex_to_bytes",
    "bytes_to_address",
    "address_to_hex",
    "parse_address",
    "address_to_int",
]
