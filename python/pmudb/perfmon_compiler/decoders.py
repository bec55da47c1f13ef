"""Decoders for the string-encoded fields of perfmon event records.

Every perfmon field is a string on the wire. Each decoder below handles one
semantic kind of field and raises a PerfmonCompileError subclass carrying the
raw value when the string does not decode; the record parser attaches the file
and field name.
"""

from typing import Final

from perfmon_compiler.errors import (
    InvalidBoolean,
    InvalidPebsType,
    MalformedNumeral,
    OversizedBitmask,
)
from perfmon_schema import (
    Counter,
    FixedCounter,
    MultiValue,
    PebsType,
    ProgrammableCounter,
    SingleValue,
    multi_value,
)

BYTE_MAX: Final[int] = 0xFF
U64_MAX: Final[int] = (1 << 64) - 1
NULL_TOKEN: Final[str] = "null"

_FIXED_PREFIXES: Final[tuple[str, ...]] = ("fixed counter", "fixed")


def parse_hex_number(value: str) -> int:
    if not value.startswith("0x"):
        raise MalformedNumeral("expected a 0x prefixed hex numeral", value=value)
    return parse_number(value)


def parse_number(value: str) -> int:
    digits = value
    base = 10
    if digits.startswith("0x"):
        digits, base = digits[2:], 16
    # int() also accepts signs, underscores, whitespace and non ASCII digits, none of which is a perfmon numeral
    if not digits or not (digits.isascii() and digits.isalnum()):
        raise MalformedNumeral("can not parse numeral", value=value)
    try:
        number = int(digits, base=base)
    except ValueError:
        raise MalformedNumeral("can not parse numeral", value=value) from None
    if number > U64_MAX:
        raise MalformedNumeral("numeral does not fit in 64 bits", value=value)
    return number


def parse_byte(value: str) -> int:
    number = parse_number(value)
    if number > BYTE_MAX:
        raise OversizedBitmask(f"{number:#x} does not fit in 8 bits", value=value)
    return number


def parse_bool(value: str) -> bool:
    match value.strip():
        case "0":
            return False
        case "1":
            return True
    raise InvalidBoolean("unknown boolean value", value=value)


def parse_counter_values(value: str) -> int:
    """Folds a comma separated list of counter indices into a bitmask."""
    mask = 0
    for token in value.split(","):
        token = token.strip()
        if not token:
            continue
        if not (token.isascii() and token.isdecimal()):
            raise MalformedNumeral(f"can not parse counter index {token!r}", value=value)
        index = int(token)
        if index >= BYTE_MAX.bit_length():
            raise OversizedBitmask(f"counter index {index} does not fit in 8 bits", value=value)
        mask |= 1 << index
    return mask


def parse_counter(value: str) -> Counter:
    lowered = value.lower()
    for prefix in _FIXED_PREFIXES:
        if lowered.startswith(prefix):
            return FixedCounter(parse_counter_values(value[len(prefix):]))
    return ProgrammableCounter(parse_counter_values(value))


def parse_pebs(value: str) -> PebsType:
    match value.strip():
        case "0":
            return PebsType.REGULAR
        case "1":
            return PebsType.PEBS_OR_REGULAR
        case "2":
            return PebsType.PEBS_ONLY
    raise InvalidPebsType("unknown PEBS type", value=value)


def parse_null_string(value: str) -> str | None:
    if value == NULL_TOKEN:
        return None
    return value


def parse_multi_value(value: str) -> MultiValue:
    """One or two 0x prefixed hex components, ex. 0xB7, 0xBB"""
    components = value.split(",")
    if len(components) > 2:
        raise MalformedNumeral(f"expected one or two components, got {len(components)}", value=value)
    try:
        return multi_value([parse_hex_number(component.strip()) for component in components])
    except MalformedNumeral as e:
        e.value = value
        raise


def parse_msr_index(value: str) -> MultiValue:
    # vendor files write a bare 0 for events without an MSR
    if value == "0":
        return SingleValue(0)
    return parse_multi_value(value)


__all__ = [
    "parse_bool",
    "parse_byte",
    "parse_counter",
    "parse_counter_values",
    "parse_hex_number",
    "parse_msr_index",
    "parse_multi_value",
    "parse_null_string",
    "parse_number",
    "parse_pebs",
]
