"""Library for the typed perfmon event descriptors and their table layout."""

from perfmon_schema.event import (
    Counter,
    EventDescriptor,
    FixedCounter,
    MultiValue,
    PairedValue,
    PebsType,
    ProgrammableCounter,
    SingleValue,
    multi_value,
)


def architecture_column() -> str:
    return "architecture"


def signature_column() -> str:
    return "signature"


__all__ = [
    "architecture_column",
    "signature_column",
    "multi_value",
    "Counter",
    "EventDescriptor",
    "FixedCounter",
    "MultiValue",
    "PairedValue",
    "PebsType",
    "ProgrammableCounter",
    "SingleValue",
]
