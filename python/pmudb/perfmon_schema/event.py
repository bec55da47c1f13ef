# Typed event descriptors and their columnar layout

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping

import polars as pl


@dataclass(frozen=True)
class SingleValue:
  value: int

  @property
  def values(self) -> tuple[int, ...]:
    return (self.value,)


@dataclass(frozen=True)
class PairedValue:
  first: int
  second: int

  @property
  def values(self) -> tuple[int, ...]:
    return (self.first, self.second)


MultiValue = SingleValue | PairedValue


def multi_value(values: list[int] | tuple[int, ...]) -> MultiValue:
    if len(values) == 1:
        return SingleValue(values[0])
    if len(values) == 2:
        return PairedValue(values[0], values[1])
    raise ValueError(f"expected one or two components, got {len(values)}")


@dataclass(frozen=True)
class FixedCounter:
  mask: int

  @classmethod
  def kind(cls) -> str:
    return "fixed"


@dataclass(frozen=True)
class ProgrammableCounter:
  mask: int

  @classmethod
  def kind(cls) -> str:
    return "programmable"


Counter = FixedCounter | ProgrammableCounter

_counter_kinds: Mapping[str, type[FixedCounter] | type[ProgrammableCounter]] = {
    FixedCounter.kind(): FixedCounter,
    ProgrammableCounter.kind(): ProgrammableCounter,
}

# counter class fields are stored as a kind column and a slot mask column
_COUNTER_FIELDS = ("counter", "counter_ht_off", "pebs_counters")


class PebsType(Enum):
    REGULAR = 0
    PEBS_OR_REGULAR = 1
    PEBS_ONLY = 2


@dataclass(frozen=True)
class EventDescriptor:
    event_name: str
    event_code: MultiValue
    umask: MultiValue
    brief_description: str
    public_description: str | None
    counter: Counter
    counter_ht_off: Counter | None
    pebs_counters: Counter | None
    sample_after_value: int
    msr_index: MultiValue
    msr_value: int
    taken_alone: bool
    counter_mask: int
    invert: bool
    any_thread: bool
    edge_detect: bool
    pebs: PebsType
    precise_store: bool
    data_la: bool
    l1_hit_indication: bool
    errata: str | None
    offcore: bool
    unit: str | None
    filter: str | None
    extended_select: bool
    collect_pebs_record: int | None
    ellc: str | None
    event_status: int
    pdir_counter: str | None
    deprecated: bool
    fc_mask: int
    filter_value: int
    port_mask: int
    umask_ext: int
    counter_type: str | None
    uncore: bool

    @classmethod
    def schema(cls) -> pl.Schema:
        """Column layout used when descriptors are written as a table."""
        return pl.Schema({
            "event_name": pl.String(),
            "event_code": pl.List(pl.UInt64()),
            "umask": pl.List(pl.UInt64()),
            "brief_description": pl.String(),
            "public_description": pl.String(),
            "counter_kind": pl.String(),
            "counter_slots": pl.UInt8(),
            "counter_ht_off_kind": pl.String(),
            "counter_ht_off_slots": pl.UInt8(),
            "pebs_counters_kind": pl.String(),
            "pebs_counters_slots": pl.UInt8(),
            "sample_after_value": pl.UInt64(),
            "msr_index": pl.List(pl.UInt64()),
            "msr_value": pl.UInt64(),
            "taken_alone": pl.Boolean(),
            "counter_mask": pl.UInt8(),
            "invert": pl.Boolean(),
            "any_thread": pl.Boolean(),
            "edge_detect": pl.Boolean(),
            "pebs": pl.String(),
            "precise_store": pl.Boolean(),
            "data_la": pl.Boolean(),
            "l1_hit_indication": pl.Boolean(),
            "errata": pl.String(),
            "offcore": pl.Boolean(),
            "unit": pl.String(),
            "filter": pl.String(),
            "extended_select": pl.Boolean(),
            "collect_pebs_record": pl.UInt64(),
            "ellc": pl.String(),
            "event_status": pl.UInt64(),
            "pdir_counter": pl.String(),
            "deprecated": pl.Boolean(),
            "fc_mask": pl.UInt8(),
            "filter_value": pl.UInt64(),
            "port_mask": pl.UInt8(),
            "umask_ext": pl.UInt8(),
            "counter_type": pl.String(),
            "uncore": pl.Boolean(),
        })

    def to_row(self) -> dict[str, Any]:
        row = {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if field.name not in _COUNTER_FIELDS
        }
        row["event_code"] = list(self.event_code.values)
        row["umask"] = list(self.umask.values)
        row["msr_index"] = list(self.msr_index.values)
        row["pebs"] = self.pebs.name
        for name in _COUNTER_FIELDS:
            counter = getattr(self, name)
            row[f"{name}_kind"] = counter.kind() if counter is not None else None
            row[f"{name}_slots"] = counter.mask if counter is not None else None
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "EventDescriptor":
        values = {
            field.name: row[field.name]
            for field in fields(cls)
            if field.name in row
        }
        values["event_code"] = multi_value(row["event_code"])
        values["umask"] = multi_value(row["umask"])
        values["msr_index"] = multi_value(row["msr_index"])
        values["pebs"] = PebsType[row["pebs"]]
        for name in _COUNTER_FIELDS:
            kind = row[f"{name}_kind"]
            values[name] = _counter_kinds[kind](row[f"{name}_slots"]) if kind is not None else None
        return EventDescriptor(**values)
