import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

from perfmon_compiler.decoders import (
    parse_bool,
    parse_byte,
    parse_counter,
    parse_msr_index,
    parse_multi_value,
    parse_null_string,
    parse_number,
    parse_pebs,
)
from perfmon_compiler.errors import (
    MalformedRecordSchema,
    MissingFile,
    PerfmonCompileError,
)
from perfmon_schema import EventDescriptor

logger = logging.getLogger(__name__)


def _verbatim(value: str) -> str:
    return value


T = TypeVar("T")


def _nullable(decoder: Callable[[str], T]) -> Callable[[str], T | None]:
    def decode(value: str) -> T | None:
        if parse_null_string(value) is None:
            return None
        return decoder(value)
    return decode


@dataclass(frozen=True)
class RecordField:
    key: str
    attribute: str
    decoder: Callable[[str], Any]
    # raw wire value used when the key is absent, None when the key is required
    default: str | None = None

    @property
    def required(self) -> bool:
        return self.default is None


# Wire keys are the lowercase perfmon field names
RECORD_FIELDS: list[RecordField] = [
    RecordField("eventname", "event_name", _verbatim),
    RecordField("eventcode", "event_code", parse_multi_value),
    RecordField("umask", "umask", parse_multi_value),
    RecordField("briefdescription", "brief_description", _verbatim),
    RecordField("publicdescription", "public_description", parse_null_string, "null"),
    RecordField("counter", "counter", parse_counter),
    RecordField("counterhtoff", "counter_ht_off", _nullable(parse_counter), "null"),
    RecordField("pebscounters", "pebs_counters", _nullable(parse_counter), "null"),
    RecordField("sampleafter_value", "sample_after_value", parse_number),
    RecordField("msrindex", "msr_index", parse_msr_index, "0"),
    RecordField("msrvalue", "msr_value", parse_number, "0"),
    RecordField("takenalone", "taken_alone", parse_bool, "0"),
    RecordField("countermask", "counter_mask", parse_byte, "0"),
    RecordField("invert", "invert", parse_bool, "0"),
    RecordField("any_thread", "any_thread", parse_bool, "0"),
    RecordField("edgedetect", "edge_detect", parse_bool, "0"),
    RecordField("pebs", "pebs", parse_pebs, "0"),
    RecordField("precisestore", "precise_store", parse_bool, "0"),
    RecordField("data_la", "data_la", parse_bool, "0"),
    RecordField("l1_hit_indication", "l1_hit_indication", parse_bool, "0"),
    RecordField("errata", "errata", parse_null_string, "null"),
    RecordField("offcore", "offcore", parse_bool, "0"),
    RecordField("unit", "unit", parse_null_string, "null"),
    RecordField("filter", "filter", parse_null_string, "null"),
    RecordField("xxt_sel", "extended_select", parse_bool, "0"),
    RecordField("collect_pebsrecord", "collect_pebs_record", _nullable(parse_number), "null"),
    RecordField("ellc", "ellc", parse_null_string, "null"),
    RecordField("even_status", "event_status", parse_number, "0"),
    RecordField("pdir_counter", "pdir_counter", parse_null_string, "null"),
    RecordField("deprecated", "deprecated", parse_bool, "0"),
    RecordField("fcmask", "fc_mask", parse_byte, "0"),
    RecordField("filter_value", "filter_value", parse_number, "0"),
    RecordField("port_mask", "port_mask", parse_byte, "0"),
    RecordField("umask_ext", "umask_ext", parse_byte, "0"),
    RecordField("counter_type", "counter_type", parse_null_string, "null"),
]


def _decode_field(record: Mapping[str, Any], record_field: RecordField) -> Any:
    if record_field.key in record:
        raw = record[record_field.key]
    elif record_field.required:
        raise MalformedRecordSchema("record is missing a required field", field=record_field.key)
    else:
        raw = record_field.default
    if not isinstance(raw, str):
        raise MalformedRecordSchema("field value is not a string", value=raw, field=record_field.key)
    try:
        return record_field.decoder(raw)
    except PerfmonCompileError as e:
        raise e.locate(field=record_field.key)


def parse_event_record(record: Any, *, uncore: bool) -> EventDescriptor:
    if not isinstance(record, dict):
        raise MalformedRecordSchema("event record is not an object", value=record)
    values = {
        record_field.attribute: _decode_field(record, record_field)
        for record_field in RECORD_FIELDS
    }
    return EventDescriptor(uncore=uncore, **values)


def parse_event_file(path: Path, *, uncore: bool) -> list[EventDescriptor]:
    """Decodes every record of one perfmon JSON data file.

    The first record that fails to decode aborts with the file attached to the error.
    """
    if not path.is_file():
        raise MissingFile("data file does not exist", file=str(path))
    with path.open(encoding="utf-8") as data_file:
        try:
            records = json.load(data_file)
        except json.JSONDecodeError as e:
            raise MalformedRecordSchema(f"invalid JSON: {e}", file=str(path)) from e
        except UnicodeDecodeError as e:
            raise MalformedRecordSchema(f"invalid UTF-8: {e}", file=str(path)) from e
    if not isinstance(records, list):
        raise MalformedRecordSchema("data file is not an array of records", file=str(path))
    descriptors = list[EventDescriptor]()
    for record in records:
        try:
            descriptors.append(parse_event_record(record, uncore=uncore))
        except PerfmonCompileError as e:
            raise e.locate(file=str(path))
    logger.debug("parsed %d events from %s", len(descriptors), path)
    return descriptors


__all__ = [
    "parse_event_file",
    "parse_event_record",
    "RecordField",
    "RECORD_FIELDS",
]
