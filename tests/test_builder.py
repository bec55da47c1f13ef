"""
Unit tests for the descriptor builder merge rules and the read only database.
"""

import pytest
from corpus import event_record

from perfmon_compiler import (
    DataFileReference,
    DescriptorBuilder,
    FileSuffix,
    MapfileEntry,
    parse_event_record,
)
from perfmon_db import EventDatabase


def _reference(file_name: str, variable: str, *signatures: str) -> DataFileReference:
    suffix = FileSuffix.UNCORE if "_uncore_" in file_name else FileSuffix.CORE
    return DataFileReference(
        file_name=file_name,
        variable=variable,
        suffix=suffix,
        entries=tuple(
            MapfileEntry(signature=signature, version="V1", event_type=suffix.value)
            for signature in signatures
        ),
    )


def _event(name: str, **overrides):
    return parse_event_record(event_record(name, **overrides), uncore=False)


class TestSignatureGrouping:
    """Test first file group wins for a signature"""

    def test_first_file_group_wins(self):
        builder = DescriptorBuilder()
        builder.add_file(_reference("/F1/F1_core_v15.json", "F1", "S"), [_event("A")])
        builder.add_file(_reference("/F2/F2_core_v20.json", "F2", "S"), [_event("B")])
        database = builder.build()

        assert dict(database.signatures) == {"S": "F1"}
        assert database.architecture("S") == "F1"
        assert database.get_event("S", "A") is not None
        assert database.get_event("S", "B") is None
        assert builder.stats().dropped_signatures == 1

    def test_same_architecture_is_not_a_drop(self):
        builder = DescriptorBuilder()
        builder.add_file(_reference("/HSW/Haswell_core_V20.json", "HASWELL", "S"), [_event("A")])
        builder.add_file(_reference("/HSW/Haswell_uncore_V20.json", "HASWELL", "S"), [_event("B")])
        database = builder.build()

        assert builder.stats().dropped_signatures == 0
        assert set(database.events("S")) == {"A", "B"}


class TestEventMerge:
    """Test last write wins within one architecture"""

    def test_last_write_wins(self):
        builder = DescriptorBuilder()
        builder.add_file(_reference("/HSW/Haswell_core_V20.json", "HASWELL", "S"), [_event("A", umask="0x01")])
        builder.add_file(_reference("/HSW/Haswell_uncore_V20.json", "HASWELL", "S"), [_event("A", umask="0x02")])
        database = builder.build()

        assert database.get_event("S", "A").umask.values == (0x02,)
        stats = builder.stats()
        assert stats.overwritten_events == 1
        assert stats.events == 1

    def test_duplicates_within_one_file(self):
        builder = DescriptorBuilder()
        builder.add_file(
            _reference("/HSW/Haswell_core_V20.json", "HASWELL", "S"),
            [_event("A", umask="0x01"), _event("A", umask="0x03")],
        )
        assert builder.build().get_event("S", "A").umask.values == (0x03,)
        assert builder.stats().overwritten_events == 1

    def test_stats(self):
        builder = DescriptorBuilder()
        builder.add_file(_reference("/HSW/Haswell_core_V20.json", "HASWELL", "S1", "S2"), [_event("A"), _event("B")])
        builder.add_file(_reference("/HSX/haswellx_core_v17.json", "HASWELLX", "S3"), [_event("A")])
        stats = builder.stats()
        assert stats.architectures == 2
        assert stats.signatures == 3
        assert stats.events == 3


class TestEventDatabase:
    """Test lookups on the immutable database"""

    @pytest.fixture
    def database(self) -> EventDatabase:
        builder = DescriptorBuilder()
        builder.add_file(_reference("/HSW/Haswell_core_V20.json", "HASWELL", "S"), [_event("A")])
        return builder.build()

    def test_absent_event_is_not_found(self, database):
        assert database.get_event("S", "NOT_AN_EVENT") is None
        assert "NOT_AN_EVENT" not in database.events("S")

    def test_absent_signature_is_not_found(self, database):
        assert database.architecture("GenuineIntel-0-0") is None
        assert database.events("GenuineIntel-0-0") is None
        assert database.get_event("GenuineIntel-0-0", "A") is None

    def test_tables_are_read_only(self, database):
        with pytest.raises(TypeError):
            database.signatures["T"] = "HASWELL"
        with pytest.raises(TypeError):
            database.tables["HASWELL"]["B"] = _event("B")

    def test_architectures(self, database):
        assert database.architectures == ["HASWELL"]
        assert list(database.tables["HASWELL"]) == ["A"]

    def test_unknown_architecture_rejected(self):
        with pytest.raises(ValueError):
            EventDatabase(signatures={"S": "MISSING"}, tables={})
