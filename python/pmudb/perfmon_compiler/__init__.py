"""Offline compiler from the perfmon corpus to an event lookup database."""

from perfmon_compiler.builder import BuildStats, DescriptorBuilder
from perfmon_compiler.compile import CompileResult, CompilerConfig, compile_catalog
from perfmon_compiler.emitter import emit_database
from perfmon_compiler.errors import (
    InvalidBoolean,
    InvalidPebsType,
    MalformedNumeral,
    MalformedRecordSchema,
    MalformedRow,
    MissingFile,
    OversizedBitmask,
    PerfmonCompileError,
    UnknownFileSuffix,
)
from perfmon_compiler.events import parse_event_file, parse_event_record
from perfmon_compiler.mapfile import (
    DataFileReference,
    FileSuffix,
    MapfileEntry,
    architecture_variable,
    file_suffix,
    load_mapfile,
)

__all__ = [
    "architecture_variable",
    "compile_catalog",
    "emit_database",
    "file_suffix",
    "load_mapfile",
    "parse_event_file",
    "parse_event_record",
    "BuildStats",
    "CompileResult",
    "CompilerConfig",
    "DataFileReference",
    "DescriptorBuilder",
    "FileSuffix",
    "MapfileEntry",
    "InvalidBoolean",
    "InvalidPebsType",
    "MalformedNumeral",
    "MalformedRecordSchema",
    "MalformedRow",
    "MissingFile",
    "OversizedBitmask",
    "PerfmonCompileError",
    "UnknownFileSuffix",
]
