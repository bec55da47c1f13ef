import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import polars as pl
from perfmon_compiler.errors import MalformedRow, MissingFile, UnknownFileSuffix

logger = logging.getLogger(__name__)

MAPFILE_COLUMNS = 4


class FileSuffix(Enum):
    CORE = "core"
    UNCORE = "uncore"
    MATRIX = "matrix"
    FPARITH = "fparith"

    def in_scope(self) -> bool:
        return self in (FileSuffix.CORE, FileSuffix.UNCORE)


# Order matters, the first matching marker decides the category
_SUFFIX_MARKERS: list[tuple[str, FileSuffix]] = [
    ("_core_", FileSuffix.CORE),
    ("_uncore_", FileSuffix.UNCORE),
    ("_matrix_", FileSuffix.MATRIX),
    ("_FP_ARITH_INST_", FileSuffix.FPARITH),
    ("_fp_arith_inst_", FileSuffix.FPARITH),
]


def file_suffix(file_name: str) -> FileSuffix:
    for marker, suffix in _SUFFIX_MARKERS:
        if marker in file_name:
            return suffix
    raise UnknownFileSuffix("unknown data file suffix", value=file_name, file=file_name)


def architecture_variable(file_name: str) -> str:
    """Architecture variable for a data file, ex. /HSX/haswellx_core_v20.json -> HASWELLX"""
    stem = Path(file_name).stem
    cut = stem.find("_core")
    if cut < 0:
        cut = stem.find("_uncore")
    if cut < 0:
        raise UnknownFileSuffix("data file stem has no _core or _uncore segment", value=file_name, file=file_name)
    return stem[:cut].upper().replace("-", "_")


@dataclass(frozen=True)
class MapfileEntry:
    signature: str
    version: str
    event_type: str


@dataclass(frozen=True)
class DataFileReference:
    file_name: str
    variable: str
    suffix: FileSuffix
    entries: tuple[MapfileEntry, ...]

    @property
    def uncore(self) -> bool:
        return self.suffix is FileSuffix.UNCORE

    def path(self, data_dir: Path) -> Path:
        # mapfile names are rooted at the data directory, ex. /HSW/Haswell_core_V20.json
        return data_dir / self.file_name.lstrip("/")


def _read_rows(mapfile: Path) -> pl.DataFrame:
    if not mapfile.is_file():
        raise MissingFile("mapfile does not exist", file=str(mapfile))
    try:
        rows = pl.read_csv(mapfile, infer_schema=False)
    except pl.exceptions.PolarsError as e:
        raise MalformedRow(f"can not read mapfile: {e}", file=str(mapfile)) from e
    if len(rows.columns) < MAPFILE_COLUMNS:
        raise MalformedRow(
            f"expected {MAPFILE_COLUMNS} columns, found {len(rows.columns)}",
            value=rows.columns,
            file=str(mapfile),
        )
    return rows


def load_mapfile(mapfile: Path | str) -> list[DataFileReference]:
    """Groups the in scope mapfile rows by the data file they reference.

    Files are returned in the order they first appear in the mapfile; matrix and
    fparith files are dropped.
    """
    if isinstance(mapfile, str):
        mapfile = Path(mapfile)
    rows = _read_rows(mapfile)
    grouped = dict[str, list[MapfileEntry]]()
    suffixes = dict[str, FileSuffix]()
    # line 1 is the header
    for line, row in enumerate(rows.iter_rows(), start=2):
        columns = row[:MAPFILE_COLUMNS]
        if any(column is None or not column.strip() for column in columns):
            raise MalformedRow(f"missing column on line {line}", value=row, file=str(mapfile))
        signature, version, file_name, event_type = (column.strip() for column in columns)
        suffix = file_suffix(file_name)
        if not suffix.in_scope():
            logger.debug("skipping %s file %s for %s", suffix.value, file_name, signature)
            continue
        suffixes[file_name] = suffix
        grouped.setdefault(file_name, []).append(
            MapfileEntry(signature=signature, version=version, event_type=event_type)
        )
    logger.info("mapfile %s references %d data files", mapfile, len(grouped))
    return [
        DataFileReference(
            file_name=file_name,
            variable=architecture_variable(file_name),
            suffix=suffixes[file_name],
            entries=tuple(entries),
        )
        for file_name, entries in grouped.items()
    ]


__all__ = [
    "architecture_variable",
    "file_suffix",
    "load_mapfile",
    "DataFileReference",
    "FileSuffix",
    "MapfileEntry",
]
