import logging
from dataclasses import dataclass
from pathlib import Path

from perfmon_compiler.builder import BuildStats, DescriptorBuilder
from perfmon_compiler.emitter import emit_database
from perfmon_compiler.events import parse_event_file
from perfmon_compiler.mapfile import load_mapfile
from perfmon_db import EventDatabase
from pmudb_config import ConfigBase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompilerConfig(ConfigBase):
    data_dir: str = "x86data/perfmon_data"
    mapfile: str = "mapfile.csv"
    output_dir: str | None = "data/pmudb"

    def get_data_dir(self) -> Path:
        return Path(self.data_dir)

    def get_mapfile(self) -> Path:
        return self.get_data_dir() / self.mapfile

    def get_output_dir(self) -> Path | None:
        if self.output_dir is None:
            return None
        return Path(self.output_dir)


@dataclass(frozen=True)
class CompileResult:
    database: EventDatabase
    stats: BuildStats
    output_dir: Path | None


def compile_catalog(config: CompilerConfig) -> CompileResult:
    """Compiles the perfmon corpus described by config into an event database.

    Every data file is parsed before anything is written; the first error aborts
    the whole pass and nothing is emitted.
    """
    data_dir = config.get_data_dir()
    builder = DescriptorBuilder()
    for reference in load_mapfile(config.get_mapfile()):
        logger.info("adding %s from %s", reference.variable, reference.file_name)
        descriptors = parse_event_file(reference.path(data_dir), uncore=reference.uncore)
        builder.add_file(reference, descriptors)
    database = builder.build()
    stats = builder.stats()
    if stats.overwritten_events or stats.dropped_signatures:
        logger.warning(
            "%d event definitions overwritten, %d signature references dropped",
            stats.overwritten_events, stats.dropped_signatures,
        )

    output_dir = config.get_output_dir()
    if output_dir is not None:
        emit_database(database, output_dir)
    return CompileResult(database=database, stats=stats, output_dir=output_dir)


__all__ = [
    "compile_catalog",
    "CompileResult",
    "CompilerConfig",
]
