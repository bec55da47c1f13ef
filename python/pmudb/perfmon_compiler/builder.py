import logging
from dataclasses import dataclass

from perfmon_compiler.mapfile import DataFileReference
from perfmon_db import EventDatabase
from perfmon_schema import EventDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildStats:
    architectures: int
    signatures: int
    events: int
    # event names replaced by a later file of the same architecture
    overwritten_events: int
    # mapfile references to a signature already claimed by another architecture
    dropped_signatures: int


class DescriptorBuilder:
    """Accumulates per architecture event tables and the signature grouping.

    Merge rules:
      * a signature belongs to the first file group that references it,
        later references from another architecture are dropped and counted
      * within one architecture the last descriptor added for an event name wins,
        replaced descriptors are counted
    """

    def __init__(self):
        self._signatures = dict[str, str]()
        self._tables = dict[str, dict[str, EventDescriptor]]()
        self._overwritten_events = 0
        self._dropped_signatures = 0

    def add_signatures(self, reference: DataFileReference) -> None:
        for entry in reference.entries:
            claimed = self._signatures.get(entry.signature)
            if claimed is None:
                self._signatures[entry.signature] = reference.variable
            elif claimed != reference.variable:
                self._dropped_signatures += 1
                logger.debug(
                    "signature %s already maps to %s, ignoring %s",
                    entry.signature, claimed, reference.file_name,
                )

    def add_events(self, reference: DataFileReference, descriptors: list[EventDescriptor]) -> None:
        table = self._tables.setdefault(reference.variable, {})
        for descriptor in descriptors:
            if descriptor.event_name in table:
                self._overwritten_events += 1
                logger.debug(
                    "%s: event %s from %s replaces an earlier definition",
                    reference.variable, descriptor.event_name, reference.file_name,
                )
            table[descriptor.event_name] = descriptor

    def add_file(self, reference: DataFileReference, descriptors: list[EventDescriptor]) -> None:
        self.add_signatures(reference)
        self.add_events(reference, descriptors)

    def stats(self) -> BuildStats:
        return BuildStats(
            architectures=len(self._tables),
            signatures=len(self._signatures),
            events=sum(len(table) for table in self._tables.values()),
            overwritten_events=self._overwritten_events,
            dropped_signatures=self._dropped_signatures,
        )

    def build(self) -> EventDatabase:
        return EventDatabase(signatures=self._signatures, tables=self._tables)


__all__ = [
    "BuildStats",
    "DescriptorBuilder",
]
