"""Read only perfmon event database.

Lookups are plain dictionary accesses over frozen descriptors built once when
the database is constructed or loaded.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Final, Mapping

import polars as pl
from perfmon_schema import EventDescriptor, architecture_column, signature_column

SIGNATURES_FILE: Final[str] = "signatures.parquet"
EVENTS_FILE: Final[str] = "events.parquet"


class EventDatabase:

    def __init__(
        self,
        *,
        signatures: Mapping[str, str],
        tables: Mapping[str, Mapping[str, EventDescriptor]],
    ):
        missing = {arch for arch in signatures.values() if arch not in tables}
        if missing:
            raise ValueError(f"signatures reference unknown architectures: {sorted(missing)}")
        self._signatures = MappingProxyType(dict(signatures))
        self._tables = MappingProxyType({
            arch: MappingProxyType(dict(events))
            for arch, events in tables.items()
        })

    @property
    def signatures(self) -> Mapping[str, str]:
        return self._signatures

    @property
    def tables(self) -> Mapping[str, Mapping[str, EventDescriptor]]:
        return self._tables

    @property
    def architectures(self) -> list[str]:
        return sorted(self._tables)

    def architecture(self, signature: str) -> str | None:
        return self._signatures.get(signature)

    def events(self, signature: str) -> Mapping[str, EventDescriptor] | None:
        arch = self._signatures.get(signature)
        if arch is None:
            return None
        return self._tables[arch]

    def get_event(self, signature: str, event_name: str) -> EventDescriptor | None:
        events = self.events(signature)
        if events is None:
            return None
        return events.get(event_name)

    def to_polars(self) -> tuple[pl.DataFrame, pl.DataFrame]:
        signatures = pl.DataFrame(
            {
                signature_column(): list(self._signatures.keys()),
                architecture_column(): list(self._signatures.values()),
            },
            schema={signature_column(): pl.String(), architecture_column(): pl.String()},
        )
        schema = pl.Schema({architecture_column(): pl.String(), **EventDescriptor.schema()})
        events = pl.DataFrame(
            [
                {architecture_column(): arch, **descriptor.to_row()}
                for arch, table in self._tables.items()
                for descriptor in table.values()
            ],
            schema=schema,
        )
        return signatures, events

    @classmethod
    def from_polars(cls, signatures: pl.DataFrame, events: pl.DataFrame) -> "EventDatabase":
        tables = dict[str, dict[str, EventDescriptor]]()
        for arch in signatures[architecture_column()].unique().to_list():
            tables[arch] = {}
        for row in events.iter_rows(named=True):
            descriptor = EventDescriptor.from_row(row)
            tables.setdefault(row[architecture_column()], {})[descriptor.event_name] = descriptor
        return EventDatabase(
            signatures=dict(zip(
                signatures[signature_column()].to_list(),
                signatures[architecture_column()].to_list(),
            )),
            tables=tables,
        )


def load_database(db_dir: Path | str) -> EventDatabase:
    if isinstance(db_dir, str):
        db_dir = Path(db_dir)
    return EventDatabase.from_polars(
        pl.read_parquet(db_dir / SIGNATURES_FILE),
        pl.read_parquet(db_dir / EVENTS_FILE),
    )


__all__ = [
    "load_database",
    "EventDatabase",
    "EVENTS_FILE",
    "SIGNATURES_FILE",
]
