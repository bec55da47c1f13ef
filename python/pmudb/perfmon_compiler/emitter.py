import logging
import shutil
import tempfile
from pathlib import Path

from perfmon_db import EVENTS_FILE, SIGNATURES_FILE, EventDatabase

logger = logging.getLogger(__name__)


def emit_database(database: EventDatabase, output_dir: Path | str) -> Path:
    """Writes the database as parquet tables and swaps them into output_dir.

    The tables are written into a staging directory beside output_dir first, so
    a failed write never leaves a partial database behind.
    """
    if isinstance(output_dir, str):
        output_dir = Path(output_dir)
    output_dir.parent.mkdir(parents=True, exist_ok=True)
    signatures, events = database.to_polars()
    staging = Path(tempfile.mkdtemp(prefix=f".{output_dir.name}.", dir=output_dir.parent))
    retired = staging.with_name(f"{staging.name}.old")
    try:
        signatures.write_parquet(staging / SIGNATURES_FILE)
        events.write_parquet(staging / EVENTS_FILE)
        if output_dir.exists():
            output_dir.rename(retired)
        staging.rename(output_dir)
    except BaseException:
        # put the previous database back if it was already moved aside
        if retired.exists() and not output_dir.exists():
            retired.rename(output_dir)
        shutil.rmtree(staging, ignore_errors=True)
        raise
    if retired.exists():
        shutil.rmtree(retired)
    logger.info(
        "wrote %d signatures and %d events to %s",
        len(signatures), len(events), output_dir,
    )
    return output_dir


__all__ = [
    "emit_database",
]
