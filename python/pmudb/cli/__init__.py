import logging
import sys
import traceback
from pathlib import Path
from typing import cast

import click
import perfmon_db
from cli.config import PmudbConfig
from click_default_group import DefaultGroup
from perfmon_compiler import CompilerConfig, PerfmonCompileError, compile_catalog
from pmudb_config import DEFAULT_CONFIG_FILE

logger = logging.getLogger("pmudb")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group(cls=DefaultGroup, default="compile", default_if_no_args=True)
def cli():
    """Compile and query perfmon event databases."""


@cli.command("compile")
@click.option(
    "-c",
    "--config-file",
    "config_file",
    default=None,
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-d",
    "--data-dir",
    "data_dir",
    default=None,
    help="Used to override the perfmon data directory from the config file.",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "-o",
    "--output-dir",
    "output_dir",
    default=None,
    help="Used to override the database output directory from the config file.",
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option(
    "-v",
    "--verbose",
    "verbose",
    default=False,
    is_flag=True,
    type=bool,
)
def cli_compile(config_file: Path | None, data_dir: Path | None, output_dir: Path | None, verbose: bool):
    """Compile mapfile.csv and its event files into a database."""
    _configure_logging(verbose)
    config = PmudbConfig()
    if config_file is not None:
        config = config.merge_file(config_file)
    overrides = dict[str, str]()
    if data_dir is not None:
        overrides["data_dir"] = str(data_dir)
    if output_dir is not None:
        overrides["output_dir"] = str(output_dir)
    config = config.merge({"compiler_config": overrides})
    compiler_config = cast(CompilerConfig, getattr(config, "compiler_config"))
    result = compile_catalog(compiler_config)
    click.echo(
        f"{result.stats.signatures} signatures, {result.stats.architectures} architectures, "
        f"{result.stats.events} events -> {result.output_dir}"
    )


@cli.command("lookup")
@click.option(
    "-i",
    "--input-dir",
    "input_dir",
    default=Path("data/pmudb"),
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.argument("signature")
@click.argument("event_name", required=False)
def cli_lookup(input_dir: Path, signature: str, event_name: str | None):
    """Look up the events of an architecture signature, or a single event."""
    database = perfmon_db.load_database(input_dir)
    events = database.events(signature)
    if events is None:
        raise click.ClickException(f"unknown architecture signature {signature}")
    if event_name is None:
        click.echo(f"{signature}: {database.architecture(signature)}")
        for name in sorted(events):
            click.echo(name)
        return
    descriptor = events.get(event_name)
    if descriptor is None:
        raise click.ClickException(f"{signature} has no event {event_name}")
    click.echo(descriptor)


@cli.command("list")
@click.option(
    "-i",
    "--input-dir",
    "input_dir",
    default=Path("data/pmudb"),
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
def cli_list(input_dir: Path):
    """List architecture signatures and the table they map to."""
    database = perfmon_db.load_database(input_dir)
    for signature, arch in sorted(database.signatures.items()):
        click.echo(f"{signature}: {arch} ({len(database.tables[arch])} events)")


@cli.command("defaults")
def cli_defaults():
    """Output default compile config into yaml file defaults.yaml."""
    DEFAULT_CONFIG_FILE.write_text(PmudbConfig().dump())


def main():
    try:
        cli.main(prog_name="pmudb", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.exceptions.Abort:
        sys.exit(1)
    except PerfmonCompileError as e:
        logger.error("compile failed: %s", e)
        sys.exit(1)
    except Exception:
        logger.error(traceback.format_exc())
        sys.exit(1)
