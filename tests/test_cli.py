"""
Tests for the pmudb command line interface.
"""

import json

import pytest
import yaml
from click.testing import CliRunner
from corpus import HASWELL_FILES, HASWELL_ROWS, event_record, write_corpus

from cli import cli
from cli.config import PmudbConfig
from perfmon_compiler import MalformedNumeral


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def compiled(tmp_path, runner):
    data_dir = write_corpus(tmp_path / "perfmon_data", HASWELL_ROWS, HASWELL_FILES)
    db_dir = tmp_path / "db"
    result = runner.invoke(cli, ["compile", "-d", str(data_dir), "-o", str(db_dir)])
    assert result.exit_code == 0, result.output
    return db_dir


class TestCompileCommand:
    """Test pmudb compile"""

    def test_reports_totals(self, tmp_path, runner):
        data_dir = write_corpus(tmp_path / "perfmon_data", HASWELL_ROWS, HASWELL_FILES)
        result = runner.invoke(cli, ["compile", "-d", str(data_dir), "-o", str(tmp_path / "db")])
        assert result.exit_code == 0, result.output
        assert "3 signatures, 2 architectures, 4 events" in result.output

    def test_config_file(self, tmp_path, runner):
        data_dir = write_corpus(tmp_path / "perfmon_data", HASWELL_ROWS, HASWELL_FILES)
        config_file = tmp_path / "pmudb.yaml"
        config_file.write_text(yaml.dump({
            "compiler_config": {"data_dir": str(data_dir), "output_dir": str(tmp_path / "from_config")},
        }))
        result = runner.invoke(cli, ["compile", "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "from_config").is_dir()

    def test_compile_error_fails(self, tmp_path, runner):
        files = dict(HASWELL_FILES)
        files["/HSW/Haswell_core_V20.json"] = [event_record("BAD", umask="0xQQ")]
        data_dir = write_corpus(tmp_path / "perfmon_data", HASWELL_ROWS, files)
        result = runner.invoke(cli, ["compile", "-d", str(data_dir), "-o", str(tmp_path / "db")])
        assert result.exit_code == 1
        assert isinstance(result.exception, MalformedNumeral)
        assert not (tmp_path / "db").exists()


class TestQueryCommands:
    """Test pmudb lookup and pmudb list"""

    def test_list(self, compiled, runner):
        result = runner.invoke(cli, ["list", "-i", str(compiled)])
        assert result.exit_code == 0, result.output
        assert "GenuineIntel-6-3C: HASWELL (3 events)" in result.output
        assert "GenuineIntel-6-3F: HASWELLX (1 events)" in result.output

    def test_lookup_architecture(self, compiled, runner):
        result = runner.invoke(cli, ["lookup", "-i", str(compiled), "GenuineIntel-6-45"])
        assert result.exit_code == 0, result.output
        assert "GenuineIntel-6-45: HASWELL" in result.output
        assert "INST_RETIRED.ANY" in result.output

    def test_lookup_event(self, compiled, runner):
        result = runner.invoke(cli, ["lookup", "-i", str(compiled), "GenuineIntel-6-3F", "MEM_LOAD_UOPS_RETIRED.L1_HIT"])
        assert result.exit_code == 0, result.output
        assert "MEM_LOAD_UOPS_RETIRED.L1_HIT" in result.output

    def test_lookup_absent_event(self, compiled, runner):
        result = runner.invoke(cli, ["lookup", "-i", str(compiled), "GenuineIntel-6-3F", "NOT_AN_EVENT"])
        assert result.exit_code == 1
        assert "has no event NOT_AN_EVENT" in result.output

    def test_lookup_absent_signature(self, compiled, runner):
        result = runner.invoke(cli, ["lookup", "-i", str(compiled), "AuthenticAMD-23-1"])
        assert result.exit_code == 1
        assert "unknown architecture signature" in result.output


class TestDefaultsCommand:
    """Test pmudb defaults"""

    def test_writes_defaults(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["defaults"])
            assert result.exit_code == 0, result.output
            with open("defaults.yaml") as defaults:
                config = yaml.safe_load(defaults)
        assert config == {
            "compiler_config": {
                "data_dir": "x86data/perfmon_data",
                "mapfile": "mapfile.csv",
                "output_dir": "data/pmudb",
            },
        }
        assert PmudbConfig().merge(config) == PmudbConfig()


class TestConfigMerge:
    """Test merging config overrides"""

    def test_nested_override(self):
        config = PmudbConfig().merge({"compiler_config": {"mapfile": "other.csv"}})
        compiler_config = getattr(config, "compiler_config")
        assert compiler_config.mapfile == "other.csv"
        assert compiler_config.data_dir == "x86data/perfmon_data"

    def test_unknown_option(self):
        with pytest.raises(ValueError):
            PmudbConfig().merge({"compiler_config": {"mapfil": "other.csv"}})

    def test_empty_override(self):
        config = PmudbConfig()
        assert config.merge(None) is config
        assert config.merge({}) is config

    def test_merge_file(self, tmp_path):
        config_file = tmp_path / "pmudb.yaml"
        config_file.write_text(json.dumps({"compiler_config": {"output_dir": None}}))
        config = PmudbConfig().merge_file(config_file)
        assert getattr(config, "compiler_config").get_output_dir() is None
