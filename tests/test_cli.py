"""Tests for nsdebug.cli - argument parsing and subcommands."""

import json
import os
import subprocess
import sys

import pytest

import nsdebug
from nsdebug.cli import _build_parser, _discover_commands, _extract_global_flags, main
from nsdebug.commands.humanize import convert
from nsdebug.humanize import InvalidFormatError


class TestGlobalFlagExtraction:
    """Global flags are pulled out wherever they appear."""

    def test_config_before_subcommand(self):
        global_args, remaining = _extract_global_flags(
            ["--config", "/tmp/d.json", "status"]
        )
        assert global_args.config == "/tmp/d.json"
        assert remaining == ["status"]

    def test_no_color_after_subcommand(self):
        global_args, remaining = _extract_global_flags(["status", "--no-color"])
        assert global_args.no_color is True
        assert remaining == ["status"]

    def test_defaults(self):
        global_args, remaining = _extract_global_flags([])
        assert global_args.config is None
        assert global_args.no_color is False
        assert remaining == []


class TestParser:

    def test_subcommands_registered(self):
        parser = _build_parser(_discover_commands())
        for argv in (["enable", "a"], ["disable"], ["status"], ["humanize", "1"]):
            assert hasattr(parser.parse_args(argv), "func")

    def test_no_args_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: nsdebug" in capsys.readouterr().out


class TestEnableDisable:

    def test_enable_writes_config(self, tmp_path, capsys):
        cfg = tmp_path / "dbg.json"
        assert main(["--config", str(cfg), "enable", "worker:*", "db:*"]) == 0
        assert json.loads(cfg.read_text()) == {"debug": "worker:*,db:*"}
        assert "[OK]" in capsys.readouterr().out

    def test_enable_empty_pattern_warns(self, tmp_path, capsys):
        cfg = tmp_path / "dbg.json"
        assert main(["enable", ",", "--config", str(cfg)]) == 0
        assert "[WARN]" in capsys.readouterr().out

    def test_enable_unwritable(self, tmp_path, capsys):
        """A directory as config path cannot be written; reported, not raised."""
        assert main(["--config", str(tmp_path), "enable", "a"]) == 1
        assert "ERROR" in capsys.readouterr().err

    def test_disable_clears(self, tmp_path, capsys):
        cfg = tmp_path / "dbg.json"
        cfg.write_text(json.dumps({"debug": "a:*", "other": 1}))
        assert main(["--config", str(cfg), "disable"]) == 0
        assert json.loads(cfg.read_text()) == {"other": 1}
        assert "Cleared 'a:*'" in capsys.readouterr().out

    def test_disable_nothing_stored(self, tmp_path, capsys):
        cfg = tmp_path / "dbg.json"
        assert main(["--config", str(cfg), "disable"]) == 0
        assert "No pattern stored" in capsys.readouterr().out

    def test_enable_keeps_unparsable_config(self, tmp_path, capsys):
        cfg = tmp_path / "dbg.json"
        cfg.write_text("{\"debug\": ")
        assert main(["--config", str(cfg), "enable", "a"]) == 1
        assert cfg.read_text() == "{\"debug\": "
        assert "Could not save pattern" in capsys.readouterr().err

    def test_disable_keeps_unparsable_config(self, tmp_path, capsys):
        cfg = tmp_path / "dbg.json"
        cfg.write_bytes(b"\xff\xfe garbage")
        assert main(["--config", str(cfg), "disable"]) == 1
        assert cfg.read_bytes() == b"\xff\xfe garbage"
        assert "ERROR" in capsys.readouterr().err


@pytest.mark.usefixtures("tmp_config_home", "isolated_cwd", "reset_default_registry")
class TestDefaultRegistryPicksUpCli:
    """What the CLI writes is what nsdebug.debug() loads."""

    def test_enable_then_debug(self, capsys):
        assert main(["enable", "x:*"]) == 0
        assert nsdebug.debug("x:a").enabled is True
        assert nsdebug.debug("y:a").enabled is False

    def test_status_matches_default_registry(self, capsys):
        main(["enable", "x:*,-x:db"])
        capsys.readouterr()
        main(["status", "x:a", "x:db"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[-2].split() == ["x:a", "enabled"]
        assert lines[-1].split() == ["x:db", "disabled"]
        assert nsdebug.enabled("x:a") is True
        assert nsdebug.enabled("x:db") is False

    def test_disable_then_debug(self, capsys):
        main(["enable", "x:*"])
        main(["disable"])
        assert nsdebug.debug("x:a").enabled is False


class TestStatus:

    def test_reports_namespaces(self, tmp_path, capsys):
        cfg = tmp_path / "dbg.json"
        cfg.write_text(json.dumps({"debug": "worker:*,-worker:db"}))
        assert main(["--config", str(cfg), "status", "worker:a", "worker:db"]) == 0
        out = capsys.readouterr().out
        assert "pattern: worker:*,-worker:db" in out
        assert "include: worker:*" in out
        assert "exclude: worker:db" in out
        lines = out.splitlines()
        assert lines[-2].split() == ["worker:a", "enabled"]
        assert lines[-1].split() == ["worker:db", "disabled"]

    def test_no_pattern(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "none.json"), "status"]) == 0
        assert "pattern: (none)" in capsys.readouterr().out

    def test_non_utf8_config(self, tmp_path, capsys):
        cfg = tmp_path / "bad.json"
        cfg.write_bytes(b"\xff\xfe garbage")
        assert main(["--config", str(cfg), "status", "a"]) == 0
        out = capsys.readouterr().out
        assert "pattern: (none)" in out
        assert out.splitlines()[-1].split() == ["a", "disabled"]

    def test_resolves_from_environment(self, tmp_config_home, isolated_cwd,
                                       monkeypatch, capsys):
        monkeypatch.setenv("DEBUG", "env:*")
        assert main(["status", "env:x"]) == 0
        out = capsys.readouterr().out
        assert "pattern: env:*" in out
        assert out.splitlines()[-1].split() == ["env:x", "enabled"]


class TestHumanize:

    def test_both_directions(self, capsys):
        assert main(["humanize", "1500", "2h", "90000"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "1500 = 1.5s", "2h = 7200000ms", "90000 = 1m",
        ]

    def test_invalid_value(self, capsys):
        assert main(["humanize", "5", "bogus"]) == 1
        captured = capsys.readouterr()
        assert "5 = 5ms" in captured.out
        assert "ERROR" in captured.err

    def test_convert_raises(self):
        with pytest.raises(InvalidFormatError):
            convert("soon")


@pytest.mark.slow
def test_version_subprocess():
    """The CLI module runs as a script."""
    result = subprocess.run(
        [sys.executable, "-m", "nsdebug.cli", "--version"],
        capture_output=True, text=True,
    )
    assert result.returncode == 0
    assert result.stdout.startswith("nsdebug ")


@pytest.mark.slow
def test_enable_reaches_fresh_process(tmp_config_home, isolated_cwd):
    """A new process sees the pattern saved by 'nsdebug enable'."""
    env = {k: v for k, v in os.environ.items() if k != "DEBUG"}
    env.update(HOME=str(tmp_config_home), USERPROFILE=str(tmp_config_home))

    def run(*args):
        return subprocess.run(
            [sys.executable, *args], capture_output=True, text=True,
            cwd=isolated_cwd, env=env,
        )

    assert run("-m", "nsdebug.cli", "enable", "x:*").returncode == 0
    result = run("-c", "import nsdebug; print(nsdebug.debug('x:a').enabled)")
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "True"
