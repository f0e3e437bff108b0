"""Tests for the depsync command line: arguments, configuration and phases."""

import json
import shutil
import subprocess
from unittest.mock import patch

import pytest

import depsync
from args import parse_args
from cli_config import ConfigError, apply_cli_overrides, apply_config, load_config
from common.sink import ReportSink
from constants import Constants, ExitCodes
from repository.git_history import (
    FileNotTrackedError,
    HistoryError,
    InvalidReferenceError,
    NotARepositoryError,
)


@pytest.fixture
def project(tmp_path, write_json):
    """A project with one bumpable and one major-crossing dependency."""
    write_json(tmp_path, "package.json", {
        "name": "app",
        "dependencies": {"foo": "^1.2.0", "bar": "^1.0.0"},
        "devDependencies": {"exact": "2.0.0"},
    })
    write_json(tmp_path, "package-lock.json", {
        "lockfileVersion": 3,
        "packages": {
            "": {"name": "app"},
            "node_modules/foo": {"version": "1.3.0"},
            "node_modules/bar": {"version": "2.0.0"},
            "node_modules/exact": {"version": "2.0.0"},
        },
    })
    return tmp_path


class TestArgs:
    """Test parse_args."""

    def test_defaults(self):
        """Test default argument values."""
        ns = parse_args([])
        assert ns.ref is None
        assert ns.DIRECTORY == "."
        assert ns.LOG_LEVEL == "INFO"
        assert ns.NO_COMPARE is False

    def test_ref_and_flags(self):
        """Test the positional reference and optional flags."""
        ns = parse_args(["develop", "-d", "web", "--no-compare", "--loglevel", "debug", "-q"])
        assert ns.ref == "develop"
        assert ns.DIRECTORY == "web"
        assert ns.NO_COMPARE is True
        assert ns.LOG_LEVEL == "DEBUG"
        assert ns.QUIET is True


class TestConfig:
    """Test configuration loading and precedence."""

    def test_yaml(self, tmp_path):
        """Test a YAML file with a depsync section."""
        path = tmp_path / "depsync.yml"
        path.write_text("depsync:\n  default_ref: develop\n  indent: 4\n  compare: false\n")
        apply_config(load_config(str(path)))
        assert Constants.DEFAULT_REF == "develop"
        assert Constants.JSON_INDENT == 4
        assert Constants.COMPARE_ENABLED is False

    def test_json_document(self, tmp_path):
        """Test a JSON config file without a section key."""
        path = tmp_path / "depsync.json"
        path.write_text(json.dumps({"lock_file": "npm-shrinkwrap.json"}))
        apply_config(load_config(str(path)))
        assert Constants.PACKAGE_LOCK_FILE == "npm-shrinkwrap.json"

    def test_no_config(self):
        """Test that no config path yields no overrides."""
        assert load_config(None) == {}

    def test_missing_file(self, tmp_path):
        """Test a config path that does not exist."""
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "nope.yml"))

    def test_invalid_yaml(self, tmp_path):
        """Test a config file that is not valid YAML."""
        path = tmp_path / "bad.yml"
        path.write_text("depsync: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_wrong_type(self):
        """Test that values of the wrong type are rejected."""
        with pytest.raises(ConfigError, match="indent"):
            apply_config({"indent": "two"})
        with pytest.raises(ConfigError):
            apply_config({"git_timeout": True})

    def test_unknown_key_ignored(self):
        """Test that unknown keys do not become Constants."""
        apply_config({"colour": "blue"})
        assert not hasattr(Constants, "colour")

    def test_cli_wins(self):
        """Test that CLI flags override config values."""
        apply_config({"manifest_file": "from-config.json", "compare": True})
        apply_cli_overrides(parse_args(["--manifest", "cli.json", "--no-compare"]))
        assert Constants.PACKAGE_JSON_FILE == "cli.json"
        assert Constants.COMPARE_ENABLED is False


class TestRun:
    """Test the sync and compare phases."""

    def test_sync_writes_manifest(self, project):
        """Test that the reconciled manifest is written with a success line."""
        sink = ReportSink()
        code = depsync.run(parse_args(["-d", str(project), "--no-compare"]), sink)
        assert code is ExitCodes.SUCCESS
        written = json.loads((project / "package.json").read_text())
        assert written["dependencies"] == {"foo": "^1.3.0", "bar": "^1.0.0"}
        assert written["devDependencies"] == {"exact": "2.0.0"}
        assert (project / "package.json").read_text().endswith("\n")
        assert [u.name for u in sink.updates] == ["foo"]
        assert sink.lines[-1] == "✅ Successfully updated package.json with latest installed versions"

    def test_missing_lockfile_is_fatal(self, project):
        """Test that a missing lockfile aborts before writing."""
        (project / "package-lock.json").unlink()
        before = (project / "package.json").read_text()
        sink = ReportSink()
        code = depsync.run(parse_args(["-d", str(project)]), sink)
        assert code is ExitCodes.FILE_ERROR
        assert sink.lines[-1].startswith("❌ Error updating package versions:")
        assert (project / "package.json").read_text() == before

    def test_malformed_manifest_is_fatal(self, project):
        """Test that invalid package.json JSON aborts the run."""
        (project / "package.json").write_text("{")
        sink = ReportSink()
        assert depsync.run(parse_args(["-d", str(project)]), sink) is ExitCodes.FILE_ERROR

    def test_non_object_grouping_kept_on_disk(self, project, write_json):
        """Test that a grouping that is not an object survives the write."""
        write_json(project, "package.json", {
            "name": "app",
            "dependencies": ["foo"],
            "peerDependencies": "x",
            "devDependencies": {"foo": "^1.0.0"},
        })
        sink = ReportSink()
        code = depsync.run(parse_args(["-d", str(project), "--no-compare"]), sink)
        assert code is ExitCodes.SUCCESS
        written = json.loads((project / "package.json").read_text())
        assert written["dependencies"] == ["foo"]
        assert written["peerDependencies"] == "x"
        assert written["devDependencies"] == {"foo": "^1.3.0"}
        assert len(sink.warnings) == 2

    def test_bad_config_is_fatal(self, project):
        """Test that a missing config file aborts the run."""
        sink = ReportSink()
        args = parse_args(["-d", str(project), "-c", str(project / "missing.yml")])
        assert depsync.run(args, sink) is ExitCodes.FILE_ERROR
        assert sink.lines[-1].startswith("❌ Error loading configuration:")

    def test_compare_reports_changes(self, project):
        """Test the categorized report against a previous manifest."""
        previous = {"dependencies": {"foo": "^1.2.0", "bar": "^0.9.0"}}
        sink = ReportSink()
        with patch("depsync.load_manifest_at_ref", return_value=previous) as load:
            code = depsync.run(parse_args(["release", "-d", str(project)]), sink)
        assert code is ExitCodes.SUCCESS
        assert load.call_args[0][0] == "release"
        assert "📜 Comparing with previous git version..." in sink.lines
        assert sink.lines[-5:] == [
            "Dependencies:",
            "  Major changes (1):",
            "    - bar: ^0.9.0 → ^1.0.0",
            "  Minor changes (1):",
            "    - foo: ^1.2.0 → ^1.3.0",
        ]

    def test_compare_defaults_to_main(self, project):
        """Test that the reference defaults to main."""
        with patch("depsync.load_manifest_at_ref", return_value={}) as load:
            depsync.run(parse_args(["-d", str(project)]), ReportSink())
        assert load.call_args[0][0] == "main"

    def test_compare_without_changes(self, project):
        """Test the line emitted when nothing changed since the reference."""
        sink = ReportSink()
        with patch("depsync.load_manifest_at_ref", return_value={"dependencies": {"foo": "^1.3.0"}}):
            depsync.run(parse_args(["-d", str(project)]), sink)
        assert sink.lines[-1] == "No dependency version changes since main"

    @pytest.mark.parametrize("error,expected", [
        (NotARepositoryError("fatal"), "⚠️ Not a git repository, can't compare with previous version"),
        (FileNotTrackedError("x"), "⚠️ package.json not tracked in git at 'main', can't compare with previous version"),
        (InvalidReferenceError("x"), "⚠️ Invalid git reference 'main', can't compare with previous version"),
        (HistoryError("boom"), "⚠️ Could not compare with git version: boom"),
    ])
    def test_history_failures_are_advisory(self, project, error, expected):
        """Test that history failures warn and keep a successful exit."""
        sink = ReportSink()
        with patch("depsync.load_manifest_at_ref", side_effect=error):
            code = depsync.run(parse_args(["-d", str(project)]), sink)
        assert code is ExitCodes.SUCCESS
        assert sink.warnings == [expected]
        assert json.loads((project / "package.json").read_text())["dependencies"]["foo"] == "^1.3.0"

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_non_utf8_history_is_advisory(self, project):
        """Test that an old manifest with invalid UTF-8 only produces a warning."""
        git = ["git", "-c", "user.name=t", "-c", "user.email=t@example.com", "-c", "commit.gpgsign=false"]
        current = (project / "package.json").read_bytes()
        (project / "package.json").write_bytes(b'{"name": "\xff\xfe", "dependencies": {}}\n')
        subprocess.run(git + ["init", "-q"], cwd=project, check=True, capture_output=True)
        subprocess.run(git + ["symbolic-ref", "HEAD", "refs/heads/main"], cwd=project, check=True, capture_output=True)
        subprocess.run(git + ["add", "package.json"], cwd=project, check=True, capture_output=True)
        subprocess.run(git + ["commit", "-q", "-m", "init"], cwd=project, check=True, capture_output=True)
        (project / "package.json").write_bytes(current)

        sink = ReportSink()
        code = depsync.run(parse_args(["-d", str(project)]), sink)
        assert code is ExitCodes.SUCCESS
        assert len(sink.warnings) == 1
        assert sink.warnings[0].startswith("⚠️ Could not compare with git version:")
        assert json.loads((project / "package.json").read_text())["dependencies"]["foo"] == "^1.3.0"

    def test_no_compare_skips_history(self, project):
        """Test that --no-compare never reads history."""
        with patch("depsync.load_manifest_at_ref") as load:
            depsync.run(parse_args(["-d", str(project), "--no-compare"]), ReportSink())
        load.assert_not_called()


class TestMain:
    """Test process exit codes."""

    def test_exit_success(self, project, monkeypatch):
        """Test exit status 0 after a successful sync."""
        monkeypatch.setattr(depsync, "configure_logging", lambda **kwargs: None)
        monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "INFO")
        with pytest.raises(SystemExit) as exc:
            depsync.main(["-d", str(project), "--no-compare"])
        assert exc.value.code == ExitCodes.SUCCESS.value

    def test_exit_failure(self, tmp_path, monkeypatch):
        """Test exit status 1 when package.json is missing."""
        monkeypatch.setattr(depsync, "configure_logging", lambda **kwargs: None)
        monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "INFO")
        with pytest.raises(SystemExit) as exc:
            depsync.main(["-d", str(tmp_path)])
        assert exc.value.code == ExitCodes.FILE_ERROR.value
