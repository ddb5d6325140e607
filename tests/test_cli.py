"""Tests for the CLI commands, run against a fake svn executable."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from svnscope.cli import app

runner = CliRunner()


@pytest.fixture
def svn(fake_svn, monkeypatch):
    monkeypatch.setenv("SVNSCOPE_SVN", str(fake_svn.executable))
    monkeypatch.delenv("SVNSCOPE_LOG_LEVEL", raising=False)
    return fake_svn


def _tree_status_xml(wc: Path) -> str:
    return (
        f'<status><target path="{wc}">'
        f'<entry path="{wc / "README.txt"}"><wc-status item="modified" revision="3" props="none">'
        f'<commit revision="3"><author>alice</author><date>2024-01-01T00:00:00Z</date></commit>'
        f"</wc-status></entry>"
        f'<entry path="{wc / "src"}"><wc-status item="conflicted" revision="3" props="none"/></entry>'
        f"</target></status>"
    )


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "svnscope" in result.output


class TestInit:
    def test_creates_config(self, tmp_path: Path):
        result = runner.invoke(app, ["init", str(tmp_path)])
        assert result.exit_code == 0
        assert (tmp_path / ".svnscope.toml").exists()

    def test_refuses_overwrite(self, tmp_path: Path):
        (tmp_path / ".svnscope.toml").write_text("existing")
        result = runner.invoke(app, ["init", str(tmp_path)])
        assert result.exit_code == 1
        assert (tmp_path / ".svnscope.toml").read_text() == "existing"


class TestStatus:
    def test_terminal(self, svn, working_copy: Path, sample_status_xml):
        svn.respond("status", stdout=sample_status_xml)
        result = runner.invoke(app, ["status", str(working_copy)])
        assert result.exit_code == 0
        assert "README.txt" in result.output
        assert "--depth=immediates" in svn.calls()[0]["args"]

    def test_json(self, svn, working_copy: Path, sample_status_xml):
        svn.respond("status", stdout=sample_status_xml)
        result = runner.invoke(app, ["status", str(working_copy), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["kind"] == "status"
        assert data["result"]["revision"] == 12

    def test_deep(self, svn, working_copy: Path, sample_status_xml):
        svn.respond("status", stdout=sample_status_xml)
        result = runner.invoke(app, ["status", str(working_copy), "--deep", "-f", "json"])
        assert result.exit_code == 0
        assert "--depth=infinity" in svn.calls()[0]["args"]
        assert len(json.loads(result.stdout)["result"]["entries"]) == 5

    def test_svn_failure_exit_1(self, svn, working_copy: Path):
        svn.respond("status", stderr="svn: E155007: '/x' is not a working copy", exit_code=1)
        result = runner.invoke(app, ["status", str(working_copy)])
        assert result.exit_code == 1
        assert "E155007" in result.output

    def test_invalid_format_exit_2(self, svn, working_copy: Path):
        result = runner.invoke(app, ["status", str(working_copy), "--format", "sarif"])
        assert result.exit_code == 2
        assert svn.calls() == []

    def test_bad_config_exit_2(self, svn, working_copy: Path):
        (working_copy / ".svnscope.toml").write_text("not [valid toml")
        result = runner.invoke(app, ["status", str(working_copy)])
        assert result.exit_code == 2
        assert "Config error" in result.output


class TestTree:
    def test_json(self, svn, working_copy: Path):
        svn.respond("status", stdout=_tree_status_xml(working_copy))
        result = runner.invoke(app, ["tree", str(working_copy), "--format", "json"])
        assert result.exit_code == 0
        files = {f["name"]: f for f in json.loads(result.stdout)["result"]}
        assert files["README.txt"]["status"]["status"] == "M"
        assert files["src"]["status"]["status"] == "C"
        assert files["lib"]["status"] is None
        assert ".svn" not in files

    def test_not_a_directory(self, svn, tmp_path: Path):
        result = runner.invoke(app, ["tree", str(tmp_path / "missing")])
        assert result.exit_code == 2


class TestHistoryCommands:
    def test_log_json(self, svn, working_copy: Path, sample_log_xml):
        svn.respond("log", stdout=sample_log_xml)
        result = runner.invoke(app, ["log", str(working_copy), "-l", "2", "-f", "json"])
        assert result.exit_code == 0
        assert [e["revision"] for e in json.loads(result.stdout)["result"]["entries"]] == [12, 11]
        args = svn.calls()[0]["args"]
        assert args[args.index("-l") + 1] == "2"

    def test_info(self, svn, working_copy: Path, sample_info_xml):
        svn.respond("info", stdout=sample_info_xml)
        result = runner.invoke(app, ["info", str(working_copy)])
        assert result.exit_code == 0
        assert "^/trunk" in result.output

    def test_diff(self, svn, working_copy: Path, sample_svn_diff):
        svn.respond("diff", stdout=sample_svn_diff)
        result = runner.invoke(app, ["diff", str(working_copy), "-c", "12"])
        assert result.exit_code == 0
        assert "value = compute()" in result.output

    def test_blame_json(self, svn, working_copy: Path, sample_blame_xml):
        svn.respond("blame", stdout=sample_blame_xml)
        svn.respond("cat", stdout="one\ntwo\nthree\n")
        target = str(working_copy / "README.txt")
        result = runner.invoke(app, ["blame", target, "-f", "json"])
        assert result.exit_code == 0
        lines = json.loads(result.stdout)["result"]["lines"]
        assert [l["content"] for l in lines] == ["one", "two", "three"]

    def test_blame_half_range_exit_2(self, svn, working_copy: Path):
        result = runner.invoke(app, ["blame", str(working_copy / "README.txt"), "--start", "3"])
        assert result.exit_code == 2

    def test_ls_json(self, svn, sample_list_xml):
        svn.respond("list", stdout=sample_list_xml)
        result = runner.invoke(app, ["ls", "https://svn.example.com/repo/trunk/", "-f", "json"])
        assert result.exit_code == 0
        entries = json.loads(result.stdout)["result"]["entries"]
        assert [e["kind"] for e in entries] == ["dir", "file"]

    def test_externals_json(self, svn, working_copy: Path, sample_externals_text):
        svn.respond("propget", stdout=sample_externals_text)
        result = runner.invoke(app, ["externals", str(working_copy), "-f", "json"])
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["result"]) == 3

    def test_missing_svn_exit_1(self, monkeypatch, working_copy: Path, tmp_path: Path):
        monkeypatch.setenv("SVNSCOPE_SVN", str(tmp_path / "no-svn-here"))
        result = runner.invoke(app, ["info", str(working_copy)])
        assert result.exit_code == 1
        assert "installed" in result.output
