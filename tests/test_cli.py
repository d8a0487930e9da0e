"""
Tests for the CLI — status and config commands end to end

Runs main() in-process against a snapshot file and a file catalog, so no
server is needed.
"""

import json

import pytest
import yaml

from lspstatus.cli import main
from lspstatus.commands import get_registered_commands
from lspstatus.config import ConfigManager


SNAPSHOT = {
    "document": {
        "id_path": "analysis.ipynb",
        "language": "python",
        "foreign": [
            {"id_path": "analysis.ipynb/r-1", "language": "R"},
            {"id_path": "analysis.ipynb/jl-1", "language": "julia"},
        ],
    },
    "connections": {
        "analysis.ipynb": {"connected": True, "initialized": True},
        "analysis.ipynb/r-1": {"connected": True, "initialized": True},
        "analysis.ipynb/jl-1": {"connected": True},
    },
}

CATALOG = {
    "sessions": [
        {"spec": {"display_name": "pylsp", "languages": ["python"]}},
        {"spec": {"display_name": "r-languageserver", "languages": ["r"]}},
        {"spec": {"display_name": "texlab", "languages": ["latex"]}},
    ]
}


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Project dir with a snapshot and a catalog file; user config isolated."""
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", tmp_path / "home" / "config.yaml")
    monkeypatch.setenv("LSPSTATUS_SYMBOLS", "ascii")
    monkeypatch.delenv("LSPSTATUS_CATALOG_URL", raising=False)

    (tmp_path / "snapshot.yaml").write_text(yaml.dump(SNAPSHOT))
    (tmp_path / "sessions.json").write_text(json.dumps(CATALOG))
    return tmp_path


def run(workspace, *args):
    return main(["--project", str(workspace), *args])


class TestStatusCommand:

    def test_json_output(self, workspace, capsys):
        code = run(workspace, "status", str(workspace / "snapshot.yaml"),
                   "--catalog", str(workspace / "sessions.json"), "--format", "json")

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["status"]["status"] == "initializing"
        assert data["short_message"] == "Partially initialized"
        assert data["long_message"] == (
            "Fully connected, but 1/3 virtual documents stuck uninitialized: analysis.ipynb/jl-1"
        )
        assert data["missing"] == ["julia"]
        assert [group["server"] for group in data["running"]] == ["pylsp", "r-languageserver"]
        assert [session["display_name"] for session in data["available"]] == ["texlab"]

    def test_text_output(self, workspace, capsys):
        code = run(workspace, "status", str(workspace / "snapshot.yaml"),
                   "--catalog", str(workspace / "sessions.json"))

        assert code == 0
        out = capsys.readouterr().out
        assert "[~] Partially initialized" in out
        assert "v Running (2)" in out
        assert "r (r-languageserver)" in out
        assert "> Available (1)" in out
        assert "texlab" not in out
        assert "  * julia" in out

    def test_full_expands_available(self, workspace, capsys):
        run(workspace, "status", str(workspace / "snapshot.yaml"),
            "--catalog", str(workspace / "sessions.json"), "--full")
        assert "texlab" in capsys.readouterr().out

    def test_unreachable_catalog_degrades(self, workspace, capsys):
        code = run(workspace, "status", str(workspace / "snapshot.yaml"),
                   "--catalog", str(workspace / "absent.json"), "--format", "json")

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["catalog_available"] is False
        assert data["running"] == []
        assert data["missing"] == []
        assert data["status"]["status"] == "initializing"

    def test_missing_snapshot(self, workspace, capsys):
        code = run(workspace, "status", str(workspace / "absent.yaml"),
                   "--catalog", str(workspace / "sessions.json"))

        assert code == 1
        assert capsys.readouterr().out.startswith("Error: Cannot read snapshot")

    def test_undecodable_snapshot(self, workspace, capsys):
        """A snapshot that is not UTF-8 prints an error instead of a traceback."""
        (workspace / "binary.yaml").write_bytes(b"document: {id_path: \xff, language: python}")

        code = run(workspace, "status", str(workspace / "binary.yaml"),
                   "--catalog", str(workspace / "sessions.json"))

        assert code == 1
        assert capsys.readouterr().out.startswith("Error: Cannot parse snapshot")

    def test_undecodable_catalog_degrades(self, workspace, capsys):
        (workspace / "binary.json").write_bytes(b'{"sessions": [{"display_name": "\xff"}]}')

        code = run(workspace, "status", str(workspace / "snapshot.yaml"),
                   "--catalog", str(workspace / "binary.json"), "--format", "json")

        assert code == 0
        assert json.loads(capsys.readouterr().out)["catalog_available"] is False

    def test_format_from_config(self, workspace, capsys):
        run(workspace, "config", "--set", "display.format", "json")
        capsys.readouterr()

        run(workspace, "status", str(workspace / "snapshot.yaml"),
            "--catalog", str(workspace / "sessions.json"))

        assert json.loads(capsys.readouterr().out)["icon"] == "refresh"


class TestConfigCommand:

    def test_show(self, workspace, capsys):
        assert run(workspace, "config") == 0
        assert "Configuration:" in capsys.readouterr().out

    def test_set(self, workspace, capsys):
        assert run(workspace, "config", "--set", "catalog.timeout", "2.5") == 0
        assert "Set catalog.timeout = 2.5 (project)" in capsys.readouterr().out

        saved = yaml.safe_load((workspace / ".lspstatus" / "config.yaml").read_text())
        assert saved["catalog"]["timeout"] == 2.5

    def test_set_user(self, workspace, capsys):
        assert run(workspace, "config", "--set", "display.symbols", "unicode", "--user") == 0
        assert (workspace / "home" / "config.yaml").exists()

    def test_set_invalid(self, workspace, capsys):
        assert run(workspace, "config", "--set", "display.format", "xml") == 1
        assert "Error: Unknown format" in capsys.readouterr().out


class TestMain:

    def test_no_command_prints_help(self, workspace, capsys):
        assert run(workspace) == 0
        assert "status" in capsys.readouterr().out

    def test_commands_registered(self, workspace):
        run(workspace)
        assert get_registered_commands() == ["status", "config"]
