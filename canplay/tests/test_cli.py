"""
Tests for the command-line interface.
"""

import json

import pytest

from ..cli import main


@pytest.fixture
def scenario_file(tmp_path):
    scenario = {
        "table": {
            "players": [
                {"player_id": "alice", "name": "Alice"},
                {"player_id": "bob", "name": "Bob"},
            ],
            "cards": [
                {"card_id": "relic", "name": "Relic", "owner_id": "alice",
                 "types": ["Artifact"], "zone": "Battlefield"},
            ],
            "turn_player_id": "alice",
        },
        "card_id": "relic",
        "action": {"kind": "activated", "activating_player_id": "alice"},
        "params": {"PlayerTurn": "True"},
    }
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps(scenario))
    return path, scenario


class TestParseCommand:
    """Tests for `canplay parse`."""

    def test_parse(self, tmp_path, capsys):
        """Prints the parsed restriction set as JSON."""
        path = tmp_path / "params.json"
        path.write_text(json.dumps({"ActivationZone": "Graveyard"}))

        main(["parse", str(path)])

        out = capsys.readouterr().out
        assert '"zone": "Graveyard"' in out

    def test_parse_invalid(self, tmp_path, capsys):
        """Malformed parameters exit with status 1."""
        path = tmp_path / "params.json"
        path.write_text(json.dumps({"ActivationZone": "Moon"}))

        with pytest.raises(SystemExit) as exc_info:
            main(["parse", str(path)])
        assert exc_info.value.code == 1
        assert "Error" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        """A missing file exits with status 1."""
        with pytest.raises(SystemExit):
            main(["parse", str(tmp_path / "missing.json")])
        assert "File not found" in capsys.readouterr().out


class TestCheckCommand:
    """Tests for `canplay check`."""

    def test_legal(self, scenario_file, capsys):
        """A legal action prints Legal and exits normally."""
        path, _ = scenario_file
        main(["check", str(path)])
        assert capsys.readouterr().out.startswith("Legal")

    def test_not_legal(self, scenario_file, capsys):
        """A rejected action names the failing stage and exits with 1."""
        path, scenario = scenario_file
        scenario["table"]["turn_player_id"] = "bob"
        path.write_text(json.dumps(scenario))

        with pytest.raises(SystemExit) as exc_info:
            main(["check", str(path)])
        assert exc_info.value.code == 1
        assert "Not legal (timing)" in capsys.readouterr().out

    def test_json_output(self, scenario_file, capsys):
        """--json prints the full report."""
        path, _ = scenario_file
        main(["check", str(path), "--json"])
        body = json.loads(capsys.readouterr().out)
        assert body["legal"] is True
        assert body["stages"]["timing"] is True
