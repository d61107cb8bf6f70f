import argparse
import json

import pytest

from circlepairing import cli
from circlepairing.config import SchedulerConfig, load_configuration
from circlepairing.exceptions import ConfigurationFileException, InvalidConfigurationException
from circlepairing.ordering import BalancedParticipantOrderer
from circlepairing.scheduling import MirroredLegStrategy


def test_config_dict_round_trip():
    config = SchedulerConfig(
        legs=2,
        orderer="balanced",
        leg_strategy="mirrored",
        seed=99,
        no_repeat_pairings=True,
        min_rest_rounds=2,
        max_consecutive_home_away=3,
        protected_seeds=4,
        protection_period=0.25,
    )

    assert SchedulerConfig.from_dict(config.to_dict()) == config


def test_config_defaults_from_empty_dict():
    assert SchedulerConfig.from_dict({}) == SchedulerConfig()


def test_config_builds_scheduler():
    config = SchedulerConfig(
        orderer="balanced",
        leg_strategy="mirrored",
        seed=5,
        no_repeat_pairings=True,
        max_consecutive_home_away=3,
    )

    scheduler = config.build_scheduler()

    assert isinstance(scheduler.participant_orderer, BalancedParticipantOrderer)
    assert isinstance(scheduler.leg_strategy, MirroredLegStrategy)
    assert scheduler.seed == 5
    assert scheduler.constraints.get_names() == [
        "No Repeat Pairings",
        "Home/Away consecutive limit (3)",
    ]


@pytest.mark.parametrize(
    "data,key",
    [
        ({"legs": "two"}, "legs"),
        ({"seed": [1]}, "seed"),
        ({"min_rest_rounds": "often"}, "min_rest_rounds"),
        ({"protection_period": "half"}, "protection_period"),
    ],
)
def test_config_rejects_values_of_wrong_type(data, key):
    with pytest.raises(ConfigurationFileException) as exc_info:
        SchedulerConfig.from_dict(data)

    assert f"'{key}'" in str(exc_info.value)


def test_config_null_values_fall_back_to_defaults():
    config = SchedulerConfig.from_dict({"legs": None, "protected_seeds": None})

    assert config.legs == 1
    assert config.protected_seeds is None


def test_config_rejects_unknown_orderer():
    with pytest.raises(InvalidConfigurationException):
        SchedulerConfig(orderer="coin_flip").build_scheduler()


def test_load_configuration(tmp_path):
    path = tmp_path / "league.json"
    path.write_text(json.dumps({"legs": 2, "leg_strategy": "mirrored"}), encoding="utf-8")

    config = load_configuration(path)

    assert config.legs == 2
    assert config.leg_strategy == "mirrored"
    assert config.orderer == "static"


def test_load_configuration_without_path():
    assert load_configuration(None) is None


def test_load_configuration_missing_file(tmp_path):
    with pytest.raises(ConfigurationFileException, match="not found"):
        load_configuration(tmp_path / "absent.json")


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_load_configuration_invalid_content(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationFileException):
        load_configuration(path)


def test_parse_participant_forms():
    bare = cli.parse_participant("Ajax", 3)
    named = cli.parse_participant("aj:Ajax", 1)
    seeded = cli.parse_participant("aj:Ajax:2", 1)

    assert (bare.id, bare.label, bare.seed) == ("p3", "Ajax", None)
    assert (named.id, named.label) == ("aj", "Ajax")
    assert seeded.seed == 2
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_participant("aj:Ajax:top", 1)


def test_parse_participant_list_skips_blanks():
    participants = cli.parse_participant_list("Ajax, Benfica,,Celtic ")

    assert [p.id for p in participants] == ["p1", "p2", "p3"]
    assert [p.label for p in participants] == ["Ajax", "Benfica", "Celtic"]


def test_read_participants_file(tmp_path):
    path = tmp_path / "teams.txt"
    path.write_text("# league\nAjax\n\nbfc:Benfica:1\n", encoding="utf-8")

    participants = cli.read_participants_file(str(path))

    assert [p.id for p in participants] == ["p1", "bfc"]
    assert participants[1].seed == 1


def test_cli_prints_schedule(capsys):
    exit_code = cli.main(["schedule", "--participants", "Ajax,Benfica,Celtic,Dynamo"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "ROUND ROBIN SCHEDULE: 4 participants, 3 rounds" in output
    assert "Round 3:" in output
    assert "Total events: 6" in output


def test_cli_json_output(capsys):
    exit_code = cli.main(
        ["schedule", "--participants", "A,B,C", "--legs", "2", "--leg-strategy", "mirrored", "--json"]
    )

    data = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert data["metadata"]["legs"] == 2
    assert data["metadata"]["total_rounds"] == 6
    assert len(data["events"]) == 6


def test_cli_reports_incomplete_schedule(capsys):
    exit_code = cli.main(
        ["schedule", "--participants", "A,B,C,D", "--legs", "2", "--no-repeat"]
    )

    output = capsys.readouterr().out
    assert exit_code == 2
    assert "=== INCOMPLETE SCHEDULE DIAGNOSTIC REPORT ===" in output
    assert "Generated: 6 events (6 missing)" in output
    assert "No Repeat Pairings: 6 violations in rounds [4,5,6]" in output
    assert "=== SCHEDULING DIAGNOSTIC REPORT ===" in output
    assert "  - A vs B (Leg 2)" in output
    assert "(Leg 1)" not in output


def test_cli_rejects_single_participant(capsys):
    exit_code = cli.main(["schedule", "--participants", "Solo"])

    assert exit_code == 1
    assert "at least 2 participants" in capsys.readouterr().out


def test_cli_command_line_overrides_config(tmp_path, capsys):
    path = tmp_path / "league.json"
    path.write_text(json.dumps({"legs": 3, "orderer": "alternating"}), encoding="utf-8")

    exit_code = cli.main(
        ["schedule", "--participants", "A,B,C,D", "--config", str(path), "--legs", "1", "--json"]
    )

    data = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert data["metadata"]["legs"] == 1
    assert data["metadata"]["participant_orderer"] == "alternating"


def test_cli_missing_config_file(tmp_path, capsys):
    exit_code = cli.main(
        ["schedule", "--participants", "A,B", "--config", str(tmp_path / "absent.json")]
    )

    assert exit_code == 1
    assert "Configuration file not found" in capsys.readouterr().out


def test_cli_requires_participants(capsys):
    assert cli.main(["schedule"]) == 1


def test_cli_without_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "circle-pairing" in capsys.readouterr().out


def test_cli_reports_bad_config_value(tmp_path, capsys):
    path = tmp_path / "league.json"
    path.write_text(json.dumps({"legs": "two"}), encoding="utf-8")

    exit_code = cli.main(["schedule", "--participants", "a,b,c", "--config", str(path)])

    assert exit_code == 1
    assert "Invalid value for 'legs': 'two'" in capsys.readouterr().out


def test_cli_preflight_reports_impossible_constraints(capsys):
    exit_code = cli.main(
        ["schedule", "--participants", "A,B,C,D", "--legs", "2", "--no-repeat", "--preflight"]
    )

    output = capsys.readouterr().out
    assert exit_code == cli.EXIT_IMPOSSIBLE
    assert "=== IMPOSSIBLE CONSTRAINTS DIAGNOSTIC REPORT ===" in output
    assert "- NoRepeatPairings: No Repeat Pairings" in output
    assert "INCOMPLETE SCHEDULE" not in output


def test_cli_preflight_passes_feasible_constraints(capsys):
    exit_code = cli.main(
        ["schedule", "--participants", "A,B,C,D", "--no-repeat", "--preflight"]
    )

    assert exit_code == 0
    assert "Total events: 6" in capsys.readouterr().out


class _ScriptedSession:
    """Stands in for PromptSession and replays fixed input lines."""

    def __init__(self, lines):
        self._lines = iter(lines)

    def prompt(self, message):
        return next(self._lines)


def _script_shell(monkeypatch, lines):
    monkeypatch.setattr(cli, "PromptSession", lambda **kwargs: _ScriptedSession(lines))


def test_interactive_shell_survives_unbalanced_quote(monkeypatch, capsys):
    _script_shell(monkeypatch, ['schedule --participants "a', "exit"])

    exit_code = cli.run_interactive_mode()

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "Error: No closing quotation" in output


def test_interactive_shell_runs_schedule(monkeypatch, capsys):
    _script_shell(monkeypatch, ["", "hello", 'schedule --participants "A,B"', "quit"])

    assert cli.run_interactive_mode() == 0

    output = capsys.readouterr().out
    assert "Unknown command: hello" in output
    assert "Total events: 1" in output
