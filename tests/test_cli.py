# tests/test_cli.py
import json
from unittest.mock import patch

import pytest

from pitchsense.cli import build_parser, main
from pitchsense.profiles.types import DEFAULT_PROFILE


@pytest.fixture
def config_file(tmp_path):
    """Config whose profile slot lives under tmp_path."""
    slot_path = tmp_path / "slot" / "active_profile.json"
    path = tmp_path / "config.toml"
    path.write_text(f'[profiles]\nslot_path = "{slot_path.as_posix()}"\n')
    return path


@pytest.fixture
def slot_path(config_file):
    return config_file.parent / "slot" / "active_profile.json"


@pytest.fixture
def profile_file(tmp_path, profile_document):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps(profile_document(friction=0.9)))
    return path


@pytest.fixture
def invalid_profile_file(tmp_path, profile_document):
    path = tmp_path / "invalid.json"
    path.write_text(json.dumps(profile_document(friction=1.2, timeStep=0.0)))
    return path


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage: pitchsense" in capsys.readouterr().out


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])

    assert exc_info.value.code == 0
    assert "pitchsense" in capsys.readouterr().out


def test_parser_knows_every_command():
    parser = build_parser()
    for argv in (
        ["validate", "p.json"],
        ["activate", "p.json"],
        ["clear"],
        ["show"],
        ["benchmark"],
        ["simulate", "1", "2", "3", "4"],
        ["sample"],
        ["init-config"],
    ):
        assert parser.parse_args(argv).command == argv[0]


class TestValidateCommand:
    def test_valid_profile(self, config_file, profile_file, capsys):
        exit_code = main(["--config", str(config_file), "validate", str(profile_file)])

        assert exit_code == 0
        assert "valid" in capsys.readouterr().out

    def test_invalid_profile_lists_errors(self, config_file, invalid_profile_file, capsys):
        exit_code = main(["--config", str(config_file), "validate", str(invalid_profile_file)])

        assert exit_code == 1
        out = capsys.readouterr().out
        assert "error(s)" in out
        assert "friction" in out

    def test_json_output(self, config_file, invalid_profile_file, capsys):
        exit_code = main(
            ["--config", str(config_file), "validate", str(invalid_profile_file), "--json"]
        )

        assert exit_code == 1
        result = json.loads(capsys.readouterr().out)
        assert result["valid"] is False
        assert len(result["errors"]) == 2

    def test_missing_file(self, config_file, tmp_path, capsys):
        exit_code = main(
            ["--config", str(config_file), "validate", str(tmp_path / "nope.json"), "--json"]
        )

        assert exit_code == 1
        result = json.loads(capsys.readouterr().out)
        assert result["status"] == "error"
        assert result["error"]["type"] == "ProfileFileError"

    def test_malformed_json(self, config_file, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        exit_code = main(["--config", str(config_file), "validate", str(path)])

        assert exit_code == 1
        assert "invalid JSON" in capsys.readouterr().err


class TestActivateCommands:
    def test_activate_show_clear(self, config_file, slot_path, profile_file, capsys):
        assert main(["--config", str(config_file), "activate", str(profile_file)]) == 0
        assert "Activated 'Test Physics' v1.0.0" in capsys.readouterr().out
        assert slot_path.exists()

        assert main(["--config", str(config_file), "show", "--json"]) == 0
        shown = json.loads(capsys.readouterr().out)
        assert shown["name"] == "Test Physics"
        assert shown["custom"] is True

        assert main(["--config", str(config_file), "clear"]) == 0
        assert not slot_path.exists()

        assert main(["--config", str(config_file), "show"]) == 0
        out = capsys.readouterr().out
        assert f"{DEFAULT_PROFILE.identity} by {DEFAULT_PROFILE.author} (default)" in out

    def test_invalid_profile_leaves_slot_untouched(
        self, config_file, slot_path, profile_file, invalid_profile_file, capsys
    ):
        main(["--config", str(config_file), "activate", str(profile_file)])
        before = slot_path.read_text()

        exit_code = main(["--config", str(config_file), "activate", str(invalid_profile_file)])

        assert exit_code == 1
        assert "Profile not activated" in capsys.readouterr().out
        assert slot_path.read_text() == before


class TestBenchmarkCommand:
    def test_default_only(self, config_file, capsys):
        exit_code = main(["--config", str(config_file), "benchmark", "--json"])

        assert exit_code == 0
        reports = json.loads(capsys.readouterr().out)
        assert [r["profile_name"] for r in reports] == [DEFAULT_PROFILE.name]
        assert reports[0]["total_tests"] > 0

    def test_candidate_file(self, config_file, profile_file, capsys):
        exit_code = main(["--config", str(config_file), "benchmark", str(profile_file)])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert DEFAULT_PROFILE.name in out
        assert "Test Physics" in out

    def test_invalid_candidate(self, config_file, invalid_profile_file, capsys):
        exit_code = main(["--config", str(config_file), "benchmark", str(invalid_profile_file)])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err


class TestSimulateCommand:
    def test_json_with_path(self, config_file, capsys):
        exit_code = main(
            ["--config", str(config_file), "simulate", "500", "300", "10", "0", "--path", "--json"]
        )

        assert exit_code == 0
        result = json.loads(capsys.readouterr().out)
        assert result["profile"] == DEFAULT_PROFILE.name
        assert result["will_exit_field"] is False
        assert result["points"] == len(result["path"])
        assert result["path"][0]["x"] == pytest.approx(509.4)
        assert result["landing_position"]["y"] == pytest.approx(300.0)

    def test_text_output(self, config_file, profile_file, capsys):
        exit_code = main(
            [
                "--config",
                str(config_file),
                "simulate",
                "990",
                "300",
                "30",
                "0",
                "--profile",
                str(profile_file),
            ]
        )

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "Landing:" in out
        assert "Reaches boundary: yes" in out


class TestSampleCommand:
    def test_prints_valid_profile(self, config_file, capsys):
        assert main(["--config", str(config_file), "sample"]) == 0

        document = json.loads(capsys.readouterr().out)
        assert document["name"] == "Enhanced Friction Model"
        assert document["customFriction"]["type"] == "quadratic"

    def test_written_sample_can_be_activated(self, config_file, slot_path, tmp_path, capsys):
        sample_path = tmp_path / "sample.json"

        assert main(["--config", str(config_file), "sample", "-o", str(sample_path)]) == 0
        assert main(["--config", str(config_file), "activate", str(sample_path)]) == 0

        assert json.loads(slot_path.read_text())["name"] == "Enhanced Friction Model"


class TestInitConfigCommand:
    def test_writes_template(self, tmp_path, capsys):
        config_path = tmp_path / "home" / "config.toml"

        with patch("pitchsense.cli.get_default_config_path", return_value=config_path):
            exit_code = main(["init-config"])

        assert exit_code == 0
        content = config_path.read_text()
        assert "[scheduler]" in content
        assert "[collaborator]" in content

    def test_refuses_to_overwrite(self, tmp_path, capsys):
        config_path = tmp_path / "config.toml"
        config_path.write_text("# mine\n")

        exit_code = main(["init-config", "--path", str(config_path)])

        assert exit_code == 1
        assert "already exists" in capsys.readouterr().err
        assert config_path.read_text() == "# mine\n"

        assert main(["init-config", "--path", str(config_path), "--force"]) == 0
        assert "[pitch]" in config_path.read_text()


def test_invalid_config_reports_error(tmp_path, capsys):
    config_path = tmp_path / "config.toml"
    config_path.write_text("[scheduler]\ncapture_capacity = 50\n")

    exit_code = main(["--config", str(config_path), "show"])

    assert exit_code == 1
    assert "capture_capacity" in capsys.readouterr().err


def test_default_config_path_used_when_present(tmp_path, capsys):
    config_path = tmp_path / "config.toml"
    config_path.write_text("[collaborator]\ntemperature = 3.0\n")

    with patch("pitchsense.cli.get_default_config_path", return_value=config_path):
        exit_code = main(["show"])

    assert exit_code == 1
    assert "temperature" in capsys.readouterr().err
