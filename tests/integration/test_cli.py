"""Integration tests for the trialforge command-line interface."""

import json
from pathlib import Path

import pytest

from trialforge.cli import load_session, main as cli_main
from trialforge.config.schema import SessionConfig

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"
SESSION_FILE = str(FIXTURES / "session_config.yml")


class TestCLICommands:
    """Test CLI command functionality."""

    def test_load_session(self):
        """Test load_session reads the fixture file."""
        session = load_session(SESSION_FILE)
        assert len(session.blocks) == 2

    def test_load_session_missing_file(self):
        """Test load_session rejects non-existent files."""
        with pytest.raises(FileNotFoundError):
            load_session("nonexistent_config.yml")

    def test_no_command_prints_help(self, capsys):
        """Test running without a command exits with 1."""
        assert cli_main([]) == 1

    def test_list_components(self, capsys):
        """Test list-components prints registries and presets."""
        exit_code = cli_main(["list-components"])
        assert exit_code == 0
        captured = capsys.readouterr()
        assert "Available TrialForge Components" in captured.out
        assert "uniform" in captured.out
        assert "AABB" in captured.out
        assert "hirsch" in captured.out

    def test_validate_accepts_valid_config(self, capsys):
        """Test validate accepts the fixture session."""
        assert cli_main(["validate", SESSION_FILE]) == 0
        assert "valid" in capsys.readouterr().out

    def test_validate_rejects_missing_file(self):
        """Test validate exits with 1 for a missing file."""
        assert cli_main(["validate", "nonexistent_config.yml"]) == 1

    def test_validate_reports_problems(self, tmp_path, capsys):
        """Test validate prints each problem to stderr."""
        config_file = tmp_path / "bad.yml"
        config_file.write_text("block_id: bad\nnum_trials: 4\nparadigm: dual-task\n")
        assert cli_main(["validate", str(config_file)]) == 1
        assert "require task2" in capsys.readouterr().err

    def test_validate_null_nested_field(self, tmp_path, capsys):
        """Test validate accepts a null coherence as the default."""
        config_file = tmp_path / "null.yml"
        config_file.write_text("block_id: x\nnum_trials: 3\ncoherence: null\n")
        assert cli_main(["validate", str(config_file)]) == 0

    def test_generate_summary(self, capsys):
        """Test generate without --output prints a summary."""
        assert cli_main(["generate", SESSION_FILE]) == 0
        out = capsys.readouterr().out
        assert "Generated 11 trials in 2 blocks" in out

    def test_generate_json(self, tmp_path):
        """Test generate writes the JSON plan with the seed in metadata."""
        output_file = tmp_path / "plan.json"
        assert cli_main(["generate", SESSION_FILE, "--seed", "3", "--output", str(output_file)]) == 0
        document = json.loads(output_file.read_text())
        assert document["metadata"]["seed"] == 3
        assert document["metadata"]["name"] == "fixture_session"
        assert [len(b["trials"]) for b in document["blocks"]] == [5, 6]

    def test_generate_json_is_reproducible(self, tmp_path):
        """Test the config seed makes repeated runs identical."""
        paths = [tmp_path / "a.json", tmp_path / "b.json"]
        for path in paths:
            cli_main(["generate", SESSION_FILE, "--output", str(path)])
        blocks = [json.loads(p.read_text())["blocks"] for p in paths]
        assert blocks[0] == blocks[1]

    def test_generate_csv(self, tmp_path):
        """Test generate writes one CSV row per trial."""
        output_file = tmp_path / "trials.csv"
        assert cli_main(["generate", SESSION_FILE, "--output", str(output_file)]) == 0
        lines = output_file.read_text().splitlines()
        assert lines[0].startswith("block_order,block_id")
        assert len(lines) == 12

    def test_generate_rejects_invalid_config(self, tmp_path):
        """Test generate refuses a config with validation problems."""
        config_file = tmp_path / "bad.yml"
        config_file.write_text("block_id: bad\nnum_trials: 4\nsequence_type: ABAB\n")
        assert cli_main(["generate", str(config_file)]) == 1

    def test_generate_rejects_scalar_nested_field(self, tmp_path, capsys):
        """Test generate reports a scalar coherence as an error."""
        config_file = tmp_path / "scalar.yml"
        config_file.write_text("block_id: x\nnum_trials: 3\ncoherence: 0.8\n")
        assert cli_main(["generate", str(config_file)]) == 1
        assert "coherence must be a mapping" in capsys.readouterr().err

    def test_visualize_prints_schedule(self, capsys):
        """Test visualize prints the absolute windows of a PRP trial."""
        assert cli_main(["visualize", SESSION_FILE, "--block", "2", "--trial", "1"]) == 0
        out = capsys.readouterr().out
        assert "cue_2" in out

    def test_visualize_saves_figure(self, tmp_path):
        """Test visualize --save writes an image."""
        image = tmp_path / "trial.png"
        assert cli_main(["visualize", SESSION_FILE, "--block", "2", "--save", str(image)]) == 0
        assert image.exists()

    def test_visualize_block_out_of_range(self):
        """Test visualize rejects a block number past the session."""
        assert cli_main(["visualize", SESSION_FILE, "--block", "9"]) == 1

    def test_preset_to_file(self, tmp_path):
        """Test preset writes a loadable session YAML."""
        output_file = tmp_path / "hirsch.yml"
        assert cli_main(["preset", "hirsch", "--seed", "1", "--output", str(output_file)]) == 0
        session = SessionConfig.from_file(output_file)
        assert session.seed == 1
        assert len(session.blocks) == 4

    def test_preset_unknown(self):
        """Test an unknown preset exits with 1."""
        assert cli_main(["preset", "nonexistent"]) == 1
