"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from subscout.cli import cli, read_messages
from subscout.core.errors import InvalidInputError

MESSAGES = [
    {
        "id": "m1",
        "text": "Your Netflix subscription of $15.99 renewed on 2024-03-05",
        "headers": [{"name": "From", "value": "info@netflix.com"}],
    },
    {"id": "m2", "text": "Netflix newsletter: new shows"},
]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def messages_file(tmp_path: Path) -> Path:
    path = tmp_path / "messages.json"
    path.write_text(json.dumps(MESSAGES))
    return path


class TestReadMessages:
    """Tests for read_messages()."""

    def test_json_array(self, messages_file: Path) -> None:
        assert read_messages(messages_file) == MESSAGES

    def test_json_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "messages.jsonl"
        path.write_text("\n".join(json.dumps(m) for m in MESSAGES) + "\n\n")
        assert read_messages(path) == MESSAGES

    def test_bad_json_line(self, tmp_path: Path) -> None:
        path = tmp_path / "messages.jsonl"
        path.write_text('{"id": "m1"}\n{broken\n')
        with pytest.raises(InvalidInputError, match="line 2"):
            read_messages(path)


class TestExtractCommand:
    """Tests for `subscout extract`."""

    def test_table_output(
        self, runner: CliRunner, messages_file: Path, config_file: Path
    ) -> None:
        result = runner.invoke(cli, ["extract", str(messages_file), "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        assert "Found 1 subscription(s) in 2 message(s)" in result.output
        assert "netflix" in result.output
        assert "15.99 USD" in result.output
        assert "2024-04-04" in result.output

    def test_json_output_file(
        self, runner: CliRunner, messages_file: Path, config_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "out.json"
        result = runner.invoke(
            cli,
            [
                "extract",
                str(messages_file),
                "-c",
                str(config_file),
                "--format",
                "json",
                "-o",
                str(out),
            ],
        )
        assert result.exit_code == 0, result.output

        records = json.loads(out.read_text())
        assert len(records) == 1
        assert records[0]["provider"] == "netflix"
        assert records[0]["amount"] == 15.99
        assert records[0]["start_date"] == "2024-03-05"
        assert records[0]["next_billing_date"] == "2024-04-04"
        assert records[0]["evidence"]["source_message_id"] == "m1"

    def test_brand_option_without_config(
        self,
        runner: CliRunner,
        messages_file: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("SUBSCOUT_CONFIG_PATH", str(tmp_path / "absent.yaml"))
        result = runner.invoke(cli, ["extract", str(messages_file), "--brand", "Netflix"])
        assert result.exit_code == 0, result.output
        assert "Found 1 subscription(s)" in result.output

    def test_warns_without_brands(
        self,
        runner: CliRunner,
        messages_file: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("SUBSCOUT_CONFIG_PATH", str(tmp_path / "absent.yaml"))
        result = runner.invoke(cli, ["extract", str(messages_file)])
        assert result.exit_code == 0, result.output
        assert "No brands configured" in result.output
        assert "Found 0 subscription(s)" in result.output

    def test_missing_explicit_config(
        self, runner: CliRunner, messages_file: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            cli, ["extract", str(messages_file), "-c", str(tmp_path / "nope.yaml")]
        )
        assert result.exit_code == 1
        assert "Config error" in result.output

    def test_invalid_message(self, runner: CliRunner, tmp_path: Path, config_file: Path) -> None:
        path = tmp_path / "messages.json"
        path.write_text(json.dumps([{"text": "no id"}]))
        result = runner.invoke(cli, ["extract", str(path), "-c", str(config_file)])
        assert result.exit_code == 1
        assert "Input error" in result.output

    def test_output_file_requires_json(
        self, runner: CliRunner, messages_file: Path, config_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "out.json"
        result = runner.invoke(
            cli, ["extract", str(messages_file), "-c", str(config_file), "-o", str(out)]
        )
        assert result.exit_code == 2
        assert "--format json" in result.output
        assert not out.exists()


class TestOtherCommands:
    """Tests for `validate-config` and `queries`."""

    def test_validate_config_valid(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["validate-config", "-c", str(config_file)])
        assert result.exit_code == 0
        assert "Configuration valid" in result.output

    def test_validate_config_invalid(self, runner: CliRunner, temp_config_dir: Path) -> None:
        path = temp_config_dir / "config.yaml"
        path.write_text("extraction:\n  max_workers: 0\n")
        result = runner.invoke(cli, ["validate-config", "-c", str(path)])
        assert result.exit_code == 1
        assert "Validation error" in result.output

    def test_queries(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["queries", "-c", str(config_file), "--days", "30"])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert len(lines) == 2
        assert lines[0].endswith('(subject:netflix OR from:netflix OR "netflix")')
        assert lines[1].startswith("after:")
