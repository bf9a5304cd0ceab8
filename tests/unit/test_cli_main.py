"""Tests for bootstrap_token.cli.main — CLI commands via Click test runner."""
from __future__ import annotations

import json
import re
from pathlib import Path

import pytest
from click.testing import CliRunner

from bootstrap_token.cli.main import cli

TOKEN = "abcdef.0123456789abcdef"
TOKEN_RE = re.compile(r"[a-z0-9]{6}\.[a-z0-9]{16}")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def store_file(tmp_path: Path) -> Path:
    return tmp_path / "tokens.json"


def invoke(runner: CliRunner, store_file: Path, *args: str):  # type: ignore[no-untyped-def]
    return runner.invoke(cli, ["token", "--store-file", str(store_file), *args])


# ---------------------------------------------------------------------------
# Root CLI
# ---------------------------------------------------------------------------


class TestRootCLI:
    def test_help_exits_zero(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0

    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "bootstrap-token" in result.output

    def test_token_help_describes_format(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["token", "--help"])
        assert result.exit_code == 0
        assert "Manage bootstrap tokens" in result.output


# ---------------------------------------------------------------------------
# token generate
# ---------------------------------------------------------------------------


class TestGenerateCommand:
    def test_prints_token(self, runner: CliRunner, store_file: Path) -> None:
        result = invoke(runner, store_file, "generate")
        assert result.exit_code == 0
        assert TOKEN_RE.fullmatch(result.output.strip())
        assert not store_file.exists()


# ---------------------------------------------------------------------------
# token create
# ---------------------------------------------------------------------------


class TestCreateCommand:
    def test_create_generated_token(self, runner: CliRunner, store_file: Path) -> None:
        result = invoke(runner, store_file, "create")
        assert result.exit_code == 0
        assert TOKEN_RE.fullmatch(result.output.strip())
        assert store_file.exists()

    def test_create_given_token(self, runner: CliRunner, store_file: Path) -> None:
        result = invoke(runner, store_file, "create", TOKEN, "--description", "ci")
        assert result.exit_code == 0
        assert result.output.strip() == TOKEN
        [entry] = json.loads(store_file.read_text())
        assert entry["name"] == "bootstrap-token-abcdef"
        assert entry["type"] == "bootstrap.kubernetes.io/token"

    def test_create_duplicate_fails(self, runner: CliRunner, store_file: Path) -> None:
        invoke(runner, store_file, "create", TOKEN)
        result = invoke(runner, store_file, "create", TOKEN)
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_create_invalid_token_fails(self, runner: CliRunner, store_file: Path) -> None:
        result = invoke(runner, store_file, "create", "not-a-token")
        assert result.exit_code == 1
        assert not store_file.exists()

    def test_groups_without_authentication_fails(
        self, runner: CliRunner, store_file: Path
    ) -> None:
        result = invoke(runner, store_file, "create", "--usages", "signing")
        assert result.exit_code == 1
        assert "authentication" in result.output
        assert not store_file.exists()

    def test_signing_only_without_groups(self, runner: CliRunner, store_file: Path) -> None:
        result = invoke(runner, store_file, "create", "--usages", "signing", "--groups", "")
        assert result.exit_code == 0

    def test_invalid_ttl_is_usage_error(self, runner: CliRunner, store_file: Path) -> None:
        result = invoke(runner, store_file, "create", "--ttl", "forever")
        assert result.exit_code == 2

    def test_zero_ttl_never_expires(self, runner: CliRunner, store_file: Path) -> None:
        invoke(runner, store_file, "create", TOKEN, "--ttl", "0")
        [entry] = json.loads(store_file.read_text())
        assert "expiration" not in entry["data"]

    def test_dry_run_does_not_write(self, runner: CliRunner, store_file: Path) -> None:
        result = invoke(runner, store_file, "--dry-run", "create", TOKEN)
        assert result.exit_code == 0
        assert "Would create secret" in result.output
        assert not store_file.exists()

    def test_print_join_command(self, runner: CliRunner, store_file: Path) -> None:
        result = invoke(
            runner,
            store_file,
            "create",
            TOKEN,
            "--print-join-command",
            "--api-server",
            "10.0.0.1:6443",
        )
        assert result.exit_code == 0
        assert result.output.strip().startswith(f"kubeadm join 10.0.0.1:6443 --token {TOKEN}")

    def test_print_join_command_requires_api_server(
        self, runner: CliRunner, store_file: Path
    ) -> None:
        result = invoke(runner, store_file, "create", "--print-join-command")
        assert result.exit_code == 2

    def test_config_file_sets_namespace(
        self, runner: CliRunner, store_file: Path, tmp_path: Path
    ) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"namespace": "bootstrap"}))
        result = runner.invoke(
            cli,
            ["token", "--store-file", str(store_file), "--config", str(config), "create", TOKEN],
        )
        assert result.exit_code == 0
        [entry] = json.loads(store_file.read_text())
        assert entry["namespace"] == "bootstrap"

    def test_bad_config_file_fails(
        self, runner: CliRunner, store_file: Path, tmp_path: Path
    ) -> None:
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"namespace": 42}))
        result = runner.invoke(
            cli,
            ["token", "--store-file", str(store_file), "--config", str(config), "create"],
        )
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# token list
# ---------------------------------------------------------------------------


class TestListCommand:
    def test_text_output(self, runner: CliRunner, store_file: Path) -> None:
        invoke(runner, store_file, "create", TOKEN, "--ttl", "0", "--description", "ci")
        result = invoke(runner, store_file, "list", "--output", "text")
        assert result.exit_code == 0
        header, row = result.output.strip().splitlines()
        assert header == "TOKEN\tTTL\tEXPIRES\tUSAGES\tDESCRIPTION\tEXTRA GROUPS"
        assert row.split("\t")[:5] == [
            "abcdef.****************",
            "<forever>",
            "<never>",
            "authentication,signing",
            "ci",
        ]

    def test_list_never_prints_secret(self, runner: CliRunner, store_file: Path) -> None:
        invoke(runner, store_file, "create", TOKEN)
        for output in ("table", "text"):
            result = invoke(runner, store_file, "list", "--output", output)
            assert result.exit_code == 0
            assert "0123456789abcdef" not in result.output

    def test_table_output(self, runner: CliRunner, store_file: Path) -> None:
        invoke(runner, store_file, "create", TOKEN)
        result = invoke(runner, store_file, "list")
        assert result.exit_code == 0
        assert "TOKEN" in result.output

    def test_corrupt_record_is_warned_not_fatal(
        self, runner: CliRunner, store_file: Path
    ) -> None:
        invoke(runner, store_file, "create", TOKEN)
        entries = json.loads(store_file.read_text())
        entries.append(
            {
                "name": "bootstrap-token-broken",
                "namespace": "kube-system",
                "type": "bootstrap.kubernetes.io/token",
                "data": {},
            }
        )
        store_file.write_text(json.dumps(entries))
        result = invoke(runner, store_file, "list", "--output", "text")
        assert result.exit_code == 0
        assert "Warning" in result.output
        assert "abcdef.****************" in result.output


# ---------------------------------------------------------------------------
# token delete
# ---------------------------------------------------------------------------


class TestDeleteCommand:
    def test_delete_by_id(self, runner: CliRunner, store_file: Path) -> None:
        invoke(runner, store_file, "create", TOKEN)
        result = invoke(runner, store_file, "delete", "abcdef")
        assert result.exit_code == 0
        assert "bootstrap token 'abcdef' deleted" in result.output
        assert json.loads(store_file.read_text()) == []

    def test_delete_by_full_token(self, runner: CliRunner, store_file: Path) -> None:
        invoke(runner, store_file, "create", TOKEN)
        result = invoke(runner, store_file, "delete", TOKEN)
        assert result.exit_code == 0
        assert "0123456789abcdef" not in result.output

    def test_delete_without_arguments_is_usage_error(
        self, runner: CliRunner, store_file: Path
    ) -> None:
        result = invoke(runner, store_file, "delete")
        assert result.exit_code == 2

    def test_mixed_batch_reports_each_and_exits_nonzero(
        self, runner: CliRunner, store_file: Path
    ) -> None:
        invoke(runner, store_file, "create", "validi.0123456789abcdef")
        result = invoke(runner, store_file, "delete", "bad-format", "validi")
        assert result.exit_code == 1
        assert "didn't match pattern" in result.output
        assert "bootstrap token 'validi' deleted" in result.output

    def test_dry_run_delete_keeps_record(self, runner: CliRunner, store_file: Path) -> None:
        invoke(runner, store_file, "create", TOKEN)
        result = invoke(runner, store_file, "--dry-run", "delete", "abcdef")
        assert result.exit_code == 0
        assert "Would delete secret" in result.output
        assert len(json.loads(store_file.read_text())) == 1
