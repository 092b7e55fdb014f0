"""Tests for installment plan commands."""

from finkeep.cli.main import cli


def _invoke(cli_runner, temp_db, workspace_id, *args, **kwargs):
    return cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--workspace", str(workspace_id), *args],
        **kwargs,
    )


class TestInstallmentCommands:
    """Tests for installment plan commands."""

    def test_create_list_show_delete(self, cli_runner, temp_db, workspace_id, checking):
        result = _invoke(
            cli_runner, temp_db, workspace_id,
            "installment", "create", "Sofa", "3000",
            "--installments", "10", "--account", "Checking", "--start-date", "+1 month",
        )
        assert result.exit_code == 0
        assert "Created installment plan 1 (10 installments)" in result.output

        result = _invoke(cli_runner, temp_db, workspace_id, "installment", "list")
        assert result.exit_code == 0
        assert "0/10 paid" in result.output
        assert "remaining 3,000.00" in result.output

        result = _invoke(cli_runner, temp_db, workspace_id, "installment", "show", "1")
        assert result.exit_code == 0
        assert "Installment: 300.00" in result.output
        assert "#10" in result.output

        # Nothing is due yet, so nothing is restored
        result = _invoke(cli_runner, temp_db, workspace_id, "installment", "delete", "1")
        assert result.exit_code == 0
        assert "restored 0.00" in result.output

    def test_too_few_installments(self, cli_runner, temp_db, workspace_id, checking):
        result = _invoke(
            cli_runner, temp_db, workspace_id,
            "installment", "create", "Sofa", "3000", "--installments", "1", "--account", "Checking",
        )
        assert result.exit_code == 1
        assert "Installments must be between 2 and 48" in result.output
