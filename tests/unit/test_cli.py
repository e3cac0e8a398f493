"""Tests for the payslip CLI commands.

Invokes click commands with CliRunner against isolated config and data
directories.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from payslip.cli.__main__ import cli


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Set up isolated environment with config and data directories."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"

    config_dir.mkdir()
    data_dir.mkdir()

    monkeypatch.setenv("PAYSLIP_CONFIG_PATH", str(config_dir))

    settings = {"data_dir": str(data_dir)}
    (config_dir / "settings.json").write_text(json.dumps(settings))

    return {
        "config_dir": config_dir,
        "data_dir": data_dir,
        "records_dir": data_dir / "records",
    }


@pytest.fixture
def runner():
    return CliRunner()


class TestGenerate:

    def test_text_output(self, isolated_env, runner):
        result = runner.invoke(cli, ["generate", "Ren", "60000"])

        assert result.exit_code == 0, result.output
        assert 'Monthly Payslip for: "Ren"' in result.output
        assert "Gross Monthly Income: $5000.00" in result.output
        assert "Monthly Income Tax: $500.00" in result.output
        assert "Net Monthly Income: $4500.00" in result.output

    def test_json_output(self, isolated_env, runner):
        result = runner.invoke(cli, ["generate", "Ren", "60000", "--format", "json", "--no-save"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["employee_name"] == "Ren"
        assert data["gross_monthly_income"] == "5000.00"
        assert data["monthly_income_tax"] == "500.00"
        assert data["net_monthly_income"] == "4500.00"
        assert data["currency_code"] == "MYR"
        assert data["tax_strategy"] == "Progressive Tax Strategy"

    def test_saves_by_default(self, isolated_env, runner):
        runner.invoke(cli, ["generate", "Ren", "60000"])
        assert len(list(isolated_env["records_dir"].glob("*.json"))) == 1

    def test_no_save(self, isolated_env, runner):
        runner.invoke(cli, ["generate", "Ren", "60000", "--no-save"])
        assert list(isolated_env["records_dir"].glob("*.json")) == []

    def test_flat_rate(self, isolated_env, runner):
        result = runner.invoke(cli, ["generate", "Ren", "100000", "--flat-rate", "0.15", "--no-save"])
        assert result.exit_code == 0, result.output
        assert "Monthly Income Tax: $1250.00" in result.output

    def test_alternative_strategy(self, isolated_env, runner):
        result = runner.invoke(cli, ["generate", "Ren", "100000", "--strategy", "alternative",
                                     "--format", "json", "--no-save"])
        data = json.loads(result.output)
        assert data["monthly_income_tax"] == "1250.00"
        assert data["tax_strategy"] == "Alternative Progressive Tax Strategy"

    def test_brackets_file(self, isolated_env, runner, tmp_path):
        table = tmp_path / "table.yaml"
        table.write_text(yaml.safe_dump({
            "name": "Half Tax",
            "brackets": [{"min": 0, "rate": 0.5}],
        }))

        result = runner.invoke(cli, ["generate", "Ren", "12000", "--brackets", str(table),
                                     "--format", "json", "--no-save"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["monthly_income_tax"] == "500.00"
        assert data["tax_strategy"] == "Half Tax"

    def test_invalid_brackets_file(self, isolated_env, runner, tmp_path):
        table = tmp_path / "table.yaml"
        table.write_text(yaml.safe_dump({"brackets": []}))

        result = runner.invoke(cli, ["generate", "Ren", "12000", "--brackets", str(table)])
        assert result.exit_code == 1
        assert "Tax brackets cannot be empty" in result.output

    def test_invalid_flat_rate(self, isolated_env, runner):
        result = runner.invoke(cli, ["generate", "Ren", "12000", "--flat-rate", "1.5"])
        assert result.exit_code == 1
        assert "Flat tax rate must be between 0 and 1" in result.output

    def test_brackets_and_flat_rate_conflict(self, isolated_env, runner, tmp_path):
        table = tmp_path / "table.yaml"
        table.write_text(yaml.safe_dump({"brackets": [{"min": 0, "rate": 0.1}]}))
        result = runner.invoke(cli, ["generate", "Ren", "12000", "--brackets", str(table),
                                     "--flat-rate", "0.1"])
        assert result.exit_code == 2

    def test_zero_salary_rejected(self, isolated_env, runner):
        result = runner.invoke(cli, ["generate", "Ren", "0"])
        assert result.exit_code == 2
        assert "positive" in result.output

    @pytest.mark.parametrize("salary", ["inf", "nan"])
    def test_non_finite_salary_rejected(self, isolated_env, runner, salary):
        result = runner.invoke(cli, ["generate", "Ren", salary])
        assert result.exit_code == 2
        assert "positive" in result.output
        assert not isinstance(result.exception, (ValueError, OverflowError))

    @pytest.mark.parametrize("entry", ["{min: 0, max: .inf, rate: 0.1}", "{min: .nan, rate: 0.1}"])
    def test_non_finite_brackets_file(self, isolated_env, runner, tmp_path, entry):
        table = tmp_path / "table.yaml"
        table.write_text(f"brackets:\n  - {entry}\n")

        for args in (["brackets"], ["generate", "Ren", "12000", "--no-save"]):
            result = runner.invoke(cli, args + ["--brackets", str(table)])
            assert result.exit_code == 1
            assert isinstance(result.exception, SystemExit)
            assert "finite" in result.output

    def test_blank_name_rejected(self, isolated_env, runner):
        result = runner.invoke(cli, ["generate", "  ", "60000"])
        assert result.exit_code == 1
        assert "Employee name cannot be empty" in result.output

    def test_currency_option(self, isolated_env, runner):
        result = runner.invoke(cli, ["generate", "Ren", "60000", "--currency", "sgd",
                                     "--format", "json", "--no-save"])
        assert json.loads(result.output)["currency_code"] == "SGD"


class TestBrackets:

    def test_default_table(self, runner):
        result = runner.invoke(cli, ["brackets"])

        assert result.exit_code == 0, result.output
        assert "Progressive Tax Strategy" in result.output
        assert "180000.00" in result.output
        assert "40%" in result.output

    def test_json(self, runner):
        result = runner.invoke(cli, ["brackets", "--strategy", "alternative", "--format", "json"])
        data = json.loads(result.output)

        assert data["strategy"] == "Alternative Progressive Tax Strategy"
        assert [b["rate"] for b in data["brackets"]] == [0.05, 0.15, 0.25]
        assert data["brackets"][-1]["max_cents"] is None

    def test_flat(self, runner):
        result = runner.invoke(cli, ["brackets", "--flat-rate", "0.2", "--format", "json"])
        data = json.loads(result.output)
        assert data["brackets"] == [{"min_cents": 0, "max_cents": None, "rate": 0.2}]


class TestRecords:

    def test_list_empty(self, isolated_env, runner):
        result = runner.invoke(cli, ["records", "list"])
        assert result.exit_code == 0
        assert "No salary computations found." in result.output

    def test_list_and_count(self, isolated_env, runner):
        runner.invoke(cli, ["generate", "Ren", "60000"])
        runner.invoke(cli, ["generate", "Alex", "80150"])

        result = runner.invoke(cli, ["records", "list"])
        assert result.exit_code == 0, result.output
        assert "Ren" in result.output
        assert "Alex" in result.output
        assert "Total: 2 record(s)" in result.output

        count = runner.invoke(cli, ["records", "list", "--count"])
        assert count.output.strip() == "2"

    def test_list_by_employee(self, isolated_env, runner):
        runner.invoke(cli, ["generate", "Ren", "60000"])
        runner.invoke(cli, ["generate", "Alex", "80150"])

        result = runner.invoke(cli, ["records", "list", "--employee", "Alex", "--format", "json"])
        data = json.loads(result.output)
        assert [r["employee_name"] for r in data] == ["Alex"]
        assert data[0]["monthly_income_tax_cents"] == 83_708

    def test_list_date_filter(self, isolated_env, runner):
        runner.invoke(cli, ["generate", "Ren", "60000"])

        old = runner.invoke(cli, ["records", "list", "--until", "2000-01-01", "--count"])
        assert old.output.strip() == "0"

        recent = runner.invoke(cli, ["records", "list", "--since", "2000-01-01", "--count"])
        assert recent.output.strip() == "1"

    def test_list_bad_date(self, isolated_env, runner):
        result = runner.invoke(cli, ["records", "list", "--since", "yesterday"])
        assert result.exit_code == 2

    def test_show_and_remove(self, isolated_env, runner):
        runner.invoke(cli, ["generate", "Ren", "60000"])
        record_id = json.loads(runner.invoke(cli, ["records", "list", "--format", "json"]).output)[0]["id"]

        shown = runner.invoke(cli, ["records", "show", record_id])
        assert shown.exit_code == 0
        assert "Employee: Ren" in shown.output
        assert "Annual salary: 60000.00" in shown.output

        removed = runner.invoke(cli, ["records", "remove", record_id])
        assert removed.exit_code == 0

        missing = runner.invoke(cli, ["records", "show", record_id])
        assert missing.exit_code == 1
        assert "Record not found" in missing.output

    def test_clear(self, isolated_env, runner):
        runner.invoke(cli, ["generate", "Ren", "60000"])
        result = runner.invoke(cli, ["records", "clear", "--force"])
        assert "Deleted 1 record(s)." in result.output

    def test_clear_requires_confirmation(self, isolated_env, runner):
        runner.invoke(cli, ["generate", "Ren", "60000"])
        result = runner.invoke(cli, ["records", "clear"], input="n\n")
        assert result.exit_code == 1
        assert runner.invoke(cli, ["records", "list", "--count"]).output.strip() == "1"


class TestStats:

    def test_json(self, isolated_env, runner):
        runner.invoke(cli, ["generate", "Ren", "60000"])
        result = runner.invoke(cli, ["stats", "--format", "json"])

        data = json.loads(result.output)
        assert data["total_payslips_generated"] == 1
        assert data["current_tax_strategy"] == "Progressive Tax Strategy"
        assert data["supported_currencies"] == ["MYR", "SGD", "IDR"]


class TestSettings:

    def test_set_currency(self, isolated_env, runner):
        result = runner.invoke(cli, ["settings", "set", "default_currency", "idr"])
        assert result.exit_code == 0, result.output
        assert "Set default_currency: IDR" in result.output

        generated = runner.invoke(cli, ["generate", "Ren", "60000", "--format", "json", "--no-save"])
        assert json.loads(generated.output)["currency_code"] == "IDR"

    def test_set_invalid_currency(self, isolated_env, runner):
        result = runner.invoke(cli, ["settings", "set", "default_currency", "EURO"])
        assert result.exit_code == 1

    def test_unknown_key(self, isolated_env, runner):
        result = runner.invoke(cli, ["settings", "set", "colour", "blue"])
        assert result.exit_code == 2

    def test_show(self, isolated_env, runner):
        result = runner.invoke(cli, ["settings", "show"])
        assert result.exit_code == 0
        assert "default_currency: MYR" in result.output

    def test_data_dir(self, isolated_env, runner, tmp_path):
        target = tmp_path / "new_data"
        result = runner.invoke(cli, ["settings", "data-dir", str(target)])
        assert result.exit_code == 0, result.output
        assert target.is_dir()

        shown = runner.invoke(cli, ["settings", "data-dir"])
        assert f"Data directory: {target.resolve()} (custom)" in shown.output

        cleared = runner.invoke(cli, ["settings", "data-dir", "--clear"])
        assert "Cleared data_dir setting." in cleared.output

        again = runner.invoke(cli, ["settings", "data-dir", "--clear"])
        assert "data_dir was not set." in again.output

    def test_data_dir_rejects_file(self, isolated_env, runner, tmp_path):
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")

        result = runner.invoke(cli, ["settings", "data-dir", str(not_a_dir)])
        assert result.exit_code != 0
        assert json.loads((isolated_env["config_dir"] / "settings.json").read_text())["data_dir"] == \
            str(isolated_env["data_dir"])

    def test_records_remove_rejects_path(self, isolated_env, runner):
        victim = isolated_env["data_dir"] / "victim.json"
        victim.write_text("{}")

        result = runner.invoke(cli, ["records", "remove", "../victim"])
        assert result.exit_code == 1
        assert "Record not found" in result.output
        assert victim.exists()


class TestVersion:

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "payslip" in result.output
