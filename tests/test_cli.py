from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from finance_tracker.cli import app

SAMPLE = (
    "date,description,amount,type\n"
    "2024-01-15,Starbucks Coffee,4.85,expense\n"
    "2024-01-15,Salary Deposit,3200.00,income\n"
    "2024-01-16,Amazon Purchase,47.99,expense\n"
)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def sample_file(tmp_path: Path) -> Path:
    p = tmp_path / "bank.csv"
    p.write_text(SAMPLE, encoding="utf-8")
    return p


def test_sample_csv_to_stdout_and_file(runner: CliRunner, tmp_path: Path):
    res = runner.invoke(app, ["sample-csv"])
    assert res.exit_code == 0
    assert res.output.splitlines()[0] == "date,description,amount,type"

    out = tmp_path / "sample.csv"
    res = runner.invoke(app, ["sample-csv", "-o", str(out)])
    assert res.exit_code == 0
    assert "Wrote sample CSV" in res.output
    assert len(out.read_text(encoding="utf-8").splitlines()) == 6


def test_validate_csv(runner: CliRunner, sample_file: Path, tmp_path: Path):
    res = runner.invoke(app, ["validate-csv", str(sample_file)])
    assert res.exit_code == 0
    assert "CSV format looks valid" in res.output

    bad = tmp_path / "bad.csv"
    bad.write_text("when,what\n2024-01-01,x\n", encoding="utf-8")
    res = runner.invoke(app, ["validate-csv", str(bad)])
    assert res.exit_code == 1
    assert "Missing required columns" in res.output


def test_import_missing_file(runner: CliRunner, tmp_path: Path):
    res = runner.invoke(app, ["import-csv", str(tmp_path / "nope.csv")])
    assert res.exit_code == 1
    assert "Error: File not found" in res.output


def test_import_in_memory_reports_counts(runner: CliRunner, sample_file: Path):
    sample_file.write_text(SAMPLE + "yesterday,Broken,1.00,expense\n", encoding="utf-8")
    res = runner.invoke(app, ["import-csv", str(sample_file)])
    assert res.exit_code == 0
    assert "Imported 3 of 4 rows" in res.output
    assert "  Row 5:" in res.output


def test_import_json_output(runner: CliRunner, sample_file: Path):
    res = runner.invoke(app, ["import-csv", str(sample_file), "--json"])
    assert res.exit_code == 0
    payload = json.loads(res.output)
    assert payload["totalRows"] == 3
    assert payload["validRows"] == 3
    assert [t["categoryId"] for t in payload["transactions"]] == ["cat-1", "cat-5", "cat-4"]


def test_import_rejects_bad_delimiter(runner: CliRunner, sample_file: Path):
    res = runner.invoke(app, ["import-csv", str(sample_file), "--delimiter", ";;"])
    assert res.exit_code == 1
    assert "single character" in res.output


def test_init_db_requires_url(runner: CliRunner):
    res = runner.invoke(app, ["init-db"])
    assert res.exit_code == 1
    assert "DATABASE_URL is not set" in res.output


def test_report_rejects_unknown_range(runner: CliRunner):
    res = runner.invoke(app, ["report", "--range", "2weeks"])
    assert res.exit_code == 1
    assert "unknown time range" in res.output


def test_database_round_trip(runner: CliRunner, sample_file: Path, tmp_path: Path):
    url = f"sqlite+pysqlite:///{tmp_path / 'cli.db'}"

    res = runner.invoke(app, ["init-db", "--database-url", url])
    assert res.exit_code == 0, res.output
    assert "Database initialized" in res.output

    res = runner.invoke(app, ["import-csv", str(sample_file), "--database-url", url])
    assert res.exit_code == 0, res.output
    assert "Imported 3 of 3 rows" in res.output

    res = runner.invoke(app, ["summary", "--database-url", url])
    assert res.exit_code == 0, res.output
    assert "Total balance:     3,147.16" in res.output
    assert "expenses:        52.84" in res.output

    res = runner.invoke(app, ["spending-by-category", "--database-url", url])
    assert res.exit_code == 0, res.output
    assert res.output.splitlines() == ["Food & Dining\t4.85", "Shopping\t47.99"]

    res = runner.invoke(app, ["report", "--range", "1year", "--json", "--database-url", url])
    assert res.exit_code == 0, res.output
    payload = json.loads(res.output)
    assert payload["timeRange"] == "1year"
    assert set(payload) >= {"monthlyTrends", "categoryBreakdown", "growthRate"}


def test_database_url_from_dotenv(runner: CliRunner, sample_file: Path, tmp_path: Path):
    url = f"sqlite+pysqlite:///{tmp_path / 'env.db'}"
    (tmp_path / ".env").write_text(f"DATABASE_URL={url}\n", encoding="utf-8")

    assert runner.invoke(app, ["init-db"]).exit_code == 0
    assert runner.invoke(app, ["import-csv", str(sample_file)]).exit_code == 0
    res = runner.invoke(app, ["summary", "--json"])
    assert res.exit_code == 0, res.output
    assert json.loads(res.output)["totalBalance"] == "3147.16"
