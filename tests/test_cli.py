import json

import pytest

from conftest import LOG_PREFIX
from perfmet.cli import build_parser, main


def run(logs_dir, baselines_dir, *args):
    return main(["--logs-dir", str(logs_dir), "--baselines-dir", str(baselines_dir), *args])


def test_parser_reads_create_baseline_options():
    args = build_parser().parse_args(
        ["create-baseline", LOG_PREFIX, "-e", "1000", "-l", "5", "-u", "3", "-i", "60000", "-n", "nightly"]
    )

    assert args.command == "create-baseline"
    assert args.log_prefix == LOG_PREFIX
    assert (args.entity_count, args.logs_per_entity) == (1000, 5)
    assert (args.upload_count, args.interval_ms) == (3, 60000)
    assert args.name == "nightly"


def test_create_list_and_show(full_logs, baselines_dir, capsys):
    assert run(full_logs, baselines_dir, "create-baseline", LOG_PREFIX, "-e", "100", "-l", "2") == 0

    output = capsys.readouterr().out
    assert "Baseline created successfully!" in output
    assert "Search Latency (avg): 4.50ms" in output
    assert "Errors: 3" in output
    saved = list(baselines_dir.glob(f"{LOG_PREFIX}-*.json"))
    assert len(saved) == 1

    assert run(full_logs, baselines_dir, "list-baselines") == 0
    output = capsys.readouterr().out
    assert "Found 1 baseline(s)" in output
    assert f"1. {LOG_PREFIX}" in output
    assert "Entities: 100, Logs per entity: 2" in output

    assert run(full_logs, baselines_dir, "show-baseline", LOG_PREFIX) == 0
    document = json.loads(capsys.readouterr().out)
    assert document["test_name"] == LOG_PREFIX
    assert document["test_config"] == {"entity_count": 100, "logs_per_entity": 2}


def test_create_with_custom_name(required_logs, baselines_dir):
    assert run(required_logs, baselines_dir, "create-baseline", LOG_PREFIX, "-n", "nightly") == 0

    saved = list(baselines_dir.glob("nightly-*.json"))
    assert len(saved) == 1
    assert json.loads(saved[0].read_text(encoding="utf-8"))["test_name"] == "nightly"


def test_list_without_baselines(logs_dir, baselines_dir, capsys):
    assert run(logs_dir, baselines_dir, "list-baselines") == 0

    assert "No baselines found." in capsys.readouterr().out


def test_list_reports_unreadable_baseline(logs_dir, baselines_dir, capsys):
    baselines_dir.mkdir(parents=True)
    (baselines_dir / "broken.json").write_text("{oops", encoding="utf-8")

    assert run(logs_dir, baselines_dir, "list-baselines") == 0

    assert "broken.json (error loading:" in capsys.readouterr().out


def test_create_fails_when_logs_are_missing(logs_dir, baselines_dir):
    assert run(logs_dir, baselines_dir, "create-baseline", LOG_PREFIX) == 1
    assert not baselines_dir.exists()


def test_show_exits_when_nothing_matches(logs_dir, baselines_dir):
    with pytest.raises(SystemExit) as excinfo:
        run(logs_dir, baselines_dir, "show-baseline", "missing")

    assert excinfo.value.code == 1


def test_database_backend(full_logs, baselines_dir, tmp_path, capsys):
    database_url = f"sqlite:///{tmp_path / 'baselines.db'}"

    assert run(full_logs, baselines_dir, "--database-url", database_url, "create-baseline", LOG_PREFIX) == 0
    capsys.readouterr()

    assert run(full_logs, baselines_dir, "--database-url", database_url, "list-baselines") == 0
    output = capsys.readouterr().out
    assert "Found 1 baseline(s)" in output
    assert not baselines_dir.exists()
