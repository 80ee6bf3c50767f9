from __future__ import annotations

import json
from pathlib import Path

import pytest

from toast_store.__main__ import main


def _snapshots(out: str) -> list:
    return [json.loads(line) for line in out.splitlines() if line.strip()]


def test_cli_prints_each_snapshot(capsys: pytest.CaptureFixture[str]):
    assert main(["Saved:success", "Oops:destructive", "--capacity", "1"]) == 0
    snapshots = _snapshots(capsys.readouterr().out)
    assert len(snapshots) == 2
    assert [t["title"] for t in snapshots[-1]] == ["Oops"]
    assert snapshots[-1][0]["variant"] == "destructive"
    assert snapshots[-1][0]["open"] is True


def test_cli_dismiss_all_waits_for_removal(capsys: pytest.CaptureFixture[str]):
    assert main(["A", "B", "--dismiss-all", "--remove-delay-ms", "10", "--timeout", "5"]) == 0
    snapshots = _snapshots(capsys.readouterr().out)
    assert snapshots[2] == [
        {"id": snapshots[1][0]["id"], "title": "B", "description": None, "variant": "default", "open": False},
        {"id": snapshots[1][1]["id"], "title": "A", "description": None, "variant": "default", "open": False},
    ]
    assert snapshots[-1] == []


def test_cli_reads_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    fp = tmp_path / "toasts.yaml"
    fp.write_text("capacity: 2\n", encoding="utf-8")
    assert main(["1", "2", "3", "--config", str(fp)]) == 0
    snapshots = _snapshots(capsys.readouterr().out)
    assert [t["title"] for t in snapshots[-1]] == ["3", "2"]


def test_cli_rejects_bad_config(capsys: pytest.CaptureFixture[str]):
    assert main(["A", "--capacity", "0"]) == 2
    assert "invalid configuration" in capsys.readouterr().err
