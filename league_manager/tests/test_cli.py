"""
CLI end-to-end: new → rename → start → record → table, against a temp DB.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from league_manager.cli import main


@pytest.fixture
def run(tmp_path, capsys):
    db = str(tmp_path / "cli.db")

    def _run(*argv: str) -> tuple[int, str, str]:
        code = main(["--db", db, *argv])
        out, err = capsys.readouterr()
        return code, out, err

    return _run


def _new_league(run, teams: int = 3) -> str:
    code, out, _ = run("--json", "new", "--name", "Sunday", "--teams", str(teams))
    assert code == 0
    data = json.loads(out)
    assert data["league"]["step"] == "naming"
    assert [p["name"] for p in data["participants"]] == [f"Team {i}" for i in range(1, teams + 1)]
    return data["league"]["id"]


def test_full_season_flow(run):
    lid = _new_league(run)
    assert run("rename", lid, "0", "Rovers")[0] == 0

    code, out, _ = run("--json", "start", lid, "--no-shuffle")
    assert code == 0
    fixtures = json.loads(out)
    assert len(fixtures) == 6
    first = fixtures[0]
    assert first["played"] is False

    code, out, _ = run("--json", "record", lid, first["id"], "3", "1", "--away-yellow", "2")
    assert code == 0
    recorded = json.loads(out)
    assert (recorded["home_goals"], recorded["away_goals"]) == (3, 1)

    code, out, _ = run("--json", "table", lid)
    assert code == 0
    table = json.loads(out)
    assert [row["rank"] for row in table] == [1, 2, 3]
    assert table[0]["points"] == 3
    assert sum(row["played"] for row in table) == 2

    code, out, _ = run("table", lid)
    assert code == 0
    assert "Rovers" in out


def test_fixtures_filtered_by_round(run):
    lid = _new_league(run, teams=4)
    run("start", lid, "--seed", "9")
    code, out, _ = run("--json", "fixtures", lid, "--round", "4")
    assert code == 0
    assert {f["round"] for f in json.loads(out)} == {4}


def test_errors_reported_with_exit_code(run):
    lid = _new_league(run)
    code, _, err = run("record", lid, "0-0-first", "1", "0")
    assert code == 1
    assert err.startswith("error:")

    run("start", lid)
    code, _, err = run("record", lid, "0-0-first", "-1", "0")
    assert code == 1
    assert "error:" in err

    code, _, err = run("table", "missing-league")
    assert code == 1
    assert "League not found" in err


def test_list_and_reset(run):
    lid = _new_league(run)
    code, out, _ = run("--json", "list")
    assert [lg["id"] for lg in json.loads(out)] == [lid]
    code, out, _ = run("reset", lid)
    assert code == 0
    assert "setup" in out
