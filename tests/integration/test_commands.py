from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml

from lift_log.__main__ import app


def _invoke(runner, store_file: Path, *args: str, **kwargs):
    return runner.invoke(app, ["--store", str(store_file), *args], **kwargs)


def _add(runner, store_file: Path, exercise: str, weight: str, reps: str = "5", sets: str = "3") -> Dict[str, Any]:
    result = _invoke(
        runner,
        store_file,
        "--json",
        "add",
        "--exercise",
        exercise,
        "--weight",
        weight,
        "--reps",
        reps,
        "--sets",
        sets,
    )
    assert result.exit_code == 0, result.stdout
    return json.loads(result.stdout)["workout"]


def _stored(store_file: Path) -> List[Dict[str, Any]]:
    return json.loads(json.loads(store_file.read_text())["workoutData"])


def test_add_persists_entry(runner, store_file: Path) -> None:
    workout = _add(runner, store_file, " Bench Press ", "185-195", "8", "3")
    assert workout["exercise"] == "Bench Press"
    assert workout["weight"] == "185-195"
    assert workout["date"].endswith("Z")
    assert _stored(store_file)[0]["id"] == workout["id"]


def test_add_incomplete_form_is_rejected(runner, store_file: Path) -> None:
    result = _invoke(runner, store_file, "add", "--exercise", "Squat", "--weight", "225")
    assert result.exit_code == 1
    assert "Please fill in all fields" in result.stdout
    assert not store_file.exists()


def test_add_incomplete_form_json(runner, store_file: Path) -> None:
    result = _invoke(runner, store_file, "--json", "add", "--exercise", "Squat")
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["status"] == "rejected"
    assert "weight" in payload["error"]


def test_log_json_newest_first_with_stats(runner, store_file: Path) -> None:
    _add(runner, store_file, "Squat", "225", "5", "5")
    _add(runner, store_file, "Bench Press", "100-110", "8", "3")

    result = _invoke(runner, store_file, "--json", "log")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [row["exercise"] for row in payload["workouts"]] == ["Bench Press", "Squat"]
    assert payload["workouts"][0]["volume"] == 2400.0
    assert payload["stats"] == {
        "maxWeight": "225",
        "totalVolume": "8025",
        "avgWeight": "162.5",
        "totalWorkouts": 2,
    }


def test_log_filter_plain_output(runner, store_file: Path) -> None:
    _add(runner, store_file, "Squat", "225")
    _add(runner, store_file, "Bench Press", "185")

    result = _invoke(runner, store_file, "--plain", "log", "--exercise", "Squat")
    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert lines[0] == "id\tdate\texercise\tweight\treps\tsets\tvolume"
    assert len(lines) == 3
    assert "\tSquat\t225\t5\t3\t3375" in lines[1]
    assert lines[-1] == "total\t1"


def test_log_empty_message(runner, store_file: Path) -> None:
    result = _invoke(runner, store_file, "log")
    assert result.exit_code == 0
    assert "No workouts logged yet" in result.stdout


def test_delete_with_force_removes_entry(runner, store_file: Path) -> None:
    keep = _add(runner, store_file, "Squat", "225")
    drop = _add(runner, store_file, "Row", "135")

    result = _invoke(runner, store_file, "--json", "delete", str(drop["id"]), "--force")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"status": "deleted", "workoutId": drop["id"]}
    assert [item["id"] for item in _stored(store_file)] == [keep["id"]]


def test_delete_prompt_declined_keeps_entry(runner, store_file: Path) -> None:
    entry = _add(runner, store_file, "Squat", "225")
    result = _invoke(runner, store_file, "delete", str(entry["id"]), input="n\n")
    assert result.exit_code == 0
    assert len(_stored(store_file)) == 1


def test_delete_unknown_id_is_noop(runner, store_file: Path) -> None:
    _add(runner, store_file, "Squat", "225")
    result = _invoke(runner, store_file, "--plain", "delete", "42", "--force")
    assert result.exit_code == 0
    assert "status\tnot_found" in result.stdout
    assert len(_stored(store_file)) == 1


def test_stats_json_empty_is_null(runner, store_file: Path) -> None:
    result = _invoke(runner, store_file, "--json", "stats")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"filter": "all", "stats": None}


def test_stats_plain(runner, store_file: Path) -> None:
    _add(runner, store_file, "Squat", "225", "5", "5")
    result = _invoke(runner, store_file, "--plain", "stats")
    assert result.exit_code == 0
    assert "maxWeight\t225" in result.stdout
    assert "totalVolume\t5625" in result.stdout
    assert "avgWeight\t225.0" in result.stdout
    assert "totalWorkouts\t1" in result.stdout


def test_chart_json_groups_by_day(runner, store_file: Path, write_store) -> None:
    write_store(
        [
            {"id": 3, "exercise": "Squat", "weight": "210", "reps": "5", "sets": "5",
             "date": "2026-01-01T11:00:00.000Z", "displayDate": "1/1/2026"},
            {"id": 2, "exercise": "Squat", "weight": "200", "reps": "5", "sets": "5",
             "date": "2026-01-01T10:00:00.000Z", "displayDate": "1/1/2026"},
            {"id": 1, "exercise": "Bench", "weight": "150", "reps": "5", "sets": "5",
             "date": "2025-12-31T10:00:00.000Z", "displayDate": "12/31/2025"},
        ]
    )
    result = _invoke(runner, store_file, "--json", "chart")
    assert result.exit_code == 0
    points = json.loads(result.stdout)["points"]
    assert [(p["exercise"], p["weight"]) for p in points] == [("Bench", 150.0), ("Squat", 210.0)]

    limited = _invoke(runner, store_file, "--json", "chart", "--limit", "1")
    assert [p["id"] for p in json.loads(limited.stdout)["points"]] == [3]


def test_chart_empty_message(runner, store_file: Path) -> None:
    result = _invoke(runner, store_file, "chart")
    assert result.exit_code == 0
    assert "No data to display" in result.stdout


def test_exercises_sorted_unique(runner, store_file: Path) -> None:
    for name in ["Squat", "Bench Press", "Squat", "Deadlift"]:
        _add(runner, store_file, name, "100")
    result = _invoke(runner, store_file, "--plain", "exercises")
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["Bench Press", "Deadlift", "Squat"]


def test_motto_default_set_and_blank(runner, store_file: Path) -> None:
    result = _invoke(runner, store_file, "--plain", "motto", "show")
    assert result.stdout.strip() == "BRICK BY BRICK"

    result = _invoke(runner, store_file, "--plain", "motto", "set", "  LIGHT WEIGHT  ")
    assert result.stdout.strip() == "LIGHT WEIGHT"
    assert json.loads(store_file.read_text())["workoutMotto"] == "LIGHT WEIGHT"

    result = _invoke(runner, store_file, "--plain", "motto", "set", "   ")
    assert result.stdout.strip() == "BRICK BY BRICK"
    assert json.loads(store_file.read_text())["workoutMotto"] == "BRICK BY BRICK"


def test_motto_edit_prompts_with_current(runner, store_file: Path) -> None:
    _invoke(runner, store_file, "motto", "set", "FIRST")
    result = _invoke(runner, store_file, "--json", "motto", "edit", input="SECOND\n")
    assert result.exit_code == 0
    assert "[FIRST]" in result.stdout
    assert json.loads(store_file.read_text())["workoutMotto"] == "SECOND"


def test_motto_reset(runner, store_file: Path) -> None:
    _invoke(runner, store_file, "motto", "set", "FIRST")
    result = _invoke(runner, store_file, "--plain", "motto", "reset")
    assert result.stdout.strip() == "BRICK BY BRICK"


def test_export_yaml_and_csv_files(runner, store_file: Path, tmp_path: Path) -> None:
    _add(runner, store_file, "Squat", "225", "5", "5")

    yaml_path = tmp_path / "out" / "lifts.yaml"
    result = _invoke(runner, store_file, "export", "--format", "yaml", "-o", str(yaml_path))
    assert result.exit_code == 0
    exported = yaml.safe_load(yaml_path.read_text())
    assert exported["motto"] == "BRICK BY BRICK"
    assert exported["workouts"][0]["volume"] == 5625.0

    csv_path = tmp_path / "out" / "lifts.csv"
    result = _invoke(runner, store_file, "export", "--format", "csv", "-o", str(csv_path))
    assert result.exit_code == 0
    assert csv_path.read_text().splitlines()[1].endswith(",Squat,225,5,5,5625")


def test_export_json_stdout(runner, store_file: Path) -> None:
    _add(runner, store_file, "Squat", "225", "5", "5")
    result = _invoke(runner, store_file, "export")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["stats"]["totalWorkouts"] == 1


def test_export_rejects_unknown_format(runner, store_file: Path) -> None:
    result = _invoke(runner, store_file, "export", "--format", "xml")
    assert result.exit_code == 2


def test_corrupt_store_reports_warning(runner, store_file: Path) -> None:
    store_file.write_text(json.dumps({"workoutData": "{oops"}))
    result = _invoke(runner, store_file, "--plain", "log")
    assert result.exit_code == 1
    assert "warning\t" in result.stdout
    assert "on_corrupt" in result.stdout


def test_corrupt_store_reset_policy(runner, store_file: Path, tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text('[storage]\non_corrupt = "reset"\n')
    store_file.write_text(json.dumps({"workoutData": "{oops"}))

    result = _invoke(runner, store_file, "--config", str(config), "--plain", "log")
    assert result.exit_code == 0
    assert "total\t0" in result.stdout


def test_invalid_config_exits_2(runner, store_file: Path, tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text("[chart]\nmax_points = 0\n")
    result = _invoke(runner, store_file, "--config", str(config), "log")
    assert result.exit_code == 2
    assert "Config error" in result.stdout


def test_config_show_and_init(runner, store_file: Path, tmp_path: Path) -> None:
    config = tmp_path / "cfg" / "config.toml"
    result = _invoke(runner, store_file, "--config", str(config), "--json", "config", "show")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["store_path"] == str(store_file.resolve())
    assert payload["config"]["chart"]["max_points"] == 10

    result = _invoke(runner, store_file, "--config", str(config), "config", "init")
    assert result.exit_code == 0
    assert "max_points = 10" in config.read_text()

    result = _invoke(runner, store_file, "--config", str(config), "config", "init")
    assert result.exit_code == 1


def test_non_utf8_store_reports_warning(runner, store_file: Path) -> None:
    store_file.write_bytes(b'{"workoutData": "\xff\xfe"}')
    result = _invoke(runner, store_file, "--plain", "log")
    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "warning\t" in result.stdout
    assert "UTF-8" in result.stdout


def test_chart_keeps_full_weight_precision(runner, store_file: Path, write_store) -> None:
    write_store(
        [
            {"id": 1, "exercise": "Squat", "weight": "102.5625", "reps": "5", "sets": "5",
             "date": "2026-01-01T10:00:00.000Z", "displayDate": "1/1/2026"},
        ]
    )
    result = _invoke(runner, store_file, "--plain", "chart")
    assert result.exit_code == 0
    assert result.stdout.splitlines()[1] == "1/1/2026\tSquat\t102.5625"

    pretty = _invoke(runner, store_file, "chart")
    assert "102.5625" in pretty.stdout


def test_config_show_pretty_renders_toml(runner, store_file: Path) -> None:
    result = _invoke(runner, store_file, "config", "show")
    assert result.exit_code == 0
    assert "[chart]" in result.stdout
    assert "max_points = 10" in result.stdout
