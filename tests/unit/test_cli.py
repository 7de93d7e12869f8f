"""Tests for the comfywire CLI."""

import json

from typer.testing import CliRunner

from comfywire.cli import app

runner = CliRunner()


def _write(path, payload):
    path.write_text(json.dumps(payload))
    return str(path)


def test_check_node_defs_reports_counts(tmp_path, make_node_def):
    path = _write(
        tmp_path / "object_info.json",
        {"KSampler": make_node_def(), "Broken": {"name": "Broken"}},
    )

    result = runner.invoke(app, ["check", "node-defs", path])
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "Node definitions: 1 accepted, 1 rejected" in result.stdout
    assert "Invalid NodeDef" in result.stdout

    strict = runner.invoke(app, ["check", "node-defs", path, "--strict"])
    assert strict.exit_code == 1


def test_check_queue(tmp_path, make_prompt):
    path = _write(
        tmp_path / "queue.json",
        {"queue_running": [make_prompt("run")], "queue_pending": [make_prompt("next", 1)]},
    )
    result = runner.invoke(app, ["check", "queue", path, "--strict"])
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "Running: 1\tPending: 1" in result.stdout
    assert "Queue items: 2 accepted, 0 rejected" in result.stdout


def test_check_history_lists_outcomes(tmp_path, make_prompt):
    path = _write(
        tmp_path / "history.json",
        {
            "p1": {
                "prompt": make_prompt("p1"),
                "outputs": {},
                "status": {"status_str": "error", "completed": True, "messages": []},
            }
        },
    )
    result = runner.invoke(app, ["check", "history", path])
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "p1\terror\t0 outputs" in result.stdout


def test_check_events_reads_json_lines(tmp_path):
    path = tmp_path / "ws.jsonl"
    path.write_text(
        "\n".join(
            [
                json.dumps({"type": "execution_start", "data": {"prompt_id": "p1", "timestamp": 1}}),
                "{not json",
                "",
                json.dumps({"type": "executing", "data": {"node": "3", "display_node": "3", "prompt_id": "p1"}}),
            ]
        )
    )
    result = runner.invoke(app, ["check", "events", str(path)])
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "Frames: 2 accepted, 1 rejected" in result.stdout
    assert "Line 2 is not valid JSON" in result.stdout


def test_check_settings_lists_unknown_keys(tmp_path):
    path = _write(tmp_path / "comfy.settings.json", {"Comfy.DevMode": True, "Other.Key": 1})
    result = runner.invoke(app, ["check", "settings", path])
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "Unrecognized keys kept: Other.Key" in result.stdout
    assert "Settings: 1 accepted, 0 rejected" in result.stdout


def test_missing_file_exits_with_error(tmp_path):
    result = runner.invoke(app, ["check", "queue", str(tmp_path / "absent.json")])
    assert result.exit_code == 1
    assert "File not found" in result.stdout
