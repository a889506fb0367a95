import json

import pytest
from typer.testing import CliRunner

from guidedflow.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _configure_store(tmp_path, monkeypatch) -> None:
    # Each command builds its own runtime, so state has to live in a file.
    monkeypatch.setenv("GUIDEDFLOW_CONFIG", str(tmp_path / "absent.yaml"))
    monkeypatch.setenv("GUIDEDFLOW_DATABASE_URL", f"sqlite://{tmp_path / 'cli.db'}")
    monkeypatch.delenv("DATABASE_URL", raising=False)


def _start(workflow_id: str) -> str:
    result = runner.invoke(app, ["instance", "start", workflow_id])
    assert result.exit_code == 0, result.stdout
    return result.stdout.split("\t")[0].strip()


def test_arc_creation_end_to_end_via_cli():
    instance_id = _start("arc_creation_v1")

    result = runner.invoke(
        app,
        ["instance", "advance", instance_id, "--data", '{"prompt": "ship the thing"}'],
    )
    assert result.exit_code == 0, result.stdout
    assert "in_progress\tagent_generate_arc" in result.stdout

    result = runner.invoke(app, ["instance", "advance", instance_id])
    assert "in_progress\tconfirm_arc" in result.stdout

    result = runner.invoke(
        app,
        [
            "instance",
            "advance",
            instance_id,
            "--decision",
            "confirm",
            "--data",
            '{"adoptedArcId": "arc_123"}',
        ],
    )
    assert result.exit_code == 0, result.stdout
    assert "completed\tconfirm_arc" in result.stdout
    assert 'Outcome: {"prompt": "ship the thing", "adoptedArcId": "arc_123"}' in result.stdout

    shown = runner.invoke(app, ["instance", "show", instance_id])
    assert shown.exit_code == 0
    document = json.loads(shown.stdout)
    assert document["status"] == "completed"
    assert document["currentStepId"] == "confirm_arc"

    again = runner.invoke(app, ["instance", "advance", instance_id])
    assert again.exit_code == 1
    assert "accepts no transitions" in again.stdout

    cancel = runner.invoke(app, ["instance", "cancel", instance_id])
    assert cancel.exit_code == 1
    assert "already completed" in cancel.stdout


def test_instance_list_and_cancel():
    empty = runner.invoke(app, ["instance", "list"])
    assert "No instances found" in empty.stdout

    arc_id = _start("arc_creation_v1")
    goal_id = _start("goal_creation_v1")

    listed = runner.invoke(app, ["instance", "list"])
    assert arc_id in listed.stdout
    assert goal_id in listed.stdout

    filtered = runner.invoke(app, ["instance", "list", "--workflow", "goal_creation_v1"])
    assert goal_id in filtered.stdout
    assert arc_id not in filtered.stdout

    cancelled = runner.invoke(app, ["instance", "cancel", arc_id])
    assert cancelled.exit_code == 0
    assert "cancelled" in cancelled.stdout


def test_instance_errors():
    instance_id = _start("arc_creation_v1")

    bad_json = runner.invoke(app, ["instance", "advance", instance_id, "--data", "{oops"])
    assert bad_json.exit_code == 1
    assert "--data is not valid JSON" in bad_json.stdout

    not_object = runner.invoke(app, ["instance", "advance", instance_id, "--data", "[1]"])
    assert not_object.exit_code == 1

    bad_decision = runner.invoke(
        app, ["instance", "advance", instance_id, "--decision", "maybe"]
    )
    assert bad_decision.exit_code == 1

    missing = runner.invoke(app, ["instance", "show", "missing-id"])
    assert missing.exit_code == 1
    assert "not found" in missing.stdout

    unknown_workflow = runner.invoke(app, ["instance", "start", "missing_v1"])
    assert unknown_workflow.exit_code == 1
