"""Command line interface for inspecting and driving guided workflows."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
import yaml

from .compiler import compile_spec
from .config import load_config
from .contracts import StepCompletion, WorkflowInstance
from .errors import GuidedFlowError, NotFoundError, WorkflowSpecError
from .registry import load_registry
from .runtime import WorkflowRuntime
from .spec import load_spec

app = typer.Typer(help="CLI for guided workflows")

# Command groups
workflow_app = typer.Typer(help="Commands for inspecting workflow definitions")
instance_app = typer.Typer(help="Commands for running workflow instances")

app.add_typer(workflow_app, name="workflow")
app.add_typer(instance_app, name="instance")


@app.callback()
def main() -> None:
    """Guided workflow CLI entry point."""
    config = load_config()
    logging.basicConfig(level=getattr(logging, config.log_level))


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _echo_instance(instance: WorkflowInstance) -> None:
    typer.echo(
        f"{instance.id}\t{instance.definition_id}\t{instance.status}\t"
        f"{instance.current_step_id or '-'}"
    )


@workflow_app.command("list")
def workflow_list() -> None:
    """
    List registered workflows.

    Includes the shipped workflows and any YAML specs named in ``spec_paths``.

    Example:
        guidedflow workflow list
        # Output: arc_creation_v1    v1    arcCreation    3 steps
    """
    registry = load_registry(load_config())
    for definition in registry:
        typer.echo(
            f"{definition.id}\tv{definition.version}\t"
            f"{definition.chat_mode or '-'}\t{len(definition.steps)} steps"
        )


@workflow_app.command("show")
def workflow_show(workflow_id: str) -> None:
    """
    Show the compiled step graph of a workflow.

    Example:
        guidedflow workflow show arc_creation_v1
        # Output: Workflow arc_creation_v1 v1: Arc creation
        #         - context_collect [collect_fields] -> agent_generate_arc
        #         - confirm_arc [confirm] confirm -> (end), edit -> agent_generate_arc
    """
    registry = load_registry(load_config())
    try:
        definition = registry.get(workflow_id)
    except NotFoundError as exc:
        _fail(str(exc))

    typer.echo(f"Workflow {definition.id} v{definition.version}: {definition.label}")
    for step in definition.steps:
        if step.type == "confirm":
            targets = (
                f"confirm -> {step.next_step_on_confirm_id or '(end)'}, "
                f"edit -> {step.next_step_on_edit_id or '(end)'}"
            )
        else:
            targets = f"-> {step.next_step_id or '(end)'}"
        typer.echo(f"- {step.id} [{step.type}] {targets}")


@workflow_app.command("compile")
def workflow_compile(
    spec_path: Path,
    as_json: bool = typer.Option(
        False, "--json", help="Print the compiled definition as JSON"
    ),
) -> None:
    """
    Compile a YAML workflow spec and report any problems.

    Example:
        guidedflow workflow compile specs/my_workflow.yaml
        guidedflow workflow compile specs/my_workflow.yaml --json
    """
    if not spec_path.exists():
        _fail("Specified path does not exist")
    try:
        definition = compile_spec(load_spec(spec_path))
    except WorkflowSpecError as exc:
        typer.secho(f"Invalid workflow spec {exc.workflow_id}:", fg=typer.colors.RED)
        for problem in exc.problems:
            typer.echo(f"  - {problem}")
        raise typer.Exit(code=1)
    except (ValueError, yaml.YAMLError) as exc:
        _fail(f"Could not read {spec_path}: {exc}")

    if as_json:
        typer.echo(definition.model_dump_json(by_alias=True, indent=2))
        return
    typer.echo(
        f"Compiled {definition.id} v{definition.version}: {len(definition.steps)} steps"
    )


@instance_app.command("start")
def instance_start(workflow_id: str) -> None:
    """
    Start a new instance of a workflow.

    Prints the instance id, workflow, status and current step.

    Example:
        guidedflow instance start arc_creation_v1
    """
    runtime = WorkflowRuntime.from_config()
    try:
        instance = asyncio.run(runtime.start(workflow_id))
    except GuidedFlowError as exc:
        _fail(str(exc))
    _echo_instance(instance)


@instance_app.command("advance")
def instance_advance(
    instance_id: str,
    data: Optional[str] = typer.Option(
        None, help="JSON object with the fields collected by the current step"
    ),
    decision: Optional[str] = typer.Option(
        None, help="Decision for confirm steps: confirm or edit"
    ),
) -> None:
    """
    Complete the current step of an instance.

    Example:
        guidedflow instance advance 1f0c... --data '{"prompt": "ship the thing"}'
        guidedflow instance advance 1f0c... --decision confirm
    """
    fields = {}
    if data:
        try:
            fields = json.loads(data)
        except json.JSONDecodeError as exc:
            _fail(f"--data is not valid JSON: {exc}")
        if not isinstance(fields, dict):
            _fail("--data must be a JSON object")
    if decision is not None and decision not in ("confirm", "edit"):
        _fail("--decision must be 'confirm' or 'edit'")

    runtime = WorkflowRuntime.from_config()
    completion = StepCompletion(fields=fields, decision=decision)
    try:
        instance = asyncio.run(runtime.advance(instance_id, completion))
    except GuidedFlowError as exc:
        _fail(str(exc))
    _echo_instance(instance)
    if instance.outcome is not None:
        typer.echo(f"Outcome: {json.dumps(instance.outcome, ensure_ascii=False)}")


@instance_app.command("cancel")
def instance_cancel(instance_id: str) -> None:
    """Cancel a running instance."""
    runtime = WorkflowRuntime.from_config()
    try:
        instance = asyncio.run(runtime.cancel(instance_id))
    except GuidedFlowError as exc:
        _fail(str(exc))
    _echo_instance(instance)


@instance_app.command("list")
def instance_list(
    workflow: Optional[str] = typer.Option(
        None, help="Only list instances of this workflow id"
    ),
) -> None:
    """
    List stored instances with their status and current step.

    Example:
        guidedflow instance list --workflow arc_creation_v1
    """
    runtime = WorkflowRuntime.from_config()
    instances = asyncio.run(runtime.repository.list_instances(workflow))
    if not instances:
        typer.echo("No instances found")
        return
    for instance in instances:
        _echo_instance(instance)


@instance_app.command("show")
def instance_show(instance_id: str) -> None:
    """Print the stored JSON document of an instance."""
    runtime = WorkflowRuntime.from_config()
    try:
        instance = asyncio.run(runtime.get(instance_id))
    except NotFoundError as exc:
        _fail(str(exc))
    typer.echo(instance.model_dump_json(by_alias=True, indent=2))


if __name__ == "__main__":
    app()
