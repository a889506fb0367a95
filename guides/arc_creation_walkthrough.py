"""Walk the arc creation workflow end to end without a model."""

import asyncio

from guidedflow import StepCompletion, WorkflowRuntime


async def main():
    """Start an instance, fill the form, redraft once and adopt the arc."""
    runtime = WorkflowRuntime()

    instance = await runtime.start("arc_creation_v1")
    print(f"🚀 Started {instance.id} at {instance.current_step_id}")

    steps = [
        StepCompletion(fields={"prompt": "ship the thing", "timeHorizon": "1 year"}),
        StepCompletion(),
        StepCompletion(decision="edit"),
        StepCompletion(),
        StepCompletion(fields={"adoptedArcId": "arc_123"}, decision="confirm"),
    ]
    for completion in steps:
        instance = await runtime.advance(instance.id, completion)
        print(f"  -> {instance.status}: {instance.current_step_id}")

    print(f"✅ Outcome: {instance.outcome}")


if __name__ == "__main__":
    asyncio.run(main())
