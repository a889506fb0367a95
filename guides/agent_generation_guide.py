"""Generate step copy with a pydantic-ai agent while driving a workflow."""

import asyncio

from pydantic_ai import Agent

from guidedflow import WorkflowRuntime
from guidedflow.generation import StepGenerator


async def main():
    """Let the agent draft each step of the onboarding flow until the arc is proposed."""
    runtime = WorkflowRuntime()
    generator = StepGenerator(Agent("test"))
    definition = runtime.registry.get("first_time_onboarding_v2")

    instance = await runtime.start(definition.id)
    while instance.current_step_id != "arc_confirm":
        result = await generator.generate(definition, instance)
        print(f"💬 [{result.step_id}] {result.text[:70]}")
        instance = await runtime.advance(instance.id, result.to_completion())

    print(f"✅ Waiting for the user to confirm the arc: {instance.collected_data}")


if __name__ == "__main__":
    asyncio.run(main())
