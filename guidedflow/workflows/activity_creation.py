"""Activity creation workflow: small, concrete near-term activities."""

from __future__ import annotations

from ..spec import StepSpec, WorkflowSpec

ACTIVITY_CREATION_SPEC = WorkflowSpec(
    id="activity_creation_v1",
    label="Activity Coach",
    version=1,
    chat_mode="activityCreation",
    outcome_schema={
        "kind": "activity_creation_outcome",
        "fields": {
            "prompt": "string",
            "timeHorizon": "string",
            "energyLevel": "string?",
            "constraints": "string?",
            "adoptedActivityTitles": "string[]?",
        },
    },
    steps=(
        StepSpec(
            id="context_collect",
            kind="form",
            label="Collect context",
            collects=("prompt", "timeHorizon", "energyLevel", "constraints"),
            prompt=(
                "Briefly acknowledge the focused goal or life area and restate that "
                "you will suggest a few concrete, near-term activities. Infer a "
                "reasonable time horizon and energy level instead of asking the "
                "user to choose; only ask one very short clarifying question if "
                "their description is extremely vague."
            ),
            copy_length="two_sentences",
            validation_hint=(
                "Ensure there is at least a short free-text prompt and a rough time "
                "horizon."
            ),
            next="agent_generate_activities",
        ),
        StepSpec(
            id="agent_generate_activities",
            kind="agent_generate",
            label="Generate activity suggestions",
            prompt=(
                "Given the user's context ({{prompt}}, horizon {{timeHorizon}}), "
                "propose 3–5 concrete, bite-sized activities. Each has a title, an "
                "approximate time/energy label, one short “why this matters” line "
                "and a 2–6 item checklist that fits a single work session."
            ),
            copy_length="short_paragraph",
            validation_hint=(
                "Activities should be specific, doable in a single sitting, and not "
                "restate existing activities verbatim."
            ),
            next="confirm_activities",
        ),
        StepSpec(
            id="confirm_activities",
            kind="confirm",
            label="Confirm or edit activities",
            collects=("adoptedActivityTitles",),
            prompt=(
                "Help the user pick one to three activities to adopt right now, "
                "trimming or rephrasing suggestions so they feel light and "
                "realistic."
            ),
            copy_length="two_sentences",
            validation_hint=(
                "Capture the final activity titles the user confirms; leave the "
                "list empty if they decide not to adopt any yet."
            ),
            next_on_edit="agent_generate_activities",
        ),
    ),
)
