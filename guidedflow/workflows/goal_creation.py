"""Goal creation workflow: one clear goal for the next 30–90 days."""

from __future__ import annotations

from ..spec import StepSpec, StepUi, WorkflowSpec

GOAL_CREATION_SPEC = WorkflowSpec(
    id="goal_creation_v1",
    label="Goal Coach",
    version=1,
    chat_mode="goalCreation",
    outcome_schema={
        "kind": "goal_creation_outcome",
        "fields": {
            "arcId": "string?",
            "prompt": "string",
            "constraints": "string?",
            "title": "string",
            "description": "string?",
            "status": "string",
            "forceIntent": "Record<string, 0 | 1 | 2 | 3>",
        },
    },
    steps=(
        StepSpec(
            id="arc_select",
            kind="form",
            label="Pick an Arc (optional)",
            collects=("arcId",),
            hide_freeform_chat_input=True,
            prompt=(
                "Ask which Arc the user wants this goal to live in. They can skip "
                "and choose later."
            ),
            copy_length="one_sentence",
            validation_hint=(
                "If an Arc is selected, capture its id; otherwise leave it empty so "
                "the user can pick later when adopting."
            ),
            next="context_collect",
            ui=StepUi(title="Which Arc is this for?", primary_action_label="Continue"),
        ),
        StepSpec(
            id="context_collect",
            kind="form",
            label="Collect prompt",
            collects=("prompt", "constraints"),
            prompt=(
                "Ask the user what they want to make progress on over the next "
                "30–90 days. If needed, ask at most one short follow-up about "
                "constraints."
            ),
            copy_length="one_sentence",
            validation_hint=(
                "Ensure there is at least a short free-text prompt describing the "
                "kind of progress the user wants. Constraints are optional."
            ),
            next="agent_generate_goals",
        ),
        StepSpec(
            id="agent_generate_goals",
            kind="agent_generate",
            label="Generate goal options",
            prompt=(
                "Given the user's Arc choice (if any) and what they want to make "
                "progress on ({{prompt}}), propose exactly ONE candidate goal with "
                "a title and short description. Weave any timeframe into the "
                "description rather than a separate field."
            ),
            copy_length="short_paragraph",
            validation_hint=(
                "Produce exactly one concrete, realistic 30–90 day goal that does "
                "not duplicate existing goals verbatim."
            ),
            next="confirm_goal",
        ),
        StepSpec(
            id="confirm_goal",
            kind="confirm",
            label="Confirm or refine goal",
            collects=("title", "description", "status", "forceIntent"),
            prompt=(
                "Help the user pick or refine one goal that feels like the right "
                "next 30–90 day focus, capturing its title, short description, "
                "lifecycle status, and a 0–3 level sketch for each force."
            ),
            copy_length="two_sentences",
            validation_hint=(
                "Capture exactly one goal draft the user feels good about adopting "
                "now; leave fields empty if they decide not to adopt yet."
            ),
            next_on_edit="agent_generate_goals",
        ),
    ),
)
