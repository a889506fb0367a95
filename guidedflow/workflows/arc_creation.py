"""Arc creation workflow.

Helps the user describe a long-term identity Arc, drafts one with the coach
and lets them adopt it or send it back for another draft.
"""

from __future__ import annotations

from ..spec import FormFieldSpec, StepSpec, StepUi, WorkflowSpec

ARC_CREATION_SPEC = WorkflowSpec(
    id="arc_creation_v1",
    label="Arc Coach",
    version=1,
    chat_mode="arcCreation",
    outcome_schema={
        "kind": "arc_creation_outcome",
        "fields": {
            "prompt": "string",
            "timeHorizon": "string",
            "constraints": "string?",
            "adoptedArcId": "string?",
        },
    },
    steps=(
        StepSpec(
            id="context_collect",
            kind="form",
            label="Collect free-text Arc desire",
            collects=("prompt", "timeHorizon", "constraints"),
            hide_freeform_chat_input=True,
            prompt=(
                "Invite the user to describe, in their own words, one thing they "
                "would like to make progress on or change in their life right now. "
                "This should feel like a low-pressure journaling prompt, not a "
                "formal goal statement."
            ),
            copy_length="two_sentences",
            validation_hint=(
                "Ensure there is at least a short free-text description of what "
                "they want to move forward."
            ),
            next="agent_generate_arc",
            ui=StepUi(
                fields=(
                    FormFieldSpec(
                        id="prompt",
                        label="What do you want to grow into?",
                        type="textarea",
                        placeholder="e.g., Become someone who makes things by hand",
                    ),
                ),
                primary_action_label="Continue",
            ),
        ),
        StepSpec(
            id="agent_generate_arc",
            kind="agent_generate",
            label="Generate Arc suggestions",
            prompt=(
                "Given the user's context ({{prompt}}) and any existing workspace "
                "snapshot, propose 1–3 Arc identity directions that feel "
                "distinctive and grounded."
            ),
            copy_length="short_paragraph",
            validation_hint=(
                "Arcs should read like long-horizon identity directions, not "
                "single projects."
            ),
            next="confirm_arc",
        ),
        StepSpec(
            id="confirm_arc",
            kind="confirm",
            label="Confirm or edit Arc",
            collects=("adoptedArcId",),
            prompt=(
                "Help the user decide whether to adopt one Arc, edit it, or try a "
                "different direction. Keep the decision clear and low-pressure."
            ),
            copy_length="two_sentences",
            validation_hint=(
                "Capture which Arc (if any) the user adopted so the client can "
                "persist it, or leave null if they chose not to adopt yet."
            ),
            next_on_edit="agent_generate_arc",
        ),
    ),
)
