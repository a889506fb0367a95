"""First-time onboarding workflow (v2).

Product copy lives here: add, remove or reorder steps, tighten prompts, or
adjust card labels. The runtime only ever sees the compiled definition.
"""

from __future__ import annotations

from ..spec import FormFieldSpec, StepSpec, StepUi, WorkflowSpec

FIRST_TIME_ONBOARDING_SPEC = WorkflowSpec(
    id="first_time_onboarding_v2",
    label="First-time onboarding (v2 – first goal)",
    version=2,
    chat_mode="firstTimeOnboarding",
    outcome_schema={
        "kind": "first_time_onboarding_v2",
        "fields": {
            "name": "string",
            "age": "number",
            "desireSummary": "string",
            "arc": {
                "name": "string",
                "narrative": "string",
            },
            "goal": {
                "title": "string",
                "why": "string",
                "timeHorizon": "string",
            },
            "activities": "object[]",
            "avatarUrl": "string?",
            "notifications": {
                "enabled": "boolean",
                "dailyTime": "string?",
            },
        },
    },
    steps=(
        StepSpec(
            id="welcome_orientation",
            kind="assistant_copy_only",
            label="Welcome & priming",
            prompt=(
                "Welcome the user, describe the app as a place to bring clarity to "
                "their life one goal, one step, one chapter at a time, and explain "
                "that you will guide them through a short setup."
            ),
            render_mode="static",
            static_copy=(
                "👋 Welcome.\n\nThis is where you turn vague ideas and “some day” "
                "goals into clear, doable steps for your real life.\n\nI’ll walk "
                "with you through a quick setup so you can start moving on what "
                "matters."
            ),
            copy_length="one_sentence",
            validation_hint=(
                "No fields collected; keep the message short, warm, and specific "
                "about what will happen."
            ),
            next="identity_intro",
        ),
        StepSpec(
            id="identity_intro",
            kind="assistant_copy_only",
            label="Invite name and age",
            prompt=(
                "Ask the user “What should I call you and how old are you?” and "
                "briefly note that you will use their age to tune tone and examples."
            ),
            copy_length="one_sentence",
            validation_hint=(
                "No structured fields here; simply invite the user to share their "
                "preferred name and age."
            ),
            next="identity_basic",
        ),
        StepSpec(
            id="identity_basic",
            kind="form",
            label="Basic identity",
            collects=("name", "age"),
            hide_freeform_chat_input=True,
            prompt=(
                "Acknowledge the user warmly (for example, “Good to meet you, "
                "{{name}}.”) and note that you’ll use what they shared to tune tone "
                "and examples. Do not ask any new questions."
            ),
            copy_length="one_sentence",
            validation_hint=(
                "Name should be non-empty. Age should be a reasonable integer; if "
                "unclear, ask once for clarification and then move on."
            ),
            next="desire_invite",
            ui=StepUi(
                fields=(
                    FormFieldSpec(
                        id="name",
                        label="Preferred name",
                        type="text",
                        placeholder="e.g., Maya or MJ",
                    ),
                    FormFieldSpec(
                        id="age",
                        label="Age",
                        type="number",
                        placeholder="How old are you?",
                    ),
                ),
            ),
        ),
        StepSpec(
            id="desire_invite",
            kind="form",
            label="Invite a desire",
            collects=("desireSummary",),
            hide_freeform_chat_input=True,
            prompt=(
                "Ask the user to share one thing they would like to make progress on "
                "right now, emphasizing that anything that matters to them is valid "
                "and low-pressure."
            ),
            render_mode="static",
            static_copy=(
                "Thanks for sharing that. Now, I’d love to hear about one thing "
                "you’d like to make progress on right now. It can be anything that "
                "matters to you, big or small. There’s no pressure."
            ),
            copy_length="two_sentences",
            validation_hint=(
                "Expect a short free-text summary. If the user is unsure, offer 2–3 "
                "example categories like “health”, “creative work”, or "
                "“relationships”."
            ),
            next="desire_reflect",
            ui=StepUi(
                fields=(
                    FormFieldSpec(
                        id="desireSummary",
                        type="textarea",
                        placeholder="Describe one thing you’d like to make progress on.",
                    ),
                ),
            ),
        ),
        StepSpec(
            id="desire_reflect",
            kind="assistant_copy_only",
            label="Reflect the desire",
            prompt=(
                "Reflect back what {{name}} said they want to make progress on "
                "({{desireSummary}}) in their own words, without judging or "
                "expanding it."
            ),
            copy_length="one_sentence",
            validation_hint="No new fields; mirror the user’s language.",
            next="arc_intro",
        ),
        StepSpec(
            id="arc_intro",
            kind="assistant_copy_only",
            label="Introduce Arcs",
            prompt=(
                "Explain that an Arc is a long-term identity direction that many "
                "goals can live inside, and that you will sketch one from what they "
                "shared."
            ),
            copy_length="two_sentences",
            validation_hint="No fields; keep the concept simple and concrete.",
            next="arc_draft",
        ),
        StepSpec(
            id="arc_draft",
            kind="agent_generate",
            label="Draft an identity Arc",
            collects=("arc",),
            prompt=(
                "Using the user's name ({{name}}), age ({{age}}) and desire "
                "({{desireSummary}}), synthesize ONE identity Arc. Respond ONLY with "
                'a JSON object of the shape {"name": string, "narrative": string}. '
                "The name is 1–3 words; the narrative is exactly 3 sentences and the "
                "first starts with “I want…”."
            ),
            copy_length="short_paragraph",
            validation_hint=(
                "The Arc should describe who they want to become, not an "
                "achievement or metric. Avoid guru-speak."
            ),
            next="arc_confirm",
        ),
        StepSpec(
            id="arc_confirm",
            kind="confirm",
            label="Confirm the Arc",
            prompt=(
                "Ask whether this Arc feels like the future them, offering to adopt "
                "it as-is or to reshape it."
            ),
            copy_length="one_sentence",
            validation_hint=(
                "Only an Arc the user said yes to should be kept; an edit sends the "
                "draft back for another pass."
            ),
            next="goal_draft",
            next_on_edit="arc_draft",
        ),
        StepSpec(
            id="goal_draft",
            kind="agent_generate",
            label="Draft goal formation",
            collects=("goal",),
            prompt=(
                "You are helping a new user turn a single desire into a simple, "
                "realistic goal inside their Arc.\n\n"
                "Context you have about the user:\n"
                "- Name: {{name}}\n"
                "- Age: {{age}}\n"
                "- What they want to make progress on: {{desireSummary}}\n"
                "- Arc: {{arc}}\n\n"
                "Synthesize ONE short-term goal that feels achievable in roughly "
                "30–90 days. Respond ONLY with a JSON object with the shape "
                '{"title": string, "why": string, "timeHorizon": string}.'
            ),
            copy_length="short_paragraph",
            validation_hint=(
                "Goal should feel doable within ~30–90 days, specific but not "
                "overwhelming. Use the user’s own language where possible."
            ),
            next="goal_confirm",
        ),
        StepSpec(
            id="goal_confirm",
            kind="confirm",
            label="Goal confirmation",
            prompt=(
                "Briefly acknowledge the drafted goal and ask whether to use it as "
                "their first goal or tweak it, reminding them they can change it "
                "anytime from the Goals view."
            ),
            copy_length="two_sentences",
            validation_hint=(
                "No additional data; confirm and reflect the goal back in natural "
                "language."
            ),
            next="activities_intro",
            next_on_edit="goal_draft",
        ),
        StepSpec(
            id="activities_intro",
            kind="assistant_copy_only",
            label="Introduce activities",
            prompt=(
                "Explain that goals move forward through small activities and that "
                "you will suggest a few they could do this week."
            ),
            render_mode="static",
            static_copy=(
                "Goals move through small, concrete activities. Let’s line up a few "
                "you could actually do this week."
            ),
            copy_length="one_sentence",
            next="activities_draft",
        ),
        StepSpec(
            id="activities_draft",
            kind="agent_generate",
            label="Suggest first activities",
            collects=("activities",),
            prompt=(
                "Given the goal {{goal}}, propose 3 small, concrete activities that "
                "fit in a single work session each. Respond ONLY with a JSON object "
                'of the shape {"activities": [{"title": string, "minutes": number}]}.'
            ),
            copy_length="two_sentences",
            validation_hint=(
                "Activities should be specific and doable in one sitting; prefer "
                "small realistic steps over vague projects."
            ),
            next="activities_confirm",
        ),
        StepSpec(
            id="activities_confirm",
            kind="confirm",
            label="Confirm activities",
            collects=("activities",),
            prompt=(
                "Help the user keep the activities that feel light and realistic, "
                "trimming or rephrasing as needed."
            ),
            copy_length="one_sentence",
            validation_hint=(
                "Capture the final list the user keeps; an empty list is fine."
            ),
            next="plan_recap",
            next_on_edit="activities_draft",
        ),
        StepSpec(
            id="plan_recap",
            kind="assistant_copy_only",
            label="Recap the plan",
            prompt=(
                "Recap the Arc, the first goal and the activities {{name}} kept, in "
                "plain language."
            ),
            copy_length="short_paragraph",
            validation_hint="No new fields; avoid hype.",
            next="profile_avatar",
        ),
        StepSpec(
            id="profile_avatar",
            kind="form",
            label="Profile personalization",
            collects=("avatarUrl",),
            prompt=(
                "Ask whether the user would like to add a photo or avatar now, and "
                "make it clear that skipping is completely fine."
            ),
            copy_length="two_sentences",
            validation_hint=(
                "avatarUrl may be null. Do not pressure the user; this is optional."
            ),
            next="notifications_optin",
            ui=StepUi(title="Profile image (optional)", primary_action_label="Continue"),
        ),
        StepSpec(
            id="notifications_optin",
            kind="form",
            label="Notification preferences",
            collects=("notifications",),
            hide_freeform_chat_input=True,
            prompt=(
                "Ask whether the user would like a gentle daily nudge for their "
                "activities and at what time, making clear they can change this "
                "later."
            ),
            copy_length="one_sentence",
            validation_hint=(
                "notifications is an object with enabled (boolean) and an optional "
                "dailyTime such as “08:30”."
            ),
            next="closing_v2",
            ui=StepUi(
                title="Stay on track",
                description="Want a gentle daily nudge for your activities?",
                primary_action_label="Save",
            ),
        ),
        StepSpec(
            id="closing_v2",
            kind="assistant_copy_only",
            label="Closing",
            prompt=(
                "Congratulate {{name}}, briefly recap that they now have a clear "
                "first goal saved, and remind them they can ask what to do next at "
                "any time."
            ),
            copy_length="short_paragraph",
            validation_hint=(
                "No new fields; keep it concise, encouraging, and grounded. Avoid "
                "hype."
            ),
        ),
    ),
)
