"""Prompt sections shared by every review step and by the Q&A loop.

Rendering lives next to the data it renders rather than in the providers:
providers only ever see a finished prompt string.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from lgtm_core.reviewer import StepResult
    from lgtm_core.utils.context import FileRecord, ReviewContext
    from lgtm_core.interactive import QATranscript

DEFAULT_MAX_CHARS = 20_000

PERSONA = "You are an expert code reviewer specializing in React and TypeScript projects.\n"


def _truncate(text: str, max_chars: int, label: str) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + f"\n... [{label} truncated]"
    return text


def _file_blocks(files: Sequence[FileRecord], max_chars: int) -> list[str]:
    blocks = []
    for f in files:
        blocks.append(f"### {f.path}\n")
        blocks.append("```")
        blocks.append(_truncate(f.content, max_chars, "file"))
        blocks.append("```\n")
    return blocks


def build_context_section(context: ReviewContext, diff: str | None, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Render the diff and every file in the context as one markdown section.

    Each subsection is labelled with the role its files play so the model
    reads dependencies as reference material and not as code under review.
    Empty subsections are left out. Pass ``diff=None`` to omit the diff.
    """
    sections = ["# CODE CONTEXT\n"]

    if diff is not None:
        sections.append("## Git Diff\n")
        sections.append("```diff")
        # The diff spans every changed file, so it gets a proportionally larger budget.
        sections.append(_truncate(diff, max_chars * max(1, len(context.changed_files)), "diff"))
        sections.append("```\n")

    sections.append("## Changed Files\n")
    sections.extend(_file_blocks(context.changed_files, max_chars))

    if context.dependencies:
        sections.append("## Codebase Context (for pattern comparison)\n")
        sections.extend(_file_blocks(context.dependencies, max_chars))

    if context.test_files:
        sections.append("## Related Tests\n")
        sections.extend(_file_blocks(context.test_files, max_chars))

    return "\n".join(sections)


def build_history_section(previous_steps: Sequence[StepResult]) -> str:
    """Render earlier step results so a step can build on, not repeat, them."""
    if not previous_steps:
        return ""

    sections = ["\n# PREVIOUS REVIEW STEPS\n", "For context, here are the findings from previous review steps:\n"]
    for step in previous_steps:
        sections.append(f"## {step.title}\n")
        sections.append(step.response_text + "\n")
    return "\n".join(sections)


QA_INSTRUCTIONS = [
    "- Answer concisely but thoroughly",
    "- Reference specific code when relevant",
    "- If the question is about something not in the code, say so",
    "- Stay within the topic of the review step",
    "- Be helpful and constructive",
]


def build_qa_prompt(
    context: ReviewContext,
    step_title: str,
    transcript: QATranscript,
    question: str,
    max_chars: int = DEFAULT_MAX_CHARS,
) -> str:
    """Build a follow-up prompt from the whole Q&A transcript plus the new question.

    The changed files are included so answers can point at real code; the
    diff and the wider dependency context are left out to keep follow-ups
    cheap.
    """
    sections = [
        f'You are in an interactive Q&A session about a code review step: "{step_title}"',
        "Answer the user's question based on the code and previous conversation.\n",
        "# CHANGED FILES\n",
        *_file_blocks(context.changed_files, max_chars),
        "# CONVERSATION HISTORY\n",
    ]
    for entry in transcript.entries:
        speaker = "User" if entry.role == "user" else "You"
        sections.append(f"**{speaker}:** {entry.content}\n")

    sections.append("\n# USER'S QUESTION\n")
    sections.append(question + "\n")
    sections.append("\n# INSTRUCTIONS\n")
    sections.extend(QA_INSTRUCTIONS)
    return "\n".join(sections)
