"""User input during a review session: step navigation and follow-up Q&A."""

from __future__ import annotations

import enum
import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Literal

import click

from lgtm_core.prompts import DEFAULT_MAX_CHARS, build_qa_prompt
from lgtm_core.providers.base import ProviderError
from lgtm_core.ui import console, print_ai_response, print_error, print_navigation, print_qa_header

if TYPE_CHECKING:
    from lgtm_core.providers.base import BaseProvider
    from lgtm_core.utils.context import ReviewContext

logger = logging.getLogger(__name__)

_EXIT_WORDS = {"done", "exit"}


class NavigationAction(str, enum.Enum):
    CONTINUE = "continue"
    ASK = "ask"
    SKIP = "skip"
    QUIT = "quit"


# Enter arrives as "\r" in raw mode and as "\n" when stdin is not a terminal.
_KEY_ACTIONS = {
    "\r": NavigationAction.CONTINUE,
    "\n": NavigationAction.CONTINUE,
    "a": NavigationAction.ASK,
    "s": NavigationAction.SKIP,
    "q": NavigationAction.QUIT,
}


def read_key() -> str:
    """Block for exactly one keypress.

    click.getchar switches the terminal to raw mode only for the duration of
    the read and restores the previous mode on the way out, including when
    Ctrl-C is translated into KeyboardInterrupt.
    """
    return click.getchar()


def read_line() -> str:
    """Read one question; end of input (Ctrl-D) reads as an empty line."""
    try:
        return click.prompt("You", default="", show_default=False)
    except (EOFError, click.Abort):
        return ""


def prompt_navigation(
    next_step_title: str | None,
    can_skip: bool,
    read_key: Callable[[], str] = read_key,
) -> NavigationAction:
    """Show the navigation menu and return the first recognised action.

    Unrecognised keys are ignored, as is ``s`` when skipping is not on offer.
    Ctrl-C ends the process on the spot: no step is in flight while we wait
    here, so there is nothing to clean up.
    """
    print_navigation(next_step_title, can_skip)
    while True:
        try:
            key = read_key()
        except KeyboardInterrupt:
            console.print()
            sys.exit(0)
        action = _KEY_ACTIONS.get(key.lower() if key.isalpha() else key)
        if action is None:
            continue
        if action is NavigationAction.SKIP and not can_skip:
            continue
        return action


@dataclass(frozen=True)
class QAEntry:
    role: Literal["user", "assistant"]
    content: str


@dataclass
class QATranscript:
    """Conversation for one Q&A sub-session; thrown away when it ends."""

    entries: list[QAEntry] = field(default_factory=list)

    @classmethod
    def seeded(cls, step_title: str, step_response: str) -> QATranscript:
        return cls([QAEntry("assistant", f"Here was my {step_title} review:\n\n{step_response}")])

    def add(self, role: Literal["user", "assistant"], content: str) -> None:
        self.entries.append(QAEntry(role, content))


def run_qa(
    context: ReviewContext,
    step_title: str,
    step_response: str,
    provider: BaseProvider,
    read_line: Callable[[], str] = read_line,
    max_chars: int = DEFAULT_MAX_CHARS,
) -> QATranscript:
    """Answer follow-up questions about one review step until the user is done.

    An empty line, ``done`` or ``exit`` (any case) ends the sub-session. A
    failed provider call is reported and the loop carries on; the failed
    exchange is not added to the transcript.
    """
    print_qa_header()
    transcript = QATranscript.seeded(step_title, step_response)

    while True:
        question = read_line().strip()
        if not question or question.lower() in _EXIT_WORDS:
            console.print("\n[green]Exiting Q&A mode[/green]\n")
            break

        prompt = build_qa_prompt(context, step_title, transcript, question, max_chars)
        try:
            with console.status("[cyan]Thinking...[/cyan]"):
                answer = provider.complete(prompt)
        except ProviderError as e:
            logger.debug("Q&A call failed: %s", e)
            print_error(f"Error: {e}")
            console.print("[dim]Continuing Q&A mode...[/dim]\n")
            continue

        console.print("\n[bold]Assistant:[/bold]\n")
        print_ai_response(answer)
        console.print()
        transcript.add("user", question)
        transcript.add("assistant", answer)

    return transcript
