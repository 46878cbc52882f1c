"""Core review session orchestration.

A session walks the fixed list of review steps as a small state machine:

    RUNNING(i) ──ok──▶ AWAITING_NAVIGATION(i) ──continue──▶ RUNNING(i+1) / COMPLETED
        │                    │  ▲        │ skip ──▶ RUNNING(i+2)
        │ provider error     │  │        └ quit ──▶ STOPPED
        ▼                    ▼  │
    RUNNING(i+1) / COMPLETED   IN_QA(i)

Only a successful step produces a StepResult. A failed step is reported,
followed by a short pause, and the session moves on to the next step
without retrying.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence

from lgtm_core.interactive import NavigationAction, prompt_navigation, run_qa
from lgtm_core.prompts import DEFAULT_MAX_CHARS
from lgtm_core.providers.anthropic import AnthropicProvider
from lgtm_core.providers.base import AuthError, BaseProvider, ProviderError, RateLimitError
from lgtm_core.providers.openai import OpenAIProvider
from lgtm_core.steps import REVIEW_STEPS, StepDefinition
from lgtm_core.ui import clear_screen, console, print_ai_response, print_error, print_header, print_success
from lgtm_core.utils.context import ReviewContext
from lgtm_core.vcs.git import get_diff

logger = logging.getLogger(__name__)

# Number of earlier results handed to each step prompt. A rolling window
# rather than the full history keeps request size flat as the session grows.
_HISTORY_WINDOW = 2
_FAILURE_DELAY_SECONDS = 2.0


class SessionState(str, enum.Enum):
    RUNNING = "running"
    AWAITING_NAVIGATION = "awaiting_navigation"
    IN_QA = "in_qa"
    STOPPED = "stopped"
    COMPLETED = "completed"


_TERMINAL_STATES = {SessionState.STOPPED, SessionState.COMPLETED}


@dataclass(frozen=True)
class StepResult:
    title: str
    ordinal: int
    prompt_text: str
    response_text: str


@dataclass
class ReviewSession:
    """Progress of one review run; only ReviewOrchestrator mutates it."""

    completed_steps: list[StepResult] = field(default_factory=list)
    current_index: int = 0
    state: SessionState = SessionState.RUNNING


def get_provider(config: dict, api_key: str) -> BaseProvider:
    model = config["model"]
    max_retries = config.get("max_retries", 2)
    if model == "anthropic":
        return AnthropicProvider(api_key=api_key, max_retries=max_retries)
    if model == "openai":
        return OpenAIProvider(api_key=api_key, max_retries=max_retries)
    raise ValueError(f"Unknown model provider: {model!r}. Choose 'anthropic' or 'openai'.")


def describe_failure(error: ProviderError) -> str | None:
    """Return an extra hint for failures the user can act on."""
    if isinstance(error, AuthError):
        return "Authentication error. Please check your API key."
    if isinstance(error, RateLimitError):
        return "Rate limit exceeded. Please try again later."
    return None


class ReviewOrchestrator:
    """Drive one interactive review session over an ordered list of steps.

    Collaborators are injected so the state machine can be exercised without
    a terminal or a network: ``navigate`` returns the user's NavigationAction
    and ``ask`` runs a Q&A sub-session.
    """

    def __init__(
        self,
        context: ReviewContext,
        merge_base: str,
        provider: BaseProvider,
        steps: Sequence[StepDefinition] = REVIEW_STEPS,
        navigate: Callable[[str | None, bool], NavigationAction] = prompt_navigation,
        ask: Callable[..., object] = run_qa,
        history_window: int = _HISTORY_WINDOW,
        failure_delay: float = _FAILURE_DELAY_SECONDS,
        max_chars_per_file: int = DEFAULT_MAX_CHARS,
        sleep: Callable[[float], None] = time.sleep,
        diff: str | None = None,
    ):
        self.context = context
        self.merge_base = merge_base
        self.provider = provider
        self.steps = list(steps)
        self.navigate = navigate
        self.ask = ask
        self.history_window = history_window
        self.failure_delay = failure_delay
        self.max_chars_per_file = max_chars_per_file
        self.sleep = sleep
        # Fixed for the whole session; git is not consulted again between steps.
        self.diff = diff if diff is not None else get_diff(merge_base)
        self.session = ReviewSession()

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def run(self) -> ReviewSession:
        """Run until the session is stopped or every step has been processed."""
        handlers = {
            SessionState.RUNNING: self._run_step,
            SessionState.AWAITING_NAVIGATION: self._await_navigation,
            SessionState.IN_QA: self._run_qa,
        }
        if not self.steps:
            self.session.state = SessionState.COMPLETED

        while self.session.state not in _TERMINAL_STATES:
            handlers[self.session.state]()

        if self.session.state is SessionState.COMPLETED:
            clear_screen()
            print_header("Review Complete")
            print_success("All steps completed!\n")
        return self.session

    # ------------------------------------------------------------------ #
    # State handlers                                                       #
    # ------------------------------------------------------------------ #

    def _advance_to(self, index: int) -> None:
        if index < self.total_steps:
            self.session.current_index = index
            self.session.state = SessionState.RUNNING
        else:
            self.session.state = SessionState.COMPLETED

    def _recent_history(self) -> list[StepResult]:
        if self.history_window <= 0:
            return []
        return self.session.completed_steps[-self.history_window :]

    def _run_step(self) -> None:
        index = self.session.current_index
        step = self.steps[index]

        clear_screen()
        print_header(step.title, index + 1, self.total_steps)

        prompt = step.build_prompt(
            self.context, self.merge_base, self._recent_history(), self.max_chars_per_file, diff=self.diff
        )
        try:
            with console.status("[cyan]Analyzing code...[/cyan]"):
                response = self.provider.complete(prompt)
        except ProviderError as e:
            logger.warning("Step %d (%s) failed: %s", index + 1, step.title, e)
            print_error(f"Error in {step.title}: {e}")
            hint = describe_failure(e)
            if hint:
                print_error(f"   {hint}")
            console.print("\n   Continuing to next step...\n")
            self.sleep(self.failure_delay)
            self._advance_to(index + 1)
            return

        console.print()
        print_ai_response(response)
        self.session.completed_steps.append(
            StepResult(title=step.title, ordinal=step.ordinal, prompt_text=prompt, response_text=response)
        )
        self.session.state = SessionState.AWAITING_NAVIGATION

    def _can_skip(self, index: int) -> bool:
        # Skipping step i+1 must still leave a step after it to run.
        return index + 1 < self.total_steps - 1

    def _await_navigation(self) -> None:
        index = self.session.current_index
        next_index = index + 1
        next_title = (
            f"Step {next_index + 1}: {self.steps[next_index].title}" if next_index < self.total_steps else None
        )
        can_skip = self._can_skip(index)

        action = self.navigate(next_title, can_skip)

        if action is NavigationAction.CONTINUE:
            self._advance_to(next_index)
        elif action is NavigationAction.ASK:
            self.session.state = SessionState.IN_QA
        elif action is NavigationAction.SKIP and can_skip:
            console.print(f"\n[yellow]Skipping {next_title}...[/yellow]\n")
            self._advance_to(index + 2)
        elif action is NavigationAction.QUIT:
            self.session.state = SessionState.STOPPED
            clear_screen()
            print_header("Review Stopped")
            console.print(f"Completed {len(self.session.completed_steps)} of {self.total_steps} steps.\n")
        else:
            logger.debug("Ignoring navigation action %r at step %d", action, index + 1)

    def _run_qa(self) -> None:
        # The Q&A is about the step that just finished, which is always the
        # most recent entry in the history.
        last = self.session.completed_steps[-1]
        self.ask(self.context, last.title, last.response_text, self.provider, max_chars=self.max_chars_per_file)
        self.session.state = SessionState.AWAITING_NAVIGATION


def run_interactive_review(
    context: ReviewContext,
    merge_base: str,
    provider: BaseProvider,
    config: dict | None = None,
) -> ReviewSession:
    """Run the full step pipeline with terminal navigation and Q&A."""
    config = config or {}
    orchestrator = ReviewOrchestrator(
        context,
        merge_base,
        provider,
        history_window=config.get("history_window", _HISTORY_WINDOW),
        failure_delay=config.get("failure_delay", _FAILURE_DELAY_SECONDS),
        max_chars_per_file=config.get("max_chars_per_file", DEFAULT_MAX_CHARS),
    )
    return orchestrator.run()
