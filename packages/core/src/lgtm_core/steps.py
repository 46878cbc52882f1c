"""The fixed review pipeline.

Each step is a StepDefinition: a title, its position in the pipeline and the
task text appended after the shared code context. Steps differ only in what
build_prompt renders; there is no other per-step behaviour.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from lgtm_core.prompts import DEFAULT_MAX_CHARS, PERSONA, build_context_section, build_history_section
from lgtm_core.vcs.git import get_diff

if TYPE_CHECKING:
    from lgtm_core.reviewer import StepResult
    from lgtm_core.utils.context import ReviewContext


@dataclass(frozen=True)
class StepDefinition:
    title: str
    ordinal: int
    task: str
    # The overview describes the change from scratch; later steps see earlier findings.
    uses_history: bool = True

    def build_prompt(
        self,
        context: ReviewContext,
        merge_base: str,
        recent_history: Sequence[StepResult] = (),
        max_chars: int = DEFAULT_MAX_CHARS,
        diff: str | None = None,
    ) -> str:
        """Render the full prompt for this step.

        Pass ``diff`` to reuse an already computed diff; otherwise it is read
        from git for merge_base.
        """
        if diff is None:
            diff = get_diff(merge_base)
        sections = [PERSONA, build_context_section(context, diff, max_chars)]
        if self.uses_history:
            history = build_history_section(recent_history)
            if history:
                sections.append(history)
        sections.append("\n---\n")
        sections.append(self.task)
        return "\n".join(sections)


_OVERVIEW_TASK = """# TASK: CODE OVERVIEW (NO REVIEW YET)

Provide a purely descriptive overview of what changed. NO judgments or reviews yet.
Base your summary **only** on the changes shown in the "Git Diff" section (lines starting with `+` or `-`).

## What Changed
Describe in 2-3 paragraphs:
- What files were modified, added, or removed
- What functionality is being added, changed, or removed
- The technical approach taken (new components, refactoring, bug fixes, API changes, etc.)
- Any architectural or structural changes to the codebase

---
**CRITICAL INSTRUCTIONS:**
- This is OVERVIEW ONLY - do not review or judge the code yet
- Do NOT mention bugs, issues, problems, or improvements
- Do NOT say things like "good", "bad", "should", "could be better"
- Just describe what changed factually and neutrally
- Think of this as reading a git commit message - just state what happened
- Detailed review will happen in the next steps
- Use markdown formatting. Be clear and concise."""

_NOMENCLATURE_TASK = """# TASK: NOMENCLATURE DEEP DIVE

Focus exclusively on naming, conventions, and clarity following React/TypeScript best practices:

## File Names
- React components: PascalCase (e.g., `UserProfile.tsx`, not `user-profile.tsx`)
- Hooks: camelCase starting with "use" (e.g., `useAuth.ts`)
- Utilities/helpers: camelCase (e.g., `formatDate.ts`)
- Test files: match source file name with `.test` or `.spec` suffix
- Are files in appropriate directories (components/, hooks/, utils/, etc.)?

## Components & Hooks
- Component names: PascalCase, descriptive, noun-based (e.g., `UserCard` not `ShowUser`)
- Custom hooks: camelCase, start with "use" (e.g., `useLocalStorage`)
- Props interfaces: `ComponentNameProps` pattern (e.g., `UserCardProps`)
- Avoid generic names like `Component`, `Item`, `Data`
- Event handlers: `handle` prefix (e.g., `handleClick`, `handleSubmit`)

## Variables & Functions
- Boolean variables: use `is`, `has`, `should` prefixes (e.g., `isLoading`, `hasError`)
- Functions: verb-based, camelCase (e.g., `fetchUser`, `calculateTotal`)
- Constants: UPPER_SNAKE_CASE for true constants (e.g., `MAX_RETRIES`)
- Avoid abbreviations unless well-known (URL, HTTP ok; usr, btn not ok)
- Compare against naming patterns in the codebase context provided

## TypeScript Types & Interfaces
- Interfaces and type aliases: PascalCase, describe what they represent (e.g., `User`, `UserId`)
- Generic type parameters: single uppercase letter or descriptive (e.g., `T`, `TData`)
- Avoid the `I` prefix for interfaces
- Union types: descriptive names (e.g., `Status = "idle" | "loading" | "success"`)

## Typos & Language
- Any typos in variable/function/file names?
- Consistent terminology throughout (e.g., user vs customer, fetch vs get)?

---
**CRITICAL INSTRUCTION:**
- Report ONLY issues and improvements needed
- If no issues found, state: "No nomenclature issues found" (one sentence only)
- Do NOT list things that are correct
- Use markdown formatting with specific examples and suggestions."""

_LOGIC_TASK = """# TASK: LOGIC & POTENTIAL BUGS

Deep dive into correctness and code quality following React/TypeScript best practices:
**IMPORTANT**: Review the changed lines of code from the "Git Diff" (lines prefixed with `+` or `-`). \
Analyze them in the context of the surrounding code, but only flag issues *in the changes*.

## TypeScript Type Safety
- Are there `any` types that should be specific?
- Missing type annotations on function parameters/returns?
- Unsafe type assertions (`as`) or non-null assertions (`!`) that could fail?

## Null/Undefined Safety
- Potential null/undefined access errors?
- Missing optional chaining (`?.`) or nullish coalescing (`??`)?
- Proper handling of optional props?

## React-Specific Issues
- Missing or incorrect dependency arrays in useEffect/useMemo/useCallback?
- Stale state or stale closures in callbacks and effects?
- Missing or non-unique keys in lists?
- Hooks called conditionally or in loops?

## Performance Concerns
- Missing memoization causing unnecessary re-renders?
- Heavy computations that should be memoized?
- Only flag if actually problematic, not premature optimization

## Edge Cases & Logic Errors
- Empty arrays/strings/objects, zero/negative numbers, index boundaries handled?
- Loading/error states properly managed?
- Incorrect operators or comparisons (=== vs ==, && vs ||)?
- Off-by-one errors, wrong assumptions about data shape, races in async code?

## Code Smells & Readability
- Components doing too much, excessive prop drilling, duplicated code?
- Complex nested ternaries, magic numbers, logic that needs a comment?

---
**CRITICAL INSTRUCTION:**
- Focus ONLY on problems and improvements
- If no issues found, state: "No logic or bug issues found" (one sentence only)
- Be thorough and specific. Reference line numbers from the diff.
- Provide code examples for suggested fixes.
- Use markdown formatting."""

_TESTS_TASK = """# TASK: TEST ANALYSIS

Evaluate test coverage and quality following React Testing Library best practices:
**IMPORTANT**: Analyze how the tests cover the specific changes introduced in the "Git Diff". \
Flag any gaps in testing related **directly** to the modified code.

## Scenario Coverage
- Are all user-visible behaviors tested?
- Are edge cases covered (empty states, loading, errors)?
- Are different user interactions tested (click, type, submit)?
- Are accessibility features tested (keyboard nav, ARIA)?
- If no test file was found, what scenarios SHOULD be tested?

## Test Quality
- Queries by role/label/text rather than `getByTestId`
- `userEvent` rather than `fireEvent`; `waitFor`/`findBy*` for async work
- Behaviour is tested, not implementation details or internal state
- Mocking is minimal and mock data is realistic
- Descriptive test names and a clear arrange-act-assert structure

## Missing Tests
List specific test cases that should be added, with React Testing Library examples.

---
**CRITICAL INSTRUCTION:**
- Focus ONLY on gaps, issues, and anti-patterns
- If coverage is comprehensive, state: "Test coverage is comprehensive" (one sentence only)
- Do NOT list existing tests that are fine
- Be specific about what's missing and why it matters
- Use markdown formatting."""

_UX_TASK = """# TASK: UX & PRODUCTION READINESS

Focus on user experience, accessibility, error handling, security, and production concerns:
**IMPORTANT**: Review the changed lines of code from the "Git Diff" (lines prefixed with `+` or `-`). \
Evaluate the impact of these specific changes on UX, security, and production readiness.

## Accessibility (A11y)
- Semantic HTML, ARIA labels and roles, keyboard navigation, focus management?
- Alt text, meaningful link text, colour contrast, labelled form fields?

## Error Handling & Resilience
- Error boundaries, graceful handling of API failures, clear error messages?
- Loading and empty states, client-side validation with helpful messages?

## Security Concerns
- User input sanitised? `dangerouslySetInnerHTML` used safely?
- Sensitive data in logs, errors, or URL params? Tokens handled securely?
- Permission checks before showing or enabling features?

## Performance (User-Facing)
- Code splitting, image optimisation, list virtualisation, request waterfalls?

## Production Considerations
- Configuration, logging and monitoring adequate?
- Backwards compatibility and rollback safety?

---
**CRITICAL INSTRUCTION:**
- Focus ONLY on user-facing concerns and production readiness
- If no concerns, state: "No UX or production concerns" (one sentence only)
- Do NOT repeat issues from previous steps (logic, tests, naming)
- Use markdown formatting."""


REVIEW_STEPS: tuple[StepDefinition, ...] = (
    StepDefinition("Overview", 0, _OVERVIEW_TASK, uses_history=False),
    StepDefinition("Nomenclature", 1, _NOMENCLATURE_TASK),
    StepDefinition("Logic & Potential Bugs", 2, _LOGIC_TASK),
    StepDefinition("Test Analysis", 3, _TESTS_TASK),
    StepDefinition("UX & Production Readiness", 4, _UX_TASK),
)
