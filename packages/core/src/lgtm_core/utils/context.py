"""Review context assembly from the local working tree.

The context for a session is every changed file, every local module those
files reach through their imports, and the test file paired with each changed
file. All three collections are read from disk relative to the project root
and deduplicated against each other: a path appears in exactly one of them.
"""

from __future__ import annotations

import logging
import math
import posixpath
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from lgtm_core.utils.imports import PathResolver, collect_dependencies

console = Console()
logger = logging.getLogger(__name__)

# {stem} = filename without extension, {suffix} = extension including the dot.
# Ordered by priority; the first existing candidate wins.
_TEST_PATTERNS = [
    "{stem}.test{suffix}",  # Jest / Vitest:  Button.test.tsx
    "{stem}.spec{suffix}",  # Jasmine / Mocha: Button.spec.tsx
    "__tests__/{stem}{suffix}",  # Jest directory convention
]


@dataclass(frozen=True)
class FileRecord:
    path: str
    content: str


@dataclass(frozen=True)
class ReviewContext:
    """Everything the review steps get to see about the codebase.

    Built once per session by build_context and never modified afterwards.
    """

    changed_files: tuple[FileRecord, ...] = ()
    # Local modules reached from the changed files, in discovery order.
    dependencies: tuple[FileRecord, ...] = ()
    # Test/spec files paired with changed files by naming convention.
    test_files: tuple[FileRecord, ...] = ()

    @property
    def all_paths(self) -> frozenset[str]:
        return frozenset(f.path for f in (*self.changed_files, *self.dependencies, *self.test_files))


def read_file(root: Path, path: str) -> str | None:
    """Return the decoded content of root/path, or None when it cannot be read."""
    try:
        return (root / path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Could not read %s: %s", path, e)
        return None


def find_test_file(file_path: str, root: Path = Path(".")) -> str | None:
    """Locate the test or spec file paired with a source file.

    Candidates live next to the source file: ``Button.test.tsx``, then
    ``Button.spec.tsx``, then ``__tests__/Button.tsx``. Returns the first one
    that exists on disk, or None.
    """
    directory = posixpath.dirname(file_path)
    stem, suffix = posixpath.splitext(posixpath.basename(file_path))

    for pattern in _TEST_PATTERNS:
        candidate = posixpath.join(directory, pattern.format(stem=stem, suffix=suffix))
        if (root / candidate).is_file():
            return candidate

    return None


def build_context(changed_paths: list[str], resolver: PathResolver | None = None) -> ReviewContext:
    """Read changed files and gather their dependencies and tests into a ReviewContext.

    Processing is strictly in input order. For each changed file the
    dependencies it discovers come next, then its test file, before moving on
    to the next changed file; the same input therefore always yields the same
    ordering. Changed files are claimed up front, so a changed file that
    another changed file imports still lands in changed_files with its own
    test lookup. Any other path is captured once, by whichever collection
    reaches it first.

    Unreadable files are reported and left out. An unreadable changed file
    contributes nothing at all, not even dependency or test discovery.
    """
    resolver = resolver or PathResolver()
    root = resolver.root

    # Every file is read at most once, whether by the graph walk or here.
    cache: dict[str, str | None] = {}

    def read(path: str) -> str | None:
        if path not in cache:
            cache[path] = read_file(root, path)
        return cache[path]

    changed: list[FileRecord] = []
    dependencies: list[FileRecord] = []
    tests: list[FileRecord] = []
    seen: set[str] = set(changed_paths)

    console.print("\n[bold]Building context...[/bold]\n")

    for path in dict.fromkeys(changed_paths):
        content = read(path)
        if content is None:
            _warn_unreadable(path)
            continue

        changed.append(FileRecord(path, content))
        console.print(f"  [cyan]{path}[/cyan]")

        for dep in collect_dependencies(path, resolver, read):
            if dep in seen:
                continue
            dep_content = read(dep)
            if dep_content is None:
                _warn_unreadable(dep)
                continue
            dependencies.append(FileRecord(dep, dep_content))
            seen.add(dep)
            console.print(f"    [dim]├─ dep[/dim]  {dep}")

        test_path = find_test_file(path, root)
        if test_path and test_path not in seen:
            test_content = read(test_path)
            if test_content is None:
                _warn_unreadable(test_path)
            else:
                tests.append(FileRecord(test_path, test_content))
                seen.add(test_path)
                console.print(f"    [dim]└─ test[/dim] {test_path}")

    return ReviewContext(
        changed_files=tuple(changed),
        dependencies=tuple(dependencies),
        test_files=tuple(tests),
    )


def _warn_unreadable(path: str) -> None:
    logger.warning("Could not read file: %s", path)
    console.print(f"  [yellow]Could not read file: {path}[/yellow]")


def estimate_token_count(text: str) -> int:
    """Rough token estimate: about four characters per token."""
    return math.ceil(len(text) / 4)


def print_context_summary(context: ReviewContext) -> None:
    files = (*context.changed_files, *context.dependencies, *context.test_files)
    console.print("\n[bold]Context summary[/bold]")
    console.print("─" * 60)
    console.print(f"Changed files:     {len(context.changed_files)}")
    console.print(f"Dependencies:      {len(context.dependencies)}")
    console.print(f"Test files:        {len(context.test_files)}")
    console.print(f"Total files:       {len(context.all_paths)}")
    console.print(f"Estimated tokens:  ~{sum(estimate_token_count(f.content) for f in files)}")
    console.print("─" * 60)
