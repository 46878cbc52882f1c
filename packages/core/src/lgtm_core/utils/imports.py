"""Static discovery of local module references for JavaScript/TypeScript sources.

Parsing is deliberately shallow: a regular expression picks up the module
specifier of static `import`, `export ... from` and literal dynamic
`import('...')` declarations, in the order they appear. References assembled
at runtime (template strings, variables, conditional requires) are not seen;
such false negatives only shrink the review context and are not treated as
errors.

Only local references take part in the graph: relative specifiers (`./`,
`../`) and configured alias prefixes (`@/` → `src/` by default). Bare package
names are external and ignored.
"""

from __future__ import annotations

import logging
import posixpath
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# Typed sources first: when both `api.ts` and `api.js` exist the TypeScript
# file is the one a bundler would pick.
DEFAULT_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".mjs")
DEFAULT_ALIASES: dict[str, str] = {"@/": "src/"}

_RELATIVE_PREFIXES = ("./", "../")

# Group 1: `import x from '...'`, `import '...'`, `export { x } from '...'`.
# Group 2: `import('...')` with a literal specifier.
_REFERENCE_RE = re.compile(
    r"""(?:^|[^\w.$])(?:import|export)\s+(?:[\w*${}\s,]+?\s+from\s+)?['"]([^'"\n]+)['"]"""
    r"""|(?:^|[^\w.$])import\s*\(\s*['"]([^'"\n]+)['"]\s*\)""",
    re.MULTILINE,
)


def parse_references(content: str) -> list[str]:
    """Return module specifiers in declaration order, duplicates included."""
    return [m.group(1) or m.group(2) for m in _REFERENCE_RE.finditer(content)]


@dataclass
class PathResolver:
    """Turn a module specifier into a project-relative file path.

    Paths handed in and returned are POSIX-style and relative to ``root``, the
    same shape git reports changed files in, so a dependency reached through
    an import compares equal to the changed-file path of the same file.
    """

    root: Path = field(default_factory=lambda: Path("."))
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    aliases: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ALIASES))

    def is_local(self, reference: str) -> bool:
        return reference.startswith(_RELATIVE_PREFIXES) or any(reference.startswith(a) for a in self.aliases)

    def resolve(self, reference: str, from_path: str) -> str | None:
        """Resolve reference as seen from from_path, or return None.

        First match wins:
          1. the literal path, when it already ends in a known extension
          2. the path with each known extension appended
          3. ``index<ext>`` inside the path treated as a directory
        """
        if not self.is_local(reference):
            return None

        base = self._project_path(reference, from_path)
        if base is None:
            return None

        if posixpath.splitext(base)[1] in self.extensions and self._exists(base):
            return base

        for ext in self.extensions:
            if self._exists(base + ext):
                return base + ext

        for ext in self.extensions:
            candidate = posixpath.join(base, f"index{ext}")
            if self._exists(candidate):
                return candidate

        return None

    def _project_path(self, reference: str, from_path: str) -> str | None:
        for prefix, target in self.aliases.items():
            if reference.startswith(prefix):
                joined = posixpath.join(target, reference[len(prefix) :])
                break
        else:
            joined = posixpath.join(posixpath.dirname(from_path), reference)

        normalized = posixpath.normpath(joined)
        # Outside the project tree: not a local file for our purposes.
        if normalized == ".." or normalized.startswith("../") or posixpath.isabs(normalized):
            logger.debug("Ignoring %r from %s: resolves outside the project root", reference, from_path)
            return None
        return normalized

    def _exists(self, path: str) -> bool:
        return (self.root / path).is_file()


def _local_edges(path: str, resolver: PathResolver, read: Callable[[str], str | None]) -> Iterator[str]:
    content = read(path)
    if content is None:
        # Unreadable files are leaves: no outgoing edges, traversal carries on.
        logger.debug("No references read from %s: file unreadable", path)
        return
    for reference in parse_references(content):
        resolved = resolver.resolve(reference, path)
        if resolved is not None:
            yield resolved


def collect_dependencies(
    root_path: str,
    resolver: PathResolver,
    read: Callable[[str], str | None],
) -> list[str]:
    """Return every file reachable from root_path through local references.

    Depth-first pre-order: a newly discovered file is emitted and fully
    expanded before the next reference of its parent is looked at, so the
    result follows declaration order file by file. The traversal keeps an
    explicit stack of per-file edge iterators instead of recursing, which
    keeps very deep import chains clear of the interpreter's recursion limit.

    The visited set starts with root_path only; each file appears at most
    once in the result and root_path never does, which makes cycles and
    diamond-shaped graphs terminate.
    """
    visited = {root_path}
    discovered: list[str] = []
    stack = [_local_edges(root_path, resolver, read)]

    while stack:
        dep = next(stack[-1], None)
        if dep is None:
            stack.pop()
            continue
        if dep in visited:
            continue
        visited.add(dep)
        discovered.append(dep)
        stack.append(_local_edges(dep, resolver, read))

    return discovered
