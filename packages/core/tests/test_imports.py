"""Tests for reference parsing, path resolution and dependency traversal."""

from dataclasses import dataclass, field

from lgtm_core.utils.imports import PathResolver, collect_dependencies, parse_references


@dataclass
class InMemoryResolver(PathResolver):
    """Resolver over a dict of path -> content instead of the filesystem."""

    files: dict = field(default_factory=dict)

    def _exists(self, path):
        return path in self.files

    def read(self, path):
        return self.files.get(path)


def _write(root, files):
    for path, content in files.items():
        target = root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)


# ---------------------------------------------------------------------------
# parse_references
# ---------------------------------------------------------------------------


class TestParseReferences:
    def test_default_and_named_imports(self):
        content = "import React from 'react';\nimport { useState, useEffect } from \"react\";\n"
        assert parse_references(content) == ["react", "react"]

    def test_namespace_and_type_imports(self):
        content = "import * as api from './api';\nimport type { User } from '../types';\n"
        assert parse_references(content) == ["./api", "../types"]

    def test_side_effect_import(self):
        assert parse_references("import './polyfills';\n") == ["./polyfills"]

    def test_re_export(self):
        content = "export { Button } from './Button';\nexport * from './Card';\n"
        assert parse_references(content) == ["./Button", "./Card"]

    def test_dynamic_import(self):
        content = "const Page = lazy(() => import('./pages/Home'));\n"
        assert parse_references(content) == ["./pages/Home"]

    def test_multiline_named_import(self):
        content = "import {\n  formatDate,\n  formatCurrency,\n} from '@/utils/format';\n"
        assert parse_references(content) == ["@/utils/format"]

    def test_declaration_order_preserved(self):
        content = (
            "import { a } from './a';\n"
            "const lazyB = () => import('./b');\n"
            "export { c } from './c';\n"
            "import './d';\n"
        )
        assert parse_references(content) == ["./a", "./b", "./c", "./d"]

    def test_plain_exports_are_not_references(self):
        content = "export const answer = 42;\nexport default function App() {}\n"
        assert parse_references(content) == []

    def test_identifier_containing_import_is_ignored(self):
        assert parse_references("const reimport = load('./x');\n") == []

    def test_empty_content(self):
        assert parse_references("") == []


# ---------------------------------------------------------------------------
# PathResolver
# ---------------------------------------------------------------------------


class TestPathResolver:
    def test_bare_package_is_external(self, tmp_path):
        resolver = PathResolver(root=tmp_path)
        assert resolver.is_local("react") is False
        assert resolver.resolve("react", "src/App.tsx") is None

    def test_relative_and_alias_are_local(self):
        resolver = PathResolver()
        assert resolver.is_local("./x") is True
        assert resolver.is_local("../x") is True
        assert resolver.is_local("@/x") is True

    def test_scoped_package_is_not_alias(self):
        # "@mui/material" shares the "@" but not the "@/" prefix.
        assert PathResolver().is_local("@mui/material") is False

    def test_appends_extension(self, tmp_path):
        _write(tmp_path, {"src/utils.ts": ""})
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("./utils", "src/App.tsx") == "src/utils.ts"

    def test_typescript_preferred_over_javascript(self, tmp_path):
        _write(tmp_path, {"src/api.ts": "", "src/api.js": ""})
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("./api", "src/App.tsx") == "src/api.ts"

    def test_literal_path_with_known_extension(self, tmp_path):
        _write(tmp_path, {"src/legacy.js": ""})
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("./legacy.js", "src/App.tsx") == "src/legacy.js"

    def test_unknown_extension_is_not_resolved(self, tmp_path):
        _write(tmp_path, {"src/styles.css": ""})
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("./styles.css", "src/App.tsx") is None

    def test_directory_index(self, tmp_path):
        _write(tmp_path, {"src/components/index.tsx": ""})
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("./components", "src/App.tsx") == "src/components/index.tsx"

    def test_file_preferred_over_directory_index(self, tmp_path):
        _write(tmp_path, {"src/hooks.ts": "", "src/hooks/index.ts": ""})
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("./hooks", "src/App.tsx") == "src/hooks.ts"

    def test_parent_relative(self, tmp_path):
        _write(tmp_path, {"src/shared/format.ts": ""})
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("../shared/format", "src/features/Cart.tsx") == "src/shared/format.ts"

    def test_alias_rewritten_from_project_root(self, tmp_path):
        _write(tmp_path, {"src/lib/http.ts": ""})
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("@/lib/http", "src/deep/nested/Widget.tsx") == "src/lib/http.ts"

    def test_custom_alias(self, tmp_path):
        _write(tmp_path, {"app/store.ts": ""})
        resolver = PathResolver(root=tmp_path, aliases={"~/": "app/"})
        assert resolver.resolve("~/store", "app/pages/Home.tsx") == "app/store.ts"
        assert resolver.is_local("@/store") is False

    def test_outside_project_root(self, tmp_path):
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("../../outside", "src/App.tsx") is None

    def test_missing_file(self, tmp_path):
        resolver = PathResolver(root=tmp_path)
        assert resolver.resolve("./ghost", "src/App.tsx") is None


# ---------------------------------------------------------------------------
# collect_dependencies
# ---------------------------------------------------------------------------


class TestCollectDependencies:
    def test_no_references(self):
        resolver = InMemoryResolver(files={"a.ts": "export const a = 1;"})
        assert collect_dependencies("a.ts", resolver, resolver.read) == []

    def test_external_references_ignored(self):
        resolver = InMemoryResolver(files={"a.ts": "import React from 'react';"})
        assert collect_dependencies("a.ts", resolver, resolver.read) == []

    def test_depth_first_pre_order(self):
        resolver = InMemoryResolver(
            files={
                "a.ts": "import './b';\nimport './c';",
                "b.ts": "import './d';",
                "c.ts": "",
                "d.ts": "",
            }
        )
        assert collect_dependencies("a.ts", resolver, resolver.read) == ["b.ts", "d.ts", "c.ts"]

    def test_cycle_terminates(self):
        resolver = InMemoryResolver(
            files={
                "a.ts": "import { b } from './b';",
                "b.ts": "import { a } from './a';",
            }
        )
        assert collect_dependencies("a.ts", resolver, resolver.read) == ["b.ts"]

    def test_self_reference(self):
        resolver = InMemoryResolver(files={"a.ts": "import './a';"})
        assert collect_dependencies("a.ts", resolver, resolver.read) == []

    def test_diamond_visits_shared_file_once(self):
        resolver = InMemoryResolver(
            files={
                "a.ts": "import './b';\nimport './c';",
                "b.ts": "import './d';",
                "c.ts": "import './d';",
                "d.ts": "",
            }
        )
        result = collect_dependencies("a.ts", resolver, resolver.read)
        assert result == ["b.ts", "d.ts", "c.ts"]
        assert len(result) == len(set(result))

    def test_duplicate_reference_in_one_file(self):
        resolver = InMemoryResolver(
            files={
                "a.ts": "import { x } from './b';\nconst y = import('./b');",
                "b.ts": "",
            }
        )
        assert collect_dependencies("a.ts", resolver, resolver.read) == ["b.ts"]

    def test_unreadable_dependency_is_a_leaf(self):
        resolver = InMemoryResolver(files={"a.ts": "import './b';\nimport './c';", "b.ts": "", "c.ts": ""})

        def read(path):
            return None if path == "b.ts" else resolver.read(path)

        assert collect_dependencies("a.ts", resolver, read) == ["b.ts", "c.ts"]

    def test_unreadable_root(self):
        resolver = InMemoryResolver(files={"a.ts": "import './b';", "b.ts": ""})
        assert collect_dependencies("a.ts", resolver, lambda path: None) == []

    def test_deep_chain_does_not_hit_recursion_limit(self):
        depth = 5000
        files = {f"f{i}.ts": f"import './f{i + 1}';" for i in range(depth)}
        files[f"f{depth}.ts"] = ""
        resolver = InMemoryResolver(files=files)

        result = collect_dependencies("f0.ts", resolver, resolver.read)

        assert len(result) == depth
        assert result[0] == "f1.ts"
        assert result[-1] == f"f{depth}.ts"

    def test_reads_each_file_once(self):
        resolver = InMemoryResolver(
            files={
                "a.ts": "import './b';\nimport './c';",
                "b.ts": "import './c';",
                "c.ts": "import './a';",
            }
        )
        reads = []

        def read(path):
            reads.append(path)
            return resolver.read(path)

        collect_dependencies("a.ts", resolver, read)
        assert sorted(reads) == ["a.ts", "b.ts", "c.ts"]
