from __future__ import annotations

import fnmatch

# Dependency lockfiles are machine-generated and only add noise to a review.
LOCKFILE_NAMES = {
    "yarn.lock",
    "package-lock.json",
    "pnpm-lock.yaml",
}

BINARY_EXTENSIONS = {
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".svg",
    ".ico",
    ".woff",
    ".woff2",
    ".ttf",
    ".eot",
    ".otf",
    ".pdf",
    ".zip",
    ".tar",
    ".gz",
    ".mp4",
    ".mp3",
    ".wav",
    ".exe",
    ".dll",
    ".so",
    ".dylib",
}


def is_code_file(file_name: str) -> bool:
    if file_name.rsplit("/", 1)[-1] in LOCKFILE_NAMES:
        return False
    return not any(file_name.lower().endswith(ext) for ext in BINARY_EXTENSIONS)


def is_excluded(filename: str, patterns: list[str]) -> bool:
    """Return True if filename matches any exclude pattern.

    Supports:
    - fnmatch globs on the full path: "src/generated/*.ts"
    - fnmatch globs on the basename: "*.min.js"
    - Directory names/prefixes: "migrations/", "vendor" (matches any file within that tree)
    """
    for pattern in patterns:
        if fnmatch.fnmatch(filename, pattern):
            return True
        if fnmatch.fnmatch(filename.rsplit("/", 1)[-1], pattern):
            return True
        prefix = pattern.rstrip("/") + "/"
        if filename.startswith(prefix) or ("/" + prefix) in filename:
            return True
    return False


def filter_files(files: list[str], patterns: list[str] | None = None) -> list[str]:
    """Drop lockfiles, binary assets and anything matching the configured exclude patterns."""
    patterns = patterns or []
    return [f for f in files if is_code_file(f) and not is_excluded(f, patterns)]
