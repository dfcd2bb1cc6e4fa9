"""File-system probes used inside criterion checks.

Leaf I/O only: every probe swallows OSError and answers False/empty, so a
missing or unreadable path is just "not found". Probes that can name what
they matched return ``(found, hits)`` with repository-relative paths.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from agentready.context import read_toml

LINT_CONFIG_FILES: tuple[str, ...] = (
    "eslint.config.js",
    "eslint.config.mjs",
    "eslint.config.cjs",
    ".eslintrc",
    ".eslintrc.js",
    ".eslintrc.cjs",
    ".eslintrc.json",
    ".eslintrc.yml",
    ".eslintrc.yaml",
    "biome.json",
    "biome.jsonc",
    ".ruff.toml",
    "ruff.toml",
    ".flake8",
    ".pylintrc",
    ".golangci.yml",
    ".golangci.yaml",
)

FORMATTER_CONFIG_FILES: tuple[str, ...] = (
    "biome.json",
    "biome.jsonc",
    ".prettierrc",
    ".prettierrc.json",
    ".prettierrc.js",
    ".prettierrc.cjs",
    ".prettierrc.yml",
    ".prettierrc.yaml",
    "prettier.config.js",
    "prettier.config.cjs",
    ".editorconfig",
    "rustfmt.toml",
)

TYPECHECK_CONFIG_FILES: tuple[str, ...] = (
    "tsconfig.json",
    "tsconfig.base.json",
    "mypy.ini",
    "pyrightconfig.json",
)

LOCKFILES: tuple[str, ...] = (
    "pnpm-lock.yaml",
    "yarn.lock",
    "package-lock.json",
    "bun.lockb",
    "poetry.lock",
    "uv.lock",
    "Pipfile.lock",
    "requirements.lock",
    "Cargo.lock",
    "go.sum",
)

ENV_TEMPLATES: tuple[str, ...] = (".env.example", ".env.sample", ".env.template")

OBSERVABILITY_PACKAGES: frozenset[str] = frozenset(
    {
        "@opentelemetry/api",
        "@opentelemetry/sdk",
        "@opentelemetry/sdk-node",
        "pino",
        "winston",
        "bunyan",
        "opentelemetry-api",
        "opentelemetry-sdk",
        "structlog",
        "loguru",
        "prometheus-client",
        "sentry-sdk",
    }
)


def exists_any(root: Path, rel_paths: Iterable[str]) -> tuple[bool, list[str]]:
    """Return whether any rel_path exists under root, and which ones."""
    hits = [rp for rp in rel_paths if (root / rp).exists()]
    return bool(hits), hits


def has_any_file(files: Iterable[str], candidates: Iterable[str]) -> tuple[bool, list[str]]:
    """Match candidate names against an already-read directory listing."""
    present = set(files)
    hits = [c for c in candidates if c in present]
    return bool(hits), hits


def has_readme(root: Path) -> bool:
    try:
        names = [p.name.lower() for p in root.iterdir() if p.is_file()]
    except OSError:
        return False
    return any(n in ("readme", "readme.md", "readme.rst", "readme.txt") for n in names)


def has_license(files: Iterable[str]) -> bool:
    return any(f.lower().startswith(("license", "licence", "copying")) for f in files)


def has_codeowners(root: Path) -> bool:
    found, _ = exists_any(root, ("CODEOWNERS", ".github/CODEOWNERS", "docs/CODEOWNERS"))
    return found


def has_github_workflows(root: Path) -> bool:
    wf = root / ".github" / "workflows"
    try:
        return any(p.suffix in (".yml", ".yaml") for p in wf.iterdir())
    except OSError:
        return False


def has_dependency_automation(root: Path) -> tuple[bool, list[str]]:
    return exists_any(
        root,
        (".github/dependabot.yml", ".github/dependabot.yaml", "renovate.json", ".github/renovate.json"),
    )


def has_pull_request_template(root: Path) -> bool:
    if (root / ".github" / "PULL_REQUEST_TEMPLATE.md").is_file():
        return True
    if (root / ".github" / "pull_request_template.md").is_file():
        return True
    try:
        return any(
            p.name.lower().endswith(".md")
            for p in (root / ".github" / "PULL_REQUEST_TEMPLATE").iterdir()
        )
    except OSError:
        return False


def has_precommit_config(root: Path) -> bool:
    found, _ = exists_any(root, (".pre-commit-config.yaml", ".husky", "lefthook.yml"))
    return found


def has_architecture_doc(root: Path) -> bool:
    try:
        if any(p.name.lower() == "architecture.md" for p in root.iterdir()):
            return True
    except OSError:
        return False
    return (root / "docs" / "architecture.md").is_file() or (root / "docs" / "ARCHITECTURE.md").is_file()


def has_agent_instructions(root: Path) -> tuple[bool, list[str]]:
    return exists_any(
        root,
        ("AGENTS.md", "CLAUDE.md", ".github/copilot-instructions.md", ".cursorrules"),
    )


def pyproject_has_tool(root: Path, *tools: str) -> bool:
    """Return True if pyproject.toml under root has any [tool.<name>] table."""
    data = read_toml(root / "pyproject.toml") or {}
    tool = data.get("tool")
    return isinstance(tool, dict) and any(t in tool for t in tools)


def has_tests_dir(root: Path) -> tuple[bool, list[str]]:
    return exists_any(root, ("tests", "test", "__tests__", "spec"))
