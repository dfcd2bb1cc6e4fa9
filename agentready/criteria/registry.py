"""Built-in criterion registry.

build_registry() returns a fresh, read-only Registry on every call; nothing
here is a module-level mutable list, so concurrent runs with different policy
chains cannot see each other's changes. Check functions only read the context.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from agentready.context import ReadinessContext, RepoApp, RepoArea, read_json, read_toml
from agentready.criteria import probes
from agentready.criteria.types import (
    AreaCriterion,
    CheckOutcome,
    Criterion,
    ExtraDefinition,
    passed_if,
)


@dataclass(frozen=True)
class Registry:
    """Base criteria, extras and area criteria, in report order."""

    criteria: tuple[Criterion, ...]
    extras: tuple[ExtraDefinition, ...]
    area_criteria: tuple[AreaCriterion, ...] = ()

    def criterion_ids(self) -> tuple[str, ...]:
        return tuple(c.id for c in self.criteria)

    def extra_ids(self) -> tuple[str, ...]:
        return tuple(e.id for e in self.extras)


# ── Repository checks ───────────────────────────────────────────────────


def _check_lint_config(context: ReadinessContext, app=None) -> CheckOutcome:
    found, hits = probes.has_any_file(context.root_files, probes.LINT_CONFIG_FILES)
    if not found and probes.pyproject_has_tool(context.root, "ruff", "flake8", "pylint"):
        found, hits = True, ["pyproject.toml"]
    return passed_if(
        found,
        "Missing linter configuration (ESLint/Biome/Ruff/Flake8/Pylint).",
        tuple(hits) or ("eslint.config.js", ".eslintrc", "biome.json", "ruff.toml"),
    )


def _check_typecheck_config(context: ReadinessContext, app=None) -> CheckOutcome:
    found, hits = probes.has_any_file(context.root_files, probes.TYPECHECK_CONFIG_FILES)
    if not found and probes.pyproject_has_tool(context.root, "mypy", "pyright"):
        found, hits = True, ["pyproject.toml"]
    return passed_if(
        found,
        "Missing type checking config (tsconfig, mypy or pyright).",
        tuple(hits) or probes.TYPECHECK_CONFIG_FILES,
    )


def _check_ci_config(context: ReadinessContext, app=None) -> CheckOutcome:
    return passed_if(
        probes.has_github_workflows(context.root),
        "Missing .github/workflows CI configuration.",
        (".github/workflows",),
    )


def _check_readme(context: ReadinessContext, app=None) -> CheckOutcome:
    return passed_if(
        probes.has_readme(context.root),
        "Missing README documentation.",
        ("README.md",),
    )


def _check_contributing(context: ReadinessContext, app=None) -> CheckOutcome:
    found, hits = probes.exists_any(context.root, ("CONTRIBUTING.md", ".github/CONTRIBUTING.md"))
    return passed_if(
        found,
        "Missing CONTRIBUTING.md for contributor workflows.",
        tuple(hits) or ("CONTRIBUTING.md",),
    )


def _check_lockfile(context: ReadinessContext, app=None) -> CheckOutcome:
    found, hits = probes.has_any_file(context.root_files, probes.LOCKFILES)
    return passed_if(found, "Missing package manager lockfile.", tuple(hits))


def _check_env_example(context: ReadinessContext, app=None) -> CheckOutcome:
    found, hits = probes.has_any_file(context.root_files, probes.ENV_TEMPLATES)
    return passed_if(
        found,
        "Missing .env.example or .env.sample for setup guidance.",
        tuple(hits),
    )


def _check_format_config(context: ReadinessContext, app=None) -> CheckOutcome:
    found, hits = probes.has_any_file(context.root_files, probes.FORMATTER_CONFIG_FILES)
    if not found and probes.pyproject_has_tool(context.root, "black", "ruff"):
        found, hits = True, ["pyproject.toml"]
    return passed_if(found, "Missing formatter config (Prettier/Biome/Black/Ruff).", tuple(hits))


def _check_codeowners(context: ReadinessContext, app=None) -> CheckOutcome:
    return passed_if(probes.has_codeowners(context.root), "Missing CODEOWNERS file.")


def _check_license(context: ReadinessContext, app=None) -> CheckOutcome:
    return passed_if(probes.has_license(context.root_files), "Missing LICENSE file.")


def _check_security_policy(context: ReadinessContext, app=None) -> CheckOutcome:
    found, hits = probes.exists_any(context.root, ("SECURITY.md", ".github/SECURITY.md"))
    return passed_if(found, "Missing SECURITY.md policy.", tuple(hits))


def _check_dependabot(context: ReadinessContext, app=None) -> CheckOutcome:
    found, hits = probes.has_dependency_automation(context.root)
    return passed_if(
        found,
        "Missing .github/dependabot.yml (or Renovate) configuration.",
        tuple(hits),
    )


def _all_dependencies(context: ReadinessContext) -> set[str]:
    deps: set[str] = set()
    for app in context.apps:
        deps.update(app.dependencies)
    if not context.apps and context.root_manifest is not None:
        for key in ("dependencies", "devDependencies"):
            section = context.root_manifest.get(key)
            if hasattr(section, "keys"):
                deps.update(section.keys())
    return deps


def _check_observability(context: ReadinessContext, app=None) -> CheckOutcome:
    hits = sorted(_all_dependencies(context) & probes.OBSERVABILITY_PACKAGES)
    return passed_if(
        bool(hits),
        "No observability dependencies detected (OpenTelemetry/logging).",
        tuple(hits),
    )


# ── Application checks ──────────────────────────────────────────────────


def _app_root(app: RepoApp) -> Path:
    return Path(app.manifest_path).parent


def _is_python_app(app: RepoApp) -> bool:
    return app.manifest_path.endswith("pyproject.toml")


def _check_build_script(context: ReadinessContext, app: RepoApp | None = None) -> CheckOutcome:
    if app is None:
        return CheckOutcome(status="skip", reason="Application check invoked without an application.")
    if _is_python_app(app):
        pyproject = read_toml(Path(app.manifest_path)) or {}
        return passed_if(
            "build-system" in pyproject,
            "Missing [build-system] table in pyproject.toml.",
            ("pyproject.toml",),
        )
    return passed_if("build" in app.scripts, "Missing build script in package.json.")


def _check_test_script(context: ReadinessContext, app: RepoApp | None = None) -> CheckOutcome:
    if app is None:
        return CheckOutcome(status="skip", reason="Application check invoked without an application.")
    if _is_python_app(app):
        found, hits = probes.has_tests_dir(_app_root(app))
        if not found and probes.pyproject_has_tool(_app_root(app), "pytest"):
            found, hits = True, ["pyproject.toml"]
        return passed_if(found, "Missing tests directory or pytest configuration.", tuple(hits))
    return passed_if("test" in app.scripts, "Missing test script in package.json.")


# ── Area checks ─────────────────────────────────────────────────────────


def _area_root(context: ReadinessContext, area: RepoArea) -> Path:
    return context.root / area.directory if area.directory else context.root


def _check_area_readme(context: ReadinessContext, area: RepoArea | None = None) -> CheckOutcome:
    if area is None:
        return CheckOutcome(status="skip", reason="Area check invoked without an area.")
    return passed_if(
        probes.has_readme(_area_root(context, area)),
        "Missing README in area directory.",
    )


def _check_area_tests(context: ReadinessContext, area: RepoArea | None = None) -> CheckOutcome:
    if area is None:
        return CheckOutcome(status="skip", reason="Area check invoked without an area.")
    root = _area_root(context, area)
    found, hits = probes.has_tests_dir(root)
    if not found:
        manifest = read_json(root / "package.json") or {}
        scripts = manifest.get("scripts") or {}
        found = isinstance(scripts, dict) and "test" in scripts
    return passed_if(found, "No tests found in area directory.", tuple(hits))


# ── Extras ──────────────────────────────────────────────────────────────


def _check_agents_doc(context: ReadinessContext, app=None) -> CheckOutcome:
    found, hits = probes.has_agent_instructions(context.root)
    return passed_if(found, "Missing AGENTS.md to guide coding agents.", tuple(hits))


def _check_pr_template(context: ReadinessContext, app=None) -> CheckOutcome:
    return passed_if(
        probes.has_pull_request_template(context.root),
        "Missing PR template for consistent reviews.",
    )


def _check_pre_commit(context: ReadinessContext, app=None) -> CheckOutcome:
    return passed_if(
        probes.has_precommit_config(context.root),
        "Missing pre-commit or Husky configuration for fast feedback.",
    )


def _check_architecture_doc(context: ReadinessContext, app=None) -> CheckOutcome:
    return passed_if(
        probes.has_architecture_doc(context.root),
        "Missing architecture documentation.",
    )


def build_criteria() -> tuple[Criterion, ...]:
    """Return the built-in criteria in report order."""
    return (
        Criterion("lint-config", "Linting configured", "style-validation", 1, "repo", "high", "low", _check_lint_config),
        Criterion("typecheck-config", "Type checking configured", "style-validation", 2, "repo", "medium", "low", _check_typecheck_config),
        Criterion("build-script", "Build script present", "build-system", 1, "app", "high", "low", _check_build_script),
        Criterion("ci-config", "CI workflow configured", "build-system", 2, "repo", "high", "medium", _check_ci_config),
        Criterion("test-script", "Test script present", "testing", 1, "app", "high", "low", _check_test_script),
        Criterion("readme", "README present", "documentation", 1, "repo", "high", "low", _check_readme),
        Criterion("contributing", "CONTRIBUTING guide present", "documentation", 2, "repo", "medium", "low", _check_contributing),
        Criterion("lockfile", "Lockfile present", "dev-environment", 1, "repo", "high", "low", _check_lockfile),
        Criterion("env-example", "Environment example present", "dev-environment", 2, "repo", "medium", "low", _check_env_example),
        Criterion("format-config", "Formatter configured", "code-quality", 2, "repo", "medium", "low", _check_format_config),
        Criterion("codeowners", "CODEOWNERS present", "security-governance", 2, "repo", "medium", "low", _check_codeowners),
        Criterion("license", "LICENSE present", "security-governance", 1, "repo", "medium", "low", _check_license),
        Criterion("security-policy", "Security policy present", "security-governance", 3, "repo", "high", "low", _check_security_policy),
        Criterion("dependabot", "Dependabot configured", "security-governance", 3, "repo", "medium", "medium", _check_dependabot),
        Criterion("observability", "Observability tooling present", "observability", 3, "repo", "medium", "medium", _check_observability),
    )


def build_extras() -> tuple[ExtraDefinition, ...]:
    """Return the built-in extra checks."""
    return (
        ExtraDefinition("agents-doc", "AGENTS.md present", _check_agents_doc),
        ExtraDefinition("pr-template", "Pull request template present", _check_pr_template),
        ExtraDefinition("pre-commit", "Pre-commit hooks configured", _check_pre_commit),
        ExtraDefinition("architecture-doc", "Architecture guide present", _check_architecture_doc),
    )


def build_area_criteria() -> tuple[AreaCriterion, ...]:
    return (
        AreaCriterion("area-readme", "Area README present", "documentation", 1, "medium", "low", _check_area_readme),
        AreaCriterion("area-tests", "Area tests present", "testing", 1, "high", "medium", _check_area_tests),
    )


def build_registry() -> Registry:
    """Construct the base registry passed into policy resolution."""
    return Registry(
        criteria=build_criteria(),
        extras=build_extras(),
        area_criteria=build_area_criteria(),
    )
