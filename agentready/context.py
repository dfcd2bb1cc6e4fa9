"""Repository context snapshot consumed by criterion checks.

build_context() reads the repository root once and returns a frozen
ReadinessContext. Checks receive the same context object and must not
mutate it. Detection here is deliberately shallow: root listing, root
manifest, workspace application units and configured areas.
"""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class RepoApp:
    """One application unit (workspace package or the root project)."""

    name: str
    path: str
    manifest_path: str
    scripts: Mapping[str, str] = field(default_factory=_empty_mapping)
    dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class RepoArea:
    """A named sub-directory of the repository that gets its own breakdown."""

    name: str
    apply_to: str
    source: str = "config"

    @property
    def directory(self) -> str:
        """Leading path of apply_to, without glob segments."""
        parts = []
        for part in self.apply_to.split("/"):
            if any(ch in part for ch in "*?["):
                break
            parts.append(part)
        return "/".join(parts)


@dataclass(frozen=True)
class ReadinessContext:
    """Read-only repository snapshot shared by every check in one run."""

    repo_path: str
    root_files: tuple[str, ...] = ()
    root_manifest: Mapping[str, Any] | None = None
    apps: tuple[RepoApp, ...] = ()
    areas: tuple[RepoArea, ...] = ()
    config: Mapping[str, Any] = field(default_factory=_empty_mapping)

    @property
    def root(self) -> Path:
        return Path(self.repo_path)

    @property
    def is_monorepo(self) -> bool:
        return len(self.apps) > 1


def safe_list_dir(path: Path) -> list[str]:
    """Return sorted entry names of path, or [] when it cannot be read."""
    try:
        return sorted(p.name for p in path.iterdir())
    except OSError:
        return []


def read_json(path: Path) -> dict[str, Any] | None:
    """Return parsed JSON object at path, or None when missing or malformed."""
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def read_toml(path: Path) -> dict[str, Any] | None:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return None


def _freeze(value: Any) -> Any:
    """Recursively wrap dicts in MappingProxyType and lists in tuples."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _npm_app(app_dir: Path, repo_root: Path, manifest: dict[str, Any]) -> RepoApp:
    scripts = manifest.get("scripts") if isinstance(manifest.get("scripts"), dict) else {}
    deps: dict[str, Any] = {}
    for key in ("dependencies", "devDependencies"):
        section = manifest.get(key)
        if isinstance(section, dict):
            deps.update(section)
    rel = app_dir.relative_to(repo_root).as_posix() if app_dir != repo_root else "."
    return RepoApp(
        name=str(manifest.get("name") or app_dir.name),
        path=rel,
        manifest_path=str(app_dir / "package.json"),
        scripts=MappingProxyType({str(k): str(v) for k, v in scripts.items()}),
        dependencies=tuple(sorted(deps)),
    )


def _python_app(app_dir: Path, repo_root: Path, manifest: dict[str, Any]) -> RepoApp:
    project = manifest.get("project") if isinstance(manifest.get("project"), dict) else {}
    deps = [str(d) for d in project.get("dependencies") or []]
    for extra in (project.get("optional-dependencies") or {}).values():
        deps.extend(str(d) for d in extra)
    # pyproject has no scripts table in the npm sense; expose declared entry points
    scripts = project.get("scripts") if isinstance(project.get("scripts"), dict) else {}
    rel = app_dir.relative_to(repo_root).as_posix() if app_dir != repo_root else "."
    return RepoApp(
        name=str(project.get("name") or app_dir.name),
        path=rel,
        manifest_path=str(app_dir / "pyproject.toml"),
        scripts=MappingProxyType({str(k): str(v) for k, v in scripts.items()}),
        dependencies=tuple(sorted({_requirement_name(d) for d in deps})),
    )


def _requirement_name(requirement: str) -> str:
    name = requirement.strip()
    for sep in ("[", "<", ">", "=", "!", "~", ";", " "):
        name = name.split(sep, 1)[0]
    return name.lower()


def _is_repo_relative(pattern: str) -> bool:
    """True when pattern is non-empty, relative and has no ".." segment."""
    posix = PurePosixPath(pattern.replace("\\", "/"))
    if not pattern.strip() or posix.is_absolute() or Path(pattern).is_absolute():
        return False
    return ".." not in posix.parts


def _workspace_patterns(repo_root: Path, root_pkg: dict[str, Any] | None) -> list[str]:
    """Return workspace glob patterns from package.json or pnpm-workspace.yaml."""
    if root_pkg:
        ws = root_pkg.get("workspaces")
        if isinstance(ws, list):
            return [str(p) for p in ws]
        if isinstance(ws, dict) and isinstance(ws.get("packages"), list):
            return [str(p) for p in ws["packages"]]
    pnpm = repo_root / "pnpm-workspace.yaml"
    if pnpm.is_file():
        try:
            with pnpm.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Could not read %s: %s", pnpm, exc)
            return []
        packages = data.get("packages") if isinstance(data, dict) else None
        if isinstance(packages, list):
            return [str(p) for p in packages]
    return []


def resolve_apps(repo_root: Path, root_files: list[str]) -> list[RepoApp]:
    """Return application units: workspace packages, else the root project."""
    root_pkg = read_json(repo_root / "package.json") if "package.json" in root_files else None
    apps: list[RepoApp] = []
    seen: set[Path] = set()
    resolved_root = repo_root.resolve()
    for pattern in _workspace_patterns(repo_root, root_pkg):
        if pattern.startswith("!"):
            continue
        if not _is_repo_relative(pattern):
            logger.warning("Ignoring workspace pattern outside the repository: %r", pattern)
            continue
        for candidate in sorted(repo_root.glob(pattern.rstrip("/"))):
            if candidate in seen or not candidate.is_dir():
                continue
            if not candidate.resolve().is_relative_to(resolved_root):
                continue
            manifest = read_json(candidate / "package.json")
            if manifest is None:
                continue
            seen.add(candidate)
            apps.append(_npm_app(candidate, repo_root, manifest))
    if apps:
        return apps

    if root_pkg is not None:
        return [_npm_app(repo_root, repo_root, root_pkg)]
    if "pyproject.toml" in root_files:
        pyproject = read_toml(repo_root / "pyproject.toml")
        if pyproject is not None:
            return [_python_app(repo_root, repo_root, pyproject)]
    return []


def _load_areas(config: Mapping[str, Any]) -> tuple[RepoArea, ...]:
    raw = config.get("areas")
    if not isinstance(raw, (list, tuple)):
        return ()
    areas = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        name = entry.get("name")
        apply_to = entry.get("applyTo") or entry.get("apply_to")
        if not (isinstance(name, str) and name.strip() and isinstance(apply_to, str) and apply_to):
            continue
        if not _is_repo_relative(apply_to):
            logger.warning("Ignoring area %r: applyTo %r is outside the repository", name, apply_to)
            continue
        areas.append(RepoArea(name=name.strip(), apply_to=apply_to))
    return tuple(areas)


def load_repo_config(repo_root: Path, config_file: str) -> dict[str, Any]:
    """Return the repository config file content, or {} when absent.

    Raises:
        ValueError: Config file exists but is not a JSON object.
    """
    path = repo_root / config_file
    if not path.is_file():
        return {}
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except ValueError as exc:
        raise ValueError(f"{config_file} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{config_file} must contain a JSON object")
    return data


def build_context(repo_path: str | Path, *, config_file: str | None = None) -> ReadinessContext:
    """Build the read-only context for one repository."""
    if config_file is None:
        from agentready.config import get_settings

        config_file = get_settings().config_file
    repo_root = Path(repo_path)
    root_files = safe_list_dir(repo_root)

    root_manifest: dict[str, Any] | None = None
    if "package.json" in root_files:
        root_manifest = read_json(repo_root / "package.json")
    elif "pyproject.toml" in root_files:
        root_manifest = read_toml(repo_root / "pyproject.toml")

    config = load_repo_config(repo_root, config_file)
    apps = resolve_apps(repo_root, root_files)
    logger.debug("Context for %s: %d root files, %d apps", repo_root, len(root_files), len(apps))
    frozen_config = _freeze(config)
    return ReadinessContext(
        repo_path=str(repo_path),
        root_files=tuple(root_files),
        root_manifest=_freeze(root_manifest) if root_manifest is not None else None,
        apps=tuple(apps),
        areas=_load_areas(frozen_config),
        config=frozen_config,
    )
