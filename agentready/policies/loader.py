"""Policy loader: turn a policy reference into a validated policy record.

Source forms:

- ``*.json`` / ``*.yaml`` / ``*.yml`` files: pure data, always validated as
  data-only (``add`` rejected), producing a DataPolicy.
- ``*.py`` files and dotted module names: code-authored policies exposing a
  module attribute ``policy`` (or ``POLICY``), producing a CodePolicy.
- inline mappings and already-built policy records, for callers in code.

``data_only=True`` is the trust mode for configuration the operator did not
hand over explicitly (e.g. a repository's own committed config file): module
sources are refused before anything is imported.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from agentready.policies.models import CodePolicy, DataPolicy, Policy
from agentready.policies.schemas import (
    PolicyValidationError,
    validate_policy,
    validate_policy_record,
)

logger = logging.getLogger(__name__)

DATA_EXTENSIONS: frozenset[str] = frozenset({".json", ".yaml", ".yml"})
MODULE_EXTENSIONS: frozenset[str] = frozenset({".py"})
POLICY_ATTRIBUTES: tuple[str, ...] = ("policy", "POLICY")

PolicySource = str | Path | Mapping[str, Any] | DataPolicy | CodePolicy


def parse_policy_sources(value: str | None) -> list[str] | None:
    """Split a comma-separated policy reference list.

    Returns None for None or an empty/blank string; otherwise the trimmed,
    non-empty segments in order.
    """
    if not value:
        return None
    sources = [part.strip() for part in value.split(",") if part.strip()]
    return sources or None


def _default_config_file() -> str:
    from agentready.config import get_settings

    return get_settings().config_file


def _looks_like_path(ref: str) -> bool:
    return (
        ref.startswith((".", "/", "~"))
        or "/" in ref
        or "\\" in ref
        or Path(ref).suffix.lower() in DATA_EXTENSIONS | MODULE_EXTENSIONS
    )


def load_policy(
    source: PolicySource,
    *,
    data_only: bool = False,
    config_file: str | None = None,
    base_dir: str | Path | None = None,
) -> Policy:
    """Load and validate one policy.

    Args:
        source: Path, module name, inline mapping, or policy record.
        data_only: Refuse code-authored sources and ``add`` rules.
        config_file: Name used in trust-mode error messages.
        base_dir: Directory that relative paths resolve against (default: cwd).

    Returns:
        DataPolicy for data sources or data-only trust, CodePolicy otherwise.

    Raises:
        PolicyValidationError: Source missing, not importable, refused by the
            trust mode, or invalid.
    """
    config_file = config_file or _default_config_file()

    if isinstance(source, DataPolicy):
        return _validated_record(source, source.source)
    if isinstance(source, CodePolicy):
        if data_only:
            raise PolicyValidationError(
                f"only JSON/YAML policies are allowed from {config_file}", source.source
            )
        return _validated_record(source, source.source)
    if isinstance(source, Mapping):
        return _validated(source, data_only=data_only, source=None)

    ref = str(source).strip()
    if not ref:
        raise PolicyValidationError("policy reference must be a non-empty string")

    if isinstance(source, Path) or _looks_like_path(ref):
        path = Path(ref).expanduser()
        if not path.is_absolute() and base_dir is not None:
            path = Path(base_dir) / path
        suffix = path.suffix.lower()
        if suffix in DATA_EXTENSIONS:
            return _load_data_file(path)
        if suffix in MODULE_EXTENSIONS:
            if data_only:
                raise PolicyValidationError(
                    f"only JSON/YAML policies are allowed from {config_file}", ref
                )
            return _load_module_file(path)
        raise PolicyValidationError(
            f"unsupported policy file extension {suffix or '(none)'!r}; "
            f"use one of {sorted(DATA_EXTENSIONS | MODULE_EXTENSIONS)}",
            ref,
        )

    if data_only:
        raise PolicyValidationError(
            f"only JSON/YAML file policies are allowed from {config_file}", ref
        )
    return _load_module(ref)


def load_policies(
    sources: Iterable[PolicySource] | None,
    *,
    data_only: bool = False,
    config_file: str | None = None,
    base_dir: str | Path | None = None,
) -> list[Policy]:
    """Load policies in order; the first failure aborts the whole load."""
    policies: list[Policy] = []
    for source in sources or ():
        policy = load_policy(source, data_only=data_only, config_file=config_file, base_dir=base_dir)
        logger.info(
            "Loaded %s policy %r from %s",
            "data" if isinstance(policy, DataPolicy) else "code",
            policy.name,
            policy.source or "inline",
        )
        policies.append(policy)
    return policies


def _validated(raw: Any, *, data_only: bool, source: str | None) -> Policy:
    try:
        return validate_policy(raw, data_only=data_only, source=source)
    except PolicyValidationError as e:
        logger.warning("Policy validation failed: %s", e)
        raise


def _validated_record(policy: Policy, source: str | None) -> Policy:
    try:
        return validate_policy_record(policy, source=source)
    except PolicyValidationError as e:
        logger.warning("Policy validation failed: %s", e)
        raise


def _load_data_file(path: Path) -> DataPolicy:
    source = str(path)
    if not path.is_file():
        raise PolicyValidationError(f"file not found at: {path}")
    try:
        with path.open(encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                raw = json.load(f)
            else:
                raw = yaml.safe_load(f)
    except json.JSONDecodeError as exc:
        raise PolicyValidationError(f"invalid JSON: {exc}", source) from exc
    except yaml.YAMLError as exc:
        raise PolicyValidationError(f"invalid YAML: {exc}", source) from exc
    except OSError as exc:
        raise PolicyValidationError(f"could not be read: {exc}", source) from exc
    return _validated(raw, data_only=True, source=source)


def _load_module_file(path: Path) -> Policy:
    source = str(path)
    if not path.is_file():
        raise PolicyValidationError(f"file not found at: {path}")
    digest = hashlib.sha256(str(path.resolve()).encode("utf-8")).hexdigest()[:12]
    module_name = f"agentready_policy_{path.stem}_{digest}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise PolicyValidationError("could not be loaded as a Python module", source)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise PolicyValidationError(f"module failed to import: {exc!r}", source) from exc
    return _policy_from_module(module, source)


def _load_module(name: str) -> Policy:
    try:
        module = importlib.import_module(name)
    except ModuleNotFoundError as exc:
        if exc.name and name.split(".")[0] != exc.name.split(".")[0]:
            raise PolicyValidationError(f"module failed to import: {exc}", name) from exc
        raise PolicyValidationError(
            f'module "{name}" could not be imported; install it first (pip install {name.split(".")[0]})',
            name,
        ) from exc
    except Exception as exc:
        raise PolicyValidationError(f"module failed to import: {exc!r}", name) from exc
    return _policy_from_module(module, name)


def _policy_from_module(module: Any, source: str) -> Policy:
    for attr in POLICY_ATTRIBUTES:
        if hasattr(module, attr):
            value = getattr(module, attr)
            break
    else:
        raise PolicyValidationError(
            f"module does not define a {' or '.join(POLICY_ATTRIBUTES)} attribute", source
        )
    if isinstance(value, (CodePolicy, DataPolicy)):
        return _validated_record(value, source)
    return _validated(value, data_only=False, source=source)
