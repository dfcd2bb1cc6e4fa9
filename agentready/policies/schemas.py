"""Policy schema validation.

Validates a raw policy mapping and builds a DataPolicy or CodePolicy from it.
Checks run in a fixed order and raise PolicyValidationError on the first
violation, naming the offending field:

1. the value is a mapping
2. ``name`` is present and non-empty after trimming
3. no unknown top-level keys
4. ``criteria`` / ``extras`` are mappings with known keys
5. ``*.disable`` are arrays of strings
6. ``*.override`` map ids to mappings of permitted metadata keys only
7. ``thresholds`` is a mapping; ``passRate`` is a number in [0, 1]
8. ``*.add`` only when the source is trusted code (data_only=False)

Override keys never include ``id`` or ``check``: a data-driven override can
neither change a criterion's identity nor inject executable logic.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Mapping

from agentready.core_catalogue.loader import get_pillar_ids, is_valid_pillar
from agentready.criteria.types import (
    EFFORTS,
    IMPACTS,
    MAX_LEVEL,
    MIN_LEVEL,
    SCOPES,
    Criterion,
    ExtraDefinition,
)
from agentready.policies.models import (
    CRITERION_OVERRIDE_KEYS,
    EXTRA_OVERRIDE_KEYS,
    CodePolicy,
    CodePolicyRules,
    DataPolicy,
    DataPolicyRules,
    Policy,
    Thresholds,
)

logger = logging.getLogger(__name__)

ALLOWED_TOP_LEVEL_KEYS: frozenset[str] = frozenset({"name", "criteria", "extras", "thresholds"})
ALLOWED_SECTION_KEYS: frozenset[str] = frozenset({"disable", "override", "add"})
ALLOWED_THRESHOLD_KEYS: frozenset[str] = frozenset({"passRate", "pass_rate"})


class PolicyValidationError(ValueError):
    """Raised when a policy source is missing, unloadable or invalid.

    Subclasses ValueError so callers can catch it alongside other config
    errors. ``source`` is the file path or module name when known.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        prefix = f"Policy {source}: " if source else "Policy: "
        super().__init__(prefix + message)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_policy(raw: Any, *, data_only: bool, source: str | None = None) -> Policy:
    """Validate a raw policy value and return the matching policy record.

    Args:
        raw: Parsed policy content (dict from JSON/YAML, or a module attribute).
        data_only: True for untrusted data; ``add`` is rejected and a
            DataPolicy is returned. False returns a CodePolicy.
        source: File path or module name, used in error messages.

    Raises:
        PolicyValidationError: On the first violated rule.
    """

    def fail(message: str) -> PolicyValidationError:
        return PolicyValidationError(message, source)

    if not isinstance(raw, Mapping):
        raise fail(f"expected an object, got {_type_name(raw)}")

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise fail('missing required field "name"')

    for key in raw:
        if key not in ALLOWED_TOP_LEVEL_KEYS:
            raise fail(
                f'unknown top-level key "{key}"; allowed keys are {sorted(ALLOWED_TOP_LEVEL_KEYS)}'
            )

    sections: dict[str, Mapping[str, Any] | None] = {}
    for section in ("criteria", "extras"):
        if section not in raw:
            sections[section] = None
            continue
        value = raw[section]
        if not isinstance(value, Mapping):
            raise fail(f'"{section}" must be an object')
        for key in value:
            if key not in ALLOWED_SECTION_KEYS:
                raise fail(f'"{section}" has unknown key "{key}"')
        sections[section] = value

    disables = {
        section: _validate_disable(value, section, fail) if value is not None else ()
        for section, value in sections.items()
    }
    overrides = {
        "criteria": _validate_override(sections["criteria"], "criteria", CRITERION_OVERRIDE_KEYS, fail),
        "extras": _validate_override(sections["extras"], "extras", EXTRA_OVERRIDE_KEYS, fail),
    }

    thresholds = _validate_thresholds(raw, fail)

    adds: dict[str, tuple[Any, ...]] = {"criteria": (), "extras": ()}
    for section, value in sections.items():
        if value is None or "add" not in value:
            continue
        if data_only:
            raise fail(f'"{section}.add" is not supported in data-only (JSON/YAML) policies')
        adds[section] = _validate_add(value["add"], section, fail)

    def rules(section: str):
        if sections[section] is None:
            return None
        if data_only:
            return DataPolicyRules(disable=disables[section], override=overrides[section])
        return CodePolicyRules(
            disable=disables[section], override=overrides[section], add=adds[section]
        )

    policy_cls = DataPolicy if data_only else CodePolicy
    return policy_cls(
        name=name.strip(),
        criteria=rules("criteria"),
        extras=rules("extras"),
        thresholds=thresholds,
        source=source,
    )


def validate_policy_record(policy: Any, *, source: str | None = None) -> Policy:
    """Check an already-built DataPolicy or CodePolicy against the mapping rules.

    Records exported by policy modules or handed to run_readiness_report()
    never pass through validate_policy(), so the name, disable lists,
    overrides, additions and thresholds are checked here instead.

    Raises:
        PolicyValidationError: On the first violated rule.
    """
    if source is None:
        source = getattr(policy, "source", None)

    def fail(message: str) -> PolicyValidationError:
        return PolicyValidationError(message, source)

    if not isinstance(policy, (DataPolicy, CodePolicy)):
        raise fail(f"expected a DataPolicy or CodePolicy, got {_type_name(policy)}")
    if not isinstance(policy.name, str) or not policy.name.strip():
        raise fail('missing required field "name"')

    for label, rules, allowed in (
        ("criteria", policy.criteria, CRITERION_OVERRIDE_KEYS),
        ("extras", policy.extras, EXTRA_OVERRIDE_KEYS),
    ):
        if rules is None:
            continue
        _validate_disable({"disable": rules.disable}, label, fail)
        _validate_override({"override": rules.override}, label, allowed, fail)
        if isinstance(rules, CodePolicyRules) and rules.add:
            _validate_add(rules.add, label, fail)

    if policy.thresholds is not None and policy.thresholds.pass_rate is not None:
        _validate_thresholds({"thresholds": {"pass_rate": policy.thresholds.pass_rate}}, fail)
    return policy


def _validate_disable(section: Mapping[str, Any], label: str, fail) -> tuple[str, ...]:
    if "disable" not in section:
        return ()
    value = section["disable"]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise fail(f'"{label}.disable" must be an array of strings')
    return tuple(value)


def _validate_override(
    section: Mapping[str, Any] | None,
    label: str,
    allowed: frozenset[str],
    fail,
) -> Mapping[str, Mapping[str, Any]]:
    if section is None or "override" not in section:
        return MappingProxyType({})
    value = section["override"]
    if not isinstance(value, Mapping):
        raise fail(f'"{label}.override" must be an object')
    out: dict[str, Mapping[str, Any]] = {}
    for item_id, fields in value.items():
        path = f"{label}.override.{item_id}"
        if not isinstance(fields, Mapping):
            raise fail(f'"{path}" must be an object')
        for key in fields:
            if key not in allowed:
                raise fail(
                    f'"{path}" has disallowed key "{key}"; allowed keys are {sorted(allowed)}'
                )
        for key, field_value in fields.items():
            _validate_override_value(path, key, field_value, fail)
        out[str(item_id)] = MappingProxyType(dict(fields))
    return MappingProxyType(out)


def _validate_override_value(path: str, key: str, value: Any, fail) -> None:
    if key == "title":
        if not isinstance(value, str) or not value.strip():
            raise fail(f'"{path}.title" must be a non-empty string')
    elif key == "level":
        if not isinstance(value, int) or isinstance(value, bool) or not MIN_LEVEL <= value <= MAX_LEVEL:
            raise fail(f'"{path}.level" must be an integer between {MIN_LEVEL} and {MAX_LEVEL}')
    elif key == "pillar":
        if not is_valid_pillar(value):
            raise fail(f'"{path}.pillar" must be one of {list(get_pillar_ids())}, got {value!r}')
    elif key == "scope":
        if value not in SCOPES:
            raise fail(f'"{path}.scope" must be one of {sorted(SCOPES)}, got {value!r}')
    elif key == "impact":
        if value not in IMPACTS:
            raise fail(f'"{path}.impact" must be one of {sorted(IMPACTS)}, got {value!r}')
    elif key == "effort":
        if value not in EFFORTS:
            raise fail(f'"{path}.effort" must be one of {sorted(EFFORTS)}, got {value!r}')


def _validate_thresholds(raw: Mapping[str, Any], fail) -> Thresholds | None:
    if "thresholds" not in raw:
        return None
    value = raw["thresholds"]
    if not isinstance(value, Mapping):
        raise fail('"thresholds" must be an object')
    for key in value:
        if key not in ALLOWED_THRESHOLD_KEYS:
            raise fail(f'"thresholds" has unknown key "{key}"')
    if "passRate" in value and "pass_rate" in value:
        raise fail('"thresholds" must not set both "passRate" and "pass_rate"')
    key = "passRate" if "passRate" in value else "pass_rate"
    if key not in value:
        return Thresholds()
    rate = value[key]
    if not _is_number(rate):
        raise fail(f'"thresholds.{key}" must be a number, got {_type_name(rate)}')
    if not 0 <= rate <= 1:
        raise fail(f'"thresholds.{key}" must be between 0 and 1, got {rate}')
    return Thresholds(pass_rate=float(rate))


def _validate_add(value: Any, label: str, fail) -> tuple[Any, ...]:
    """Validate code-authored additions; dict entries are built into records."""
    if not isinstance(value, (list, tuple)):
        raise fail(f'"{label}.add" must be an array')
    record_cls = Criterion if label == "criteria" else ExtraDefinition
    out = []
    seen: set[str] = set()
    for i, entry in enumerate(value):
        path = f"{label}.add[{i}]"
        if isinstance(entry, Mapping):
            if not callable(entry.get("check")):
                raise fail(f'"{path}.check" must be callable')
            try:
                entry = record_cls(**entry)
            except (TypeError, ValueError) as exc:
                raise fail(f'"{path}" is not a valid {record_cls.__name__}: {exc}') from exc
        if not isinstance(entry, record_cls):
            raise fail(f'"{path}" must be a {record_cls.__name__}, got {_type_name(entry)}')
        if isinstance(entry, Criterion) and not is_valid_pillar(entry.pillar):
            raise fail(f'"{path}.pillar" must be one of {list(get_pillar_ids())}, got {entry.pillar!r}')
        if entry.id in seen:
            raise fail(f'"{label}.add" contains duplicate id "{entry.id}"')
        seen.add(entry.id)
        out.append(entry)
    return tuple(out)
