"""Policy loading, validation and chain resolution."""

from __future__ import annotations

from agentready.policies.loader import load_policies, load_policy, parse_policy_sources
from agentready.policies.models import (
    DEFAULT_PASS_RATE,
    CodePolicy,
    CodePolicyRules,
    DataPolicy,
    DataPolicyRules,
    Policy,
    Thresholds,
)
from agentready.policies.resolver import ResolvedChain, resolve_chain
from agentready.policies.schemas import PolicyValidationError, validate_policy, validate_policy_record

__all__ = [
    "DEFAULT_PASS_RATE",
    "CodePolicy",
    "CodePolicyRules",
    "DataPolicy",
    "DataPolicyRules",
    "Policy",
    "PolicyValidationError",
    "ResolvedChain",
    "Thresholds",
    "load_policies",
    "load_policy",
    "parse_policy_sources",
    "resolve_chain",
    "validate_policy",
    "validate_policy_record",
]
