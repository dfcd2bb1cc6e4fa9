"""agentready: repository readiness scoring and policy composition."""

__version__ = "0.1.0"
