"""Scheduling policy model and YAML loading."""

from .errors import PolicyError
from .loader import load_policy, parse_policy
from .model import PolicyModel, Priority

__all__ = [
    "PolicyError",
    "PolicyModel",
    "Priority",
    "load_policy",
    "parse_policy",
]
