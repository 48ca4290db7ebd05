"""Typed, immutable representation of a personal scheduling policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .errors import PolicyError


@dataclass(frozen=True)
class Priority:
    """A ranked priority label; lower rank means higher precedence."""
    rank: int
    label: str


@dataclass(frozen=True)
class PolicyModel:
    """Read-only scheduling policy for a single planning run.

    Every sequence keeps document order: earlier directives win when two of
    them conflict.
    """

    priorities: tuple[Priority, ...] = ()
    general_directives: tuple[str, ...] = ()
    energy_directives: tuple[str, ...] = ()
    recovery_directives: tuple[str, ...] = ()
    user_directives: tuple[str, ...] = ()
    user_rules: tuple[str, ...] = ()
    recurring_events: tuple[str, ...] = ()
    adhoc_requests: tuple[str, ...] = ()
    system_rules: tuple[str, ...] = ()
    adaptation_notes: tuple[str, ...] = ()
    capitalize_task_names: bool = False
    version: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        previous = 0
        for priority in self.priorities:
            if priority.rank < 1:
                raise PolicyError(
                    f"Priority rank must be a positive integer, got: {priority.rank}"
                )
            if priority.rank <= previous:
                raise PolicyError(
                    "Priority ranks must be strictly increasing, got "
                    f"{priority.rank} after {previous}"
                )
            if not priority.label.strip():
                raise PolicyError(f"Priority {priority.rank} has an empty label")
            previous = priority.rank

    @property
    def hard_constraints(self) -> tuple[str, ...]:
        return self.user_rules
