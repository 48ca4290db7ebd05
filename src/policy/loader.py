"""YAML policy document loading into :class:`PolicyModel`."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .errors import PolicyError
from .model import PolicyModel, Priority


def load_policy(path: str | Path, *, logger: Optional[logging.Logger] = None) -> PolicyModel:
    """Read a YAML strategy file and return the typed policy."""
    logger = logger or logging.getLogger(__name__)
    policy_path = Path(path)
    if not policy_path.exists():
        raise PolicyError(f"Policy file not found: {policy_path}")
    if not policy_path.is_file():
        raise PolicyError(f"Policy path is not a file: {policy_path}")

    try:
        with open(policy_path, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as error:
        raise PolicyError(f"Failed to parse policy YAML: {error}") from error

    policy = parse_policy(raw)
    logger.info(
        "Loaded policy %s (%d priorities, %d recurring, %d ad-hoc)",
        policy_path,
        len(policy.priorities),
        len(policy.recurring_events),
        len(policy.adhoc_requests),
    )
    return policy


def parse_policy(raw: Any) -> PolicyModel:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise PolicyError("Policy document root must be a mapping.")

    system_directives = _mapping(raw, "high_level_system_directives")
    system_parameters = _mapping(raw, "system_parameters")
    low_level_system_rules = _mapping(raw, "low_level_system_rules")

    system_rules: list[str] = []
    for name in low_level_system_rules:
        system_rules.extend(
            _text_list(low_level_system_rules[name], f"low_level_system_rules.{name}")
        )

    version = raw.get("version")
    return PolicyModel(
        priorities=_priorities(raw.get("priorities")),
        general_directives=_text_list(
            system_directives.get("general"),
            "high_level_system_directives.general",
        ),
        energy_directives=_text_list(
            system_directives.get("energy_maintenance"),
            "high_level_system_directives.energy_maintenance",
        ),
        recovery_directives=_text_list(
            system_directives.get("recovery_management"),
            "high_level_system_directives.recovery_management",
        ),
        user_directives=_text_list(
            raw.get("high_level_user_directives"),
            "high_level_user_directives",
        ),
        user_rules=_text_list(raw.get("low_level_user_rules"), "low_level_user_rules"),
        recurring_events=_text_list(raw.get("recurring_events"), "recurring_events"),
        adhoc_requests=_text_list(raw.get("adhoc_requests"), "adhoc_requests"),
        system_rules=tuple(system_rules),
        adaptation_notes=_text_list(raw.get("system_adaptation"), "system_adaptation"),
        capitalize_task_names=_as_bool(
            system_parameters.get("capitalize_task_names", False),
            "system_parameters.capitalize_task_names",
        ),
        version=str(version).strip() if version is not None else None,
    )


def _priorities(value: Any) -> tuple[Priority, ...]:
    if value is None:
        return ()
    if isinstance(value, Mapping):
        items: list[Priority] = []
        for rank_raw, label in value.items():
            try:
                rank = int(rank_raw)
            except (TypeError, ValueError) as error:
                raise PolicyError(
                    f"Priority rank must be an integer, got: {rank_raw!r}"
                ) from error
            items.append(Priority(rank=rank, label=_as_text(label, f"priorities.{rank}")))
        return tuple(sorted(items, key=lambda item: item.rank))
    if isinstance(value, list):
        return tuple(
            Priority(rank=index, label=_as_text(label, f"priorities[{index}]"))
            for index, label in enumerate(value, start=1)
        )
    raise PolicyError("priorities must be a mapping of rank to label or a list.")


def _mapping(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = root.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise PolicyError(f"{name} must be a mapping.")
    return value


def _text_list(value: Any, field: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise PolicyError(f"{field} must be a list of strings.")
    return tuple(
        text for text in (_as_text(item, field) for item in value) if text
    )


def _as_text(value: Any, field: str) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise PolicyError(f"{field} entries must be strings.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    raise PolicyError(f"{field} must be a boolean.")
