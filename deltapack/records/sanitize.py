"""Pre-comparison sanitation of decoded record payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
import re
from typing import Any, Mapping

from deltapack.core.types import MISSING
from deltapack.records.exceptions import SanitationPolicyConfigError

SANITIZE_CONFIG_ENV_VAR = "JSONDELTA_SANITIZE_CONFIG"

IGNORED_FIELD_NAMES = frozenset({"report_id"})

# Order matters: the "Z" form must be stripped before the bare form.
SUFFIX_PATTERNS = (
    re.compile(r"\.000Z\b"),
    re.compile(r"\.000\b"),
)


@dataclass(frozen=True, slots=True)
class SanitationPolicy:
    """Which fields, nulls and string suffixes are normalized away."""

    version: str = "1.0"
    enabled: bool = True
    drop_nulls: bool = True
    ignored_field_names: frozenset[str] = field(default_factory=lambda: IGNORED_FIELD_NAMES)
    suffix_patterns: tuple[re.Pattern[str], ...] = field(
        default_factory=lambda: SUFFIX_PATTERNS
    )


DEFAULT_SANITATION_POLICY = SanitationPolicy()


def build_sanitation_policy(
    *,
    version: str = "1.0-custom",
    enabled: bool = True,
    drop_nulls: bool = True,
    base_policy: SanitationPolicy = DEFAULT_SANITATION_POLICY,
    extra_ignored_field_names: tuple[str, ...] = (),
    extra_suffix_patterns: tuple[str, ...] = (),
) -> SanitationPolicy:
    """Build a custom sanitation policy by extending a base policy."""
    if not version.strip():
        raise SanitationPolicyConfigError("Sanitation policy version cannot be empty.")

    ignored = set(base_policy.ignored_field_names)
    for name in extra_ignored_field_names:
        if not isinstance(name, str):
            raise SanitationPolicyConfigError(
                "sanitation config key 'extra_ignored_field_names' must contain strings."
            )
        if name.strip():
            ignored.add(name.strip())

    patterns = tuple(base_policy.suffix_patterns) + _compile_patterns(
        extra_suffix_patterns,
        key="extra_suffix_patterns",
    )

    return SanitationPolicy(
        version=version.strip(),
        enabled=enabled,
        drop_nulls=drop_nulls,
        ignored_field_names=frozenset(ignored),
        suffix_patterns=patterns,
    )


def sanitation_policy_from_config(
    config: Mapping[str, Any],
    *,
    base_policy: SanitationPolicy = DEFAULT_SANITATION_POLICY,
) -> SanitationPolicy:
    """Create a sanitation policy from config mapping."""
    supported_keys = {
        "version",
        "enabled",
        "drop_nulls",
        "extra_ignored_field_names",
        "extra_suffix_patterns",
    }
    unknown = sorted(set(config.keys()) - supported_keys)
    if unknown:
        raise SanitationPolicyConfigError(
            "Unsupported sanitation config keys: " + ", ".join(unknown)
        )

    version = config.get("version")
    if version is None:
        version = f"{base_policy.version}+custom"
    elif not isinstance(version, str):
        raise SanitationPolicyConfigError("sanitation config key 'version' must be a string.")

    flags: dict[str, bool] = {}
    for key in ("enabled", "drop_nulls"):
        value = config.get(key, getattr(base_policy, key))
        if not isinstance(value, bool):
            raise SanitationPolicyConfigError(
                f"sanitation config key '{key}' must be a boolean."
            )
        flags[key] = value

    return build_sanitation_policy(
        version=version,
        enabled=flags["enabled"],
        drop_nulls=flags["drop_nulls"],
        base_policy=base_policy,
        extra_ignored_field_names=_read_string_list(config, key="extra_ignored_field_names"),
        extra_suffix_patterns=_read_string_list(config, key="extra_suffix_patterns"),
    )


def load_sanitation_policy_from_file(
    path: str | Path,
    *,
    base_policy: SanitationPolicy = DEFAULT_SANITATION_POLICY,
) -> SanitationPolicy:
    """Load sanitation policy config from JSON file."""
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise
    except json.JSONDecodeError as error:
        raise SanitationPolicyConfigError(
            f"Invalid sanitation config JSON ({config_path}): {error}"
        ) from error

    if not isinstance(raw, dict):
        raise SanitationPolicyConfigError(
            f"Sanitation config must be a JSON object ({config_path})."
        )

    return sanitation_policy_from_config(raw, base_policy=base_policy)


def sanitize_value(value: Any, *, policy: SanitationPolicy = DEFAULT_SANITATION_POLICY) -> Any:
    """Return a sanitized copy of ``value``; a dropped root becomes ``None``."""
    if not policy.enabled:
        return value
    sanitized = _sanitize(value, policy=policy)
    return None if sanitized is MISSING else sanitized


def sanitize_string(value: str, *, policy: SanitationPolicy = DEFAULT_SANITATION_POLICY) -> str:
    cleaned = value
    for pattern in policy.suffix_patterns:
        cleaned = pattern.sub("", cleaned)
    return cleaned


def _sanitize(value: Any, *, policy: SanitationPolicy) -> Any:
    # Containers are attached to their parent before their members are
    # visited, so document order survives the explicit stack.
    holder: list[Any] = []
    pending: list[tuple[Any, dict[str, Any] | list[Any], str | None]] = [(value, holder, None)]
    while pending:
        item, target, key = pending.pop()
        members: list[tuple[Any, dict[str, Any] | list[Any], str | None]] = []
        if isinstance(item, dict):
            cleaned: Any = {}
            for name, member in item.items():
                if name not in policy.ignored_field_names:
                    members.append((member, cleaned, name))
        elif isinstance(item, (list, tuple)):
            cleaned = []
            members = [(member, cleaned, None) for member in item]
        else:
            cleaned = _sanitize_scalar(item, policy=policy)
            if cleaned is MISSING:
                continue

        if isinstance(target, dict):
            target[key] = cleaned
        else:
            target.append(cleaned)
        pending.extend(reversed(members))
    return holder[0] if holder else MISSING


def _sanitize_scalar(value: Any, *, policy: SanitationPolicy) -> Any:
    if value is None:
        return MISSING if policy.drop_nulls else None
    if isinstance(value, str):
        return sanitize_string(value, policy=policy)
    return value


def _compile_patterns(
    patterns: tuple[str, ...],
    *,
    key: str,
) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        if not isinstance(pattern, str):
            raise SanitationPolicyConfigError(
                f"sanitation config key '{key}' must contain strings."
            )
        try:
            compiled.append(re.compile(pattern))
        except re.error as error:
            raise SanitationPolicyConfigError(
                f"Invalid regex in '{key}': {pattern!r} ({error})"
            ) from error
    return tuple(compiled)


def _read_string_list(config: Mapping[str, Any], *, key: str) -> tuple[str, ...]:
    if key not in config:
        return ()
    value = config[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SanitationPolicyConfigError(
            f"sanitation config key '{key}' must be a JSON array of strings."
        )
    return tuple(item.strip() for item in value if item.strip())
