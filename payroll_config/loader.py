"""
Policy Loader (``payroll_config.loader``).

Responsibility
--------------
Reads a payroll policy YAML file and parses it into a frozen
``PayrollPolicy``.  Callers outside this package go through
``payroll_config.get_active_policy()``.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for policy
  identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML, wrong top-level shape, unknown or invalid keys
  -> ``PolicyConfigError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import PayrollPolicy
from payroll_kernel.exceptions import PolicyConfigError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        PolicyConfigError: if the file is not valid YAML or not a mapping.
    """
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise PolicyConfigError(str(path), f"invalid YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PolicyConfigError(str(path), "top level must be a mapping")
    return data


def parse_policy(data: dict[str, Any], source: str = "<dict>") -> PayrollPolicy:
    """
    Parse a ``PayrollPolicy`` from a dict.

    Accepts either the bare policy mapping or one nested under a
    ``payroll_policy`` key.  Missing keys take the schema defaults.
    """
    body = data.get("payroll_policy", data)
    if not isinstance(body, dict):
        raise PolicyConfigError(source, "'payroll_policy' must be a mapping")
    try:
        return PayrollPolicy.from_dict(dict(body))
    except (TypeError, ValueError) as exc:
        raise PolicyConfigError(source, str(exc)) from exc


def load_policy_file(path: Path) -> PayrollPolicy:
    """Load and parse one policy file."""
    return parse_policy(load_yaml_file(path), source=str(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
