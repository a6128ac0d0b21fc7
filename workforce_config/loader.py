"""
Configuration Loader (``workforce_config.loader``).

Responsibility
--------------
Loads the engine YAML file and parses it into ``workforce_config.schema``
dataclasses.  Module sections are delegated to the owning module's
``from_dict`` so defaults and validation live in one place.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages.
* Times in YAML must be quoted strings ("17:00").  An unquoted ``17:00``
  is read by YAML 1.1 as the integer 1020 and is rejected.
* ``compute_checksum`` is a deterministic SHA-256 over the parsed
  document, used to identify the configuration in logs.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from workforce_config.schema import DatabaseSettings, EngineConfig
from workforce_engines.approval import ApprovalLevel
from workforce_modules.attendance.config import AttendanceConfig
from workforce_modules.payroll.config import PayrollConfig


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_approval_level(data: dict[str, Any]) -> ApprovalLevel:
    return ApprovalLevel(
        level_no=int(data["level"]),
        approver_id=str(data["approver_id"]),
        title=str(data.get("title", "")),
    )


def parse_approval_chains(data: dict[str, Any]) -> dict[str, tuple[ApprovalLevel, ...]]:
    """Parse ``approval_chains: {REQUEST_TYPE: [{level, approver_id, title}, ...]}``."""
    chains: dict[str, tuple[ApprovalLevel, ...]] = {}
    for request_type, levels in (data or {}).items():
        parsed = tuple(parse_approval_level(level) for level in (levels or ()))
        numbers = [level.level_no for level in parsed]
        if len(set(numbers)) != len(numbers):
            raise ValueError(
                f"approval chain {request_type!r} has duplicate level numbers: {numbers}"
            )
        chains[str(request_type)] = tuple(sorted(parsed, key=lambda lvl: lvl.level_no))
    return chains


def parse_database(data: dict[str, Any]) -> DatabaseSettings:
    if not data:
        return DatabaseSettings()
    return DatabaseSettings(
        url=str(data.get("url", DatabaseSettings.url)),
        echo=bool(data.get("echo", False)),
        pool_size=int(data.get("pool_size", DatabaseSettings.pool_size)),
        max_overflow=int(data.get("max_overflow", DatabaseSettings.max_overflow)),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def parse_engine_config(data: dict[str, Any]) -> EngineConfig:
    """Build an ``EngineConfig`` from a parsed YAML document.

    Missing module sections fall back to the module defaults.
    """
    attendance_data = data.get("attendance") or {}
    payroll_data = data.get("payroll") or {}
    return EngineConfig(
        config_id=str(data.get("config_id", "default")),
        version=int(data.get("version", 1)),
        attendance=(
            AttendanceConfig.from_dict(attendance_data)
            if attendance_data
            else AttendanceConfig.with_defaults()
        ),
        payroll=(
            PayrollConfig.from_dict(payroll_data)
            if payroll_data
            else PayrollConfig.with_defaults()
        ),
        approval_chains=parse_approval_chains(data.get("approval_chains") or {}),
        database=parse_database(data.get("database") or {}),
        checksum=compute_checksum(data),
    )


def load_engine_config(path: Path) -> EngineConfig:
    return parse_engine_config(load_yaml_file(path))
