"""
workforce_config -- single public entrypoint for engine configuration.

Responsibility:
    ``get_active_config()`` is the one way services obtain configuration.
    It loads a YAML file (the packaged ``defaults.yaml`` unless a path is
    given), delegates each module section to that module's ``from_dict``,
    and returns a frozen ``EngineConfig``.

Architecture position:
    Configuration -- sits above ``workforce_kernel`` and the modules.  The
    kernel MUST NEVER import from ``workforce_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested file does not exist.
    - ``ValueError`` -- a section fails its dataclass validation.

Audit relevance:
    Every successful call emits a ``WORKFORCE_CONFIG_TRACE`` log entry with
    the config_id, version, checksum and approval chain sizes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.orm import Session, sessionmaker

from workforce_config.loader import load_engine_config
from workforce_config.schema import DatabaseSettings, EngineConfig
from workforce_kernel.db.engine import get_session_factory, init_engine_from_url
from workforce_modules.payroll.approval import ConfigApprovalWorkflow

_logger = logging.getLogger("workforce_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(config_path: Path | None = None) -> EngineConfig:
    """Load and validate the engine configuration.

    Args:
        config_path: YAML file to load.  Defaults to the packaged
            ``defaults.yaml``.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        ValueError: If a section fails validation.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = load_engine_config(path)

    _logger.info(
        "WORKFORCE_CONFIG_TRACE",
        extra={
            "config_id": config.config_id,
            "config_version": config.version,
            "config_checksum": config.checksum,
            "config_path": str(path),
            "approval_chains": {
                key: len(levels) for key, levels in config.approval_chains.items()
            },
        },
    )
    return config


def build_approval_workflow(config: EngineConfig) -> ConfigApprovalWorkflow:
    """Approval workflow over the configured chains."""
    return ConfigApprovalWorkflow(config.approval_chains)


def open_database(config: EngineConfig) -> sessionmaker[Session]:
    """Initialize the process-wide engine from the database section."""
    database = config.database
    init_engine_from_url(
        database.url,
        echo=database.echo,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
    )
    return get_session_factory()


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DatabaseSettings",
    "EngineConfig",
    "build_approval_workflow",
    "get_active_config",
    "open_database",
]
