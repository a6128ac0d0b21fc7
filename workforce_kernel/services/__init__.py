"""Shared service infrastructure for the workforce kernel."""

from workforce_kernel.services.base import SYSTEM_ACTOR_ID, BaseService

__all__ = ["BaseService", "SYSTEM_ACTOR_ID"]
