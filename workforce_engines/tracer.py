"""
workforce_engines.tracer -- ``@traced_engine`` decorator.

Wraps a pure engine function so every call logs ``WORKFORCE_ENGINE_TRACE``
at DEBUG with the engine name and version, a fingerprint of the inputs that
determine the result, and the elapsed time.  Two payroll versions computed
from the same salary, month and employment dates share a fingerprint, which
makes an unexpected difference between versions easy to trace.

The fingerprint covers the named parameters whether they were passed by
position or by keyword; parameters left at their default are included with
the default value.
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from workforce_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

FINGERPRINT_LENGTH = 16


def _canonical(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, Mapping):
        return "{" + ",".join(f"{k}:{_canonical(v)}" for k, v in sorted(value.items())) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonical(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(fields: tuple[str, ...], arguments: Mapping[str, Any]) -> str:
    """SHA-256 prefix over ``name=value`` pairs for ``fields``."""
    text = "|".join(f"{name}={_canonical(arguments.get(name))}" for name in fields)
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable[[Callable], Callable]:
    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 3)

            if _logger.isEnabledFor(logging.DEBUG):
                bound = signature.bind(*args, **kwargs)
                bound.apply_defaults()
                _logger.debug(
                    "WORKFORCE_ENGINE_TRACE",
                    extra={
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": compute_input_fingerprint(
                            fingerprint_fields, bound.arguments
                        ),
                        "duration_ms": elapsed_ms,
                    },
                )
            return result

        return wrapper

    return decorator
