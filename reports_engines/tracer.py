"""
Module: reports_engines.tracer
Responsibility:
    ``@traced_engine`` decorator recording each engine call as a
    REPORTS_ENGINE_TRACE log entry: engine name and version, a fingerprint
    of the inputs that determine the result, and the elapsed time.

Architecture position:
    Engines -- support code for the calculation layer.  Emits a log record
    only; engines stay free of I/O.

Invariants enforced:
    - Fingerprints depend only on argument values, never on how they were
      passed: positional and keyword calls bind to the same parameter names.
    - Mapping keys are sorted and sequences keep their order before hashing.
    - The fingerprint is the first 16 hex chars of a SHA-256 digest.

Failure modes:
    - A fingerprint field the call did not supply (and that has no default)
      hashes as "null".
    - One-shot iterators are hashed by identity, not content; engines
      materialize them before the traced call.
    - Exceptions from the engine propagate unchanged; no trace is emitted
      for a failed call.
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Mapping
from dataclasses import fields, is_dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from reports_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

TRACE_MESSAGE = "REPORTS_ENGINE_TRACE"


def _canonicalize(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, Decimal)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return _canonicalize(value.value)
    if is_dataclass(value) and not isinstance(value, type):
        value = {f.name: getattr(value, f.name) for f in fields(value)}
    if isinstance(value, Mapping):
        body = ",".join(
            f"{key}:{_canonicalize(item)}"
            for key, item in sorted(value.items(), key=lambda pair: str(pair[0]))
        )
        return "{" + body + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(map(_canonicalize, value)) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: Mapping[str, Any],
) -> str:
    """16-char SHA-256 prefix over ``name=value`` pairs of the selected fields."""
    canonical = "|".join(
        f"{name}={_canonicalize(kwargs.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits REPORTS_ENGINE_TRACE for each successful engine call.

    Args:
        engine_name: Engine identifier, e.g. "aging".
        engine_version: Version of the engine's calculation rules.
        fingerprint_fields: Parameter names whose values feed the fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                bound.apply_defaults()
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = (time.perf_counter() - started) * 1000

            _logger.info(TRACE_MESSAGE, extra={
                "trace_type": TRACE_MESSAGE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": round(elapsed_ms, 2),
                "function": func.__qualname__,
            })
            return result

        return wrapper

    return decorator
