"""
reports_config -- single public entrypoint for company preferences.

Responsibility:
    Provides the ONLY way to obtain company preferences at runtime through
    ``get_active_preferences()``.  Report services receive the returned
    ``CompanyPreferences`` and never read files or environment variables
    themselves.

Architecture position:
    Configuration -- sits above ``reports_kernel`` and below
    ``reports_modules``.  The kernel MUST NEVER import from
    ``reports_config``.

Invariants enforced:
    - Single entrypoint: all runtime preferences flow through
      ``get_active_preferences()``.
    - The returned preferences have passed schema validation.

Failure modes:
    - ``FileNotFoundError`` -- the preferences file does not exist.
    - ``InvalidPreferencesError`` -- a value is unusable.

Audit relevance:
    Every successful call emits a ``REPORTS_CONFIG_TRACE`` log entry with
    the source path, checksum and the aging thresholds in force, tying each
    report run to the settings that shaped it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from reports_config.loader import load_preferences
from reports_config.schema import CompanyPreferences

_logger = logging.getLogger("reports_kernel.config")

PREFERENCES_ENV_VAR = "REPORTS_PREFERENCES_PATH"

_DEFAULT_PREFERENCES_PATH = Path(__file__).parent / "preferences.yaml"


def get_active_preferences(path: Path | str | None = None) -> CompanyPreferences:
    """The ONLY public preferences entrypoint.

    Resolution order: explicit ``path``, then the ``REPORTS_PREFERENCES_PATH``
    environment variable, then the bundled ``preferences.yaml``.

    Raises:
        FileNotFoundError: If the resolved file does not exist.
        InvalidPreferencesError: If a value fails validation.
    """
    if path is None:
        path = os.environ.get(PREFERENCES_ENV_VAR) or _DEFAULT_PREFERENCES_PATH
    source = Path(path)

    preferences = load_preferences(source)

    _logger.info(
        "REPORTS_CONFIG_TRACE",
        extra={
            "trace_type": "REPORTS_CONFIG_TRACE",
            "source": str(source),
            "checksum": preferences.checksum,
            "home_currency": preferences.home_currency,
            "past_due_days": preferences.past_due_days,
            "second_past_due_days": preferences.second_past_due_days,
            "zero_balance_tolerance": str(preferences.zero_balance_tolerance),
        },
    )
    return preferences


__all__ = [
    "CompanyPreferences",
    "PREFERENCES_ENV_VAR",
    "get_active_preferences",
]
