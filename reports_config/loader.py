"""
Preferences Loader (``reports_config.loader``).

Responsibility
--------------
Loads a company preferences YAML document and parses it into the frozen
``CompanyPreferences`` schema.  Report services never call this directly;
the single runtime entry point is ``reports_config.get_active_preferences()``.

Invariants enforced
-------------------
* Every section of the document is optional; absent keys take the schema
  defaults.
* Unusable values raise ``InvalidPreferencesError`` naming the field.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Non-mapping document or section  -> ``InvalidPreferencesError``.

Expected layout::

    company:
      name: Demo Trading Co
      home_currency: USD
    aging:
      past_due_days: 30
      second_past_due_days: 60
    balances:
      zero_balance_tolerance: "0.01"
      float_comp_delta: "0.004"
    display:
      price_decimals: 2
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from reports_config.schema import CompanyPreferences
from reports_kernel.exceptions import InvalidPreferencesError

_SECTIONS = ("company", "aging", "balances", "display")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 checksum of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_decimal(value: Any, field: str) -> Decimal:
    """Parse a Decimal from a YAML scalar; floats go through ``str``."""
    if isinstance(value, bool):
        raise InvalidPreferencesError(field, f"expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidPreferencesError(field, f"expected a number, got {value!r}") from e


def parse_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPreferencesError(field, f"expected an integer, got {value!r}")
    return value


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidPreferencesError(name, "section must be a mapping")
    return section


def parse_preferences(data: dict[str, Any]) -> CompanyPreferences:
    """
    Parse ``CompanyPreferences`` from a loaded YAML document.

    Postconditions:
        - Returns a validated frozen ``CompanyPreferences`` whose
          ``checksum`` identifies ``data``.
    Raises:
        InvalidPreferencesError: on any unusable value.
    """
    if not isinstance(data, dict):
        raise InvalidPreferencesError("<root>", "document must be a mapping")
    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise InvalidPreferencesError(unknown[0], "unknown section")

    company = _section(data, "company")
    aging = _section(data, "aging")
    balances = _section(data, "balances")
    display = _section(data, "display")

    kwargs: dict[str, Any] = {"checksum": compute_checksum(data)}
    if "name" in company:
        kwargs["company_name"] = str(company["name"])
    if "home_currency" in company:
        kwargs["home_currency"] = str(company["home_currency"])
    if "past_due_days" in aging:
        kwargs["past_due_days"] = parse_int(aging["past_due_days"], "past_due_days")
    if aging.get("second_past_due_days") is not None:
        kwargs["second_past_due_days"] = parse_int(
            aging["second_past_due_days"], "second_past_due_days"
        )
    if "zero_balance_tolerance" in balances:
        kwargs["zero_balance_tolerance"] = parse_decimal(
            balances["zero_balance_tolerance"], "zero_balance_tolerance"
        )
    if "float_comp_delta" in balances:
        kwargs["float_comp_delta"] = parse_decimal(
            balances["float_comp_delta"], "float_comp_delta"
        )
    if "price_decimals" in display:
        kwargs["price_decimals"] = parse_int(display["price_decimals"], "price_decimals")

    return CompanyPreferences(**kwargs)


def load_preferences(path: Path) -> CompanyPreferences:
    """Load and parse a preferences file."""
    return parse_preferences(load_yaml_file(path))
