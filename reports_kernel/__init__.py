"""
reports_kernel -- shared foundation for the counterparty reports.

Structured logging, typed exceptions, value objects, the injectable clock,
SQLAlchemy base/engine helpers, ORM models and read-only selectors.  The
kernel imports nothing from reports_engines, reports_config or
reports_modules.
"""
