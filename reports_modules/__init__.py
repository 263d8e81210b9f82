"""
Report services built on the validate -> fetch -> process -> format template.

    from reports_modules import AgedAnalysisReport, ReportConfig
"""

from reports_modules.aged_analysis import AgedAnalysisReport
from reports_modules.balances import BalancesReport
from reports_modules.base import AbstractReportService, CounterpartyReportService, ReportConfig
from reports_modules.models import render_to_dict
from reports_modules.statements import StatementReport

__all__ = [
    "AbstractReportService",
    "AgedAnalysisReport",
    "BalancesReport",
    "CounterpartyReportService",
    "ReportConfig",
    "StatementReport",
    "render_to_dict",
]
