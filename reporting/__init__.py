"""
Reporting module for the market study valuation engine.

Generates market study PDFs from valuated studies.

Usage:
    from core.market_study import ValuationService, build_market_study
    from reporting import generate_report, create_sample_study_data

    study = build_market_study(create_sample_study_data(), ValuationService())
    result = generate_report(study)
"""

from .pdf_generator import (
    MarketStudyReportGenerator,
    ReportSuccess,
    generate_report,
    get_report_styles,
)
from .sample_data import create_sample_study_data

__all__ = [
    "MarketStudyReportGenerator",
    "ReportSuccess",
    "generate_report",
    "get_report_styles",
    "create_sample_study_data",
]
