"""Pydantic schemas for report output."""

from vosescout.schemas.report import ScrapeReport, ShowingResponse, build_report

__all__ = [
    "ScrapeReport",
    "ShowingResponse",
    "build_report",
]
