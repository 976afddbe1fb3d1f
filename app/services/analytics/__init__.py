from .assembler import (
    assemble_interview_report,
    assemble_job_search_report,
    assemble_networking_report,
    assemble_report,
)
from .exceptions import AnalyticsError, InvalidRecordCollection, InvalidReferenceTime, UnknownReportType
from .recommendations import generate_recommendations

__all__ = [
    "assemble_report",
    "assemble_job_search_report",
    "assemble_interview_report",
    "assemble_networking_report",
    "generate_recommendations",
    "AnalyticsError",
    "InvalidRecordCollection",
    "InvalidReferenceTime",
    "UnknownReportType",
]
