"""
Networking analytics API endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from app.api.deps.auth import get_caller_id
from app.schemas.analytics import AnalyticsRequest, ReportType, ResponseEnvelope
from app.services.analytics import assemble_report

logger = logging.getLogger("app_logger")

router = APIRouter(prefix="/analytics/networking", tags=["analytics:networking"])


@router.post("", response_model=ResponseEnvelope)
def networking_analytics(payload: AnalyticsRequest, caller_id: str = Depends(get_caller_id)):
    logger.info(f"[API] Networking analytics requested by {caller_id} for {len(payload.records)} records")
    report = assemble_report(
        payload.records,
        now=payload.now,
        benchmarks=payload.benchmarks,
        report_type=ReportType.networking,
    )
    return ResponseEnvelope(
        success=True,
        message="Network analytics retrieved successfully",
        data=report.model_dump(by_alias=True, mode="json"),
    )
