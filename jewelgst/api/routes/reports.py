"""
GST Report API Routes
HSN summary + GSTR-1 workbook export for a shop's paid invoices.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from loguru import logger

from jewelgst.errors import GstDataFetchError
from jewelgst.models.hsn_summary import GstReportData
from jewelgst.models.invoice import DateRange
from jewelgst.pipelines.gstr1_export import build_gstr1_workbook, export_filename
from jewelgst.services.gst_report import GstReportService

router = APIRouter(prefix="/api/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_report_service() -> GstReportService:
    return GstReportService()


def _date_range(from_date: Optional[date], to_date: Optional[date]) -> Optional[DateRange]:
    if from_date is None:
        if to_date is not None:
            raise HTTPException(status_code=422, detail="'to' requires 'from'")
        return None
    return DateRange(from_date=from_date, to_date=to_date)


async def _generate(service: GstReportService, shop_id: str, date_range: Optional[DateRange]) -> GstReportData:
    try:
        return await service.generate_hsn_summary(shop_id, date_range)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except GstDataFetchError as e:
        logger.error("GST report failed for shop {}: {}", shop_id, e.message)
        raise HTTPException(status_code=502, detail=e.message)


@router.get("/gst/{shop_id}")
async def get_gst_report(
    shop_id: str,
    from_date: Optional[date] = Query(None, alias="from"),
    to_date: Optional[date] = Query(None, alias="to"),
    service: GstReportService = Depends(get_report_service),
) -> Dict[str, Any]:
    """Paid invoices in the period and their per-HSN tax summary."""
    report = await _generate(service, shop_id, _date_range(from_date, to_date))
    return report.model_dump(mode="json")


@router.get("/gst/{shop_id}/export")
async def export_gst_report(
    shop_id: str,
    from_date: Optional[date] = Query(None, alias="from"),
    to_date: Optional[date] = Query(None, alias="to"),
    service: GstReportService = Depends(get_report_service),
) -> Response:
    if from_date is None:
        raise HTTPException(status_code=422, detail="Date range required")
    date_range = DateRange(from_date=from_date, to_date=to_date)

    report = await _generate(service, shop_id, date_range)
    if not report.invoices:
        raise HTTPException(status_code=404, detail="No paid invoices found for the selected period")

    filename = export_filename(date_range)
    return Response(
        content=build_gstr1_workbook(report),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
