from __future__ import annotations

import asyncio
from typing import Optional

from loguru import logger

from jewelgst.core.hsn_aggregator import InterStateResolver, build_hsn_summary, never_inter_state
from jewelgst.database.invoice_store import InvoiceStore
from jewelgst.models.hsn_summary import GstReportData
from jewelgst.models.invoice import DateRange


class GstReportService:
    """
    Builds the GST report for a shop: its paid invoices in the period plus the
    HSN summary computed from them. Nothing is cached; every call re-reads.
    """

    def __init__(
        self,
        store: Optional[InvoiceStore] = None,
        is_inter_state: InterStateResolver = never_inter_state,
    ) -> None:
        self.store = store or InvoiceStore()
        self.is_inter_state = is_inter_state

    async def generate_hsn_summary(self, shop_id: str, date_range: Optional[DateRange] = None) -> GstReportData:
        if not shop_id or not shop_id.strip():
            raise ValueError("shop_id is required")

        # Independent reads; a failure in the invoice read aborts the report.
        invoices, defaults = await asyncio.gather(
            asyncio.to_thread(self.store.fetch_paid_invoices, shop_id, date_range),
            asyncio.to_thread(self.store.fetch_tax_defaults, shop_id),
        )

        summary = build_hsn_summary(invoices, defaults, is_inter_state=self.is_inter_state)
        logger.info(
            "GST report for shop {}: {} invoices, {} HSN codes (cgst={} sgst={})",
            shop_id, len(invoices), len(summary), defaults.cgst_rate, defaults.sgst_rate,
        )
        return GstReportData(invoices=invoices, hsn_summary=summary)
