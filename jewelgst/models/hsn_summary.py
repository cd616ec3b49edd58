from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from jewelgst.models.invoice import Invoice


class HsnSummaryEntry(BaseModel):
    hsn_code: str
    description: str = "Gold Jewellery"
    uqc: str = "GMS"  # Unit Quantity Code
    total_quantity: float = 0.0
    total_value: float = 0.0
    taxable_value: float = 0.0
    integrated_tax_amount: float = 0.0
    central_tax_amount: float = 0.0
    state_tax_amount: float = 0.0
    cess_amount: float = 0.0


class GstReportData(BaseModel):
    invoices: List[Invoice] = Field(default_factory=list)
    hsn_summary: List[HsnSummaryEntry] = Field(default_factory=list)
