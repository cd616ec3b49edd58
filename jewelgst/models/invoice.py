from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class Customer(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    gst_number: Optional[str] = None
    state: Optional[str] = None


class LineItem(BaseModel):
    # Raw column values; numeric coercion happens in the HSN aggregator.
    hsn_code: Optional[str] = None
    gross_weight: Any = None
    net_weight: Any = None
    amount: Any = None  # (net_weight * rate) + (net_weight * making)
    rate: Any = None
    making: Any = None


class Invoice(BaseModel):
    id: str
    shop_id: str
    invoice_number: Optional[str] = None
    invoice_date: date
    status: str = "paid"
    subtotal: Any = None
    cgst_amount: Any = None
    sgst_amount: Any = None
    grand_total: Any = None
    customer: Optional[Customer] = None
    items: List[LineItem] = Field(default_factory=list)


class DateRange(BaseModel):
    from_date: date
    to_date: Optional[date] = None

    def bounds(self) -> tuple[date, date]:
        """
        Inclusive (start, end). With no end date the range is a single day,
        not open-ended.
        """
        return self.from_date, self.to_date or self.from_date
