from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from jewelgst.config import settings
from jewelgst.utils.numbers import number_or


class ShopTaxDefaults(BaseModel):
    cgst_rate: float = settings.DEFAULT_CGST_RATE
    sgst_rate: float = settings.DEFAULT_SGST_RATE

    @property
    def igst_rate(self) -> float:
        return self.cgst_rate + self.sgst_rate

    @classmethod
    def from_raw(cls, cgst_rate: Any = None, sgst_rate: Any = None) -> "ShopTaxDefaults":
        """Missing, non-numeric or zero stored rates fall back to the configured defaults."""
        return cls(
            cgst_rate=number_or(cgst_rate, settings.DEFAULT_CGST_RATE),
            sgst_rate=number_or(sgst_rate, settings.DEFAULT_SGST_RATE),
        )
