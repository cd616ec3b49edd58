from __future__ import annotations

import io
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from jewelgst.models.hsn_summary import GstReportData, HsnSummaryEntry
from jewelgst.models.invoice import DateRange, Invoice


# Jewellery is billed at a flat 3% GST (1.5 CGST + 1.5 SGST).
FLAT_RATE = "3.0"

B2B_COLUMNS = [
    "GSTIN/UIN of Recipient", "Receiver Name", "Invoice Number", "Invoice Date",
    "Invoice Value", "Place Of Supply", "Reverse Charge", "Invoice Type",
    "E-Commerce GSTIN", "Rate", "Taxable Value", "Cess Amount",
]
B2CS_COLUMNS = [
    "Type", "Place Of Supply", "Invoice Number", "Invoice Date", "Invoice Value",
    "Rate", "Taxable Value", "Cess Amount", "E-Commerce GSTIN",
]
HSN_COLUMNS = [
    "HSN/SAC", "Description", "UQC", "Total Quantity", "Total Value", "Taxable Value",
    "Integrated Tax Amount", "Central Tax Amount", "State/UT Tax Amount", "Cess Amount",
]
RAW_COLUMNS = ["Invoice No", "Date", "Customer", "GSTIN", "Subtotal", "CGST", "SGST", "Total", "Status"]


def _fmt_date(d: date) -> str:
    return d.strftime("%d-%b-%Y")


def _gstin(inv: Invoice) -> Optional[str]:
    return inv.customer.gst_number if inv.customer and inv.customer.gst_number else None


def _state(inv: Invoice) -> str:
    return (inv.customer.state if inv.customer else None) or ""


def build_b2b_rows(invoices: List[Invoice]) -> List[Dict[str, Any]]:
    """Sales to GST-registered customers."""
    return [
        {
            "GSTIN/UIN of Recipient": _gstin(inv),
            "Receiver Name": inv.customer.name if inv.customer else None,
            "Invoice Number": inv.invoice_number,
            "Invoice Date": _fmt_date(inv.invoice_date),
            "Invoice Value": inv.grand_total,
            "Place Of Supply": _state(inv),
            "Reverse Charge": "N",
            "Invoice Type": "Regular",
            "E-Commerce GSTIN": "",
            "Rate": FLAT_RATE,
            "Taxable Value": inv.subtotal,
            "Cess Amount": "0",
        }
        for inv in invoices
        if _gstin(inv)
    ]


def build_b2cs_rows(invoices: List[Invoice]) -> List[Dict[str, Any]]:
    """Sales to unregistered consumers."""
    return [
        {
            "Type": "OE",
            "Place Of Supply": _state(inv),
            "Invoice Number": inv.invoice_number,
            "Invoice Date": _fmt_date(inv.invoice_date),
            "Invoice Value": inv.grand_total,
            "Rate": FLAT_RATE,
            "Taxable Value": inv.subtotal,
            "Cess Amount": "0",
            "E-Commerce GSTIN": "",
        }
        for inv in invoices
        if not _gstin(inv)
    ]


def build_hsn_rows(summary: List[HsnSummaryEntry]) -> List[Dict[str, Any]]:
    return [
        {
            "HSN/SAC": h.hsn_code,
            "Description": h.description,
            "UQC": h.uqc,
            "Total Quantity": f"{h.total_quantity:.3f}",
            "Total Value": f"{h.total_value:.2f}",
            "Taxable Value": f"{h.taxable_value:.2f}",
            "Integrated Tax Amount": f"{h.integrated_tax_amount:.2f}",
            "Central Tax Amount": f"{h.central_tax_amount:.2f}",
            "State/UT Tax Amount": f"{h.state_tax_amount:.2f}",
            "Cess Amount": f"{h.cess_amount:.2f}",
        }
        for h in summary
    ]


def build_raw_rows(invoices: List[Invoice]) -> List[Dict[str, Any]]:
    return [
        {
            "Invoice No": inv.invoice_number,
            "Date": _fmt_date(inv.invoice_date),
            "Customer": inv.customer.name if inv.customer else None,
            "GSTIN": _gstin(inv) or "N/A",
            "Subtotal": inv.subtotal,
            "CGST": inv.cgst_amount,
            "SGST": inv.sgst_amount,
            "Total": inv.grand_total,
            "Status": inv.status,
        }
        for inv in invoices
    ]


def build_gstr1_workbook(report: GstReportData) -> bytes:
    """
    GSTR-1 compatible workbook. B2B, B2CS and HSN sheets are written only when
    they have rows; "All Invoices" is always present.
    """
    sheets = [
        ("B2B", build_b2b_rows(report.invoices), B2B_COLUMNS),
        ("B2CS", build_b2cs_rows(report.invoices), B2CS_COLUMNS),
        ("HSN", build_hsn_rows(report.hsn_summary), HSN_COLUMNS),
    ]

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, rows, columns in sheets:
            if rows:
                pd.DataFrame(rows, columns=columns).to_excel(writer, sheet_name=name, index=False)
        pd.DataFrame(build_raw_rows(report.invoices), columns=RAW_COLUMNS).to_excel(
            writer, sheet_name="All Invoices", index=False
        )
    return buf.getvalue()


def export_filename(date_range: DateRange) -> str:
    name = f"GSTR_Report_{date_range.from_date.strftime('%d%b%y')}"
    if date_range.to_date:
        name += f"_{date_range.to_date.strftime('%d%b%y')}"
    return f"{name}.xlsx"
