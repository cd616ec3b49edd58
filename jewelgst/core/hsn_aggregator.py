from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from jewelgst.config import settings
from jewelgst.models.hsn_summary import HsnSummaryEntry
from jewelgst.models.invoice import Invoice
from jewelgst.models.shop import ShopTaxDefaults
from jewelgst.utils.numbers import to_number


InterStateResolver = Callable[[Invoice], bool]


def never_inter_state(invoice: Invoice) -> bool:
    """Default resolver: every sale is treated as intra-state (CGST + SGST)."""
    logger.debug("Invoice {}: no inter-state check configured; treating as intra-state", invoice.id)
    return False


def state_based_inter_state(shop_state: Optional[str]) -> InterStateResolver:
    """
    Opt-in resolver comparing the customer's state with the shop's.
    Unknown state on either side is treated as intra-state.
    """
    shop_norm = (shop_state or "").strip().lower()

    def _resolve(invoice: Invoice) -> bool:
        customer_state = invoice.customer.state if invoice.customer else None
        cust_norm = (customer_state or "").strip().lower()
        if not shop_norm or not cust_norm:
            logger.debug(
                "Invoice {}: state unknown (shop={!r}, customer={!r}); treating as intra-state",
                invoice.id, shop_state, customer_state,
            )
            return False
        return cust_norm != shop_norm

    return _resolve


def effective_rate(tax_amount: object, subtotal: object, default_rate: float) -> float:
    """
    Rate implied by the tax already charged on an invoice, as a percentage.
    Falls back to the shop default when nothing was charged or subtotal is zero.
    """
    amt = to_number(tax_amount)
    base = to_number(subtotal)
    if amt > 0 and base != 0:
        return amt / base * 100
    return default_rate


def invoice_rates(invoice: Invoice, defaults: ShopTaxDefaults) -> Tuple[float, float]:
    return (
        effective_rate(invoice.cgst_amount, invoice.subtotal, defaults.cgst_rate),
        effective_rate(invoice.sgst_amount, invoice.subtotal, defaults.sgst_rate),
    )


def build_hsn_summary(
    invoices: Iterable[Invoice],
    defaults: ShopTaxDefaults,
    is_inter_state: InterStateResolver = never_inter_state,
) -> List[HsnSummaryEntry]:
    """
    Fold invoice line items into one entry per HSN code.

    Tax is computed per line using the invoice's effective rates and then
    accumulated; nothing is rounded here. Entries come back in the order their
    HSN code was first seen.
    """
    igst_rate = defaults.igst_rate
    summary: Dict[str, HsnSummaryEntry] = {}

    for inv in invoices:
        inter_state = is_inter_state(inv)
        cgst_rate, sgst_rate = invoice_rates(inv, defaults)

        for item in inv.items:
            hsn = item.hsn_code or settings.DEFAULT_HSN_CODE
            weight = to_number(item.net_weight)
            taxable = to_number(item.amount)

            entry = summary.get(hsn)
            if entry is None:
                entry = summary[hsn] = HsnSummaryEntry(hsn_code=hsn)

            entry.total_quantity += weight
            entry.taxable_value += taxable

            # Evaluated as taxable * rate / 100. Computing taxable * (rate / 100)
            # can differ in the last bit.
            if inter_state:
                igst = taxable * igst_rate / 100
                entry.integrated_tax_amount += igst
                entry.total_value += taxable + igst
            else:
                entry.central_tax_amount += taxable * cgst_rate / 100
                entry.state_tax_amount += taxable * sgst_rate / 100
                entry.total_value += taxable + taxable * (cgst_rate + sgst_rate) / 100

    return list(summary.values())
