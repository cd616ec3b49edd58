from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from jewelgst.database.postgres_client import PostgresClient, get_postgres_client
from jewelgst.errors import GstDataFetchError
from jewelgst.models.invoice import Customer, DateRange, Invoice, LineItem
from jewelgst.models.shop import ShopTaxDefaults


_PAID_INVOICES_SQL = """
SELECT
    i.id AS id, i.shop_id AS shop_id, i.invoice_number AS invoice_number,
    i.invoice_date AS invoice_date, i.status AS status, i.subtotal AS subtotal,
    i.cgst_amount AS cgst_amount, i.sgst_amount AS sgst_amount, i.grand_total AS grand_total,
    c.id AS customer_id, c.name AS customer_name, c.phone AS customer_phone,
    c.gst_number AS customer_gst_number, c.state AS customer_state,
    ii.id AS item_id, ii.hsn_code AS hsn_code, ii.gross_weight AS gross_weight,
    ii.net_weight AS net_weight, ii.amount AS amount, ii.rate AS rate, ii.making AS making
FROM invoices i
LEFT JOIN customers c ON c.id = i.customer_id
LEFT JOIN invoice_items ii ON ii.invoice_id = i.id
WHERE i.shop_id = :shop_id
  AND i.status = 'paid'
  AND i.deleted_at IS NULL
  {date_filter}
ORDER BY i.invoice_date ASC, i.id ASC, ii.position ASC, ii.id ASC
"""

_DATE_FILTER_SQL = "AND i.invoice_date >= :start AND i.invoice_date <= :end"

_SHOP_RATES_SQL = "SELECT cgst_rate, sgst_rate FROM shops WHERE id = :shop_id"


def _invoices_from_rows(rows: List[Mapping[str, Any]]) -> List[Invoice]:
    """Group joined invoice/item rows back into invoices, keeping row order."""
    by_id: Dict[str, Dict[str, Any]] = {}
    for r in rows:
        inv_id = str(r["id"])
        inv = by_id.get(inv_id)
        if inv is None:
            customer = None
            if r["customer_id"] is not None:
                customer = Customer(
                    name=r["customer_name"],
                    phone=r["customer_phone"],
                    gst_number=r["customer_gst_number"],
                    state=r["customer_state"],
                )
            inv = by_id[inv_id] = {
                "id": inv_id,
                "shop_id": str(r["shop_id"]),
                "invoice_number": r["invoice_number"],
                "invoice_date": r["invoice_date"],
                "status": r["status"],
                "subtotal": r["subtotal"],
                "cgst_amount": r["cgst_amount"],
                "sgst_amount": r["sgst_amount"],
                "grand_total": r["grand_total"],
                "customer": customer,
                "items": [],
            }
        if r["item_id"] is not None:
            inv["items"].append(
                LineItem(
                    hsn_code=r["hsn_code"],
                    gross_weight=r["gross_weight"],
                    net_weight=r["net_weight"],
                    amount=r["amount"],
                    rate=r["rate"],
                    making=r["making"],
                )
            )
    return [Invoice(**v) for v in by_id.values()]


class InvoiceStore:
    """Read-only access to a shop's invoices and tax settings."""

    def __init__(self, client: Optional[PostgresClient] = None) -> None:
        self.client = client or get_postgres_client()

    def fetch_paid_invoices(self, shop_id: str, date_range: Optional[DateRange] = None) -> List[Invoice]:
        params: Dict[str, Any] = {"shop_id": shop_id}
        date_filter = ""
        if date_range is not None:
            start, end = date_range.bounds()
            params["start"] = start.isoformat()
            params["end"] = end.isoformat()
            date_filter = _DATE_FILTER_SQL

        try:
            with self.client.session() as db:
                rows = db.execute(text(_PAID_INVOICES_SQL.format(date_filter=date_filter)), params).mappings().all()
        except SQLAlchemyError as e:
            logger.exception("Error fetching GST report data for shop {}", shop_id)
            raise GstDataFetchError() from e

        invoices = _invoices_from_rows(list(rows))
        logger.debug("Fetched {} paid invoices for shop {}", len(invoices), shop_id)
        return invoices

    def fetch_tax_defaults(self, shop_id: str) -> ShopTaxDefaults:
        try:
            with self.client.session() as db:
                row = db.execute(text(_SHOP_RATES_SQL), {"shop_id": shop_id}).mappings().first()
        except SQLAlchemyError as e:
            logger.warning("Shop tax rates unavailable for {}; using defaults: {}", shop_id, str(e))
            return ShopTaxDefaults.from_raw()

        if row is None:
            return ShopTaxDefaults.from_raw()
        return ShopTaxDefaults.from_raw(row["cgst_rate"], row["sgst_rate"])
