"""Shared fixtures: a seeded SQLite invoice database and invoice builders."""

from collections.abc import Generator
from datetime import date
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine, text

from jewelgst.database.invoice_store import InvoiceStore
from jewelgst.database.postgres_client import PostgresClient
from jewelgst.models.invoice import Customer, Invoice, LineItem

SHOPS = [
    {"id": "shop-1", "shop_name": "Lakshmi Jewellers", "state": "Maharashtra", "cgst_rate": 1.5, "sgst_rate": 1.5},
    {"id": "shop-2", "shop_name": "Blank Rates", "state": None, "cgst_rate": None, "sgst_rate": "abc"},
    {"id": "shop-3", "shop_name": "Custom Rates", "state": "Gujarat", "cgst_rate": 2, "sgst_rate": 2},
]

CUSTOMERS = [
    {"id": "cust-1", "shop_id": "shop-1", "name": "Asha Traders", "phone": "9800000001",
     "gst_number": "27ABCDE1234F1Z5", "state": "Maharashtra"},
    {"id": "cust-2", "shop_id": "shop-1", "name": "Ravi Kumar", "phone": "9800000002",
     "gst_number": None, "state": "Maharashtra"},
]

INVOICES = [
    {"id": "inv-a", "shop_id": "shop-1", "customer_id": "cust-1", "invoice_number": "INV-001",
     "invoice_date": "2024-01-05", "status": "paid", "subtotal": 1000, "cgst_amount": 15,
     "sgst_amount": 15, "grand_total": 1030, "deleted_at": None},
    {"id": "inv-b", "shop_id": "shop-1", "customer_id": "cust-2", "invoice_number": "INV-002",
     "invoice_date": "2024-01-10", "status": "paid", "subtotal": 500, "cgst_amount": 0,
     "sgst_amount": 0, "grand_total": 515, "deleted_at": None},
    {"id": "inv-c", "shop_id": "shop-1", "customer_id": "cust-2", "invoice_number": "INV-003",
     "invoice_date": "2024-01-10", "status": "draft", "subtotal": 800, "cgst_amount": 12,
     "sgst_amount": 12, "grand_total": 824, "deleted_at": None},
    {"id": "inv-d", "shop_id": "shop-1", "customer_id": "cust-1", "invoice_number": "INV-004",
     "invoice_date": "2024-01-12", "status": "paid", "subtotal": 300, "cgst_amount": 4.5,
     "sgst_amount": 4.5, "grand_total": 309, "deleted_at": "2024-01-13 10:00:00"},
    {"id": "inv-e", "shop_id": "shop-1", "customer_id": None, "invoice_number": "INV-005",
     "invoice_date": "2024-02-01", "status": "paid", "subtotal": 200, "cgst_amount": 3,
     "sgst_amount": 3, "grand_total": 206, "deleted_at": None},
    {"id": "inv-x", "shop_id": "shop-2", "customer_id": None, "invoice_number": "X-001",
     "invoice_date": "2024-01-05", "status": "paid", "subtotal": 100, "cgst_amount": 0,
     "sgst_amount": 0, "grand_total": 103, "deleted_at": None},
]

INVOICE_ITEMS = [
    {"id": "a1", "invoice_id": "inv-a", "position": 0, "hsn_code": "7113", "gross_weight": 10.5,
     "net_weight": 10, "rate": 90, "making": 10, "amount": 1000},
    {"id": "b1", "invoice_id": "inv-b", "position": 0, "hsn_code": "7108", "gross_weight": 5,
     "net_weight": 5, "rate": 90, "making": 10, "amount": 500},
    {"id": "c1", "invoice_id": "inv-c", "position": 0, "hsn_code": "7113", "gross_weight": 8,
     "net_weight": 8, "rate": 90, "making": 10, "amount": 800},
    {"id": "d1", "invoice_id": "inv-d", "position": 0, "hsn_code": "7113", "gross_weight": 3,
     "net_weight": 3, "rate": 90, "making": 10, "amount": 300},
    {"id": "e2", "invoice_id": "inv-e", "position": 1, "hsn_code": "", "gross_weight": 2,
     "net_weight": 2, "rate": None, "making": None, "amount": None},
    {"id": "e1", "invoice_id": "inv-e", "position": 0, "hsn_code": None, "gross_weight": None,
     "net_weight": "abc", "rate": None, "making": None, "amount": 200},
    {"id": "x1", "invoice_id": "inv-x", "position": 0, "hsn_code": "7113", "gross_weight": 1,
     "net_weight": 1, "rate": 90, "making": 10, "amount": 100},
]


def _insert(conn: Any, table: str, rows: list[dict[str, Any]]) -> None:
    cols = list(rows[0].keys())
    sql = f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({', '.join(':' + c for c in cols)})"
    conn.execute(text(sql), rows)


@pytest.fixture
def db_client(tmp_path: Path) -> Generator[PostgresClient, None, None]:
    """A PostgresClient over a seeded SQLite file database."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'gst.db'}",
        connect_args={"check_same_thread": False},
    )
    client = PostgresClient(database_url=str(engine.url), engine=engine)
    client.init_schema()
    with engine.begin() as conn:
        _insert(conn, "shops", SHOPS)
        _insert(conn, "customers", CUSTOMERS)
        _insert(conn, "invoices", INVOICES)
        _insert(conn, "invoice_items", INVOICE_ITEMS)
    yield client
    engine.dispose()


@pytest.fixture
def store(db_client: PostgresClient) -> InvoiceStore:
    return InvoiceStore(client=db_client)


def make_invoice(
    inv_id: str,
    items: list[dict[str, Any]],
    subtotal: Any = 0,
    cgst_amount: Any = 0,
    sgst_amount: Any = 0,
    invoice_date: date = date(2024, 1, 5),
    customer: Customer | None = None,
) -> Invoice:
    return Invoice(
        id=inv_id,
        shop_id="shop-1",
        invoice_number=inv_id.upper(),
        invoice_date=invoice_date,
        subtotal=subtotal,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        grand_total=subtotal,
        customer=customer,
        items=[LineItem(**i) for i in items],
    )
