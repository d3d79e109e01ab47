from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Query

from cashdesk.models.enums import TransactionType
from cashdesk.models.transaction import Transaction
from cashdesk.services import transaction_service


def _record(client, headers, **fields):
    body = {"cashierId": "CASH100", "amount": 25, "type": "sale", "description": "Groceries"}
    body.update(fields)
    return client.post("/api/transactions", json=body, headers=headers)


def _insert(db, *rows):
    """Insert (cashier_id, amount, type) rows with strictly increasing creation times."""
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for index, (cashier_id, amount, txn_type) in enumerate(rows):
        db.add(Transaction(
            transaction_id=f"T{index:04d}",
            cashier_id=cashier_id,
            amount=Decimal(amount),
            type=TransactionType(txn_type),
            description="Seeded row",
            created_at=start + timedelta(minutes=index),
        ))
    db.commit()


def test_cashier_records_own_transaction(client, cashier_headers):
    response = _record(client, cashier_headers, cashierId=None)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["cashierId"] == "CASH100"
    assert data["cashierName"] == "Ada Lovelace"
    assert data["amount"] == 25.0
    assert data["transactionId"].startswith("TXN-")


def test_cashier_cannot_record_for_someone_else(client, cashier_headers):
    response = _record(client, cashier_headers, cashierId="CASH999")
    assert response.status_code == 403


def test_admin_must_name_cashier(client, admin_headers):
    response = _record(client, admin_headers, cashierId="")
    assert response.status_code == 400


@pytest.mark.parametrize("amount", [0, -1, "-0.01", "abc", None, True, "0.001", 0.004, "1e15", "1e40", "10000000000"])
def test_rejects_non_positive_or_invalid_amount(client, admin_headers, amount):
    response = _record(client, admin_headers, amount=amount)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_accepts_string_amount(client, admin_headers):
    response = _record(client, admin_headers, amount="19.99")
    assert response.status_code == 201
    assert response.json()["data"]["amount"] == 19.99


def test_largest_amount_is_accepted(client, admin_headers):
    response = _record(client, admin_headers, amount="9999999999.99")
    assert response.status_code == 201
    assert response.json()["data"]["amount"] == 9999999999.99


def test_created_at_carries_utc_offset(client, admin_headers, db_session):
    created = _record(client, admin_headers).json()["data"]
    assert created["createdAt"].endswith("+00:00")
    _insert(db_session, ("CASH100", "5.00", "sale"))
    listed = client.get("/api/transactions", headers=admin_headers).json()["data"]["transactions"]
    assert all(t["createdAt"].endswith("+00:00") for t in listed)


@pytest.mark.parametrize("description", ["ab", "  ab  ", "", None])
def test_rejects_short_description(client, admin_headers, description):
    response = _record(client, admin_headers, description=description)
    assert response.status_code == 400


def test_description_of_three_characters_is_accepted(client, admin_headers):
    response = _record(client, admin_headers, description=" abc ")
    assert response.status_code == 201
    assert response.json()["data"]["description"] == "abc"


@pytest.mark.parametrize("txn_type", ["payment", "income", "expense", "SALE"])
def test_rejects_unknown_type(client, admin_headers, txn_type):
    response = _record(client, admin_headers, type=txn_type)
    assert response.status_code == 400


def test_duplicate_transaction_reference(client, admin_headers):
    assert _record(client, admin_headers, transactionId="TXN001").status_code == 201
    response = _record(client, admin_headers, transactionId="TXN001")
    assert response.status_code == 409


def test_duplicate_reference_missed_by_lookup_still_conflicts(client, admin_headers, monkeypatch):
    assert _record(client, admin_headers, transactionId="TXN002").status_code == 201
    # A concurrent writer commits between the lookup and the insert
    monkeypatch.setattr(Query, "first", lambda self: None)
    response = _record(client, admin_headers, transactionId="TXN002")
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_storage_failure_hides_driver_message(client, admin_headers, monkeypatch):
    def broken(db):
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    monkeypatch.setattr(transaction_service, "get_stats", broken)
    response = client.get("/api/transactions/stats", headers=admin_headers)
    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "SERVER_ERROR"
    assert error["message"] == "Database error"
    assert "disk I/O" not in response.text


def test_pages_concatenate_to_full_list(client, admin_headers, db_session):
    _insert(db_session, *[("CASH1", "1.00", "sale")] * 23)

    first = client.get("/api/transactions", params={"page": 1, "limit": 5}, headers=admin_headers).json()
    pagination = first["data"]["pagination"]
    assert pagination["totalTransactions"] == 23
    assert pagination["totalPages"] == 5
    assert pagination["hasNext"] is True
    assert pagination["hasPrev"] is False

    collected = []
    for page in range(1, pagination["totalPages"] + 1):
        body = client.get(
            "/api/transactions", params={"page": page, "limit": 5}, headers=admin_headers
        ).json()
        collected.extend(t["transactionId"] for t in body["data"]["transactions"])

    assert len(collected) == len(set(collected)) == 23
    # Newest first: the last inserted row leads
    assert collected == [f"T{i:04d}" for i in reversed(range(23))]

    last = client.get("/api/transactions", params={"page": 5, "limit": 5}, headers=admin_headers).json()
    assert last["data"]["pagination"]["hasNext"] is False
    assert len(last["data"]["transactions"]) == 3


def test_page_beyond_last_is_empty(client, admin_headers, db_session):
    _insert(db_session, ("CASH1", "1.00", "sale"))
    body = client.get("/api/transactions", params={"page": 3}, headers=admin_headers).json()
    assert body["data"]["transactions"] == []
    assert body["data"]["pagination"]["hasPrev"] is True


def test_invalid_paging_parameters(client, admin_headers):
    assert client.get("/api/transactions", params={"page": 0}, headers=admin_headers).status_code == 422
    assert client.get("/api/transactions", params={"limit": 1000}, headers=admin_headers).status_code == 422


def test_filter_by_cashier_and_type(client, admin_headers, db_session):
    _insert(
        db_session,
        ("CASH1", "10.00", "sale"),
        ("CASH1", "2.00", "refund"),
        ("CASH2", "7.00", "sale"),
    )
    body = client.get(
        "/api/transactions", params={"cashierId": "CASH1", "type": "sale"}, headers=admin_headers
    ).json()
    rows = body["data"]["transactions"]
    assert [(t["cashierId"], t["type"]) for t in rows] == [("CASH1", "sale")]
    assert body["data"]["pagination"]["totalTransactions"] == 1


def test_filter_with_unknown_type(client, admin_headers):
    response = client.get("/api/transactions", params={"type": "payment"}, headers=admin_headers)
    assert response.status_code == 400


def test_cashier_token_can_list(client, cashier_headers):
    response = client.get("/api/transactions", headers=cashier_headers)
    assert response.status_code == 200


def test_stats_on_empty_ledger(client, admin_headers):
    stats = client.get("/api/transactions/stats", headers=admin_headers).json()["data"]
    assert stats == {
        "totalTransactions": 0,
        "totalSales": 0.0,
        "totalRefunds": 0.0,
        "totalVoids": 0.0,
        "activeCashiers": 0,
        "avgTransactionAmount": 0.0,
        "netBalance": 0.0,
    }


@pytest.mark.parametrize("reverse", [False, True])
def test_stats_totals_are_order_independent(client, admin_headers, db_session, reverse):
    rows = [
        ("CASH1", "100.00", "sale"),
        ("CASH1", "20.50", "refund"),
        ("CASH2", "49.50", "sale"),
        ("CASH2", "10.00", "void"),
        ("CASH3", "0.50", "sale"),
    ]
    _insert(db_session, *(reversed(rows) if reverse else rows))

    stats = client.get("/api/transactions/stats", headers=admin_headers).json()["data"]
    assert stats["totalTransactions"] == 5
    assert stats["totalSales"] == pytest.approx(150.00)
    assert stats["totalRefunds"] == pytest.approx(20.50)
    assert stats["totalVoids"] == pytest.approx(10.00)
    assert stats["totalSales"] - stats["totalRefunds"] == pytest.approx(129.50)
    assert stats["netBalance"] == pytest.approx(119.50)
    assert stats["activeCashiers"] == 3
    assert stats["avgTransactionAmount"] == pytest.approx(36.10)


def test_stats_are_idempotent(client, admin_headers, db_session):
    _insert(db_session, ("CASH1", "12.34", "sale"), ("CASH2", "5.00", "refund"))
    first = client.get("/api/transactions/stats", headers=admin_headers).json()
    second = client.get("/api/transactions/stats", headers=admin_headers).json()
    assert first == second


def test_delete_transaction(client, admin_headers):
    created = _record(client, admin_headers).json()["data"]
    response = client.delete(f"/api/transactions/{created['id']}", headers=admin_headers)
    assert response.status_code == 200
    listing = client.get("/api/transactions", headers=admin_headers).json()["data"]
    assert listing["transactions"] == []


def test_delete_missing_transaction(client, admin_headers):
    assert client.delete("/api/transactions/999", headers=admin_headers).status_code == 404


def test_cashier_cannot_delete_transactions(client, cashier_headers):
    created = _record(client, cashier_headers).json()["data"]
    response = client.delete(f"/api/transactions/{created['id']}", headers=cashier_headers)
    assert response.status_code == 403
